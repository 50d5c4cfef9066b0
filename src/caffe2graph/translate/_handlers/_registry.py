"""Handler registry for operator translation.

Provides the dispatch table from operator kind to handler, plus small
accessors shared by the handlers.
"""

__docformat__ = "restructuredtext"
__all__ = [
    "HANDLERS",
    "Handler",
    "get_handler",
    "get_input_name",
    "get_op_name",
    "register_handler",
]

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from caffe2graph.analyze import ArgumentDict
from caffe2graph.errors import DanglingReferenceError
from caffe2graph.graph import Node
from caffe2graph.translate.types import OperatorKind

if TYPE_CHECKING:
    from caffe2graph.translate.translator import OperatorTranslator

# Handler type: takes the translator, the OperatorDef and its arguments,
# returns the node published under every output name
Handler = Callable[["OperatorTranslator", Any, ArgumentDict], Node]

# Global handler registry
HANDLERS: dict[OperatorKind, Handler] = {}


def register_handler(kind: OperatorKind, handler: Handler) -> None:
    """Register handler for an operator kind.

    :param kind: Operator kind
    :param handler: Handler function
    """
    HANDLERS[kind] = handler


def get_handler(kind: OperatorKind) -> Handler | None:
    """Get handler for an operator kind.

    :param kind: Operator kind
    :return: Handler function or None if not registered
    """
    return HANDLERS.get(kind)


def get_op_name(op: Any) -> str:
    """Name for the nodes emitted by an operator: its name, else its first output."""
    if op.name:
        return op.name
    return op.output[0] if op.output else op.type


def get_input_name(op: Any, index: int) -> str:
    """Get the name bound to an input slot.

    :param op: OperatorDef
    :param index: Input slot
    :return: Input name
    :raises DanglingReferenceError: If the operator has no such slot
    """
    if index >= len(op.input):
        raise DanglingReferenceError(
            f"{op.type} '{get_op_name(op)}' expects input #{index}, "
            f"but only {len(op.input)} are bound"
        )
    return op.input[index]

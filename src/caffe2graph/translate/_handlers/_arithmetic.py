"""Elementwise arithmetic handlers: Mul, Add (with broadcast) and Sum."""

__docformat__ = "restructuredtext"
__all__ = ["register_arithmetic_handlers"]

from typing import TYPE_CHECKING, Any

from caffe2graph.analyze import ArgumentDict, resolve_broadcast_axis
from caffe2graph.errors import DanglingReferenceError, UnsupportedConfigurationError
from caffe2graph.graph import Node
from caffe2graph.translate._handlers._registry import (
    get_input_name,
    get_op_name,
    register_handler,
)
from caffe2graph.translate.types import OperatorKind

if TYPE_CHECKING:
    from caffe2graph.translate.translator import OperatorTranslator


def _handle_broadcast_arithmetic(
    translator: "OperatorTranslator", op: Any, args: ArgumentDict
) -> Node:
    """Lower Mul and Add.

    With ``broadcast=1`` the second operand is expanded to the first operand's
    shape starting at ``axis``; ``axis=-1`` aligns trailing dimensions. With
    ``broadcast=0`` the operands must already have equal shapes.
    """
    name = get_op_name(op)
    function = translator.function

    lhs = translator.get_or_create_node(get_input_name(op, 0))
    rhs = translator.get_or_create_node(get_input_name(op, 1))

    broadcast = args.get_int("broadcast")
    if broadcast not in (0, 1):
        raise UnsupportedConfigurationError(f"{op.type} broadcast={broadcast} is not supported")
    if broadcast == 1:
        axis = resolve_broadcast_axis(args.get_int("axis"), len(lhs.dims), len(rhs.dims))
        rhs = function.create_broadcast(name, rhs, lhs.dims, axis)

    if op.type == OperatorKind.MUL:
        return function.create_mul(name, lhs, rhs)
    return function.create_add(name, lhs, rhs)


def _handle_sum(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    """Lower Sum as a left fold of Add nodes; a single input passes through."""
    if not op.input:
        raise DanglingReferenceError(f"Sum '{get_op_name(op)}' has no inputs")
    name = get_op_name(op)
    inputs = [translator.get_or_create_node(input_name) for input_name in op.input]
    result = inputs[0]
    for other in inputs[1:]:
        result = translator.function.create_add(name, result, other)
    return result


def register_arithmetic_handlers() -> None:
    """Register Mul, Add and Sum handlers."""
    register_handler(OperatorKind.MUL, _handle_broadcast_arithmetic)
    register_handler(OperatorKind.ADD, _handle_broadcast_arithmetic)
    register_handler(OperatorKind.SUM, _handle_sum)

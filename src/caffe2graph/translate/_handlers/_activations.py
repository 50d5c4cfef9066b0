"""Elementwise activation and pass-through handlers."""

__docformat__ = "restructuredtext"
__all__ = ["register_activation_handlers"]

from typing import TYPE_CHECKING, Any

from caffe2graph.analyze import ArgumentDict
from caffe2graph.graph import Node
from caffe2graph.translate._handlers._registry import (
    get_input_name,
    get_op_name,
    register_handler,
)
from caffe2graph.translate.types import OperatorKind

if TYPE_CHECKING:
    from caffe2graph.translate.translator import OperatorTranslator


def _handle_relu(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    input = translator.get_or_create_node(get_input_name(op, 0))
    return translator.function.create_relu(get_op_name(op), input)


def _handle_sigmoid(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    input = translator.get_or_create_node(get_input_name(op, 0))
    return translator.function.create_sigmoid(get_op_name(op), input)


def _handle_tanh(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    input = translator.get_or_create_node(get_input_name(op, 0))
    return translator.function.create_tanh(get_op_name(op), input)


def _handle_dropout(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    """Dropout is the identity at inference: republish the input node.

    Caffe2's optional ``mask`` output aliases the same node.
    """
    return translator.get_or_create_node(get_input_name(op, 0))


def register_activation_handlers() -> None:
    """Register activation and pass-through handlers."""
    register_handler(OperatorKind.RELU, _handle_relu)
    register_handler(OperatorKind.SIGMOID, _handle_sigmoid)
    register_handler(OperatorKind.TANH, _handle_tanh)
    register_handler(OperatorKind.DROPOUT, _handle_dropout)

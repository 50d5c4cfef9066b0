"""Softmax, FC, ChannelShuffle and Squeeze handlers."""

__docformat__ = "restructuredtext"
__all__ = ["register_shaping_handlers"]

from typing import TYPE_CHECKING, Any

from caffe2graph.analyze import ArgumentDict, flatten_cdr
from caffe2graph.graph import Node
from caffe2graph.translate._handlers._registry import (
    get_input_name,
    get_op_name,
    register_handler,
)
from caffe2graph.translate.types import OperatorKind

if TYPE_CHECKING:
    from caffe2graph.translate.translator import OperatorTranslator


def _handle_softmax(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    """Lower Softmax.

    Caffe2 allows inputs like <N x 10 x 1 x 1>; they are flattened to rank 2,
    which is a bitcast rather than a data movement. The labels operand is
    looked up under the translator's reserved name.
    """
    name = get_op_name(op)
    function = translator.function

    expected = translator.get_or_create_node(translator.softmax_expected_name)
    input = translator.get_or_create_node(get_input_name(op, 0))

    reshaped = function.create_reshape(f"{name}.reshape", input, flatten_cdr(input.dims))
    return function.create_softmax(name, reshaped, expected)


def _handle_fc(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    """Lower FC.

    Caffe2 stores W as [out, in]; the graph expects [in, out].
    """
    name = get_op_name(op)
    module = translator.module

    input = translator.get_or_create_node(get_input_name(op, 0))
    weights = translator.get_tensor(get_input_name(op, 1)).transpose((1, 0))
    bias = translator.get_tensor(get_input_name(op, 2))

    w = module.add_variable(f"{name}.weights", weights.data)
    b = module.add_variable(f"{name}.biases", bias.data)
    return translator.function.create_fully_connected(name, input, w, b)


def _handle_channel_shuffle(
    translator: "OperatorTranslator", op: Any, args: ArgumentDict
) -> Node:
    group = args.get_int("group")
    kernel = args.get_int("kernel")
    input = translator.get_or_create_node(get_input_name(op, 0))
    return translator.function.create_channel_shuffle(get_op_name(op), input, group, kernel)


def _handle_squeeze(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    dims = args.get_ints("dims")
    input = translator.get_or_create_node(get_input_name(op, 0))
    return translator.function.create_squeeze(get_op_name(op), input, dims)


def register_shaping_handlers() -> None:
    """Register Softmax, FC, ChannelShuffle and Squeeze handlers."""
    register_handler(OperatorKind.SOFTMAX, _handle_softmax)
    register_handler(OperatorKind.FC, _handle_fc)
    register_handler(OperatorKind.CHANNEL_SHUFFLE, _handle_channel_shuffle)
    register_handler(OperatorKind.SQUEEZE, _handle_squeeze)

"""SpatialBN and Concat handlers."""

__docformat__ = "restructuredtext"
__all__ = ["register_normalization_handlers"]

from typing import TYPE_CHECKING, Any

from caffe2graph.analyze import ArgumentDict
from caffe2graph.graph import Node
from caffe2graph.presets import DEFAULT_EPSILON
from caffe2graph.translate._handlers._registry import (
    get_input_name,
    get_op_name,
    register_handler,
)
from caffe2graph.translate.types import OperatorKind

if TYPE_CHECKING:
    from caffe2graph.translate.translator import OperatorTranslator


def _handle_spatial_bn(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    """Lower SpatialBN.

    Inputs are bound by position: X, scale, bias, running mean, running var.
    The four parameter tensors are copied verbatim into the node's variables.
    """
    input = translator.get_or_create_node(get_input_name(op, 0))
    scale = translator.get_tensor(get_input_name(op, 1))
    bias = translator.get_tensor(get_input_name(op, 2))
    mean = translator.get_tensor(get_input_name(op, 3))
    var = translator.get_tensor(get_input_name(op, 4))
    epsilon = args.get_float("epsilon", DEFAULT_EPSILON)
    channel = args.get_channel()

    node = translator.function.create_batch_normalization(
        get_op_name(op), input, channel, epsilon
    )
    node.scale.copy_from(scale)
    node.bias.copy_from(bias)
    node.mean.copy_from(mean)
    node.var.copy_from(var)
    return node


def _handle_concat(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    inputs = [translator.get_or_create_node(name) for name in op.input]
    channel = args.get_channel()
    return translator.function.create_concat(get_op_name(op), inputs, channel)


def register_normalization_handlers() -> None:
    """Register SpatialBN and Concat handlers."""
    register_handler(OperatorKind.SPATIAL_BN, _handle_spatial_bn)
    register_handler(OperatorKind.CONCAT, _handle_concat)

"""Spatial operator handlers: Conv, MaxPool, AveragePool and LRN.

Caffe2 passes activations as NCHW while the graph's spatial nodes expect NHWC,
so every handler here wraps its node in a pair of transposes.
"""

__docformat__ = "restructuredtext"
__all__ = ["register_spatial_handlers"]

from typing import TYPE_CHECKING, Any

from caffe2graph.analyze import ArgumentDict, calculate_conv_output_dims
from caffe2graph.errors import UnsupportedConfigurationError
from caffe2graph.graph import Node
from caffe2graph.presets import NCHW2NHWC, NHWC2NCHW
from caffe2graph.translate._handlers._registry import (
    get_input_name,
    get_op_name,
    register_handler,
)
from caffe2graph.translate.types import OperatorKind

if TYPE_CHECKING:
    from caffe2graph.translate.translator import OperatorTranslator

_PER_SIDE_PADS = ("pad_l", "pad_r", "pad_t", "pad_b")

# Caffe2 stores conv weights as KCRS; the graph reads them as KRSC
_KCRS2KRSC = (0, 2, 3, 1)


def _check_symmetric_padding(args: ArgumentDict) -> None:
    """Reject per-side padding arguments.

    :param args: Operator arguments
    :raises UnsupportedConfigurationError: If any of pad_[lrtb] is present
    """
    present = [name for name in _PER_SIDE_PADS if name in args]
    if present:
        raise UnsupportedConfigurationError(
            f"Use of {', '.join(present)} on {args.op_type} is currently unsupported"
        )


def _handle_conv(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    """Lower Conv.

    The output channel count (depth) comes from the transposed weights and sizes
    the zero bias used when no serialized bias tensor is bound.
    """
    stride = args.get_int("stride", 1)
    pad = args.get_int("pad", 0)
    kernel = args.get_int("kernel")
    group = args.get_int("group", 1)
    _check_symmetric_padding(args)

    name = get_op_name(op)
    function = translator.function
    module = translator.module

    input = translator.get_or_create_node(get_input_name(op, 0))
    weights = translator.get_tensor(get_input_name(op, 1)).transpose(_KCRS2KRSC)
    depth = weights.dims[0]

    filter = module.add_variable(f"{name}.filter", weights.data)
    bias = module.create_variable(weights.elem_kind, (depth,), f"{name}.bias")
    if len(op.input) > 2 and translator.has_tensor(op.input[2]):
        bias.copy_from(translator.get_tensor(op.input[2]))

    transposed = function.create_transpose(name, input, NCHW2NHWC)
    n, h, w, _ = transposed.dims
    out_h, out_w = calculate_conv_output_dims(h, w, kernel, stride, pad)
    conv = function.create_conv(
        name, transposed, filter, bias, (n, out_h, out_w, depth), kernel, stride, pad, group
    )
    return function.create_transpose(name, conv, NHWC2NCHW)


def _handle_pool(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    """Lower MaxPool and AveragePool.

    ``global_pooling`` pools over the whole spatial extent of the input.
    """
    stride = args.get_int("stride")
    kernel = args.get_int("kernel")
    pad = args.get_int("pad", 0)
    _check_symmetric_padding(args)

    name = get_op_name(op)
    function = translator.function

    input = translator.get_or_create_node(get_input_name(op, 0))
    transposed = function.create_transpose(name, input, NCHW2NHWC)

    if args.get_int("global_pooling", 0):
        _, h, w, _ = transposed.dims
        if h != w:
            raise UnsupportedConfigurationError(
                f"Global pooling over a non-square {h}x{w} input is unsupported"
            )
        kernel = h

    if op.type == OperatorKind.MAX_POOL:
        pool = function.create_pool_max(name, transposed, kernel, stride, pad)
    else:
        pool = function.create_pool_avg(name, transposed, kernel, stride, pad)
    return function.create_transpose(name, pool, NHWC2NCHW)


def _handle_lrn(translator: "OperatorTranslator", op: Any, args: ArgumentDict) -> Node:
    size = args.get_int("size")
    alpha = args.get_float("alpha")
    beta = args.get_float("beta")
    k = args.get_float("bias")

    name = get_op_name(op)
    function = translator.function

    input = translator.get_or_create_node(get_input_name(op, 0))
    transposed = function.create_transpose(name, input, NCHW2NHWC)
    lrn = function.create_local_response_normalization(
        name, transposed, size // 2, alpha, beta, k
    )
    return function.create_transpose(name, lrn, NHWC2NCHW)


def register_spatial_handlers() -> None:
    """Register Conv, pooling and LRN handlers."""
    register_handler(OperatorKind.CONV, _handle_conv)
    register_handler(OperatorKind.MAX_POOL, _handle_pool)
    register_handler(OperatorKind.AVERAGE_POOL, _handle_pool)
    register_handler(OperatorKind.LRN, _handle_lrn)

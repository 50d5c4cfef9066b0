"""Builders for Caffe2 protobuf messages.

Mirrors ``onnx.helper``: python values in, protobuf messages out. Used to
assemble networks and weight descriptors programmatically.
"""

__docformat__ = "restructuredtext"
__all__ = [
    "make_argument",
    "make_constant_fill",
    "make_given_tensor_fill",
    "make_net",
    "make_operator",
    "print_message",
]

from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np
from google.protobuf import text_format

from caffe2graph.load.schema import Argument, NetDef, OperatorDef


def make_argument(name: str, value: Any) -> Argument:
    """Create an ``Argument`` holding ``value`` in the matching variant.

    ``bool`` and ``int`` map to ``i``, ``float`` to ``f``, ``str``/``bytes`` to
    ``s``, and sequences to ``ints`` or ``floats`` depending on their elements.

    :param name: Argument name
    :param value: Python value
    :return: Argument message
    """
    arg = Argument()
    arg.name = name

    if isinstance(value, bool | int | np.integer):
        arg.i = int(value)
    elif isinstance(value, float | np.floating):
        arg.f = float(value)
    elif isinstance(value, str):
        arg.s = value.encode("utf-8")
    elif isinstance(value, bytes):
        arg.s = value
    elif isinstance(value, Iterable):
        values = list(np.asarray(value).flatten().tolist())
        if all(isinstance(v, int) for v in values):
            arg.ints.extend(values)
        else:
            arg.floats.extend(float(v) for v in values)
    else:
        raise TypeError(f"Unsupported argument value type {type(value).__name__} for {name}")
    return arg


def make_operator(
    op_type: str,
    inputs: Sequence[str],
    outputs: Sequence[str],
    name: str | None = None,
    **kwargs: Any,
) -> OperatorDef:
    """Create an ``OperatorDef``.

    :param op_type: Operator type tag (e.g., "Conv")
    :param inputs: Input names
    :param outputs: Output names
    :param name: Optional operator name
    :param kwargs: Arguments, converted with :func:`make_argument`
    :return: Operator message
    """
    op = OperatorDef()
    op.type = op_type
    op.input.extend(inputs)
    op.output.extend(outputs)
    if name:
        op.name = name
    op.arg.extend(make_argument(key, value) for key, value in sorted(kwargs.items()))
    return op


def make_given_tensor_fill(name: str | Sequence[str], values: np.ndarray) -> OperatorDef:
    """Create a ``GivenTensorFill`` directive from an array.

    :param name: Output name, or several names aliasing the same tensor
    :param values: Tensor contents, shape taken from the array
    :return: Operator message
    """
    outputs = [name] if isinstance(name, str) else list(name)
    array = np.asarray(values, dtype=np.float32)
    op = make_operator("GivenTensorFill", [], outputs, shape=list(array.shape))
    values_arg = op.arg.add()
    values_arg.name = "values"
    values_arg.floats.extend(array.flatten().tolist())
    return op


def make_constant_fill(name: str, shape: Sequence[int]) -> OperatorDef:
    """Create a ``ConstantFill`` directive.

    :param name: Output name
    :param shape: Tensor shape
    :return: Operator message
    """
    return make_operator("ConstantFill", [], [name], shape=list(shape))


def make_net(
    ops: Sequence[OperatorDef],
    name: str = "",
    external_input: Sequence[str] = (),
    external_output: Sequence[str] = (),
) -> NetDef:
    """Create a ``NetDef``.

    :param ops: Operators in execution order
    :param name: Network name
    :param external_input: Declared external input names
    :param external_output: Declared external output names
    :return: Network message
    """
    net = NetDef()
    if name:
        net.name = name
    net.op.extend(ops)
    net.external_input.extend(external_input)
    net.external_output.extend(external_output)
    return net


def print_message(message: Any) -> str:
    """Render a protobuf message as human-readable text format.

    :param message: Any protobuf message
    :return: Text-format dump
    """
    return text_format.MessageToString(message)

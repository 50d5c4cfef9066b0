"""Shape arithmetic shared by the operator handlers and the target graph."""

__docformat__ = "restructuredtext"
__all__ = [
    "calculate_conv_output_dims",
    "flatten_cdr",
    "resolve_broadcast_axis",
    "shuffle_dims",
]

import math
from collections.abc import Sequence


def calculate_conv_output_dims(
    height: int, width: int, kernel: int, stride: int, pad: int
) -> tuple[int, int]:
    """Compute spatial output size of a square-kernel convolution or pooling.

    Each axis follows ``floor((in + 2 * pad - kernel) / stride) + 1``.

    :param height: Input height
    :param width: Input width
    :param kernel: Kernel size
    :param stride: Stride
    :param pad: Symmetric padding
    :return: (output height, output width)
    :raises ValueError: If the kernel does not fit the padded input
    """
    if stride <= 0:
        raise ValueError(f"Stride must be positive, got {stride}")
    if height + 2 * pad < kernel or width + 2 * pad < kernel:
        raise ValueError(
            f"Kernel {kernel} does not fit input {height}x{width} with padding {pad}"
        )
    out_h = (height + 2 * pad - kernel) // stride + 1
    out_w = (width + 2 * pad - kernel) // stride + 1
    return out_h, out_w


def flatten_cdr(dims: Sequence[int]) -> tuple[int, int]:
    """Collapse all dimensions after the first into one.

    :param dims: Tensor shape of rank >= 1
    :return: (first dimension, product of the rest)
    """
    if not dims:
        raise ValueError("Cannot flatten a rank-0 shape")
    return dims[0], math.prod(dims[1:])


def resolve_broadcast_axis(axis: int, lhs_rank: int, rhs_rank: int) -> int:
    """Resolve a Caffe2 broadcast axis.

    ``-1`` aligns the trailing dimensions of the second operand with the
    first operand's.

    :param axis: Axis argument
    :param lhs_rank: Rank of the first operand
    :param rhs_rank: Rank of the second operand
    :return: Concrete axis
    """
    if axis == -1:
        return lhs_rank - rhs_rank
    return axis


def shuffle_dims(dims: Sequence[int], shuffle: Sequence[int]) -> tuple[int, ...]:
    """Permute a shape.

    :param dims: Input shape
    :param shuffle: Permutation, ``out[i] = dims[shuffle[i]]``
    :return: Permuted shape
    """
    if sorted(shuffle) != list(range(len(dims))):
        raise ValueError(f"Invalid permutation {tuple(shuffle)} for shape {tuple(dims)}")
    return tuple(dims[i] for i in shuffle)

"""Materialized weight tensors."""

__docformat__ = "restructuredtext"
__all__ = ["TensorValue"]

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from caffe2graph.errors import ValueCountMismatchError
from caffe2graph.graph.types import ElemKind


@dataclass
class TensorValue:
    """Element kind plus a row-major buffer.

    :param elem_kind: Element type
    :param data: Buffer of ``elem_kind.dtype`` holding the tensor contents
    """

    elem_kind: ElemKind
    data: np.ndarray

    @property
    def dims(self) -> tuple[int, ...]:
        return tuple(self.data.shape)

    @property
    def size(self) -> int:
        return math.prod(self.dims)

    @classmethod
    def from_values(
        cls,
        shape: Sequence[int],
        values: Iterable[float],
        elem_kind: ElemKind = ElemKind.FLOAT,
    ) -> "TensorValue":
        """Create a tensor from an enumerated literal list.

        :param shape: Tensor shape
        :param values: Flat values in row-major order
        :param elem_kind: Element type
        :return: New tensor
        :raises ValueCountMismatchError: If ``len(values) != product(shape)``
        """
        flat = np.fromiter(values, dtype=elem_kind.dtype)
        expected = math.prod(shape)
        if flat.size != expected:
            raise ValueCountMismatchError(
                f"The number of serialized values ({flat.size}) does not match "
                f"the size of the tensor {tuple(shape)} ({expected})"
            )
        return cls(elem_kind, flat.reshape(tuple(shape)))

    @classmethod
    def zeros(cls, shape: Sequence[int], elem_kind: ElemKind = ElemKind.FLOAT) -> "TensorValue":
        return cls(elem_kind, np.zeros(tuple(shape), dtype=elem_kind.dtype))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "TensorValue":
        """Wrap a copy of a numpy array.

        :param array: Source array
        :return: New tensor
        """
        array = np.asarray(array)
        elem_kind = ElemKind.from_dtype(array.dtype)
        return cls(elem_kind, np.array(array, copy=True))

    def transpose(self, shuffle: Sequence[int]) -> "TensorValue":
        """Return a transposed, contiguous copy.

        :param shuffle: Axis permutation, ``out.dims[i] = dims[shuffle[i]]``
        :return: New tensor
        """
        return TensorValue(self.elem_kind, np.ascontiguousarray(self.data.transpose(shuffle)))

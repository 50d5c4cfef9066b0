"""Target graph type definitions."""

__docformat__ = "restructuredtext"
__all__ = ["ElemKind", "NodeKind", "TrainKind", "TypeRef", "Visibility"]

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np


class ElemKind(Enum):
    """Element type of a tensor.

    :cvar FLOAT: 32-bit IEEE float
    """

    FLOAT = "float32"

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.value)

    @classmethod
    def from_dtype(cls, dtype: np.dtype) -> "ElemKind":
        """Map a numpy dtype to an element kind.

        :param dtype: Numpy dtype
        :return: Matching element kind
        :raises ValueError: If the dtype has no element kind
        """
        for kind in cls:
            if kind.dtype == np.dtype(dtype):
                return kind
        raise ValueError(f"Unsupported element type {dtype}")


@dataclass(frozen=True)
class TypeRef:
    """Element kind plus shape of a node's result.

    :param elem_kind: Element type
    :param dims: Shape
    """

    elem_kind: ElemKind
    dims: tuple[int, ...]

    @property
    def size(self) -> int:
        return math.prod(self.dims)

    def __str__(self) -> str:
        return f"{self.elem_kind.value}<{' x '.join(str(d) for d in self.dims)}>"


class Visibility(Enum):
    """Whether a variable is bound by the caller (PUBLIC) or owned by the graph."""

    PUBLIC = "public"
    PRIVATE = "private"


class TrainKind(Enum):
    """How a variable is initialized.

    :cvar NONE: Left as provided
    :cvar BROADCAST: Filled with a constant payload
    """

    NONE = "none"
    BROADCAST = "broadcast"


class NodeKind(Enum):
    """Kinds of node the target graph can hold."""

    VARIABLE = "Variable"
    RELU = "Relu"
    SIGMOID = "Sigmoid"
    TANH = "Tanh"
    TRANSPOSE = "Transpose"
    CONVOLUTION = "Convolution"
    POOL_MAX = "PoolMax"
    POOL_AVG = "PoolAvg"
    BATCH_NORMALIZATION = "BatchNormalization"
    CONCAT = "Concat"
    ADD = "Add"
    MUL = "Mul"
    BROADCAST = "Broadcast"
    SOFTMAX = "SoftMax"
    RESHAPE = "Reshape"
    FULLY_CONNECTED = "FullyConnected"
    LOCAL_RESPONSE_NORMALIZATION = "LocalResponseNormalization"
    CHANNEL_SHUFFLE = "ChannelShuffle"
    SQUEEZE = "Squeeze"
    SAVE = "Save"

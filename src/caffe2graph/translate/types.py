"""Supported Caffe2 operator kinds."""

__docformat__ = "restructuredtext"
__all__ = ["OperatorKind"]

from enum import Enum


class OperatorKind(str, Enum):
    """Caffe2 operator type tags the translator can lower.

    Values are the exact ``OperatorDef.type`` strings.
    """

    RELU = "Relu"
    SIGMOID = "Sigmoid"
    TANH = "Tanh"
    DROPOUT = "Dropout"
    CONV = "Conv"
    MAX_POOL = "MaxPool"
    AVERAGE_POOL = "AveragePool"
    SPATIAL_BN = "SpatialBN"
    CONCAT = "Concat"
    SUM = "Sum"
    MUL = "Mul"
    ADD = "Add"
    SOFTMAX = "Softmax"
    FC = "FC"
    LRN = "LRN"
    CHANNEL_SHUFFLE = "ChannelShuffle"
    SQUEEZE = "Squeeze"

    @classmethod
    def lookup(cls, op_type: str) -> "OperatorKind | None":
        """Find the kind for a type tag.

        :param op_type: ``OperatorDef.type``
        :return: Matching kind or None if unsupported
        """
        try:
            return cls(op_type)
        except ValueError:
            return None

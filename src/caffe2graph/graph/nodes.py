"""Target graph nodes."""

__docformat__ = "restructuredtext"
__all__ = ["BatchNormalizationNode", "Node", "SaveNode", "Variable"]

from typing import Any

import numpy as np

from caffe2graph.graph.types import ElemKind, NodeKind, TrainKind, TypeRef, Visibility


class Node:
    """A node of the target dataflow graph.

    Nodes compare by identity. Operator parameters (kernel, stride, ...) live
    in :attr:`params`.

    :param kind: Node kind
    :param name: Node name (not unique)
    :param inputs: Operand nodes
    :param type_ref: Result type
    :param params: Kind-specific parameters
    """

    def __init__(
        self,
        kind: NodeKind,
        name: str,
        inputs: list["Node"],
        type_ref: TypeRef,
        **params: Any,
    ):
        self.kind = kind
        self.name = name
        self.inputs = inputs
        self.type = type_ref
        self.params = params

    @property
    def dims(self) -> tuple[int, ...]:
        return self.type.dims

    @property
    def elem_kind(self) -> ElemKind:
        return self.type.elem_kind

    def __repr__(self) -> str:
        return f"{self.kind.value}(name={self.name!r}, type={self.type})"


class Variable(Node):
    """A graph-owned tensor: caller input, weight, or result buffer.

    :param name: Variable name
    :param type_ref: Tensor type
    :param visibility: Public variables are bound by the caller
    :param train_kind: Initialization policy
    """

    def __init__(
        self,
        name: str,
        type_ref: TypeRef,
        visibility: Visibility = Visibility.PRIVATE,
        train_kind: TrainKind = TrainKind.BROADCAST,
    ):
        super().__init__(NodeKind.VARIABLE, name, [], type_ref)
        self.visibility = visibility
        self.train_kind = train_kind
        self.payload = np.zeros(type_ref.dims, dtype=type_ref.elem_kind.dtype)

    def copy_from(self, source: Any) -> None:
        """Copy tensor contents into the payload.

        :param source: ``TensorValue`` or numpy array of identical shape
        :raises ValueError: If the shape differs
        """
        data = np.asarray(getattr(source, "data", source))
        if tuple(data.shape) != self.dims:
            raise ValueError(
                f"Cannot copy tensor of shape {tuple(data.shape)} into variable "
                f"{self.name} of shape {self.dims}"
            )
        self.payload = data.astype(self.elem_kind.dtype, copy=True)


class BatchNormalizationNode(Node):
    """Batch normalization; inputs are (input, scale, bias, mean, var)."""

    @property
    def scale(self) -> Variable:
        return self.inputs[1]

    @property
    def bias(self) -> Variable:
        return self.inputs[2]

    @property
    def mean(self) -> Variable:
        return self.inputs[3]

    @property
    def var(self) -> Variable:
        return self.inputs[4]


class SaveNode(Node):
    """Terminal node writing its input into a public output variable."""

    @property
    def input(self) -> Node:
        return self.inputs[0]

    @property
    def output(self) -> Variable:
        return self.params["output"]

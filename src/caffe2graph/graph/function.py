"""Target graph containers and node factories.

:class:`Module` owns variables; :class:`Function` owns computation nodes and
validates operand shapes as nodes are created. Spatial operators work on
channel-last (NHWC) tensors.
"""

__docformat__ = "restructuredtext"
__all__ = ["Function", "Module"]

import math
from collections.abc import Sequence

import numpy as np

from caffe2graph.analyze.shapes import calculate_conv_output_dims, flatten_cdr, shuffle_dims
from caffe2graph.graph.nodes import BatchNormalizationNode, Node, SaveNode, Variable
from caffe2graph.graph.types import ElemKind, NodeKind, TrainKind, TypeRef, Visibility


def _check_rank(node: Node, rank: int, op_name: str) -> None:
    if len(node.dims) != rank:
        raise ValueError(f"{op_name} expects a rank-{rank} input, got {node.type}")


def _check_same_type(lhs: Node, rhs: Node, op_name: str) -> None:
    if lhs.type != rhs.type:
        raise ValueError(f"{op_name} operands differ: {lhs.type} vs {rhs.type}")


class Module:
    """Container of variables and functions."""

    def __init__(self):
        self.variables: list[Variable] = []
        self.functions: list[Function] = []

    def create_function(self, name: str) -> "Function":
        function = Function(self, name)
        self.functions.append(function)
        return function

    def create_variable(
        self,
        elem_kind: ElemKind,
        dims: Sequence[int],
        name: str,
        visibility: Visibility = Visibility.PRIVATE,
        train_kind: TrainKind = TrainKind.BROADCAST,
    ) -> Variable:
        """Create a zero-initialized variable.

        :param elem_kind: Element type
        :param dims: Shape
        :param name: Variable name
        :param visibility: Public or private
        :param train_kind: Initialization policy
        :return: New variable
        """
        variable = Variable(name, TypeRef(elem_kind, tuple(dims)), visibility, train_kind)
        self.variables.append(variable)
        return variable

    def add_variable(
        self,
        name: str,
        payload: np.ndarray,
        visibility: Visibility = Visibility.PRIVATE,
    ) -> Variable:
        """Create a variable holding a copy of ``payload``.

        :param name: Variable name
        :param payload: Contents, shape and element type taken from it
        :param visibility: Public or private
        :return: New variable
        """
        elem_kind = ElemKind.from_dtype(payload.dtype)
        variable = self.create_variable(elem_kind, payload.shape, name, visibility)
        variable.copy_from(payload)
        return variable

    def get_variable_by_name(self, name: str) -> Variable | None:
        return next((v for v in self.variables if v.name == name), None)


class Function:
    """A computation graph within a :class:`Module`.

    :param parent: Owning module
    :param name: Function name
    """

    def __init__(self, parent: Module, name: str):
        self.parent = parent
        self.name = name
        self.nodes: list[Node] = []

    def _add(self, node: Node) -> Node:
        self.nodes.append(node)
        return node

    def _unary(self, kind: NodeKind, name: str, input: Node) -> Node:
        return self._add(Node(kind, name, [input], input.type))

    def create_relu(self, name: str, input: Node) -> Node:
        return self._unary(NodeKind.RELU, name, input)

    def create_sigmoid(self, name: str, input: Node) -> Node:
        return self._unary(NodeKind.SIGMOID, name, input)

    def create_tanh(self, name: str, input: Node) -> Node:
        return self._unary(NodeKind.TANH, name, input)

    def create_transpose(self, name: str, input: Node, shuffle: Sequence[int]) -> Node:
        dims = shuffle_dims(input.dims, shuffle)
        return self._add(
            Node(
                NodeKind.TRANSPOSE,
                name,
                [input],
                TypeRef(input.elem_kind, dims),
                shuffle=tuple(shuffle),
            )
        )

    def create_conv(
        self,
        name: str,
        input: Node,
        filter: Node,
        bias: Node,
        out_dims: Sequence[int],
        kernel: int,
        stride: int,
        pad: int,
        group: int,
    ) -> Node:
        """Create an NHWC convolution.

        :param name: Node name
        :param input: Input of shape [N, H, W, C]
        :param filter: Filter of shape [depth, kernel, kernel, C / group]
        :param bias: Bias of shape [depth]
        :param out_dims: Result shape [N, OH, OW, depth]
        :param kernel: Square kernel size
        :param stride: Stride
        :param pad: Symmetric padding
        :param group: Number of groups
        :return: Convolution node
        """
        _check_rank(input, 4, "Convolution")
        n, h, w, c = input.dims
        if group <= 0 or c % group:
            raise ValueError(f"Convolution channels {c} not divisible by group {group}")
        depth = out_dims[3]
        if depth % group:
            raise ValueError(f"Convolution depth {depth} not divisible by group {group}")
        if filter.dims != (depth, kernel, kernel, c // group):
            raise ValueError(
                f"Convolution filter {filter.type} does not match "
                f"[{depth}, {kernel}, {kernel}, {c // group}]"
            )
        if bias.dims != (depth,):
            raise ValueError(f"Convolution bias {bias.type} does not match [{depth}]")
        out_h, out_w = calculate_conv_output_dims(h, w, kernel, stride, pad)
        if tuple(out_dims) != (n, out_h, out_w, depth):
            raise ValueError(
                f"Convolution output {tuple(out_dims)} does not match "
                f"{(n, out_h, out_w, depth)}"
            )
        return self._add(
            Node(
                NodeKind.CONVOLUTION,
                name,
                [input, filter, bias],
                TypeRef(input.elem_kind, tuple(out_dims)),
                kernel=kernel,
                stride=stride,
                pad=pad,
                group=group,
            )
        )

    def _pool(
        self, kind: NodeKind, name: str, input: Node, kernel: int, stride: int, pad: int
    ) -> Node:
        _check_rank(input, 4, kind.value)
        n, h, w, c = input.dims
        out_h, out_w = calculate_conv_output_dims(h, w, kernel, stride, pad)
        return self._add(
            Node(
                kind,
                name,
                [input],
                TypeRef(input.elem_kind, (n, out_h, out_w, c)),
                kernel=kernel,
                stride=stride,
                pad=pad,
            )
        )

    def create_pool_max(self, name: str, input: Node, kernel: int, stride: int, pad: int) -> Node:
        return self._pool(NodeKind.POOL_MAX, name, input, kernel, stride, pad)

    def create_pool_avg(self, name: str, input: Node, kernel: int, stride: int, pad: int) -> Node:
        return self._pool(NodeKind.POOL_AVG, name, input, kernel, stride, pad)

    def create_batch_normalization(
        self,
        name: str,
        input: Node,
        channel_idx: int,
        epsilon: float,
        momentum: float = 0.9,
    ) -> BatchNormalizationNode:
        """Create batch normalization with fresh parameter variables.

        Scale and variance start at one, bias and mean at zero.

        :param name: Node name
        :param input: Input node
        :param channel_idx: Channel axis
        :param epsilon: Variance epsilon
        :param momentum: Running average momentum
        :return: Batch normalization node
        """
        if not 0 <= channel_idx < len(input.dims):
            raise ValueError(f"Channel axis {channel_idx} out of range for {input.type}")
        channels = input.dims[channel_idx]
        module = self.parent
        scale = module.create_variable(input.elem_kind, (channels,), f"{name}.scale")
        bias = module.create_variable(input.elem_kind, (channels,), f"{name}.bias")
        mean = module.create_variable(input.elem_kind, (channels,), f"{name}.mean")
        var = module.create_variable(input.elem_kind, (channels,), f"{name}.var")
        scale.payload.fill(1.0)
        var.payload.fill(1.0)
        return self._add(
            BatchNormalizationNode(
                NodeKind.BATCH_NORMALIZATION,
                name,
                [input, scale, bias, mean, var],
                input.type,
                channel_idx=channel_idx,
                epsilon=epsilon,
                momentum=momentum,
            )
        )

    def create_concat(self, name: str, inputs: Sequence[Node], dimension: int) -> Node:
        if not inputs:
            raise ValueError("Concat requires at least one input")
        first = inputs[0]
        rank = len(first.dims)
        if not 0 <= dimension < rank:
            raise ValueError(f"Concat dimension {dimension} out of range for {first.type}")
        for other in inputs[1:]:
            same_rest = all(
                a == b for i, (a, b) in enumerate(zip(first.dims, other.dims)) if i != dimension
            )
            if len(other.dims) != rank or not same_rest:
                raise ValueError(f"Concat inputs differ: {first.type} vs {other.type}")
        dims = list(first.dims)
        dims[dimension] = sum(inp.dims[dimension] for inp in inputs)
        return self._add(
            Node(
                NodeKind.CONCAT,
                name,
                list(inputs),
                TypeRef(first.elem_kind, tuple(dims)),
                dimension=dimension,
            )
        )

    def create_add(self, name: str, lhs: Node, rhs: Node) -> Node:
        _check_same_type(lhs, rhs, "Add")
        return self._add(Node(NodeKind.ADD, name, [lhs, rhs], lhs.type))

    def create_mul(self, name: str, lhs: Node, rhs: Node) -> Node:
        _check_same_type(lhs, rhs, "Mul")
        return self._add(Node(NodeKind.MUL, name, [lhs, rhs], lhs.type))

    def create_broadcast(
        self, name: str, input: Node, new_shape: Sequence[int], axis: int
    ) -> Node:
        """Expand ``input`` to ``new_shape``, aligning its first axis at ``axis``.

        :param name: Node name
        :param input: Lower-rank operand
        :param new_shape: Target shape
        :param axis: Axis of ``new_shape`` where ``input``'s dimensions begin
        :return: Broadcast node
        """
        new_shape = tuple(new_shape)
        if axis < 0 or axis + len(input.dims) > len(new_shape):
            raise ValueError(f"Cannot broadcast {input.type} to {new_shape} at axis {axis}")
        for i, dim in enumerate(input.dims):
            if dim not in (1, new_shape[axis + i]):
                raise ValueError(f"Cannot broadcast {input.type} to {new_shape} at axis {axis}")
        return self._add(
            Node(
                NodeKind.BROADCAST,
                name,
                [input],
                TypeRef(input.elem_kind, new_shape),
                axis=axis,
            )
        )

    def create_softmax(self, name: str, input: Node, selected: Node) -> Node:
        return self._add(Node(NodeKind.SOFTMAX, name, [input, selected], input.type))

    def create_reshape(self, name: str, input: Node, dims: Sequence[int]) -> Node:
        dims = tuple(dims)
        if math.prod(dims) != input.type.size:
            raise ValueError(f"Cannot reshape {input.type} to {dims}")
        return self._add(
            Node(NodeKind.RESHAPE, name, [input], TypeRef(input.elem_kind, dims), dims=dims)
        )

    def create_fully_connected(self, name: str, input: Node, weights: Node, bias: Node) -> Node:
        """Create a fully connected layer on the flattened input.

        :param name: Node name
        :param input: Input, flattened to [N, K]
        :param weights: Weights of shape [K, M]
        :param bias: Bias of shape [M]
        :return: Node of shape [N, M]
        """
        batch, features = flatten_cdr(input.dims)
        if len(weights.dims) != 2 or weights.dims[0] != features:
            raise ValueError(f"FullyConnected weights {weights.type} do not match K={features}")
        depth = weights.dims[1]
        if bias.dims != (depth,):
            raise ValueError(f"FullyConnected bias {bias.type} does not match [{depth}]")
        return self._add(
            Node(
                NodeKind.FULLY_CONNECTED,
                name,
                [input, weights, bias],
                TypeRef(input.elem_kind, (batch, depth)),
            )
        )

    def create_local_response_normalization(
        self,
        name: str,
        input: Node,
        half_window_size: int,
        alpha: float,
        beta: float,
        k: float,
    ) -> Node:
        _check_rank(input, 4, "LocalResponseNormalization")
        return self._add(
            Node(
                NodeKind.LOCAL_RESPONSE_NORMALIZATION,
                name,
                [input],
                input.type,
                half_window_size=half_window_size,
                alpha=alpha,
                beta=beta,
                k=k,
            )
        )

    def create_channel_shuffle(self, name: str, input: Node, group: int, kernel: int) -> Node:
        if not 0 <= kernel < len(input.dims):
            raise ValueError(f"ChannelShuffle axis {kernel} out of range for {input.type}")
        if group <= 0 or input.dims[kernel] % group:
            raise ValueError(f"ChannelShuffle group {group} does not divide {input.type}")
        return self._add(
            Node(
                NodeKind.CHANNEL_SHUFFLE,
                name,
                [input],
                input.type,
                group=group,
                kernel=kernel,
            )
        )

    def create_squeeze(self, name: str, input: Node, axes: Sequence[int]) -> Node:
        axes = tuple(sorted(set(axes)))
        rank = len(input.dims)
        for axis in axes:
            if not 0 <= axis < rank or input.dims[axis] != 1:
                raise ValueError(f"Cannot squeeze axis {axis} of {input.type}")
        dims = tuple(d for i, d in enumerate(input.dims) if i not in axes)
        return self._add(
            Node(NodeKind.SQUEEZE, name, [input], TypeRef(input.elem_kind, dims), axes=axes)
        )

    def create_save(self, name: str, input: Node) -> SaveNode:
        """Store ``input`` into a new public variable.

        :param name: Node name
        :param input: Node to save
        :return: Save node
        """
        output = self.parent.create_variable(
            input.elem_kind, input.dims, f"{name}.var", Visibility.PUBLIC, TrainKind.NONE
        )
        return self._add(SaveNode(NodeKind.SAVE, name, [input], input.type, output=output))

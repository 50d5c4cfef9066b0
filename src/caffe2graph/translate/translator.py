"""Operator translation.

Walks a network ``NetDef`` in file order and lowers each operator into the
target :class:`~caffe2graph.graph.Function`. Names used by Caffe2 to wire
operators together are resolved through a :class:`NodeRegistry`; weight names
not yet seen as nodes are promoted from the :class:`TensorRegistry` into
private variables on first use.
"""

__docformat__ = "restructuredtext"
__all__ = ["NodeRegistry", "OperatorTranslator"]

import logging
import warnings
from collections.abc import Iterable, Iterator

from caffe2graph.analyze import ArgumentDict
from caffe2graph.errors import DanglingReferenceError, MissingOutputError, UnsupportedOperatorError
from caffe2graph.graph import Function, Module, Node, SaveNode, TrainKind, Visibility
from caffe2graph.load import NetDef, OperatorDef, print_message
from caffe2graph.presets import DEFAULT_SOFTMAX_EXPECTED_NAME
from caffe2graph.translate._handlers import get_handler, get_op_name, register_all_handlers
from caffe2graph.translate.types import OperatorKind
from caffe2graph.weights import TensorRegistry, TensorValue

logger = logging.getLogger(__name__)


class NodeRegistry:
    """Name to graph node mapping.

    Entries are views; the nodes belong to the graph. Several names may map
    to the same node.
    """

    def __init__(self):
        self._nodes: dict[str, Node] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def get(self, name: str) -> Node:
        """Look up a node.

        :param name: Published name
        :return: Node
        :raises DanglingReferenceError: If nothing was published under ``name``
        """
        node = self._nodes.get(name)
        if node is None:
            raise DanglingReferenceError(f"Could not find a node with the name '{name}'")
        return node

    def publish(self, names: Iterable[str], node: Node) -> None:
        for name in names:
            self._nodes[name] = node

    def truncate(self, count: int) -> None:
        """Drop every name published after the first ``count``."""
        for name in list(self._nodes)[count:]:
            del self._nodes[name]


class OperatorTranslator:
    """Lower Caffe2 operators into a graph function.

    :param function: Target function
    :param tensors: Materialized tensors
    :param nodes: Node registry, typically pre-seeded with input variables
    :param softmax_expected_name: Name of the labels tensor fed to Softmax
    """

    def __init__(
        self,
        function: Function,
        tensors: TensorRegistry,
        nodes: NodeRegistry | None = None,
        softmax_expected_name: str = DEFAULT_SOFTMAX_EXPECTED_NAME,
    ):
        register_all_handlers()
        self.function = function
        self.tensors = tensors
        self.nodes = nodes if nodes is not None else NodeRegistry()
        self.softmax_expected_name = softmax_expected_name

    @property
    def module(self) -> Module:
        return self.function.parent

    def has_tensor(self, name: str) -> bool:
        return name in self.tensors

    def get_tensor(self, name: str) -> TensorValue:
        return self.tensors.get(name)

    def get_or_create_node(self, name: str) -> Node:
        """Resolve a name to a node, promoting a weight tensor on first use.

        :param name: Input name
        :return: Published node, or a new private variable holding a copy of
            the tensor registered under ``name``
        :raises DanglingReferenceError: If ``name`` is neither a node nor a tensor
        """
        if name in self.nodes:
            return self.nodes.get(name)

        tensor = self.tensors.get(name)
        variable = self.module.create_variable(
            tensor.elem_kind, tensor.dims, name, Visibility.PRIVATE, TrainKind.BROADCAST
        )
        variable.copy_from(tensor)
        self.nodes.publish([name], variable)
        return variable

    def translate(self, op: OperatorDef) -> Node:
        """Lower one operator and publish its outputs.

        :param op: Operator to lower
        :return: Node published under every output name
        :raises UnsupportedOperatorError: If the type tag has no handler
        """
        kind = OperatorKind.lookup(op.type)
        handler = get_handler(kind) if kind is not None else None
        if handler is None:
            dump = print_message(op)
            logger.error("Unsupported operator\n%s", dump)
            raise UnsupportedOperatorError(f"Unsupported operator '{op.type}'\n{dump}")

        # A failed operator leaves nothing behind
        num_nodes = len(self.function.nodes)
        num_variables = len(self.module.variables)
        num_names = len(self.nodes)
        try:
            node = handler(self, op, ArgumentDict(op.arg, op.type))
        except Exception:
            del self.function.nodes[num_nodes:]
            del self.module.variables[num_variables:]
            self.nodes.truncate(num_names)
            raise
        self.nodes.publish(op.output, node)
        logger.debug("Lowered %s '%s' -> %s", op.type, get_op_name(op), node.type)
        return node

    def translate_net(self, net: NetDef) -> None:
        """Lower all operators in order.

        :param net: Network descriptor
        """
        for op in net.op:
            self.translate(op)

    def finalize(self, net: NetDef) -> SaveNode:
        """Attach the terminal save node to the network's external output.

        Only the first declared external output is saved.

        :param net: Network descriptor
        :return: Save node
        :raises MissingOutputError: If no external output is declared
        :raises DanglingReferenceError: If the output name was never published
        """
        if not net.external_output:
            raise MissingOutputError("Network needs external outputs defined")
        if len(net.external_output) > 1:
            warnings.warn(
                f"Network declares {len(net.external_output)} external outputs; "
                f"only '{net.external_output[0]}' is saved",
                UserWarning,
                stacklevel=2,
            )
        result = self.nodes.get(net.external_output[0])
        return self.function.create_save("output", result)

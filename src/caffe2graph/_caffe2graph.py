__docformat__ = "restructuredtext"
__all__ = ["Caffe2Importer"]

import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np

from caffe2graph.graph import ElemKind, Function, Node, SaveNode, TrainKind, Visibility
from caffe2graph.presets import DEFAULT_SOFTMAX_EXPECTED_NAME, MAX_PROTO_BYTES
from caffe2graph.translate import NodeRegistry, OperatorTranslator
from caffe2graph.weights import TensorRegistry, TensorValue, load_weights

logger = logging.getLogger(__name__)


class Caffe2Importer:
    """Import a Caffe2 model into a graph function.

    Construction performs the whole import; a failure at any stage raises and
    leaves no importer behind.

    :param net_desc_filename: Path to the network descriptor
    :param net_weight_filename: Path to the weights descriptor
    :param names: Names of caller-provided input tensors
    :param tensors: Input tensors, parallel to ``names``; numpy arrays are cast to float32
    :param function: Target function
    :param softmax_expected_name: Name of the labels tensor fed to Softmax
    :param max_proto_bytes: Largest accepted descriptor file size
    :param verbose: Print a summary after importing
    """

    def __init__(
        self,
        net_desc_filename: str | Path,
        net_weight_filename: str | Path,
        names: Sequence[str],
        tensors: Sequence[TensorValue | np.ndarray],
        function: Function,
        softmax_expected_name: str = DEFAULT_SOFTMAX_EXPECTED_NAME,
        max_proto_bytes: int = MAX_PROTO_BYTES,
        verbose: bool = False,
    ):
        if len(names) != len(tensors):
            raise ValueError(
                f"Invalid initialization list: {len(names)} names for {len(tensors)} tensors"
            )
        self.function = function
        self.verbose = verbose
        self._tensors = TensorRegistry()
        self._nodes = NodeRegistry()

        # Stage 1: Register caller-provided inputs
        module = function.parent
        for name, tensor in zip(names, tensors):
            if not isinstance(tensor, TensorValue):
                tensor = TensorValue.from_array(np.asarray(tensor, dtype=ElemKind.FLOAT.dtype))
            variable = module.create_variable(
                tensor.elem_kind, tensor.dims, name, Visibility.PUBLIC, TrainKind.NONE
            )
            variable.copy_from(tensor)
            self._nodes.publish([name], variable)
            self._tensors.register(name, tensor)

        # Stage 2: Load descriptors
        from caffe2graph.load import load_net_def

        logger.info("Importing Caffe2 model %s (weights %s)", net_desc_filename, net_weight_filename)
        network_def = load_net_def(net_desc_filename, max_proto_bytes)
        weights_def = load_net_def(net_weight_filename, max_proto_bytes)

        # Stage 3: Materialize weights
        load_weights(weights_def, self._tensors)

        # Stage 4: Translate operators and save the output
        translator = self._translator = OperatorTranslator(
            function, self._tensors, self._nodes, softmax_expected_name=softmax_expected_name
        )
        translator.translate_net(network_def)
        self._root = translator.finalize(network_def)

        logger.info(
            "Imported %d operators into %d nodes (%d tensors)",
            len(network_def.op),
            len(function.nodes),
            len(self._tensors),
        )
        if self.verbose:
            print(f"Imported: {net_desc_filename} ({len(network_def.op)} operators)")
            print(f"Graph nodes: {len(function.nodes)}")

    @property
    def root(self) -> SaveNode:
        """Save node attached to the network's external output."""
        return self._root

    def get_tensor_by_name(self, name: str) -> TensorValue:
        """Get a materialized tensor.

        :param name: Tensor name
        :return: Tensor
        :raises DanglingReferenceError: If no tensor has this name
        """
        return self._tensors.get(name)

    def get_node_by_name(self, name: str) -> Node:
        """Get a published node.

        :param name: Output name used by the network
        :return: Node
        :raises DanglingReferenceError: If no node has this name
        """
        return self._nodes.get(name)

    def has_node_by_name(self, name: str) -> bool:
        return name in self._nodes

    def get_or_create_node_by_name(self, name: str) -> Node:
        """Get a published node, promoting a registered tensor on first use.

        :param name: Node or tensor name
        :return: Node
        """
        return self._translator.get_or_create_node(name)

"""Weight descriptor materialization.

A weights ``NetDef`` holds fill directives rather than graph operators::

    op {
      output: "conv1_w"
      type: "GivenTensorFill"
      arg { name: "shape" ints: 96 ints: 3 ints: 11 ints: 11 }
      arg { name: "values" floats: -0.028315347 ... }
    }
    op {
      output: "data"
      type: "ConstantFill"
      arg { name: "shape" ints: 1 }
    }
"""

__docformat__ = "restructuredtext"
__all__ = ["WEIGHT_FILLERS", "load_weights"]

import logging
from collections.abc import Callable

from caffe2graph.analyze import ArgumentDict
from caffe2graph.errors import UnsupportedWeightKindError
from caffe2graph.load import NetDef, OperatorDef, print_message
from caffe2graph.weights.registry import TensorRegistry
from caffe2graph.weights.tensor import TensorValue

logger = logging.getLogger(__name__)


def _given_tensor_fill(op: OperatorDef, args: ArgumentDict, registry: TensorRegistry) -> None:
    """Load a tensor with explicit values, aliased by every output name."""
    tensor = TensorValue.from_values(args.get_ints("shape"), args.get_floats("values"))
    handle = registry.add(tensor)
    for name in op.output:
        registry.bind(name, handle)


def _constant_fill(op: OperatorDef, args: ArgumentDict, registry: TensorRegistry) -> None:
    """Allocate a zero tensor unless the name is already populated."""
    name = op.output[0]
    # Tensors pre-populated by the caller or filled earlier win.
    if name in registry:
        logger.debug("Keeping existing tensor %s", name)
        return
    registry.register(name, TensorValue.zeros(args.get_ints("shape")))


WEIGHT_FILLERS: dict[str, Callable[[OperatorDef, ArgumentDict, TensorRegistry], None]] = {
    "GivenTensorFill": _given_tensor_fill,
    "ConstantFill": _constant_fill,
}


def load_weights(weights: NetDef, registry: TensorRegistry) -> None:
    """Populate ``registry`` from a weights descriptor.

    :param weights: Weights ``NetDef``
    :param registry: Tensor registry to fill
    :raises UnsupportedWeightKindError: On any directive other than
        ``GivenTensorFill`` or ``ConstantFill``
    """
    for op in weights.op:
        filler = WEIGHT_FILLERS.get(op.type)
        if filler is None:
            dump = print_message(op)
            logger.error("Unsupported weight kind\n%s", dump)
            raise UnsupportedWeightKindError(f"Unsupported weight kind '{op.type}'\n{dump}")
        filler(op, ArgumentDict(op.arg, op.type), registry)
        logger.debug("Materialized %s -> %s", op.type, list(op.output))

"""Stage 3: Weight materialization."""

__docformat__ = "restructuredtext"
__all__ = ["WEIGHT_FILLERS", "TensorRegistry", "TensorValue", "load_weights"]

from caffe2graph.weights.materializer import WEIGHT_FILLERS, load_weights
from caffe2graph.weights.registry import TensorRegistry
from caffe2graph.weights.tensor import TensorValue

"""Target dataflow graph.

Node and variable types plus the :class:`Function` node factories the
importer lowers Caffe2 operators into.
"""

__docformat__ = "restructuredtext"
__all__ = [
    "BatchNormalizationNode",
    "ElemKind",
    "Function",
    "Module",
    "Node",
    "NodeKind",
    "SaveNode",
    "TrainKind",
    "TypeRef",
    "Variable",
    "Visibility",
]

from caffe2graph.graph.function import Function, Module
from caffe2graph.graph.nodes import BatchNormalizationNode, Node, SaveNode, Variable
from caffe2graph.graph.types import ElemKind, NodeKind, TrainKind, TypeRef, Visibility

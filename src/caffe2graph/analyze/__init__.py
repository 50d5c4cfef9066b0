"""Stage 2: Operator argument and shape analysis."""

__docformat__ = "restructuredtext"
__all__ = [
    "ArgumentDict",
    "calculate_conv_output_dims",
    "flatten_cdr",
    "resolve_broadcast_axis",
    "shuffle_dims",
]

from caffe2graph.analyze.arguments import ArgumentDict
from caffe2graph.analyze.shapes import (
    calculate_conv_output_dims,
    flatten_cdr,
    resolve_broadcast_axis,
    shuffle_dims,
)

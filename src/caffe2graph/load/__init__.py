"""Stage 1: Caffe2 descriptor loading.

Protobuf schema, file loading and message builders.
"""

__docformat__ = "restructuredtext"
__all__ = [
    "Argument",
    "DeviceOption",
    "NetDef",
    "OperatorDef",
    "PartitionInfo",
    "TensorProto",
    "load_net_def",
    "make_argument",
    "make_constant_fill",
    "make_given_tensor_fill",
    "make_net",
    "make_operator",
    "print_message",
    "save_net_def",
]

from caffe2graph.load.helper import (
    make_argument,
    make_constant_fill,
    make_given_tensor_fill,
    make_net,
    make_operator,
    print_message,
)
from caffe2graph.load.loader import load_net_def, save_net_def
from caffe2graph.load.schema import (
    Argument,
    DeviceOption,
    NetDef,
    OperatorDef,
    PartitionInfo,
    TensorProto,
)

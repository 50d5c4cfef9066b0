"""Preset constants for Caffe2 model import.

Defaults used by the loader and the operator handlers. Per-import overrides
are passed as keyword arguments to :class:`caffe2graph.Caffe2Importer`.
"""

__docformat__ = "restructuredtext"
__all__ = [
    "DEFAULT_EPSILON",
    "DEFAULT_ORDER",
    "DEFAULT_SOFTMAX_EXPECTED_NAME",
    "MAX_PROTO_BYTES",
    "NCHW2NHWC",
    "NHWC2NCHW",
    "TEXT_FORMAT_SUFFIX",
    "is_text_format",
]

# Descriptor files ending with this suffix are parsed as protobuf text format
TEXT_FORMAT_SUFFIX = ".pbtxt"

# Binary descriptors larger than this are rejected before decoding
MAX_PROTO_BYTES = 1_000_000_000

# Name of the labels tensor fed to every Softmax node
DEFAULT_SOFTMAX_EXPECTED_NAME = "softmax_expected"

DEFAULT_EPSILON = 1e-5
DEFAULT_ORDER = "NCHW"

# Axis permutations between Caffe2's channel-first and the graph's channel-last
NCHW2NHWC = (0, 2, 3, 1)
NHWC2NCHW = (0, 3, 1, 2)


def is_text_format(path: str) -> bool:
    """Determine if a descriptor file uses the text encoding.

    :param path: Path to descriptor file
    :return: True for text format, False for binary
    """
    return str(path).endswith(TEXT_FORMAT_SUFFIX)

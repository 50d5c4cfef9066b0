__docformat__ = "restructuredtext"
__version__ = "2026.1.0"
__all__ = [
    "Caffe2ImportError",
    "Caffe2Importer",
    "DEFAULT_SOFTMAX_EXPECTED_NAME",
    "ErrorKind",
    "TensorValue",
]

from caffe2graph._caffe2graph import Caffe2Importer
from caffe2graph.errors import Caffe2ImportError, ErrorKind
from caffe2graph.presets import DEFAULT_SOFTMAX_EXPECTED_NAME
from caffe2graph.weights import TensorValue

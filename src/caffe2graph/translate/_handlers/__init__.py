"""Operator handlers for translation.

Handler registry and operator-specific lowering functions.
"""

__docformat__ = "restructuredtext"
__all__ = [
    "HANDLERS",
    "get_handler",
    "get_input_name",
    "get_op_name",
    "register_activation_handlers",
    "register_all_handlers",
    "register_arithmetic_handlers",
    "register_handler",
    "register_normalization_handlers",
    "register_shaping_handlers",
    "register_spatial_handlers",
]

from caffe2graph.translate._handlers._activations import register_activation_handlers
from caffe2graph.translate._handlers._arithmetic import register_arithmetic_handlers
from caffe2graph.translate._handlers._normalization import register_normalization_handlers
from caffe2graph.translate._handlers._registry import (
    HANDLERS,
    get_handler,
    get_input_name,
    get_op_name,
    register_handler,
)
from caffe2graph.translate._handlers._shaping import register_shaping_handlers
from caffe2graph.translate._handlers._spatial import register_spatial_handlers


def register_all_handlers() -> None:
    """Register every built-in handler. Safe to call repeatedly."""
    register_activation_handlers()
    register_spatial_handlers()
    register_normalization_handlers()
    register_arithmetic_handlers()
    register_shaping_handlers()

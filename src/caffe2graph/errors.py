"""Import error taxonomy.

Every failure raised while importing a Caffe2 model derives from
:class:`Caffe2ImportError` and carries an :class:`ErrorKind`. Concrete errors
also derive from the closest builtin exception so callers may catch them
idiomatically (``except ValueError``).
"""

__docformat__ = "restructuredtext"
__all__ = [
    "AttributeTypeError",
    "Caffe2ImportError",
    "DanglingReferenceError",
    "ErrorKind",
    "MissingAttributeError",
    "MissingOutputError",
    "ModelIOError",
    "ModelParseError",
    "UnsupportedConfigurationError",
    "UnsupportedOperatorError",
    "UnsupportedWeightKindError",
    "ValueCountMismatchError",
]

from enum import Enum


class ErrorKind(Enum):
    """Classification of import failures.

    :cvar IO: Descriptor file missing or unreadable
    :cvar PARSE: Descriptor bytes/text could not be decoded
    :cvar MISSING_ATTRIBUTE: Required operator attribute absent
    :cvar ATTRIBUTE_TYPE: Attribute read with the wrong variant (caller bug)
    :cvar VALUE_COUNT_MISMATCH: Literal count differs from the shape's size
    :cvar UNSUPPORTED_KIND: Operator or weight-fill type not supported
    :cvar DANGLING_REFERENCE: Name absent from a registry
    :cvar UNSUPPORTED_CONFIGURATION: Attribute combination not supported
    :cvar MISSING_OUTPUT: Network declares no external output
    """

    IO = "io"
    PARSE = "parse"
    MISSING_ATTRIBUTE = "missing_attribute"
    ATTRIBUTE_TYPE = "attribute_type"
    VALUE_COUNT_MISMATCH = "value_count_mismatch"
    UNSUPPORTED_KIND = "unsupported_kind"
    DANGLING_REFERENCE = "dangling_reference"
    UNSUPPORTED_CONFIGURATION = "unsupported_configuration"
    MISSING_OUTPUT = "missing_output"

    @property
    def is_input_error(self) -> bool:
        """True when the failure is caused by the model, not by this package."""
        return self is not ErrorKind.ATTRIBUTE_TYPE


class Caffe2ImportError(Exception):
    """Base class of all import failures."""

    kind: ErrorKind

    def __str__(self) -> str:
        # KeyError quotes its message; keep plain text for every kind.
        return str(self.args[0]) if self.args else self.kind.value


class ModelIOError(Caffe2ImportError, OSError):
    kind = ErrorKind.IO


class ModelParseError(Caffe2ImportError, ValueError):
    kind = ErrorKind.PARSE


class MissingAttributeError(Caffe2ImportError, KeyError):
    kind = ErrorKind.MISSING_ATTRIBUTE


class AttributeTypeError(Caffe2ImportError, TypeError):
    kind = ErrorKind.ATTRIBUTE_TYPE


class ValueCountMismatchError(Caffe2ImportError, ValueError):
    kind = ErrorKind.VALUE_COUNT_MISMATCH


class UnsupportedOperatorError(Caffe2ImportError, NotImplementedError):
    kind = ErrorKind.UNSUPPORTED_KIND


class UnsupportedWeightKindError(Caffe2ImportError, NotImplementedError):
    kind = ErrorKind.UNSUPPORTED_KIND


class DanglingReferenceError(Caffe2ImportError, KeyError):
    kind = ErrorKind.DANGLING_REFERENCE


class UnsupportedConfigurationError(Caffe2ImportError, ValueError):
    kind = ErrorKind.UNSUPPORTED_CONFIGURATION


class MissingOutputError(Caffe2ImportError, ValueError):
    kind = ErrorKind.MISSING_OUTPUT

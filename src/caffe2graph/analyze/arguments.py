"""Operator argument lookup with typed, defaulted accessors."""

__docformat__ = "restructuredtext"
__all__ = ["ArgumentDict"]

from collections.abc import Iterable
from typing import Any

from caffe2graph.errors import (
    AttributeTypeError,
    MissingAttributeError,
    UnsupportedConfigurationError,
)
from caffe2graph.presets import DEFAULT_ORDER

_NO_DEFAULT = object()

# Order name -> channel axis
_CHANNEL_AXIS = {"NCHW": 1, "NHWC": 3}


class ArgumentDict:
    """Random access map over an operator's ``Argument`` list.

    Accessors raise :class:`MissingAttributeError` when the argument is absent
    and no default is given, and :class:`AttributeTypeError` when the argument
    holds a different variant than the one requested.

    :param args: Arguments of one operator
    :param op_type: Operator type, used in error messages
    """

    def __init__(self, args: Iterable[Any], op_type: str = ""):
        self.op_type = op_type
        self._args = {arg.name: arg for arg in args}

    def __contains__(self, name: str) -> bool:
        return name in self._args

    def __len__(self) -> int:
        return len(self._args)

    def has(self, name: str) -> bool:
        return name in self._args

    def _lookup(self, name: str) -> Any:
        arg = self._args.get(name)
        if arg is None:
            raise MissingAttributeError(f"{self.op_type} requires argument '{name}'")
        return arg

    def _check_variant(self, arg: Any, field: str, variant: str) -> None:
        if not arg.HasField(field):
            raise AttributeTypeError(
                f"{self.op_type} argument '{arg.name}' has no {variant} value"
            )

    def get_int(self, name: str, default: Any = _NO_DEFAULT) -> int:
        """Read a single integer.

        :param name: Argument name
        :param default: Value returned when the argument is absent
        :return: Integer value
        """
        if default is not _NO_DEFAULT and name not in self._args:
            return default
        arg = self._lookup(name)
        self._check_variant(arg, "i", "int")
        return int(arg.i)

    def get_float(self, name: str, default: Any = _NO_DEFAULT) -> float:
        """Read a single float.

        :param name: Argument name
        :param default: Value returned when the argument is absent
        :return: Float value
        """
        if default is not _NO_DEFAULT and name not in self._args:
            return default
        arg = self._lookup(name)
        self._check_variant(arg, "f", "float")
        return float(arg.f)

    def get_str(self, name: str, default: Any = _NO_DEFAULT) -> str:
        """Read a single string.

        :param name: Argument name
        :param default: Value returned when the argument is absent
        :return: Decoded string value
        """
        if default is not _NO_DEFAULT and name not in self._args:
            return default
        arg = self._lookup(name)
        self._check_variant(arg, "s", "str")
        return arg.s.decode("utf-8")

    def get_ints(self, name: str, default: Any = _NO_DEFAULT) -> tuple[int, ...]:
        """Read a list of integers, e.g. a ``shape`` or ``dims`` record.

        An empty list is a valid value, so only the singular variants count as
        a variant mismatch.

        :param name: Argument name
        :param default: Value returned when the argument is absent
        :return: Integer tuple
        """
        if default is not _NO_DEFAULT and name not in self._args:
            return default
        arg = self._lookup(name)
        if arg.floats or arg.strings or any(arg.HasField(field) for field in ("i", "f", "s")):
            raise AttributeTypeError(f"{self.op_type} argument '{name}' has no ints value")
        return tuple(int(v) for v in arg.ints)

    def get_floats(self, name: str, default: Any = _NO_DEFAULT) -> tuple[float, ...]:
        """Read a list of floats.

        :param name: Argument name
        :param default: Value returned when the argument is absent
        :return: Float tuple
        """
        if default is not _NO_DEFAULT and name not in self._args:
            return default
        arg = self._lookup(name)
        if arg.ints or arg.strings or any(arg.HasField(field) for field in ("i", "f", "s")):
            raise AttributeTypeError(f"{self.op_type} argument '{name}' has no floats value")
        return tuple(float(v) for v in arg.floats)

    def get_channel(self) -> int:
        """Translate the ``order`` argument into a channel axis.

        :return: 1 for NCHW (the default), 3 for NHWC
        :raises UnsupportedConfigurationError: For any other order
        """
        order = self.get_str("order", DEFAULT_ORDER)
        if order not in _CHANNEL_AXIS:
            raise UnsupportedConfigurationError(f"Invalid order field '{order}' on {self.op_type}")
        return _CHANNEL_AXIS[order]

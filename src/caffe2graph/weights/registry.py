"""Name-keyed tensor arena."""

__docformat__ = "restructuredtext"
__all__ = ["TensorRegistry"]

from collections.abc import Iterator

from caffe2graph.errors import DanglingReferenceError
from caffe2graph.weights.tensor import TensorValue


class TensorRegistry:
    """Single-owner store of materialized tensors.

    Tensors live in an append-only arena and are addressed by integer handle;
    names bind to handles, so several names may alias one tensor and handles
    stay valid for the lifetime of the registry.
    """

    def __init__(self):
        self._arena: list[TensorValue] = []
        self._handles: dict[str, int] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def add(self, tensor: TensorValue) -> int:
        """Take ownership of a tensor.

        :param tensor: Tensor to store
        :return: Handle of the stored tensor
        """
        self._arena.append(tensor)
        return len(self._arena) - 1

    def bind(self, name: str, handle: int) -> None:
        """Bind (or rebind) a name to a stored tensor.

        :param name: Tensor name
        :param handle: Handle returned by :meth:`add`
        """
        if not 0 <= handle < len(self._arena):
            raise IndexError(f"Invalid tensor handle {handle}")
        self._handles[name] = handle

    def register(self, name: str, tensor: TensorValue) -> int:
        handle = self.add(tensor)
        self.bind(name, handle)
        return handle

    def handle(self, name: str) -> int:
        if name not in self._handles:
            raise DanglingReferenceError(f"There is no tensor registered with the name '{name}'")
        return self._handles[name]

    def get(self, name: str) -> TensorValue:
        """Look up a tensor by name.

        :param name: Tensor name
        :return: Registered tensor
        :raises DanglingReferenceError: If the name is not registered
        """
        return self._arena[self.handle(name)]

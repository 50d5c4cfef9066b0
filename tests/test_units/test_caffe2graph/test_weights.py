"""Tests for Stage 3: weight materialization.

Test Coverage:
- TestTensorValue: explicit and constant construction, transpose
- TestTensorRegistry: arena handles and aliasing
- TestLoadWeights: GivenTensorFill, ConstantFill, unsupported kinds
"""

import numpy as np
import pytest

from caffe2graph.errors import (
    DanglingReferenceError,
    ErrorKind,
    MissingAttributeError,
    UnsupportedWeightKindError,
    ValueCountMismatchError,
)
from caffe2graph.graph import ElemKind
from caffe2graph.load import (
    make_constant_fill,
    make_given_tensor_fill,
    make_net,
    make_operator,
)
from caffe2graph.weights import TensorRegistry, TensorValue, load_weights


class TestTensorValue:
    """Test TensorValue construction."""

    def test_from_values_row_major(self):
        """Build a tensor from row-major values."""
        tensor = TensorValue.from_values((2, 3), [0, 1, 2, 3, 4, 5])
        assert tensor.elem_kind is ElemKind.FLOAT
        assert tensor.dims == (2, 3)
        assert tensor.data.dtype == np.float32
        assert tensor.data[1, 0] == 3.0

    @pytest.mark.parametrize("count", [5, 7])
    def test_from_values_count_mismatch(self, count):
        """Test a wrong value count is rejected."""
        with pytest.raises(ValueCountMismatchError, match="does not match") as excinfo:
            TensorValue.from_values((2, 3), range(count))
        assert excinfo.value.kind is ErrorKind.VALUE_COUNT_MISMATCH

    def test_zeros(self):
        """Build a zero tensor."""
        tensor = TensorValue.zeros((4, 2))
        assert tensor.size == 8
        assert not tensor.data.any()

    def test_transpose_is_contiguous_copy(self):
        """Verify transpose returns a contiguous copy."""
        tensor = TensorValue.from_values((2, 3), range(6))
        transposed = tensor.transpose((1, 0))
        assert transposed.dims == (3, 2)
        assert transposed.data.flags["C_CONTIGUOUS"]
        np.testing.assert_array_equal(transposed.data, tensor.data.T)

    def test_from_array_copies(self):
        """Verify from_array does not share memory."""
        array = np.ones((2, 2), dtype=np.float32)
        tensor = TensorValue.from_array(array)
        array[0, 0] = 5.0
        assert tensor.data[0, 0] == 1.0

    def test_from_array_rejects_unknown_dtype(self):
        """Test integer arrays are rejected."""
        with pytest.raises(ValueError, match="Unsupported element type"):
            TensorValue.from_array(np.ones(2, dtype=np.int64))


class TestTensorRegistry:
    """Test the tensor arena."""

    def test_register_and_get(self):
        """Register a tensor and look it up."""
        registry = TensorRegistry()
        tensor = TensorValue.zeros((1,))
        registry.register("a", tensor)
        assert "a" in registry
        assert registry.get("a") is tensor

    def test_aliases_share_one_tensor(self):
        """Verify aliases share one handle."""
        registry = TensorRegistry()
        handle = registry.add(TensorValue.zeros((2,)))
        registry.bind("a", handle)
        registry.bind("b", handle)
        assert registry.get("a") is registry.get("b")
        assert registry.handle("a") == registry.handle("b") == handle
        assert len(registry) == 2

    def test_missing_name(self):
        """Test an unknown name fails."""
        with pytest.raises(DanglingReferenceError, match="no tensor registered"):
            TensorRegistry().get("missing")

    def test_bind_invalid_handle(self):
        """Test binding an unknown handle fails."""
        with pytest.raises(IndexError):
            TensorRegistry().bind("a", 0)


class TestLoadWeights:
    """Test the weight materializer."""

    def test_given_tensor_fill(self):
        """Load an explicit tensor."""
        registry = TensorRegistry()
        values = np.arange(12, dtype=np.float32).reshape(3, 4)
        load_weights(make_net([make_given_tensor_fill("w", values)]), registry)
        np.testing.assert_array_equal(registry.get("w").data, values)

    def test_given_tensor_fill_aliases_outputs(self):
        """Verify all outputs of a fill alias one tensor."""
        registry = TensorRegistry()
        load_weights(
            make_net([make_given_tensor_fill(["w", "w_alias"], np.ones((2, 2)))]), registry
        )
        assert registry.get("w") is registry.get("w_alias")

    def test_given_tensor_fill_count_mismatch(self):
        """Test a fill with the wrong value count registers nothing."""
        op = make_operator("GivenTensorFill", [], ["w"], shape=[2, 2], values=[1.0, 2.0, 3.0])
        registry = TensorRegistry()
        with pytest.raises(ValueCountMismatchError):
            load_weights(make_net([op]), registry)
        assert "w" not in registry

    def test_given_tensor_fill_overwrites(self):
        """Verify explicit fills replace existing tensors."""
        registry = TensorRegistry()
        registry.register("w", TensorValue.zeros((2,)))
        load_weights(make_net([make_given_tensor_fill("w", np.array([3.0, 4.0]))]), registry)
        np.testing.assert_array_equal(registry.get("w").data, [3.0, 4.0])

    def test_constant_fill_zeros(self):
        """Load a zero tensor."""
        registry = TensorRegistry()
        load_weights(make_net([make_constant_fill("data", [1, 3, 2, 2])]), registry)
        tensor = registry.get("data")
        assert tensor.dims == (1, 3, 2, 2)
        assert not tensor.data.any()

    def test_constant_fill_never_overwrites_caller_tensor(self):
        """Verify ConstantFill keeps a caller tensor."""
        registry = TensorRegistry()
        caller = TensorValue.from_values((2,), [7.0, 8.0])
        registry.register("data", caller)
        load_weights(make_net([make_constant_fill("data", [5])]), registry)
        assert registry.get("data") is caller

    def test_constant_fill_never_overwrites_explicit_fill(self):
        """Verify ConstantFill keeps an earlier explicit fill."""
        registry = TensorRegistry()
        weights = make_net(
            [
                make_given_tensor_fill("w", np.array([1.0, 2.0])),
                make_constant_fill("w", [2]),
            ]
        )
        load_weights(weights, registry)
        np.testing.assert_array_equal(registry.get("w").data, [1.0, 2.0])

    def test_missing_shape(self):
        """Test a fill without shape fails."""
        op = make_operator("ConstantFill", [], ["data"])
        with pytest.raises(MissingAttributeError, match="shape"):
            load_weights(make_net([op]), TensorRegistry())

    def test_unsupported_weight_kind(self, caplog):
        """Test an unknown fill kind raises and logs its dump."""
        op = make_operator("UniformFill", [], ["w"], shape=[2])
        with caplog.at_level("ERROR"), pytest.raises(UnsupportedWeightKindError) as excinfo:
            load_weights(make_net([op]), TensorRegistry())
        assert excinfo.value.kind is ErrorKind.UNSUPPORTED_KIND
        assert 'type: "UniformFill"' in str(excinfo.value)
        assert "Unsupported weight kind" in caplog.text

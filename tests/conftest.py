"""Pytest configuration and shared fixtures for caffe2graph tests."""

import numpy as np
import pytest

from caffe2graph.graph import Module
from caffe2graph.load import make_net, make_operator, save_net_def


@pytest.fixture
def function():
    """Create an empty target function inside a fresh module."""
    return Module().create_function("main")


@pytest.fixture
def save_model(tmp_path):
    """Return a helper writing a (network, weights) pair to disk.

    The helper returns the two file paths as strings.
    """

    def _save(network, weights, suffix=".pbtxt"):
        net_path = tmp_path / f"predict_net{suffix}"
        init_path = tmp_path / f"init_net{suffix}"
        save_net_def(network, net_path)
        save_net_def(weights, init_path)
        return str(net_path), str(init_path)

    return _save


@pytest.fixture
def relu_model(save_model):
    """Create and save a single-Relu network."""
    network = make_net(
        [make_operator("Relu", ["x"], ["y"])], external_input=["x"], external_output=["y"]
    )
    return save_model(network, make_net([]))


@pytest.fixture
def input_x():
    """A 1x4 input tensor."""
    return np.array([[-1.0, 0.0, 1.0, 2.0]], dtype=np.float32)

"""Shared pytest fixtures for caffe2graph unit tests.

This module provides:
- Saved model fixtures, as (network path, weights path) pairs
- Input tensors matching those models
"""

import numpy as np
import pytest

from tests.test_units.test_caffe2graph.fixtures.synthetic_nets import SyntheticCaffe2Nets


@pytest.fixture
def conv_model(save_model):
    """Create and save a single-Conv model with bias."""
    return save_model(*SyntheticCaffe2Nets.create_conv_net())


@pytest.fixture
def conv_model_no_bias(save_model):
    """Create and save a single-Conv model without bias."""
    return save_model(*SyntheticCaffe2Nets.create_conv_net(with_bias=False))


@pytest.fixture
def lenet_model(save_model):
    """Create and save the LeNet-like model in text format."""
    return save_model(*SyntheticCaffe2Nets.create_lenet_like_net())


@pytest.fixture
def lenet_model_binary(save_model):
    """Create and save the LeNet-like model in binary format."""
    return save_model(*SyntheticCaffe2Nets.create_lenet_like_net(), suffix=".pb")


@pytest.fixture
def spatial_bn_model(save_model):
    """Create and save a SpatialBN model."""
    return save_model(*SyntheticCaffe2Nets.create_spatial_bn_net())


@pytest.fixture
def conv_input():
    """A 1x4x10x10 input tensor."""
    return np.random.default_rng(1).standard_normal((1, 4, 10, 10)).astype(np.float32)


@pytest.fixture
def lenet_input():
    """A 1x1x8x8 input tensor."""
    return np.random.default_rng(2).standard_normal((1, 1, 8, 8)).astype(np.float32)

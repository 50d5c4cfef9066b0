"""Synthetic Caffe2 network builders for test coverage.

Each factory returns a ``(network, weights)`` pair of ``NetDef`` messages.
"""

import numpy as np

from caffe2graph.load import (
    NetDef,
    make_constant_fill,
    make_given_tensor_fill,
    make_net,
    make_operator,
)


class SyntheticCaffe2Nets:
    """Factory for creating synthetic Caffe2 networks for testing."""

    @staticmethod
    def create_relu_net() -> tuple[NetDef, NetDef]:
        """Single Relu: x -> y."""
        network = make_net(
            [make_operator("Relu", ["x"], ["y"])],
            name="relu",
            external_input=["x"],
            external_output=["y"],
        )
        return network, make_net([], name="relu_init")

    @staticmethod
    def create_conv_net(
        in_channels=4, out_channels=8, kernel=3, stride=1, pad=1, with_bias=True
    ) -> tuple[NetDef, NetDef]:
        """Single Conv with KCRS weights w and optional bias b."""
        rng = np.random.default_rng(42)
        weights = [
            make_given_tensor_fill(
                "w",
                rng.standard_normal((out_channels, in_channels, kernel, kernel)).astype(np.float32),
            )
        ]
        inputs = ["x", "w"]
        if with_bias:
            weights.append(
                make_given_tensor_fill("b", np.arange(out_channels, dtype=np.float32))
            )
            inputs.append("b")
        network = make_net(
            [make_operator("Conv", inputs, ["y"], kernel=kernel, stride=stride, pad=pad)],
            name="conv",
            external_input=["x"],
            external_output=["y"],
        )
        return network, make_net(weights, name="conv_init")

    @staticmethod
    def create_lenet_like_net() -> tuple[NetDef, NetDef]:
        """Conv -> Relu -> MaxPool -> Dropout -> FC -> Softmax on a 1x1x8x8 input."""
        rng = np.random.default_rng(0)
        weights = make_net(
            [
                make_given_tensor_fill(
                    "conv1_w", rng.standard_normal((2, 1, 3, 3)).astype(np.float32)
                ),
                make_given_tensor_fill("conv1_b", np.zeros(2, dtype=np.float32)),
                make_given_tensor_fill(
                    "fc_w", rng.standard_normal((10, 2 * 4 * 4)).astype(np.float32)
                ),
                make_given_tensor_fill("fc_b", np.zeros(10, dtype=np.float32)),
                make_constant_fill("softmax_expected", [1, 1]),
            ],
            name="lenet_init",
        )
        network = make_net(
            [
                make_operator(
                    "Conv", ["data", "conv1_w", "conv1_b"], ["conv1"], kernel=3, pad=1
                ),
                make_operator("Relu", ["conv1"], ["conv1"]),
                make_operator("MaxPool", ["conv1"], ["pool1"], kernel=2, stride=2),
                make_operator("Dropout", ["pool1"], ["drop1", "drop1_mask"]),
                make_operator("FC", ["drop1", "fc_w", "fc_b"], ["fc"]),
                make_operator("Softmax", ["fc"], ["prob"]),
            ],
            name="lenet",
            external_input=["data"],
            external_output=["prob"],
        )
        return network, weights

    @staticmethod
    def create_spatial_bn_net(channels=3, order="NCHW") -> tuple[NetDef, NetDef]:
        """SpatialBN with distinct scale/bias/mean/var tensors."""
        weights = make_net(
            [
                make_given_tensor_fill("scale", np.full(channels, 2.0, dtype=np.float32)),
                make_given_tensor_fill("bias", np.full(channels, 0.5, dtype=np.float32)),
                make_given_tensor_fill("mean", np.arange(channels, dtype=np.float32)),
                make_given_tensor_fill("var", np.full(channels, 4.0, dtype=np.float32)),
            ]
        )
        network = make_net(
            [
                make_operator(
                    "SpatialBN",
                    ["x", "scale", "bias", "mean", "var"],
                    ["y"],
                    epsilon=1e-3,
                    order=order,
                )
            ],
            external_output=["y"],
        )
        return network, weights

    @staticmethod
    def create_broadcast_net(op_type="Mul", axis=-1) -> tuple[NetDef, NetDef]:
        """Binary op of x with a broadcast weight c."""
        weights = make_net([make_given_tensor_fill("c", np.ones(4, dtype=np.float32))])
        network = make_net(
            [make_operator(op_type, ["x", "c"], ["y"], broadcast=1, axis=axis)],
            external_output=["y"],
        )
        return network, weights

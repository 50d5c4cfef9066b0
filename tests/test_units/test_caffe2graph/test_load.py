"""Tests for Stage 1: descriptor loading.

Test Coverage:
- TestSchema: message classes and field numbers
- TestLoadNetDef: text and binary encodings, errors, byte ceiling
- TestHelpers: argument/operator builders
"""

import numpy as np
import pytest
from google.protobuf import text_format

from caffe2graph.errors import ErrorKind, ModelIOError, ModelParseError
from caffe2graph.load import (
    NetDef,
    OperatorDef,
    TensorProto,
    load_net_def,
    make_argument,
    make_given_tensor_fill,
    make_net,
    make_operator,
    print_message,
    save_net_def,
)
from caffe2graph.presets import is_text_format

PBTXT_NET = """
name: "tiny"
op {
  input: "data"
  output: "relu"
  name: ""
  type: "Relu"
  device_option { device_type: 0 }
}
external_input: "data"
external_output: "relu"
"""


class TestSchema:
    """Test the generated Caffe2 message classes."""

    def test_netdef_field_numbers(self):
        """Field numbers follow caffe2.proto."""
        fields = {f.name: f.number for f in NetDef.DESCRIPTOR.fields}
        assert fields["op"] == 2
        assert fields["external_input"] == 7
        assert fields["external_output"] == 8
        assert fields["partition_info"] == 9

    def test_operator_argument_field_numbers(self):
        """Verify OperatorDef and Argument field numbers."""
        op_fields = {f.name: f.number for f in OperatorDef.DESCRIPTOR.fields}
        assert op_fields["input"] == 1
        assert op_fields["type"] == 4
        assert op_fields["arg"] == 5
        arg_descriptor = OperatorDef.DESCRIPTOR.fields_by_name["arg"].message_type
        arg_fields = {f.name: f.number for f in arg_descriptor.fields}
        assert arg_fields == {
            "name": 1,
            "f": 2,
            "i": 3,
            "s": 4,
            "floats": 5,
            "ints": 6,
            "strings": 7,
            "n": 8,
            "nets": 9,
            "t": 10,
            "tensors": 11,
        }

    def test_text_format_parse(self):
        """Parse a text-format network directly."""
        net = text_format.Parse(PBTXT_NET, NetDef())
        assert net.name == "tiny"
        assert len(net.op) == 1
        assert net.op[0].type == "Relu"
        assert list(net.external_output) == ["relu"]


class TestLoadNetDef:
    """Test loading descriptors from file."""

    def test_load_text_format(self, tmp_path):
        """Load a .pbtxt network."""
        path = tmp_path / "predict_net.pbtxt"
        path.write_text(PBTXT_NET)
        net = load_net_def(path)
        assert net.op[0].input[0] == "data"

    def test_load_binary_format(self, tmp_path):
        """Load a binary network."""
        net = text_format.Parse(PBTXT_NET, NetDef())
        path = tmp_path / "predict_net.pb"
        path.write_bytes(net.SerializeToString())
        loaded = load_net_def(str(path))
        assert loaded == net

    def test_save_then_load_binary_preserves_weights(self, tmp_path):
        """Verify saved weights load back intact."""
        values = np.arange(6, dtype=np.float32).reshape(2, 3)
        net = make_net([make_given_tensor_fill("w", values)])
        path = tmp_path / "init_net.pb"
        save_net_def(net, path)
        loaded = load_net_def(path)
        assert list(loaded.op[0].arg[0].ints) == [2, 3]
        assert list(loaded.op[0].arg[1].floats) == values.flatten().tolist()

    def test_missing_file_raises_io_error(self, tmp_path):
        """Test a missing file raises ModelIOError."""
        with pytest.raises(ModelIOError) as excinfo:
            load_net_def(tmp_path / "missing.pb")
        assert excinfo.value.kind is ErrorKind.IO
        assert isinstance(excinfo.value, OSError)

    def test_load_text_with_partitions_and_nested_arguments(self, tmp_path):
        """Test upstream fields beyond the operator list parse in text format."""
        path = tmp_path / "partitioned.pbtxt"
        path.write_text(
            PBTXT_NET
            + """
partition_info { name: "p0" device_id: 0 device_id: 1 }
arg {
  name: "step"
  n { name: "inner" op { type: "Relu" input: "a" output: "b" } }
}
arg {
  name: "init"
  t { dims: 2 data_type: FLOAT float_data: 1.0 float_data: 2.0 name: "w" }
}
"""
        )
        net = load_net_def(path)
        assert net.partition_info[0].name == "p0"
        assert list(net.partition_info[0].device_id) == [0, 1]
        assert net.arg[0].n.op[0].type == "Relu"
        tensor = net.arg[1].t
        assert tensor.data_type == TensorProto.FLOAT
        assert list(tensor.float_data) == [1.0, 2.0]

    def test_malformed_text_raises_parse_error(self, tmp_path):
        """Test truncated text raises ModelParseError."""
        path = tmp_path / "broken.pbtxt"
        path.write_text("op { type: ")
        with pytest.raises(ModelParseError, match="Failed to parse"):
            load_net_def(path)

    def test_unknown_text_field_raises_parse_error(self, tmp_path):
        """Test an unknown text field raises ModelParseError."""
        path = tmp_path / "unknown.pbtxt"
        path.write_text('no_such_field: "x"')
        with pytest.raises(ModelParseError):
            load_net_def(path)

    def test_corrupted_binary_raises_parse_error(self, tmp_path):
        """Test truncated binary raises ModelParseError."""
        path = tmp_path / "corrupt.pb"
        # Field 2 (op), length-delimited, claiming more bytes than present
        path.write_bytes(b"\x12\xff\x01\x00")
        with pytest.raises(ModelParseError):
            load_net_def(path)

    def test_byte_ceiling_rejects_large_files(self, tmp_path):
        """Test files above max_bytes are rejected."""
        path = tmp_path / "big.pb"
        path.write_bytes(b"\x00" * 64)
        with pytest.raises(ModelParseError, match="exceeding the limit"):
            load_net_def(path, max_bytes=16)

    def test_suffix_selects_encoding(self):
        """Verify only the .pbtxt suffix selects text format."""
        assert is_text_format("model/predict_net.pbtxt")
        assert not is_text_format("model/predict_net.pb")
        assert not is_text_format("model/predict_net.pbtxt.bak")


class TestHelpers:
    """Test message builders."""

    def test_make_argument_variants(self):
        """Build arguments of every variant."""
        assert make_argument("a", 3).i == 3
        assert make_argument("a", True).i == 1
        assert make_argument("a", 0.5).f == pytest.approx(0.5)
        assert make_argument("a", "NHWC").s == b"NHWC"
        assert list(make_argument("a", [1, 2]).ints) == [1, 2]
        assert list(make_argument("a", [0.5, 1]).floats) == [0.5, 1.0]

    def test_make_argument_rejects_unknown_type(self):
        """Test unsupported python values are rejected."""
        with pytest.raises(TypeError):
            make_argument("a", object())

    def test_make_operator(self):
        """Build an operator with a name and arguments."""
        op = make_operator("Conv", ["x", "w"], ["y"], name="conv1", kernel=3)
        assert op.type == "Conv"
        assert op.name == "conv1"
        assert list(op.input) == ["x", "w"]
        assert op.arg[0].name == "kernel"

    def test_print_message_is_text_format(self):
        """Verify dumps are in text format."""
        op = make_operator("Relu", ["x"], ["y"])
        dump = print_message(op)
        assert 'type: "Relu"' in dump
        assert 'input: "x"' in dump

"""Caffe2 protobuf schema.

Builds ``caffe2.proto`` (``NetDef``, ``OperatorDef``, ``Argument``,
``DeviceOption``, ``TensorProto`` and ``PartitionInfo``) at import time, into a
private descriptor pool. Field numbers and enum values follow the upstream
schema so descriptors written by Caffe2 decode unchanged, in both binary and
text format. Quantized tensors (``QTensorProto``), partition backend options
and external tensor storage are not modelled; binary files carrying them keep
those fields as unknown fields, text files fail to parse.
"""

__docformat__ = "restructuredtext"
__all__ = [
    "Argument",
    "DeviceOption",
    "NetDef",
    "OperatorDef",
    "PartitionInfo",
    "TensorProto",
]

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_PACKAGE = "caffe2"

_FieldProto = descriptor_pb2.FieldDescriptorProto
_OPTIONAL = _FieldProto.LABEL_OPTIONAL
_REQUIRED = _FieldProto.LABEL_REQUIRED
_REPEATED = _FieldProto.LABEL_REPEATED
_BOOL = _FieldProto.TYPE_BOOL
_BYTES = _FieldProto.TYPE_BYTES
_DOUBLE = _FieldProto.TYPE_DOUBLE
_ENUM = _FieldProto.TYPE_ENUM
_FLOAT = _FieldProto.TYPE_FLOAT
_INT32 = _FieldProto.TYPE_INT32
_INT64 = _FieldProto.TYPE_INT64
_MESSAGE = _FieldProto.TYPE_MESSAGE
_STRING = _FieldProto.TYPE_STRING
_UINT32 = _FieldProto.TYPE_UINT32

# Message name (dotted for nested messages) -> (name, number, label, type, type_name)
_MESSAGES: dict[str, list[tuple[str, int, int, int, str | None]]] = {
    "DeviceOption": [
        ("device_type", 1, _OPTIONAL, _INT32, None),
        ("device_id", 2, _OPTIONAL, _INT32, None),
        ("random_seed", 3, _OPTIONAL, _UINT32, None),
        ("node_name", 4, _OPTIONAL, _STRING, None),
        ("numa_node_id", 5, _OPTIONAL, _INT32, None),
        ("extra_info", 6, _REPEATED, _STRING, None),
    ],
    "TensorProto": [
        ("dims", 1, _REPEATED, _INT64, None),
        ("data_type", 2, _OPTIONAL, _ENUM, ".caffe2.TensorProto.DataType"),
        ("float_data", 3, _REPEATED, _FLOAT, None),
        ("int32_data", 4, _REPEATED, _INT32, None),
        ("byte_data", 5, _OPTIONAL, _BYTES, None),
        ("string_data", 6, _REPEATED, _BYTES, None),
        ("name", 7, _OPTIONAL, _STRING, None),
        ("device_detail", 8, _OPTIONAL, _MESSAGE, ".caffe2.DeviceOption"),
        ("double_data", 9, _REPEATED, _DOUBLE, None),
        ("int64_data", 10, _REPEATED, _INT64, None),
        ("segment", 11, _OPTIONAL, _MESSAGE, ".caffe2.TensorProto.Segment"),
        ("raw_data", 13, _OPTIONAL, _BYTES, None),
    ],
    "TensorProto.Segment": [
        ("begin", 1, _REQUIRED, _INT64, None),
        ("end", 2, _REQUIRED, _INT64, None),
    ],
    "Argument": [
        ("name", 1, _OPTIONAL, _STRING, None),
        ("f", 2, _OPTIONAL, _FLOAT, None),
        ("i", 3, _OPTIONAL, _INT64, None),
        ("s", 4, _OPTIONAL, _BYTES, None),
        ("floats", 5, _REPEATED, _FLOAT, None),
        ("ints", 6, _REPEATED, _INT64, None),
        ("strings", 7, _REPEATED, _BYTES, None),
        ("n", 8, _OPTIONAL, _MESSAGE, ".caffe2.NetDef"),
        ("nets", 9, _REPEATED, _MESSAGE, ".caffe2.NetDef"),
        ("t", 10, _OPTIONAL, _MESSAGE, ".caffe2.TensorProto"),
        ("tensors", 11, _REPEATED, _MESSAGE, ".caffe2.TensorProto"),
    ],
    "OperatorDef": [
        ("input", 1, _REPEATED, _STRING, None),
        ("output", 2, _REPEATED, _STRING, None),
        ("name", 3, _OPTIONAL, _STRING, None),
        ("type", 4, _OPTIONAL, _STRING, None),
        ("arg", 5, _REPEATED, _MESSAGE, ".caffe2.Argument"),
        ("device_option", 6, _OPTIONAL, _MESSAGE, ".caffe2.DeviceOption"),
        ("engine", 7, _OPTIONAL, _STRING, None),
        ("control_input", 8, _REPEATED, _STRING, None),
        ("is_gradient_op", 9, _OPTIONAL, _BOOL, None),
        ("debug_info", 10, _OPTIONAL, _STRING, None),
        ("domain", 11, _OPTIONAL, _STRING, None),
        ("op_version", 12, _OPTIONAL, _INT64, None),
    ],
    "PartitionInfo": [
        ("name", 1, _OPTIONAL, _STRING, None),
        ("device_id", 2, _REPEATED, _INT32, None),
        ("extra_info", 3, _OPTIONAL, _STRING, None),
    ],
    "NetDef": [
        ("name", 1, _OPTIONAL, _STRING, None),
        ("op", 2, _REPEATED, _MESSAGE, ".caffe2.OperatorDef"),
        ("type", 3, _OPTIONAL, _STRING, None),
        ("num_workers", 4, _OPTIONAL, _INT32, None),
        ("device_option", 5, _OPTIONAL, _MESSAGE, ".caffe2.DeviceOption"),
        ("arg", 6, _REPEATED, _MESSAGE, ".caffe2.Argument"),
        ("external_input", 7, _REPEATED, _STRING, None),
        ("external_output", 8, _REPEATED, _STRING, None),
        ("partition_info", 9, _REPEATED, _MESSAGE, ".caffe2.PartitionInfo"),
    ],
}

# Message name -> enum name -> (value name, number)
_ENUMS: dict[str, dict[str, list[tuple[str, int]]]] = {
    "TensorProto": {
        "DataType": [
            ("UNDEFINED", 0),
            ("FLOAT", 1),
            ("INT32", 2),
            ("BYTE", 3),
            ("STRING", 4),
            ("BOOL", 5),
            ("UINT8", 6),
            ("INT8", 7),
            ("UINT16", 8),
            ("INT16", 9),
            ("INT64", 10),
            ("FLOAT16", 12),
            ("DOUBLE", 13),
            ("ZERO_COLLISION_HASH", 14),
            ("REBATCHING_BUFFER", 15),
        ],
    },
}


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    """Assemble the ``caffe2.proto`` file descriptor.

    :return: File descriptor holding all supported messages
    """
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "caffe2graph/caffe2.proto"
    file_proto.package = _PACKAGE
    file_proto.syntax = "proto2"

    message_protos: dict[str, descriptor_pb2.DescriptorProto] = {}
    for message_name, fields in _MESSAGES.items():
        parent_name, _, local_name = message_name.rpartition(".")
        if parent_name:
            message_proto = message_protos[parent_name].nested_type.add()
        else:
            message_proto = file_proto.message_type.add()
        message_proto.name = local_name
        message_protos[message_name] = message_proto

        for name, number, label, field_type, type_name in fields:
            field_proto = message_proto.field.add()
            field_proto.name = name
            field_proto.number = number
            field_proto.label = label
            field_proto.type = field_type
            if type_name is not None:
                field_proto.type_name = type_name

    for message_name, enums in _ENUMS.items():
        for enum_name, values in enums.items():
            enum_proto = message_protos[message_name].enum_type.add()
            enum_proto.name = enum_name
            for value_name, number in values:
                value_proto = enum_proto.value.add()
                value_proto.name = value_name
                value_proto.number = number
    return file_proto


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file_descriptor().SerializeToString())


def _message_class(name: str) -> type:
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{_PACKAGE}.{name}"))


DeviceOption = _message_class("DeviceOption")
TensorProto = _message_class("TensorProto")
Argument = _message_class("Argument")
OperatorDef = _message_class("OperatorDef")
PartitionInfo = _message_class("PartitionInfo")
NetDef = _message_class("NetDef")

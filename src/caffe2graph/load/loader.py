"""Caffe2 descriptor file loading and saving."""

__docformat__ = "restructuredtext"
__all__ = ["load_net_def", "save_net_def"]

import logging
from pathlib import Path

from google.protobuf import text_format
from google.protobuf.message import DecodeError

from caffe2graph.errors import ModelIOError, ModelParseError
from caffe2graph.load.schema import NetDef
from caffe2graph.presets import MAX_PROTO_BYTES, is_text_format

logger = logging.getLogger(__name__)


def _read_bytes(path: Path, max_bytes: int) -> bytes:
    """Read a descriptor file, enforcing the byte ceiling.

    :param path: Path to descriptor file
    :param max_bytes: Largest accepted file size in bytes
    :return: Raw file contents
    :raises ModelIOError: If the file is missing or unreadable
    :raises ModelParseError: If the file exceeds ``max_bytes``
    """
    try:
        size = path.stat().st_size
        if size > max_bytes:
            raise ModelParseError(
                f"Descriptor {path} is {size} bytes, exceeding the limit of {max_bytes} bytes"
            )
        return path.read_bytes()
    except OSError as error:
        raise ModelIOError(f"Can't find the model or network file {path}: {error}") from error


def load_net_def(path: str | Path, max_bytes: int = MAX_PROTO_BYTES) -> NetDef:
    """Load a Caffe2 ``NetDef`` from file.

    Files ending with ``.pbtxt`` are parsed as protobuf text format, anything
    else as binary wire format.

    :param path: Path to descriptor file
    :param max_bytes: Largest accepted file size in bytes
    :return: Parsed network descriptor
    :raises ModelIOError: If the file is missing or unreadable
    :raises ModelParseError: If the file cannot be decoded
    """
    path = Path(path)
    data = _read_bytes(path, max_bytes)
    net = NetDef()

    if is_text_format(str(path)):
        try:
            text_format.Parse(data.decode("utf-8"), net)
        except (text_format.ParseError, UnicodeDecodeError) as error:
            raise ModelParseError(f"Failed to parse the network descriptor {path}: {error}") from error
    else:
        try:
            net.ParseFromString(data)
        except DecodeError as error:
            raise ModelParseError(f"Failed to parse the network descriptor {path}: {error}") from error

    logger.debug("Loaded %s: %d operators", path, len(net.op))
    return net


def save_net_def(net: NetDef, path: str | Path) -> None:
    """Save a Caffe2 ``NetDef`` to file, in the encoding implied by its suffix.

    :param net: Network descriptor
    :param path: Destination path
    """
    path = Path(path)
    if is_text_format(str(path)):
        path.write_text(text_format.MessageToString(net))
    else:
        path.write_bytes(net.SerializeToString())

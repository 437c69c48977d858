"""Wire format shared by the client and the server.

Every frame is an operation code and a payload size, both 4-byte signed
little-endian integers, followed by the payload itself. A package payload
is a run of length-prefixed values.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

_INT = struct.Struct("<i")


class OpCode(IntEnum):
    """Kinds of frame the server understands."""

    MESSAGE = 0
    PACKAGE = 1


def serialize(op_code: int, payload: bytes) -> bytes:
    """Build a frame from an operation code and its payload."""
    return _INT.pack(int(op_code)) + _INT.pack(len(payload)) + bytes(payload)


def _to_c_string(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8") + b"\0"
    return bytes(value)


def _from_c_string(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def encode_message(message: str) -> bytes:
    """Frame a single text message, sent NUL-terminated."""
    return serialize(OpCode.MESSAGE, _to_c_string(message))


def decode_values(payload: bytes) -> list[str]:
    """Split a package payload into its values.

    Raises ValueError if the payload is truncated or a length is negative.
    """
    view = memoryview(payload)
    values: list[str] = []
    offset = 0
    while offset < len(view):
        if offset + _INT.size > len(view):
            raise ValueError(f"truncated length prefix at offset {offset}")
        (length,) = _INT.unpack_from(view, offset)
        offset += _INT.size
        if length < 0:
            raise ValueError(f"negative value length {length} at offset {offset}")
        end = offset + length
        if end > len(view):
            raise ValueError(f"value of {length} bytes overruns the payload")
        values.append(_from_c_string(bytes(view[offset:end])))
        offset = end
    return values


@dataclass
class Package:
    """A package of values waiting to be sent."""

    op_code: OpCode = OpCode.PACKAGE
    buffer: bytearray = field(default_factory=bytearray)

    def add(self, value: str | bytes) -> None:
        """Append a value; text is stored NUL-terminated."""
        data = _to_c_string(value)
        self.buffer += _INT.pack(len(data)) + data

    def serialize(self) -> bytes:
        """Return the whole frame for this package."""
        return serialize(self.op_code, bytes(self.buffer))
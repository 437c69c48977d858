import struct

import pytest

from tpsockets.protocol import (
    OpCode,
    Package,
    decode_values,
    encode_message,
    serialize,
)


def test_encode_message_wire_bytes():
    assert encode_message("hi") == b"\x00\x00\x00\x00\x03\x00\x00\x00hi\x00"


def test_serialize_header_and_payload():
    frame = serialize(OpCode.PACKAGE, b"abc")
    op, size = struct.unpack("<ii", frame[:8])
    assert op == OpCode.PACKAGE
    assert size == 3
    assert frame[8:] == b"abc"


def test_empty_package_serializes_to_header_only():
    frame = Package().serialize()
    assert struct.unpack("<ii", frame) == (int(OpCode.PACKAGE), 0)


def test_package_round_trip():
    package = Package()
    for value in ["uno", "dos", ""]:
        package.add(value)
    frame = package.serialize()
    op, size = struct.unpack("<ii", frame[:8])
    assert op == OpCode.PACKAGE
    assert size == len(frame) - 8
    assert decode_values(frame[8:]) == ["uno", "dos", ""]


def test_package_add_prefixes_length_including_terminator():
    package = Package()
    package.add("abc")
    (length,) = struct.unpack("<i", bytes(package.buffer[:4]))
    assert length == len("abc") + 1
    assert bytes(package.buffer[4:]) == b"abc\0"


def test_package_add_bytes_kept_verbatim():
    package = Package()
    package.add(b"raw")
    assert bytes(package.buffer[4:]) == b"raw"
    assert decode_values(bytes(package.buffer)) == ["raw"]


def test_decode_values_empty():
    assert decode_values(b"") == []


def test_decode_values_truncated_prefix():
    with pytest.raises(ValueError):
        decode_values(b"\x01\x00")


def test_decode_values_overrun():
    with pytest.raises(ValueError):
        decode_values(struct.pack("<i", 10) + b"abc")


def test_decode_values_negative_length():
    with pytest.raises(ValueError):
        decode_values(struct.pack("<i", -1))
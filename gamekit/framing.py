"""Length-prefixed binary frames used on the game's stream transports.

Two layouts share a 16-bit big-endian total length at the front:

* ``Frame``:    length(u16) | method(u16) | payload
* ``RpcFrame``: length(u16) | seq(u32) | method(u16) | payload

The length counts the whole frame, header included.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

MAX_FRAME = 0xFFFF
REPLY_METHOD = 0xFFFF
"""Method number marking an RPC frame as the reply to a pending call."""

_FRAME_HEADER = struct.Struct(">HH")
_RPC_HEADER = struct.Struct(">HIH")
_LENGTH = struct.Struct(">H")


class FrameError(ValueError):
    """A frame is malformed, truncated or too large."""


def _check_range(name: str, value: int, upper: int) -> None:
    if not 0 <= value <= upper:
        raise FrameError(f"{name} {value} out of range 0..{upper}")


def _frame_length(data: bytes, header_size: int) -> int:
    if len(data) < header_size:
        raise FrameError(f"frame of {len(data)} bytes is shorter than its {header_size}-byte header")
    (length,) = _LENGTH.unpack_from(data)
    if length < header_size:
        raise FrameError(f"declared length {length} is shorter than the header")
    if length > len(data):
        raise FrameError(f"declared length {length} exceeds the {len(data)} bytes available")
    return length


@dataclass(frozen=True)
class Frame:
    """A frame carrying a method number and a payload."""

    method: int
    payload: bytes = b""

    def encode(self) -> bytes:
        _check_range("method", self.method, 0xFFFF)
        length = _FRAME_HEADER.size + len(self.payload)
        if length > MAX_FRAME:
            raise FrameError(f"frame length {length} exceeds {MAX_FRAME}")
        return _FRAME_HEADER.pack(length, self.method) + bytes(self.payload)

    @classmethod
    def parse(cls, data: bytes) -> "Frame":
        """Decode one frame; bytes past the declared length are ignored."""
        data = bytes(data)
        length = _frame_length(data, _FRAME_HEADER.size)
        _, method = _FRAME_HEADER.unpack_from(data)
        return cls(method, data[_FRAME_HEADER.size:length])


@dataclass(frozen=True)
class RpcFrame:
    """A frame carrying a call sequence number, a method number and a payload."""

    seq: int
    method: int
    payload: bytes = b""

    @property
    def is_reply(self) -> bool:
        return self.method == REPLY_METHOD

    def encode(self) -> bytes:
        _check_range("seq", self.seq, 0xFFFFFFFF)
        _check_range("method", self.method, 0xFFFF)
        length = _RPC_HEADER.size + len(self.payload)
        if length > MAX_FRAME:
            raise FrameError(f"frame length {length} exceeds {MAX_FRAME}")
        return _RPC_HEADER.pack(length, self.seq, self.method) + bytes(self.payload)

    @classmethod
    def parse(cls, data: bytes) -> "RpcFrame":
        """Decode one frame; bytes past the declared length are ignored."""
        data = bytes(data)
        length = _frame_length(data, _RPC_HEADER.size)
        _, seq, method = _RPC_HEADER.unpack_from(data)
        return cls(seq, method, data[_RPC_HEADER.size:length])


def _read_exact(reader: BinaryIO, size: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < size:
        chunk = reader.read(size - len(chunks))
        if not chunk:
            break
        chunks += chunk
    return bytes(chunks)


def read_frame(reader: BinaryIO, limit: int = 8 * 1024) -> bytes:
    """Read one whole length-prefixed frame, header included, from a binary stream.

    Raises EOFError if the stream ends before a frame is complete and
    FrameError if the declared length exceeds ``limit`` or cannot hold its own prefix.
    """
    header = _read_exact(reader, _LENGTH.size)
    if len(header) < _LENGTH.size:
        raise EOFError("stream ended before a frame header")
    (length,) = _LENGTH.unpack(header)
    if length > limit:
        raise FrameError(f"header {length} too long")
    if length < _LENGTH.size:
        raise FrameError(f"header {length} too short")
    body = _read_exact(reader, length - _LENGTH.size)
    if len(body) < length - _LENGTH.size:
        raise EOFError("stream ended inside a frame")
    return header + body
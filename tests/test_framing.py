import io

import pytest

from gamekit.framing import (
    MAX_FRAME,
    REPLY_METHOD,
    Frame,
    FrameError,
    RpcFrame,
    read_frame,
)


def test_frame_wire_bytes():
    assert Frame(1, b"\x01\x02").encode() == b"\x00\x06\x00\x01\x01\x02"


def test_rpc_frame_wire_bytes():
    encoded = RpcFrame(1, 1, bytes([1, 2, 3, 4, 5, 6, 7])).encode()
    assert encoded == b"\x00\x0f\x00\x00\x00\x01\x00\x01" + bytes([1, 2, 3, 4, 5, 6, 7])


@pytest.mark.parametrize("payload", [b"", b"x", b"hello world", bytes(range(256))])
def test_frame_round_trip(payload):
    frame = Frame(42, payload)
    assert Frame.parse(frame.encode()) == frame


@pytest.mark.parametrize("seq,method", [(0, 0), (7, 3), (0xFFFFFFFF, REPLY_METHOD)])
def test_rpc_frame_round_trip(seq, method):
    frame = RpcFrame(seq, method, b"payload")
    assert RpcFrame.parse(frame.encode()) == frame


def test_encoded_length_prefix_counts_whole_frame():
    encoded = Frame(9, b"abc").encode()
    assert int.from_bytes(encoded[:2], "big") == len(encoded)
    rpc = RpcFrame(5, 9, b"abc").encode()
    assert int.from_bytes(rpc[:2], "big") == len(rpc)


def test_parse_ignores_trailing_bytes():
    encoded = Frame(3, b"abc").encode()
    assert Frame.parse(encoded + b"junk") == Frame(3, b"abc")


def test_reply_flag():
    assert RpcFrame(1, REPLY_METHOD).is_reply
    assert not RpcFrame(1, 0).is_reply


def test_parse_short_data_raises():
    with pytest.raises(FrameError):
        Frame.parse(b"\x00")
    with pytest.raises(FrameError):
        RpcFrame.parse(b"\x00\x08\x00")


def test_parse_truncated_payload_raises():
    encoded = Frame(1, b"abcdef").encode()
    with pytest.raises(FrameError):
        Frame.parse(encoded[:-1])


def test_parse_length_below_header_raises():
    with pytest.raises(FrameError):
        Frame.parse(b"\x00\x02\x00\x01")


def test_encode_too_large_raises():
    with pytest.raises(FrameError):
        Frame(1, bytes(MAX_FRAME)).encode()
    with pytest.raises(FrameError):
        RpcFrame(1, 1, bytes(MAX_FRAME)).encode()


def test_encode_out_of_range_fields_raise():
    with pytest.raises(FrameError):
        Frame(0x10000).encode()
    with pytest.raises(FrameError):
        RpcFrame(-1, 0).encode()


def test_read_frame_reads_consecutive_frames():
    first = Frame(1, b"one").encode()
    second = RpcFrame(2, 3, b"two").encode()
    stream = io.BytesIO(first + second)
    assert read_frame(stream) == first
    assert read_frame(stream) == second
    with pytest.raises(EOFError):
        read_frame(stream)


def test_read_frame_rejects_length_over_limit():
    encoded = Frame(1, bytes(100)).encode()
    with pytest.raises(FrameError, match="too long"):
        read_frame(io.BytesIO(encoded), limit=50)


def test_read_frame_accepts_length_equal_to_limit():
    encoded = Frame(1, bytes(46)).encode()
    assert read_frame(io.BytesIO(encoded), limit=len(encoded)) == encoded


def test_read_frame_truncated_stream_raises():
    encoded = Frame(1, b"abcdef").encode()
    with pytest.raises(EOFError):
        read_frame(io.BytesIO(encoded[:-2]))
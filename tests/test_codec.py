"""
Tests for the proof wire codec.
"""

import struct

import pytest

from merkleclient.merkle.hashing import md5_hex
from merkleclient.protocol import codec
from merkleclient.protocol.errors import IncompleteReadError, ProtocolError
from merkleclient.transport.inprocess import InProcessTransport


class _RawAuthority:
    """Replies with fixed bytes regardless of the request."""

    def __init__(self, reply: bytes):
        self._reply = reply

    def handle(self, identifier: str) -> bytes:
        return self._reply


def _transport_with(reply: bytes, **kwargs) -> InProcessTransport:
    transport = InProcessTransport(_RawAuthority(reply), **kwargs)
    transport.open()
    transport.send(b"tx")
    return transport


class TestRequestEncoding:
    def test_request_is_raw_utf8(self):
        assert codec.encode_request("tx1") == b"tx1"
        assert codec.encode_request("tx-é") == "tx-é".encode("utf-8")

    def test_close_sentinel(self):
        assert codec.encode_close() == b"close"


class TestHeader:
    def test_big_endian_length(self):
        assert codec.decode_header(b"\x00\x00\x00\x40") == 64
        assert codec.decode_header(b"\x00\x00\x01\x00") == 256

    def test_zero_length(self):
        assert codec.decode_header(b"\x00\x00\x00\x00") == 0

    def test_negative_length_rejected(self):
        with pytest.raises(ProtocolError, match="Negative"):
            codec.decode_header(struct.pack(">i", -32))

    def test_oversized_length_rejected(self):
        with pytest.raises(ProtocolError, match="exceeds limit"):
            codec.decode_header(struct.pack(">i", 4096), max_payload_bytes=1024)

    def test_wrong_header_size(self):
        with pytest.raises(ProtocolError, match="4 bytes"):
            codec.decode_header(b"\x00\x00\x40")


class TestProofDecoding:
    def test_splits_fixed_width_chunks_in_order(self):
        nodes = [md5_hex("a"), md5_hex("b"), md5_hex("c")]
        payload = "".join(nodes).encode("utf-8")
        assert codec.decode_proof(payload, 32) == nodes

    def test_empty_payload(self):
        assert codec.decode_proof(b"", 32) == []

    def test_misaligned_payload_rejected(self):
        """A trailing partial chunk is an error, not silently dropped."""
        payload = md5_hex("a").encode("utf-8") + b"abc"
        with pytest.raises(ProtocolError, match="not a multiple"):
            codec.decode_proof(payload, 32)

    def test_invalid_utf8_rejected(self):
        with pytest.raises(ProtocolError, match="utf-8"):
            codec.decode_proof(b"\xff" * 4, 4)

    def test_non_positive_width(self):
        with pytest.raises(ValueError):
            codec.decode_proof(b"abcd", 0)


class TestResponseEncoding:
    def test_layout(self):
        nodes = [md5_hex("x"), md5_hex("y")]
        data = codec.encode_response(nodes, 32)

        assert data[:4] == struct.pack(">i", 64)
        assert data[4:] == (nodes[0] + nodes[1]).encode("utf-8")

    def test_wrong_node_width_rejected(self):
        with pytest.raises(ProtocolError, match="expected 32"):
            codec.encode_response(["short"], 32)

    def test_round_trip_through_transport(self):
        nodes = [md5_hex(str(i)) for i in range(6)]
        transport = _transport_with(codec.encode_response(nodes, 32))

        length, proof = codec.read_proof(transport, 32)

        assert length == 192
        assert proof == nodes

    def test_round_trip_with_short_reads(self):
        nodes = [md5_hex(str(i)) for i in range(3)]
        transport = _transport_with(codec.encode_response(nodes, 32), max_read=5)

        _, proof = codec.read_proof(transport, 32)

        assert proof == nodes

    def test_header_callback_runs_before_payload(self):
        nodes = [md5_hex("a"), md5_hex("b")]
        transport = _transport_with(codec.encode_response(nodes, 32))
        seen = []

        def on_header(length):
            seen.append((length, len(transport._inbox)))

        codec.read_proof(transport, 32, on_header=on_header)

        assert seen == [(64, 64)]

    def test_header_callback_skipped_on_bad_header(self):
        transport = _transport_with(struct.pack(">i", -1))
        seen = []

        with pytest.raises(ProtocolError):
            codec.read_proof(transport, 32, on_header=seen.append)
        assert seen == []


class TestReadProofFailures:
    def test_truncated_payload(self):
        """Header promises 64 bytes, stream delivers 32."""
        reply = struct.pack(">i", 64) + md5_hex("a").encode("utf-8")
        transport = _transport_with(reply)

        with pytest.raises(IncompleteReadError) as exc_info:
            codec.read_proof(transport, 32)

        assert exc_info.value.expected == 64
        assert len(exc_info.value.partial) == 32
        assert isinstance(exc_info.value, ProtocolError)

    def test_truncated_header(self):
        transport = _transport_with(b"\x00\x00")

        with pytest.raises(IncompleteReadError):
            codec.read_proof(transport, 32)

    def test_misaligned_declared_length(self):
        reply = struct.pack(">i", 40) + b"a" * 40
        transport = _transport_with(reply)

        with pytest.raises(ProtocolError, match="not a multiple"):
            codec.read_proof(transport, 32)

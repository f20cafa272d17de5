"""
Wire codec for the proof protocol.

    client    -> authority : raw UTF-8 bytes of the identifier (no framing)
    authority -> client    : 4-byte big-endian length N, then N payload bytes
                             made of N / W fixed-width digest chunks
    client    -> authority : b"close" once the batch is done

Request/response turn-taking is the only framing on the request side, so the
codec never adds a prefix or delimiter to outgoing identifiers.
"""

from __future__ import annotations

import struct
from typing import Callable, Iterable, List, Optional, Tuple

from .errors import ProtocolError
from .models import Proof
from .validators import CLOSE_SENTINEL

HEADER_SIZE = 4
TEXT_ENCODING = "utf-8"
DEFAULT_MAX_PAYLOAD_BYTES = 1024 * 1024

_HEADER = struct.Struct(">i")


def encode_request(identifier: str) -> bytes:
    return identifier.encode(TEXT_ENCODING)


def encode_close() -> bytes:
    return CLOSE_SENTINEL.encode(TEXT_ENCODING)


def decode_header(header: bytes, max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES) -> int:
    """
    Decode the 4-byte length header into the payload size N.

    Raises:
        ProtocolError: If the header is the wrong size, negative, or above
            max_payload_bytes
    """
    if len(header) != HEADER_SIZE:
        raise ProtocolError(
            f"Length header must be {HEADER_SIZE} bytes, got {len(header)}"
        )
    (length,) = _HEADER.unpack(header)
    if length < 0:
        raise ProtocolError(f"Negative payload length in header: {length}")
    if length > max_payload_bytes:
        raise ProtocolError(
            f"Payload length {length} exceeds limit of {max_payload_bytes} bytes"
        )
    return length


def decode_proof(payload: bytes, width: int) -> Proof:
    """
    Split a payload into consecutive width-byte digests, in received order.

    A trailing partial chunk is an error, never silently dropped.
    """
    if width <= 0:
        raise ValueError(f"Digest width must be positive, got {width}")
    if len(payload) % width != 0:
        raise ProtocolError(
            f"Payload of {len(payload)} bytes is not a multiple of digest width {width}"
        )

    nodes: List[str] = []
    for offset in range(0, len(payload), width):
        chunk = payload[offset:offset + width]
        try:
            nodes.append(chunk.decode(TEXT_ENCODING))
        except UnicodeDecodeError as exc:
            raise ProtocolError(
                f"Proof node at offset {offset} is not valid {TEXT_ENCODING}"
            ) from exc
    return nodes


def encode_response(proof: Iterable[str], width: int) -> bytes:
    """
    Build header + payload for a proof, as the authority sends it.

    Raises:
        ProtocolError: If a node does not encode to exactly width bytes
    """
    chunks: List[bytes] = []
    for node in proof:
        data = node.encode(TEXT_ENCODING)
        if len(data) != width:
            raise ProtocolError(
                f"Proof node {node!r} is {len(data)} bytes, expected {width}"
            )
        chunks.append(data)
    payload = b"".join(chunks)
    return _HEADER.pack(len(payload)) + payload


def read_proof(
    transport,
    width: int,
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
    on_header: Optional[Callable[[int], None]] = None,
) -> Tuple[int, Proof]:
    """
    Read one response from the transport.

    on_header, when given, is called with the declared length after the
    header is decoded and before the payload is read.

    Returns:
        (declared payload length, decoded proof)
    """
    length = decode_header(transport.recv_exact(HEADER_SIZE), max_payload_bytes)
    if on_header is not None:
        on_header(length)
    payload = transport.recv_exact(length)
    return length, decode_proof(payload, width)

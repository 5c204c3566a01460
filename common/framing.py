"""
Length-prefixed message framing.

Wire format:
  [4-byte length (uint32, network byte order)] [payload bytes]

The payload length is bounded by MAX_MESSAGE_SIZE in both directions.
"""

import asyncio
import struct
from typing import Optional

from common.constants import FRAME_HEADER_SIZE, MAX_MESSAGE_SIZE


HEADER = struct.Struct('!I')


class FramingError(Exception):
    """Raised when a frame violates the length bound. Fatal for the connection."""


def frame_message(payload: bytes, max_size: int = MAX_MESSAGE_SIZE) -> bytes:
    """Prefix a payload with its length, rejecting oversized payloads."""
    if len(payload) > max_size:
        raise FramingError(f"Payload of {len(payload)} bytes exceeds limit of {max_size}")
    return HEADER.pack(len(payload)) + payload


async def write_message(writer: asyncio.StreamWriter, payload: bytes, max_size: int = MAX_MESSAGE_SIZE):
    """
    Write one framed message and wait for the stream to drain.

    Header and payload go out in a single write() so frames from concurrent
    senders never interleave on the same stream.
    """
    writer.write(frame_message(payload, max_size))
    await writer.drain()


async def _read_exact(reader: asyncio.StreamReader, n: int) -> Optional[bytes]:
    """Read exactly n bytes, or return None if the stream ends first."""
    try:
        return await reader.readexactly(n)
    except asyncio.IncompleteReadError:
        return None


async def read_message(reader: asyncio.StreamReader, max_size: int = MAX_MESSAGE_SIZE) -> Optional[bytes]:
    """
    Read one framed message.

    Returns the payload, or None when the peer disconnected (at a frame
    boundary or part way through one). Raises FramingError if the declared
    length is out of bounds; nothing past the header is read in that case.
    """
    header = await _read_exact(reader, FRAME_HEADER_SIZE)
    if header is None:
        return None

    (length,) = HEADER.unpack(header)
    if length > max_size:
        raise FramingError(f"Declared length {length} exceeds limit of {max_size}")

    if length == 0:
        return b''

    return await _read_exact(reader, length)

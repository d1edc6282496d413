"""MessagePack framing for the lobby session channel.

Outbound requests are small flat maps. Inbound frames can carry a whole
room-list snapshot, so the array limit is sized for a busy lobby while
strings and maps stay tight.
"""

from typing import Any

import msgpack

MAX_BUFFER_LEN = 4 * 1024 * 1024  # whole frame
MAX_ARRAY_LEN = 10_000  # games per snapshot, spectators per game

_UNPACK_LIMITS = {
    "max_str_len": 64 * 1024,
    "max_bin_len": 64 * 1024,
    "max_array_len": MAX_ARRAY_LEN,
    "max_map_len": 256,
    "max_ext_len": 1024,
}


class DecodeError(Exception):
    """An inbound frame is not a MessagePack map within the size limits."""


def encode(data: dict[str, Any]) -> bytes:
    return msgpack.packb(data, use_bin_type=True)


def decode(data: bytes) -> dict[str, Any]:
    if len(data) > MAX_BUFFER_LEN:
        raise DecodeError(f"payload too large: {len(data)} bytes (max {MAX_BUFFER_LEN})")
    try:
        result = msgpack.unpackb(data, raw=False, **_UNPACK_LIMITS)
    except (msgpack.UnpackException, ValueError) as e:
        raise DecodeError(f"failed to decode MessagePack data: {e}") from e
    if not isinstance(result, dict):
        raise DecodeError(f"expected dict, got {type(result).__name__}")
    return result

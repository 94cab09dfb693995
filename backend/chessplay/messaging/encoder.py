"""
Frame encoder/decoder for the wire protocol.

Text frames carry JSON and binary frames carry MessagePack. Both decode to
the same dict shape, so the rest of the server never sees the framing.
"""

import json
from enum import StrEnum
from typing import Any

import msgpack


class WireFormat(StrEnum):
    JSON = "json"
    MSGPACK = "msgpack"


class DecodeError(Exception):
    """Error raised when an inbound frame cannot be decoded into a message dict."""


# Size limits to prevent resource exhaustion from malicious payloads.
MAX_FRAME_LEN = 64 * 1024  # 64KB total payload
MAX_STR_LEN = 16 * 1024
MAX_BIN_LEN = 16 * 1024
MAX_ARRAY_LEN = 256  # client messages carry no large arrays
MAX_MAP_LEN = 64
MAX_EXT_LEN = 1024


def encode(data: dict[str, Any], wire_format: WireFormat = WireFormat.JSON) -> str | bytes:
    """
    Encode a message dict for sending. JSON yields str, MessagePack yields bytes.
    """
    if wire_format is WireFormat.MSGPACK:
        return msgpack.packb(data)
    return json.dumps(data, separators=(",", ":"))


def _decode_json(frame: str) -> object:
    # oversized integer literals raise plain ValueError, deep nesting RecursionError
    try:
        return json.loads(frame)
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"failed to decode JSON data: {e}") from e


def _decode_msgpack(frame: bytes) -> object:
    try:
        return msgpack.unpackb(
            frame,
            raw=False,
            max_str_len=MAX_STR_LEN,
            max_bin_len=MAX_BIN_LEN,
            max_array_len=MAX_ARRAY_LEN,
            max_map_len=MAX_MAP_LEN,
            max_ext_len=MAX_EXT_LEN,
        )
    except (msgpack.UnpackException, ValueError) as e:
        raise DecodeError(f"failed to decode MessagePack data: {e}") from e


def decode(frame: str | bytes) -> dict[str, Any]:
    """
    Decode an inbound frame to a dict.

    Raises DecodeError if the frame is invalid, not an object, or exceeds size limits.
    """
    if len(frame) > MAX_FRAME_LEN:
        raise DecodeError(f"payload too large: {len(frame)} bytes (max {MAX_FRAME_LEN})")

    result = _decode_msgpack(frame) if isinstance(frame, bytes) else _decode_json(frame)

    if not isinstance(result, dict):
        raise DecodeError(f"expected object, got {type(result).__name__}")

    return result

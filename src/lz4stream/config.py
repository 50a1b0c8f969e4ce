"""
Environment-driven defaults for lz4stream.

This module contains settings that apply to every writer and to the command
line tool when no explicit value is given.
"""

import os

from .constants import BEST_COMPRESSION, DEFAULT_COMPRESSION


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            f"Invalid {name} environment variable: '{raw}' is not an integer"
        ) from None


LZ4STREAM_LEVEL: int = _int_from_env("LZ4STREAM_LEVEL", DEFAULT_COMPRESSION)
"""Default compression level (-1 to 9). Defaults to DEFAULT_COMPRESSION."""

if not DEFAULT_COMPRESSION <= LZ4STREAM_LEVEL <= BEST_COMPRESSION:
    raise ValueError(
        f"Invalid LZ4STREAM_LEVEL environment variable: '{LZ4STREAM_LEVEL}'. "
        f"Supported values: {DEFAULT_COMPRESSION}..{BEST_COMPRESSION}"
    )

LZ4STREAM_BUFFER_SIZE: int = _int_from_env("LZ4STREAM_BUFFER_SIZE", 64 * 1024)
"""Copy buffer size used by the command line tool, in bytes."""

if LZ4STREAM_BUFFER_SIZE <= 0:
    raise ValueError(
        f"Invalid LZ4STREAM_BUFFER_SIZE environment variable: '{LZ4STREAM_BUFFER_SIZE}'. "
        "Must be a positive integer"
    )

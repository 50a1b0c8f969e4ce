"""
Block codec used inside frames.

The frame layer never looks inside a block body. It hands raw chunks to a
block codec and gets back either a compressed body or nothing at all, in
which case the chunk is stored uncompressed.

The default codec is the raw LZ4 block format from the lz4 library, without
the 4-byte size prefix that ``lz4.block.compress`` adds by default: the frame's
own size field already carries the length.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

import lz4.block

from .constants import BEST_COMPRESSION, DEFAULT_COMPRESSION
from .exceptions import BlockCorruptError


class BlockCodec(Protocol):
    """Compress and decompress single, independent blocks."""

    def compress(self, src: bytes, max_out: int) -> bytes | None:
        """
        Compress one chunk.

        Returns:
            The compressed body, or None when there is nothing to compress or
            the result would not fit in ``max_out`` bytes.
        """
        ...

    def decompress(self, src: bytes, capacity: int) -> bytes:
        """
        Decompress one block body of at most ``capacity`` decoded bytes.

        Raises:
            BlockCorruptError: If the body is malformed or decodes past ``capacity``.
        """
        ...


@dataclass(frozen=True, slots=True)
class Lz4BlockCodec:
    """
    LZ4 block codec backed by ``lz4.block``.

    Attributes:
        mode: ``"default"`` for the fast compressor, ``"high_compression"`` for LZ4HC.
        compression: Compression level passed to LZ4HC (ignored in default mode).
    """

    mode: Literal["default", "high_compression"] = "default"
    compression: int = 0

    def compress(self, src: bytes, max_out: int) -> bytes | None:
        if not src:
            return None
        compressed = lz4.block.compress(
            src,
            mode=self.mode,
            compression=self.compression,
            store_size=False,
        )
        if len(compressed) > max_out:
            return None
        return compressed

    def decompress(self, src: bytes, capacity: int) -> bytes:
        try:
            return lz4.block.decompress(src, uncompressed_size=capacity)
        except lz4.block.LZ4BlockError as e:
            raise BlockCorruptError(str(e)) from e


def validate_level(level: int) -> int:
    """
    Check that a compression level is within the supported range.

    Raises:
        ValueError: If the level is outside ``DEFAULT_COMPRESSION..BEST_COMPRESSION``.
    """
    if not DEFAULT_COMPRESSION <= level <= BEST_COMPRESSION:
        raise ValueError(f"Invalid compression level: {level}")
    return level


def codec_for_level(level: int) -> Lz4BlockCodec:
    """
    Pick the block codec for a compression level.

    Only BEST_COMPRESSION switches to LZ4HC. Every other level, including
    DEFAULT_COMPRESSION, uses the fast compressor.
    """
    if validate_level(level) == BEST_COMPRESSION:
        return Lz4BlockCodec(mode="high_compression", compression=BEST_COMPRESSION)
    return Lz4BlockCodec()

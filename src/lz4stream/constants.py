"""
Constants for the LZ4 frame format.

Reference: https://github.com/lz4/lz4/blob/dev/doc/lz4_Frame_format.md
"""

from __future__ import annotations

from typing import Final

# ===========================================================================
# Frame Identification
# ===========================================================================
#
# Every frame starts with a 4-byte little-endian magic number, followed by the
# 3-byte frame descriptor::
#
#   [magic: 4 LE][FLG: 1][BD: 1][HC: 1]

MAGIC: Final[int] = 0x184D2204
"""Magic number opening every LZ4 frame (stored little-endian: 04 22 4D 18)."""

MAGIC_SIZE: Final[int] = 4
"""Size of the magic number in bytes."""

DESCRIPTOR_SIZE: Final[int] = 3
"""Size of the frame descriptor (FLG + BD + HC) in bytes."""

FRAME_VERSION: Final[int] = 1
"""The only frame format version this codec understands."""

# ===========================================================================
# FLG Byte Layout
# ===========================================================================
#
# Bits are numbered from the most significant bit down::
#
#   [version:2][independent:1][block_checksum:1][content_size:1]
#   [content_checksum:1][reserved:1][dictionary:1]

FLG_VERSION_SHIFT: Final[int] = 6
"""Position of the 2-bit version field."""

FLG_INDEPENDENT_BLOCKS: Final[int] = 1 << 5
"""Blocks do not reference data from previous blocks."""

FLG_BLOCK_CHECKSUM: Final[int] = 1 << 4
"""Each block body is followed by a 4-byte checksum."""

FLG_CONTENT_SIZE: Final[int] = 1 << 3
"""An 8-byte content size follows the descriptor (unsupported)."""

FLG_CONTENT_CHECKSUM: Final[int] = 1 << 2
"""A 4-byte checksum of the whole content follows the end marker."""

FLG_DICTIONARY: Final[int] = 1 << 0
"""A 4-byte dictionary id follows the descriptor (unsupported)."""

# ===========================================================================
# BD Byte Layout
# ===========================================================================
#
#   [reserved:1][block_size_code:3][reserved:4]

BD_BLOCK_SIZE_SHIFT: Final[int] = 4
"""Position of the 3-bit block size code."""

MIN_BLOCK_SIZE_CODE: Final[int] = 4
"""Smallest block size code (64 KiB)."""

MAX_BLOCK_SIZE_CODE: Final[int] = 7
"""Largest block size code (4 MiB)."""

DEFAULT_BLOCK_SIZE_CODE: Final[int] = MAX_BLOCK_SIZE_CODE
"""Block size code written by default."""


def block_capacity(code: int) -> int:
    """
    Maximum uncompressed bytes per block for a block size code.

    The codes map to 64 KiB, 256 KiB, 1 MiB and 4 MiB::

        capacity = 1 << (8 + 2 * code)
    """
    return 1 << (8 + 2 * code)


# ===========================================================================
# Block Framing
# ===========================================================================

BLOCK_SIZE_FIELD_SIZE: Final[int] = 4
"""Size of the little-endian size field preceding every block."""

BLOCK_STORED_FLAG: Final[int] = 0x80000000
"""Bit 31 of the size field: the body is stored uncompressed."""

BLOCK_LENGTH_MASK: Final[int] = 0x7FFFFFFF
"""Bits 0..30 of the size field: length of the block body."""

END_MARK: Final[int] = 0
"""An all-zero size field terminates the sequence of blocks."""

CHECKSUM_SIZE: Final[int] = 4
"""Size of block and content checksums in bytes."""

# ===========================================================================
# Compression Levels
# ===========================================================================

DEFAULT_COMPRESSION: Final[int] = -1
"""Level selecting the default (fast) block compressor."""

BEST_SPEED: Final[int] = 3
"""Fastest compression level."""

BEST_COMPRESSION: Final[int] = 9
"""Level selecting the high-compression block compressor."""

"""Streaming LZ4 frame format.

An LZ4 frame wraps independently compressed LZ4 blocks in a small container
with a header checksum, optional per-block checksums, an end marker and an
optional checksum of the whole content.

Usage::

    from lz4stream import open_reader, open_writer

    # Compress into any binary sink
    with open_writer(sink) as writer:
        writer.write(chunk)

    # Decompress from any binary source
    with open_reader(source) as reader:
        data = reader.read()

Or, for data already in memory::

    from lz4stream import compress, decompress

    original = decompress(compress(data))

The implementation follows the LZ4 frame format description:
https://github.com/lz4/lz4/blob/dev/doc/lz4_Frame_format.md
"""

from __future__ import annotations

from .checksum import XXH32, Checksum32, ChecksumAlgorithm
from .codec import BlockCodec, Lz4BlockCodec
from .constants import BEST_COMPRESSION, BEST_SPEED, DEFAULT_COMPRESSION
from .descriptor import FrameDescriptor
from .exceptions import (
    BlockChecksumError,
    BlockCorruptError,
    ContentChecksumError,
    DescriptorChecksumError,
    DescriptorError,
    Feature,
    FrameError,
    InvalidBlockSizeError,
    InvalidMagicError,
    ReservedBitsError,
    TruncatedStreamError,
    UnsupportedBlockSizeError,
    UnsupportedFeatureError,
    UnsupportedVersionError,
)
from .reader import FrameReader, decompress, open_reader
from .writer import FrameWriter, compress, open_writer

__all__ = [
    # Streaming API
    "open_reader",
    "open_writer",
    "FrameReader",
    "FrameWriter",
    "FrameDescriptor",
    # One-shot API
    "compress",
    "decompress",
    # Compression levels
    "DEFAULT_COMPRESSION",
    "BEST_SPEED",
    "BEST_COMPRESSION",
    # Collaborators
    "BlockCodec",
    "Lz4BlockCodec",
    "Checksum32",
    "ChecksumAlgorithm",
    "XXH32",
    # Exceptions
    "FrameError",
    "DescriptorError",
    "InvalidMagicError",
    "UnsupportedVersionError",
    "UnsupportedFeatureError",
    "Feature",
    "UnsupportedBlockSizeError",
    "ReservedBitsError",
    "DescriptorChecksumError",
    "InvalidBlockSizeError",
    "TruncatedStreamError",
    "BlockChecksumError",
    "ContentChecksumError",
    "BlockCorruptError",
]

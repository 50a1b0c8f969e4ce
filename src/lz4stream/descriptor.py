"""
Frame descriptor encoding and decoding.

DESCRIPTOR LAYOUT
-----------------
The descriptor follows the magic number and has a fixed size of 3 bytes::

    [FLG: 1][BD: 1][HC: 1]

FLG (most significant bit first)::

    [version:2][independent:1][block_checksum:1][content_size:1]
    [content_checksum:1][reserved:1][dictionary:1]

BD::

    [reserved:1][block_size_code:3][reserved:4]

HC is the second least significant byte of XXH32(FLG || BD) with seed 0::

    HC = (xxh32(flg + bd) >> 8) & 0xFF


DECODING ORDER
--------------
All 16 field bits are read first, then the header checksum is verified, and
only then are the field values validated. A corrupted FLG or BD byte is
therefore reported as a checksum error, while a well-formed descriptor that
asks for an unsupported feature is reported precisely.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Self

from .bits import BitFieldReader
from .checksum import DEFAULT_CHECKSUM, ChecksumAlgorithm
from .constants import (
    BD_BLOCK_SIZE_SHIFT,
    DEFAULT_BLOCK_SIZE_CODE,
    DESCRIPTOR_SIZE,
    FLG_BLOCK_CHECKSUM,
    FLG_CONTENT_CHECKSUM,
    FLG_CONTENT_SIZE,
    FLG_DICTIONARY,
    FLG_INDEPENDENT_BLOCKS,
    FLG_VERSION_SHIFT,
    FRAME_VERSION,
    MAGIC,
    MAX_BLOCK_SIZE_CODE,
    MIN_BLOCK_SIZE_CODE,
    block_capacity,
)
from .exceptions import (
    DescriptorChecksumError,
    Feature,
    InvalidMagicError,
    ReservedBitsError,
    UnsupportedBlockSizeError,
    UnsupportedFeatureError,
    UnsupportedVersionError,
)
from .wire import ByteSource, pack_uint32, read_uint32


class FrameDescriptor(BaseModel):
    """
    Stream-wide options declared in the frame header.

    The defaults describe the preset written by FrameWriter: independent
    blocks, no block checksums, a content checksum and 4 MiB blocks.

    Instances are immutable. Combinations this codec cannot produce or decode
    are rejected at construction.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    version: int = FRAME_VERSION
    """Frame format version. Only 1 is defined."""

    independent_blocks: bool = True
    """Blocks are compressed independently of each other."""

    block_checksum_present: bool = False
    """Each block body is followed by its checksum."""

    content_size_present: bool = False
    """An explicit content size follows the descriptor."""

    content_checksum_present: bool = True
    """A checksum of all decoded content follows the end marker."""

    has_dictionary: bool = False
    """A dictionary id follows the descriptor."""

    block_size_code: int = Field(
        default=DEFAULT_BLOCK_SIZE_CODE, ge=MIN_BLOCK_SIZE_CODE, le=MAX_BLOCK_SIZE_CODE
    )
    """Maximum block size class (4: 64 KiB, 5: 256 KiB, 6: 1 MiB, 7: 4 MiB)."""

    @model_validator(mode="after")
    def _check_supported(self) -> Self:
        if self.version != FRAME_VERSION:
            raise ValueError(f"version must be {FRAME_VERSION}, got {self.version}")
        if not self.independent_blocks:
            raise ValueError("dependent blocks are not supported")
        if self.content_size_present:
            raise ValueError("content size is not supported")
        if self.has_dictionary:
            raise ValueError("dictionaries are not supported")
        return self

    @property
    def block_capacity(self) -> int:
        """Maximum uncompressed size of a single block in bytes."""
        return block_capacity(self.block_size_code)

    @property
    def flg(self) -> int:
        """The packed FLG byte."""
        flg = self.version << FLG_VERSION_SHIFT
        if self.independent_blocks:
            flg |= FLG_INDEPENDENT_BLOCKS
        if self.block_checksum_present:
            flg |= FLG_BLOCK_CHECKSUM
        if self.content_size_present:
            flg |= FLG_CONTENT_SIZE
        if self.content_checksum_present:
            flg |= FLG_CONTENT_CHECKSUM
        if self.has_dictionary:
            flg |= FLG_DICTIONARY
        return flg

    @property
    def bd(self) -> int:
        """The packed BD byte."""
        return self.block_size_code << BD_BLOCK_SIZE_SHIFT


def header_checksum(flg: int, bd: int, checksum: ChecksumAlgorithm = DEFAULT_CHECKSUM) -> int:
    """Compute the HC byte for a FLG/BD pair."""
    return (checksum.hash(bytes([flg, bd])) >> 8) & 0xFF


def encode_descriptor(
    descriptor: FrameDescriptor, checksum: ChecksumAlgorithm = DEFAULT_CHECKSUM
) -> bytes:
    """
    Encode the magic number and descriptor.

    Returns:
        7 bytes: ``[magic: 4 LE][FLG][BD][HC]``.
    """
    flg = descriptor.flg
    bd = descriptor.bd
    return pack_uint32(MAGIC) + bytes([flg, bd, header_checksum(flg, bd, checksum)])


def read_descriptor(
    source: ByteSource, checksum: ChecksumAlgorithm = DEFAULT_CHECKSUM
) -> FrameDescriptor:
    """
    Read and validate the magic number and descriptor.

    Consumes exactly 7 bytes on success.

    Raises:
        TruncatedStreamError: If the stream ends inside the header.
        InvalidMagicError: If the magic number is wrong.
        DescriptorChecksumError: If HC does not match FLG and BD.
        UnsupportedVersionError: If the version is not 1.
        UnsupportedFeatureError: For dependent blocks, content size or dictionaries.
        UnsupportedBlockSizeError: For block size codes below 4.
        ReservedBitsError: If a reserved bit is set.
    """
    magic = read_uint32(source, "magic number")
    if magic != MAGIC:
        raise InvalidMagicError(magic)

    # The reader may not consume anything past the 3 descriptor bytes.
    reader = BitFieldReader(source, checksum.new(), limit=DESCRIPTOR_SIZE)

    # FLG
    version = reader.read_bits(2)
    independent_blocks = reader.read_bit()
    block_checksum_present = reader.read_bit()
    content_size_present = reader.read_bit()
    content_checksum_present = reader.read_bit()
    flg_reserved = reader.read_bit()
    has_dictionary = reader.read_bit()

    # BD
    bd_reserved_high = reader.read_bit()
    block_size_code = reader.read_bits(3)
    bd_reserved_low = reader.read_bits(4)

    # HC covers exactly the two bytes consumed so far.
    expected = (reader.checksum() >> 8) & 0xFF
    stored = reader.read_bits(8)
    if stored != expected:
        raise DescriptorChecksumError(expected, stored)

    if version != FRAME_VERSION:
        raise UnsupportedVersionError(version)
    if not independent_blocks:
        raise UnsupportedFeatureError(Feature.DEPENDENT_BLOCKS)
    if content_size_present:
        raise UnsupportedFeatureError(Feature.CONTENT_SIZE)
    if flg_reserved:
        raise ReservedBitsError("FLG bit 1")
    if has_dictionary:
        raise UnsupportedFeatureError(Feature.DICTIONARY)
    if bd_reserved_high:
        raise ReservedBitsError("BD bit 7")
    if block_size_code < MIN_BLOCK_SIZE_CODE:
        raise UnsupportedBlockSizeError(block_size_code)
    if bd_reserved_low:
        raise ReservedBitsError("BD bits 0-3")

    return FrameDescriptor(
        version=version,
        independent_blocks=independent_blocks,
        block_checksum_present=block_checksum_present,
        content_size_present=content_size_present,
        content_checksum_present=content_checksum_present,
        has_dictionary=has_dictionary,
        block_size_code=block_size_code,
    )

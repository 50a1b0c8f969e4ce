"""
Block framing.

BLOCK LAYOUT
------------
After the descriptor, data is carried in blocks laid back-to-back::

    [size: 4 LE][body: size & 0x7FFFFFFF bytes][block_checksum: 4 LE, optional]

Bit 31 of the size field marks a stored block: the body is the original
chunk, unmodified. Otherwise the body is an LZ4 compressed block.

The block checksum, when the descriptor enables it, covers the body exactly
as it appears on the wire (compressed or stored).

An all-zero size field ends the sequence of blocks. A stored block of length
zero (``0x80000000``) is an ordinary empty block, not an end marker.
"""

from __future__ import annotations

from .checksum import Checksum32, ChecksumAlgorithm
from .codec import BlockCodec
from .constants import BLOCK_LENGTH_MASK, BLOCK_STORED_FLAG, END_MARK
from .descriptor import FrameDescriptor
from .exceptions import BlockChecksumError, InvalidBlockSizeError
from .wire import ByteSource, pack_uint32, read_exact, read_uint32


class BlockEncoder:
    """Turn caller chunks into framed blocks."""

    def __init__(
        self,
        descriptor: FrameDescriptor,
        codec: BlockCodec,
        checksum: ChecksumAlgorithm,
        content: Checksum32,
    ) -> None:
        """
        Args:
            descriptor: Options of the frame being written.
            codec: Block compressor.
            checksum: Algorithm for block checksums.
            content: Accumulator for the content checksum.
        """
        self.descriptor = descriptor
        self.codec = codec
        self.checksum = checksum
        self.content = content

    def encode(self, chunk: bytes) -> bytes:
        """
        Frame one chunk.

        The chunk must not exceed the descriptor's block capacity; the caller
        is responsible for splitting larger inputs.

        A chunk is stored compressed only if the codec produced a body strictly
        shorter than the chunk itself. Everything else, including the empty
        chunk, is stored raw.

        Returns:
            ``[size][body]`` plus the block checksum if enabled.
        """
        capacity = self.descriptor.block_capacity
        compressed = self.codec.compress(chunk, capacity)

        if compressed is not None and len(compressed) < len(chunk):
            size_field = len(compressed)
            body = compressed
        else:
            size_field = len(chunk) | BLOCK_STORED_FLAG
            body = chunk

        output = bytearray(pack_uint32(size_field))
        output.extend(body)
        if self.descriptor.block_checksum_present:
            output.extend(pack_uint32(self.checksum.hash(body)))

        if chunk:
            self.content.update(chunk)

        return bytes(output)


class BlockDecoder:
    """Read framed blocks from a source and return their plaintext."""

    def __init__(
        self,
        source: ByteSource,
        descriptor: FrameDescriptor,
        codec: BlockCodec,
        checksum: ChecksumAlgorithm,
        content: Checksum32,
    ) -> None:
        """
        Args:
            source: Byte source positioned at a block size field.
            descriptor: Options of the frame being read.
            codec: Block decompressor.
            checksum: Algorithm for block checksums.
            content: Accumulator for the content checksum.
        """
        self.source = source
        self.descriptor = descriptor
        self.codec = codec
        self.checksum = checksum
        self.content = content

    def decode_next(self) -> bytes | None:
        """
        Decode the next block.

        Returns:
            The block's plaintext (possibly empty), or None at the end marker.

        Raises:
            TruncatedStreamError: If the stream ends inside the block.
            InvalidBlockSizeError: If the body is larger than the block capacity.
            BlockChecksumError: If the body does not match its checksum.
            BlockCorruptError: If the codec rejects the body.
        """
        size_field = read_uint32(self.source, "block size")
        if size_field == END_MARK:
            return None

        stored = bool(size_field & BLOCK_STORED_FLAG)
        length = size_field & BLOCK_LENGTH_MASK

        # Refuse oversized blocks before reading or decompressing anything.
        capacity = self.descriptor.block_capacity
        if length > capacity:
            raise InvalidBlockSizeError(length, capacity)

        body = read_exact(self.source, length, "block body")

        if self.descriptor.block_checksum_present:
            stored_checksum = read_uint32(self.source, "block checksum")
            computed = self.checksum.hash(body)
            if stored_checksum != computed:
                raise BlockChecksumError(computed, stored_checksum)

        data = body if stored else self.codec.decompress(body, capacity)

        if self.descriptor.content_checksum_present:
            self.content.update(data)

        return data

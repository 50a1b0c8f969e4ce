"""
Streaming frame writer.

A frame is produced in three phases::

    [magic + descriptor]           written lazily, before the first block
    [block][block]...[block]       one block per write() call
    [end marker][content checksum] written by close()

Each write() becomes exactly one block. Writes are not re-chunked: a chunk
larger than the block capacity is rejected, and callers with larger inputs
split them into several writes (the one-shot ``compress`` does this).
"""

from __future__ import annotations

import io
import logging
from types import TracebackType

from .block import BlockEncoder
from .checksum import DEFAULT_CHECKSUM, ChecksumAlgorithm
from .codec import BlockCodec, codec_for_level
from .constants import END_MARK
from .descriptor import FrameDescriptor, encode_descriptor
from .wire import ByteSink, pack_uint32, write_all

logger = logging.getLogger(__name__)


class FrameWriter:
    """
    Compress data written to it into an LZ4 frame on an underlying sink.

    Any failure while writing poisons the writer: the same exception is
    raised again by every later write() or close(). Closing the writer does
    not close the sink.
    """

    def __init__(
        self,
        sink: ByteSink,
        codec: BlockCodec,
        *,
        descriptor: FrameDescriptor | None = None,
        checksum: ChecksumAlgorithm = DEFAULT_CHECKSUM,
    ) -> None:
        """
        Args:
            sink: Destination for the encoded frame.
            codec: Block compressor.
            descriptor: Frame options. Defaults to the standard preset.
            checksum: Checksum algorithm for header, block and content checksums.
        """
        self.descriptor = descriptor if descriptor is not None else FrameDescriptor()
        self.blocks_written = 0
        self._sink = sink
        self._checksum = checksum
        self._content = checksum.new()
        self._encoder = BlockEncoder(self.descriptor, codec, checksum, self._content)
        self._header_written = False
        self._error: BaseException | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def writable(self) -> bool:
        return True

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """
        Compress one chunk into a single block.

        Returns:
            Number of bytes consumed (always the whole chunk).

        Raises:
            ValueError: If the writer is closed or the chunk exceeds the block capacity.
        """
        if self._closed:
            raise ValueError("write to closed frame writer")
        if self._error is not None:
            raise self._error

        chunk = bytes(data)
        capacity = self.descriptor.block_capacity
        if len(chunk) > capacity:
            raise ValueError(
                f"Chunk of {len(chunk)} bytes exceeds block capacity of {capacity} bytes"
            )

        try:
            self._write_header()
            write_all(self._sink, self._encoder.encode(chunk))
        except Exception as e:
            self._fault(e)
            raise

        self.blocks_written += 1
        return len(chunk)

    def close(self) -> None:
        """
        Finish the frame: end marker, then the content checksum if enabled.

        A writer that was never written to still emits the header, so an empty
        frame is valid. Closing twice is a no-op; a poisoned writer raises its
        cached error instead.
        """
        if self._closed:
            if self._error is not None:
                raise self._error
            return
        self._closed = True

        if self._error is not None:
            raise self._error

        trailer = pack_uint32(END_MARK)
        if self.descriptor.content_checksum_present:
            trailer += pack_uint32(self._content.finish())

        try:
            self._write_header()
            write_all(self._sink, trailer)
        except Exception as e:
            self._fault(e)
            raise

        logger.debug("Frame closed after %d blocks", self.blocks_written)

    def __enter__(self) -> FrameWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # An interrupted frame is left unterminated rather than made to look complete.
        if exc_type is None:
            self.close()
        else:
            self._closed = True

    def _write_header(self) -> None:
        if self._header_written:
            return
        write_all(self._sink, encode_descriptor(self.descriptor, self._checksum))
        self._header_written = True
        logger.debug(
            "Frame header written (block capacity %d bytes)", self.descriptor.block_capacity
        )

    def _fault(self, error: BaseException) -> None:
        self._error = error
        logger.debug("Frame writer failed: %s", error)


def open_writer(
    sink: ByteSink,
    level: int | None = None,
    *,
    descriptor: FrameDescriptor | None = None,
    checksum: ChecksumAlgorithm = DEFAULT_CHECKSUM,
    codec: BlockCodec | None = None,
) -> FrameWriter:
    """
    Open a frame writer on a byte sink.

    Args:
        sink: Destination for the encoded frame.
        level: Compression level (-1 to 9). Defaults to LZ4STREAM_LEVEL.
        descriptor: Frame options. Defaults to the standard preset.
        checksum: Checksum algorithm.
        codec: Block codec overriding the one chosen by ``level``.

    Raises:
        ValueError: If the level is out of range.
    """
    if level is None:
        from .config import LZ4STREAM_LEVEL

        level = LZ4STREAM_LEVEL
    block_codec = codec_for_level(level)
    if codec is not None:
        block_codec = codec
    return FrameWriter(sink, block_codec, descriptor=descriptor, checksum=checksum)


def compress(
    data: bytes,
    level: int | None = None,
    *,
    descriptor: FrameDescriptor | None = None,
) -> bytes:
    """
    Compress a complete byte string into a single frame.

    The input is split into blocks of at most the descriptor's block capacity.
    """
    sink = io.BytesIO()
    with open_writer(sink, level, descriptor=descriptor) as writer:
        capacity = writer.descriptor.block_capacity
        view = memoryview(data)
        for offset in range(0, len(view), capacity):
            writer.write(view[offset : offset + capacity])
    return sink.getvalue()

"""
Streaming frame reader.

Reading is pull-based. The descriptor is parsed when the reader is opened;
afterwards each read() is served from a staging buffer of decoded bytes,
which is refilled one block at a time::

    read()
      |-- staging buffer non-empty? -> copy out, return
      |-- stream ended or faulted?  -> return b"" / raise cached error
      '-- decode next block         -> append to staging, retry

The content checksum trails the end marker and is verified by close(), not
by read(). A caller that reads everything successfully must still close the
reader to learn whether the content was intact.
"""

from __future__ import annotations

import io
import logging
from types import TracebackType

from .block import BlockDecoder
from .checksum import DEFAULT_CHECKSUM, ChecksumAlgorithm
from .codec import BlockCodec, Lz4BlockCodec
from .descriptor import read_descriptor
from .exceptions import ContentChecksumError, FrameError
from .wire import ByteSource, read_uint32

logger = logging.getLogger(__name__)


class FrameReader:
    """
    Decompress an LZ4 frame from an underlying byte source.

    The reader moves through Ready -> Draining -> Closed. Once a read fails,
    the reader is faulted and keeps raising the same exception. Closing the
    reader does not close the source.
    """

    def __init__(
        self,
        source: ByteSource,
        *,
        checksum: ChecksumAlgorithm = DEFAULT_CHECKSUM,
        codec: BlockCodec | None = None,
    ) -> None:
        """
        Parse the frame descriptor.

        Raises:
            DescriptorError: If the descriptor is invalid or unsupported.
            TruncatedStreamError: If the stream ends inside the header.
        """
        self.descriptor = read_descriptor(source, checksum)
        logger.debug("Frame descriptor parsed: %s", self.descriptor)

        self.blocks_read = 0
        self._source = source
        self._content = checksum.new()
        self._decoder = BlockDecoder(
            source,
            self.descriptor,
            codec if codec is not None else Lz4BlockCodec(),
            checksum,
            self._content,
        )
        self._staging = bytearray()
        self._end_of_stream = False
        self._error: BaseException | None = None
        self._closed = False
        self._close_error: BaseException | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """
        Read decoded bytes into a writable buffer.

        Returns:
            Number of bytes copied, 0 at end of stream.
        """
        view = memoryview(buffer).cast("B")
        if len(view) == 0:
            self._check_open()
            return 0
        if not self._fill():
            return 0

        n = min(len(view), len(self._staging))
        view[:n] = self._staging[:n]
        del self._staging[:n]
        return n

    def read(self, size: int | None = -1) -> bytes:
        """
        Read up to ``size`` decoded bytes, or everything when ``size`` is negative.

        Never returns more than what is already staged plus one decoded block.

        Returns:
            The bytes read, ``b""`` at end of stream.
        """
        if size is None or size < 0:
            return self.readall()
        if size == 0:
            self._check_open()
            return b""
        if not self._fill():
            return b""

        data = bytes(self._staging[:size])
        del self._staging[:size]
        return data

    def readall(self) -> bytes:
        """Read until the end marker."""
        output = bytearray()
        while self._fill():
            output += self._staging
            self._staging.clear()
        return bytes(output)

    def close(self) -> None:
        """
        Verify the content checksum and release the reader.

        Raises:
            ContentChecksumError: If the trailing checksum does not match the content.
            TruncatedStreamError: If the checksum is missing.
            FrameError: The cached error of a faulted reader.
        """
        if self._closed:
            if self._close_error is not None:
                raise self._close_error
            return
        self._closed = True

        try:
            self._verify_trailer()
        except (FrameError, OSError) as e:
            self._close_error = e
            raise

        logger.debug("Frame closed after %d blocks", self.blocks_read)

    def __enter__(self) -> FrameReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # Do not mask an in-flight exception with a checksum failure.
        if exc_type is None:
            self.close()
        else:
            self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("read from closed frame reader")

    def _fill(self) -> bool:
        """
        Make sure the staging buffer holds data.

        Returns:
            True if data is staged, False at end of stream.
        """
        self._check_open()
        while not self._staging:
            if self._error is not None:
                raise self._error
            if self._end_of_stream:
                return False

            try:
                data = self._decoder.decode_next()
            except (FrameError, OSError) as e:
                self._fault(e)
                raise

            if data is None:
                self._end_of_stream = True
                logger.debug("End of frame after %d blocks", self.blocks_read)
            else:
                # An empty block leaves the buffer empty and the loop continues.
                self._staging += data
                self.blocks_read += 1
        return True

    def _verify_trailer(self) -> None:
        if self._error is not None:
            raise self._error
        if not self.descriptor.content_checksum_present:
            return

        try:
            stored = read_uint32(self._source, "content checksum")
        except (FrameError, OSError) as e:
            self._fault(e)
            raise

        computed = self._content.finish()
        if stored != computed:
            raise ContentChecksumError(computed, stored)

    def _fault(self, error: BaseException) -> None:
        self._error = error
        logger.debug("Frame reader failed: %s", error)


def open_reader(
    source: ByteSource,
    *,
    checksum: ChecksumAlgorithm = DEFAULT_CHECKSUM,
    codec: BlockCodec | None = None,
) -> FrameReader:
    """
    Open a frame reader on a byte source.

    The descriptor is parsed immediately. If it is invalid, no reader is returned.
    """
    return FrameReader(source, checksum=checksum, codec=codec)


def decompress(data: bytes) -> bytes:
    """
    Decompress a complete frame and verify its checksums.

    Raises:
        FrameError: If the frame is malformed, truncated or corrupted.
    """
    with open_reader(io.BytesIO(data)) as reader:
        return reader.readall()

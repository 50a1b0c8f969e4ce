"""
Tests for block framing.

Block layout::

    [size: 4 LE, bit 31 = stored][body][block_checksum: 4 LE, optional]
"""

from __future__ import annotations

import io

import pytest

from lz4stream.block import BlockDecoder, BlockEncoder
from lz4stream.checksum import XXH32
from lz4stream.codec import Lz4BlockCodec
from lz4stream.descriptor import FrameDescriptor
from lz4stream.exceptions import (
    BlockChecksumError,
    BlockCorruptError,
    InvalidBlockSizeError,
    TruncatedStreamError,
)
from tests.lz4stream.helpers import (
    END_MARK_BYTES,
    FixedCodec,
    PolyAccumulator,
    PolyChecksum,
    RecordingCodec,
    le32,
    stored_block,
    xxh32,
)

COMPRESSIBLE = b"abcdefgh" * 512
"""4 KiB of highly repetitive data."""


def make_encoder(
    descriptor: FrameDescriptor | None = None,
    codec: object | None = None,
) -> tuple[BlockEncoder, PolyAccumulator]:
    content = PolyAccumulator()
    encoder = BlockEncoder(
        descriptor or FrameDescriptor(),
        codec or Lz4BlockCodec(),
        XXH32(),
        content,
    )
    return encoder, content


def make_decoder(
    data: bytes,
    descriptor: FrameDescriptor | None = None,
    codec: object | None = None,
) -> tuple[BlockDecoder, PolyAccumulator]:
    content = PolyAccumulator()
    decoder = BlockDecoder(
        io.BytesIO(data),
        descriptor or FrameDescriptor(),
        codec or Lz4BlockCodec(),
        XXH32(),
        content,
    )
    return decoder, content


class TestBlockEncoder:
    """Compressed-or-stored discrimination and trailing fields."""

    def test_small_chunk_stored(self) -> None:
        """12 bytes cannot shrink, so they are stored raw with bit 31 set."""
        encoder, _ = make_encoder()
        framed = encoder.encode(b"hello world\n")
        assert framed == b"\x0c\x00\x00\x80" + b"hello world\n"

    def test_empty_chunk_stored(self) -> None:
        """The empty chunk becomes a stored block of length zero."""
        encoder, content = make_encoder()
        assert encoder.encode(b"") == b"\x00\x00\x00\x80"
        assert content.fed == []

    def test_compressible_chunk_compressed(self) -> None:
        """Repetitive data is stored compressed with bit 31 clear."""
        encoder, _ = make_encoder()
        framed = encoder.encode(COMPRESSIBLE)
        size_field = int.from_bytes(framed[:4], "little")
        assert not size_field & 0x80000000
        assert size_field == len(framed) - 4
        assert size_field < len(COMPRESSIBLE)
        assert Lz4BlockCodec().decompress(framed[4:], 65536) == COMPRESSIBLE

    def test_compressed_must_be_strictly_smaller(self) -> None:
        """A codec result as long as the chunk is not used."""
        encoder, _ = make_encoder(codec=FixedCodec(result=b"12345"))
        assert encoder.encode(b"abcde") == le32(5 | 0x80000000) + b"abcde"

    def test_shorter_codec_output_used(self) -> None:
        """A codec result one byte shorter than the chunk is used."""
        encoder, _ = make_encoder(codec=FixedCodec(result=b"1234"))
        assert encoder.encode(b"abcde") == le32(4) + b"1234"

    def test_codec_declines(self) -> None:
        """A codec returning None forces a stored block."""
        encoder, _ = make_encoder(codec=FixedCodec(result=None))
        assert encoder.encode(COMPRESSIBLE[:64]) == stored_block(COMPRESSIBLE[:64])

    def test_codec_gets_block_capacity(self) -> None:
        """The codec is bounded by the descriptor's block capacity."""
        codec = RecordingCodec()
        encoder, _ = make_encoder(FrameDescriptor(block_size_code=4), codec)
        encoder.encode(b"data")
        assert codec.compress_calls == [(b"data", 64 * 1024)]

    def test_block_checksum_over_stored_body(self) -> None:
        """With block checksums, the stored body is hashed."""
        encoder, _ = make_encoder(FrameDescriptor(block_checksum_present=True))
        framed = encoder.encode(b"hello world\n")
        assert framed == stored_block(b"hello world\n", with_checksum=True)
        assert framed[-4:] == b"\xb0\x8d\x52\xa4"

    def test_block_checksum_over_compressed_body(self) -> None:
        """With block checksums, the compressed body (not the chunk) is hashed."""
        encoder, _ = make_encoder(FrameDescriptor(block_checksum_present=True))
        framed = encoder.encode(COMPRESSIBLE)
        body = framed[4:-4]
        assert int.from_bytes(framed[-4:], "little") == xxh32(body)
        assert int.from_bytes(framed[-4:], "little") != xxh32(COMPRESSIBLE)

    def test_content_checksum_fed_with_original(self) -> None:
        """The content accumulator sees the uncompressed chunk."""
        encoder, content = make_encoder()
        encoder.encode(COMPRESSIBLE)
        encoder.encode(b"tail")
        assert content.fed == [COMPRESSIBLE, b"tail"]


class TestBlockDecoder:
    """Reading blocks, end markers and block-level failures."""

    def test_end_marker(self) -> None:
        """An all-zero size field is the end of the stream."""
        decoder, _ = make_decoder(END_MARK_BYTES)
        assert decoder.decode_next() is None

    def test_stored_block(self) -> None:
        """A stored body is returned verbatim."""
        decoder, content = make_decoder(stored_block(b"hello world\n"))
        assert decoder.decode_next() == b"hello world\n"
        assert content.fed == [b"hello world\n"]

    def test_empty_stored_block_is_not_end(self) -> None:
        """0x80000000 is an empty data block followed by more blocks."""
        decoder, _ = make_decoder(stored_block(b"") + stored_block(b"x") + END_MARK_BYTES)
        assert decoder.decode_next() == b""
        assert decoder.decode_next() == b"x"
        assert decoder.decode_next() is None

    def test_compressed_block(self) -> None:
        """A compressed body is run through the codec with the block capacity."""
        body = Lz4BlockCodec().compress(COMPRESSIBLE, 65536)
        assert body is not None
        codec = RecordingCodec()
        decoder, _ = make_decoder(le32(len(body)) + body, codec=codec)
        assert decoder.decode_next() == COMPRESSIBLE
        assert codec.decompress_calls == [(body, 4 * 1024 * 1024)]

    def test_oversized_block_rejected_before_decompression(self) -> None:
        """A declared length above capacity fails without touching the codec."""
        codec = RecordingCodec()
        descriptor = FrameDescriptor(block_size_code=4)
        data = le32(64 * 1024 + 1) + b"\x00" * 16
        decoder, _ = make_decoder(data, descriptor, codec)
        with pytest.raises(InvalidBlockSizeError) as exc_info:
            decoder.decode_next()
        assert exc_info.value.length == 64 * 1024 + 1
        assert exc_info.value.capacity == 64 * 1024
        assert codec.decompress_calls == []

    def test_oversized_stored_block_rejected(self) -> None:
        """The bound applies to stored blocks too."""
        descriptor = FrameDescriptor(block_size_code=4)
        decoder, _ = make_decoder(le32((64 * 1024 + 1) | 0x80000000), descriptor)
        with pytest.raises(InvalidBlockSizeError):
            decoder.decode_next()

    def test_block_at_capacity_accepted(self) -> None:
        """A block exactly at capacity is valid."""
        chunk = bytes(range(256)) * 256
        decoder, _ = make_decoder(stored_block(chunk), FrameDescriptor(block_size_code=4))
        assert decoder.decode_next() == chunk

    @pytest.mark.parametrize("data", [b"", b"\x0c", b"\x0c\x00\x00"])
    def test_truncated_size_field(self, data: bytes) -> None:
        """A missing or partial size field is a truncated stream, not an end marker."""
        decoder, _ = make_decoder(data)
        with pytest.raises(TruncatedStreamError):
            decoder.decode_next()

    def test_truncated_body(self) -> None:
        """A body shorter than declared is a truncated stream."""
        decoder, _ = make_decoder(stored_block(b"hello world\n")[:-3])
        with pytest.raises(TruncatedStreamError) as exc_info:
            decoder.decode_next()
        assert exc_info.value.expected == 12
        assert exc_info.value.actual == 9

    def test_block_checksum_verified(self) -> None:
        """With block checksums, the trailing hash is read and checked."""
        descriptor = FrameDescriptor(block_checksum_present=True)
        block = stored_block(b"hello world\n", with_checksum=True)
        decoder, _ = make_decoder(block + END_MARK_BYTES, descriptor)
        assert decoder.decode_next() == b"hello world\n"
        assert decoder.decode_next() is None

    def test_block_checksum_mismatch(self) -> None:
        """A corrupted body fails the block checksum."""
        descriptor = FrameDescriptor(block_checksum_present=True)
        block = bytearray(stored_block(b"hello world\n", with_checksum=True))
        block[5] ^= 0x01
        decoder, _ = make_decoder(bytes(block), descriptor)
        with pytest.raises(BlockChecksumError) as exc_info:
            decoder.decode_next()
        assert exc_info.value.actual == 0xA4528DB0

    def test_missing_block_checksum(self) -> None:
        """A block checksum cut short is a truncated stream."""
        descriptor = FrameDescriptor(block_checksum_present=True)
        block = stored_block(b"hello world\n", with_checksum=True)[:-2]
        decoder, _ = make_decoder(block, descriptor)
        with pytest.raises(TruncatedStreamError):
            decoder.decode_next()

    def test_no_block_checksum_expected_without_flag(self) -> None:
        """Without the flag, the bytes after a body start the next block."""
        decoder, _ = make_decoder(stored_block(b"ab") + stored_block(b"cd") + END_MARK_BYTES)
        assert decoder.decode_next() == b"ab"
        assert decoder.decode_next() == b"cd"
        assert decoder.decode_next() is None

    def test_corrupt_compressed_body(self) -> None:
        """Codec failures surface as BlockCorruptError."""
        body = b"\xff" * 8
        decoder, _ = make_decoder(le32(len(body)) + body)
        with pytest.raises(BlockCorruptError):
            decoder.decode_next()

    def test_content_checksum_skipped_when_disabled(self) -> None:
        """Without a content checksum the accumulator is left alone."""
        descriptor = FrameDescriptor(content_checksum_present=False)
        decoder, content = make_decoder(stored_block(b"data"), descriptor)
        assert decoder.decode_next() == b"data"
        assert content.fed == []

    def test_injected_block_checksum(self) -> None:
        """Block checksums use the injected algorithm."""
        checksum = PolyChecksum()
        descriptor = FrameDescriptor(block_checksum_present=True)
        data = le32(4 | 0x80000000) + b"data" + le32(checksum.hash(b"data"))
        decoder = BlockDecoder(
            io.BytesIO(data), descriptor, Lz4BlockCodec(), checksum, PolyAccumulator()
        )
        assert decoder.decode_next() == b"data"

"""Test helpers for lz4stream unit tests."""

from __future__ import annotations

from .builders import (
    END_MARK_BYTES,
    MAGIC_BYTES,
    PRESET_HEADER,
    le32,
    make_frame,
    make_header,
    stored_block,
    xxh32,
)
from .mocks import (
    BrokenCodec,
    FailingSink,
    FailingSource,
    FixedCodec,
    PolyAccumulator,
    PolyChecksum,
    RecordingCodec,
    ShortWriteSink,
    StalledSink,
    TrickleSource,
)
from .vectors import (
    EMPTY_FRAME,
    GETTYSBURG,
    GETTYSBURG_FRAME,
    HELLO_BLOCK_CHECKSUM_FRAME,
    HELLO_FRAME,
    HELLO_X2_FRAME,
    REFERENCE_FRAMES,
    SHE_SELLS_FRAME,
)

__all__ = [
    "END_MARK_BYTES",
    "MAGIC_BYTES",
    "PRESET_HEADER",
    "le32",
    "make_frame",
    "make_header",
    "stored_block",
    "xxh32",
    "BrokenCodec",
    "FailingSink",
    "FailingSource",
    "FixedCodec",
    "PolyAccumulator",
    "PolyChecksum",
    "RecordingCodec",
    "ShortWriteSink",
    "StalledSink",
    "TrickleSource",
    "EMPTY_FRAME",
    "GETTYSBURG",
    "GETTYSBURG_FRAME",
    "HELLO_BLOCK_CHECKSUM_FRAME",
    "HELLO_FRAME",
    "HELLO_X2_FRAME",
    "REFERENCE_FRAMES",
    "SHE_SELLS_FRAME",
]

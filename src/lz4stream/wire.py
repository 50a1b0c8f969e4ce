"""Byte source and sink helpers shared by the descriptor and block layers."""

from __future__ import annotations

from typing import Protocol

from .exceptions import TruncatedStreamError


class ByteSource(Protocol):
    """Anything with a binary ``read``, such as an open file or ``io.BytesIO``."""

    def read(self, size: int = -1, /) -> bytes: ...


class ByteSink(Protocol):
    """Anything with a binary ``write``."""

    def write(self, data: bytes | memoryview, /) -> int | None: ...


def read_exact(source: ByteSource, size: int, operation: str) -> bytes:
    """
    Read exactly ``size`` bytes.

    Raw streams may return fewer bytes than requested, so keep reading until
    the request is satisfied or the source reports end of input.

    Raises:
        TruncatedStreamError: If the source ends first.
    """
    data = source.read(size)
    if len(data) == size:
        return data

    buffer = bytearray(data)
    while len(buffer) < size:
        more = source.read(size - len(buffer))
        if not more:
            raise TruncatedStreamError(operation, expected=size, actual=len(buffer))
        buffer.extend(more)
    return bytes(buffer)


def write_all(sink: ByteSink, data: bytes) -> None:
    """
    Write all of ``data``.

    Raw streams may accept only part of a buffer, so keep writing the
    remainder. A sink that returns None is taken to have written everything.

    Raises:
        OSError: If the sink accepts no bytes at all.
    """
    view = memoryview(data)
    while view:
        written = sink.write(view)
        if written is None:
            return
        if written <= 0:
            raise OSError(f"Sink accepted no bytes ({len(view)} remaining)")
        view = view[written:]


def read_uint32(source: ByteSource, operation: str) -> int:
    """Read a little-endian unsigned 32-bit integer."""
    return int.from_bytes(read_exact(source, 4, operation), "little")


def pack_uint32(value: int) -> bytes:
    """Encode an unsigned 32-bit integer as 4 little-endian bytes."""
    return value.to_bytes(4, "little")

"""
MSB-first bit field reader.

The frame descriptor packs several small fields into two bytes::

    FLG: [version:2][B.Indep:1][B.Checksum:1][C.Size:1][C.Checksum:1][reserved:1][DictID:1]
    BD:  [reserved:1][B.MaxSize:3][reserved:4]

Fields are read from the most significant bit of each byte downwards, in the
order they appear above. Every byte pulled from the source is also fed into a
checksum accumulator, so the header checksum can be computed over exactly the
bytes that were parsed.
"""

from __future__ import annotations

from .checksum import Checksum32
from .exceptions import TruncatedStreamError
from .wire import ByteSource


class BitFieldReader:
    """
    Read unsigned fields of 1 to 32 bits from a byte source.

    Bits are buffered in an integer register. A request for ``n`` bits pulls
    whole bytes until at least ``n`` bits are available, then returns the top
    ``n`` of them.

    The checksum tracks raw bytes, not bits: a byte that is only partially
    consumed has already been hashed in full.
    """

    def __init__(self, source: ByteSource, checksum: Checksum32, limit: int | None = None) -> None:
        """
        Args:
            source: Underlying byte source.
            checksum: Accumulator fed with every byte read.
            limit: Maximum number of bytes this reader may pull, if bounded.
        """
        self._source = source
        self._checksum = checksum
        self._limit = limit
        self._register = 0
        self._count = 0
        self.bytes_read = 0

    def read_bits(self, n: int) -> int:
        """
        Read an ``n``-bit unsigned field.

        Raises:
            ValueError: If ``n`` is not between 1 and 32.
            TruncatedStreamError: If the source (or the byte limit) runs out.
        """
        if not 1 <= n <= 32:
            raise ValueError(f"Bit width must be between 1 and 32, got {n}")

        while self._count < n:
            self._register = (self._register << 8) | self._next_byte(n)
            self._count += 8

        # Take the top n buffered bits and keep the remainder.
        self._count -= n
        value = self._register >> self._count
        self._register &= (1 << self._count) - 1
        return value

    def read_bit(self) -> bool:
        """Read a single bit as a flag."""
        return self.read_bits(1) == 1

    def checksum(self) -> int:
        """Checksum of every byte consumed so far."""
        return self._checksum.finish()

    def _next_byte(self, n: int) -> int:
        needed = (n - self._count + 7) // 8
        if self._limit is not None and self.bytes_read >= self._limit:
            raise TruncatedStreamError("bit field", expected=needed, actual=0)

        byte = self._source.read(1)
        if not byte:
            raise TruncatedStreamError("bit field", expected=needed, actual=0)

        self._checksum.update(byte)
        self.bytes_read += 1
        return byte[0]

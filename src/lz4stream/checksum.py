"""
32-bit checksums used by the frame format.

The frame format protects three things with the same hash function:

  1. HEADER: one byte taken from the hash of FLG and BD.
  2. BLOCKS: an optional 4-byte hash after every block body.
  3. CONTENT: an optional 4-byte hash of all decoded data after the end marker.

The hash is XXH32 with seed 0. Callers receive it as an injected algorithm
object so each path can be exercised with a synthetic hash in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import xxhash


class Checksum32(Protocol):
    """An incremental 32-bit checksum accumulator."""

    def update(self, data: bytes) -> None:
        """Feed more bytes into the accumulator."""
        ...

    def finish(self) -> int:
        """Return the checksum of everything fed so far, without consuming state."""
        ...

    def reset(self) -> None:
        """Forget everything fed so far."""
        ...


class ChecksumAlgorithm(Protocol):
    """Factory for accumulators plus a one-shot hash."""

    def new(self) -> Checksum32:
        """Create a fresh accumulator."""
        ...

    def hash(self, data: bytes) -> int:
        """Hash a complete byte string."""
        ...


class XXH32Accumulator:
    """Incremental XXH32 backed by the xxhash library."""

    __slots__ = ("_state",)

    def __init__(self, seed: int = 0) -> None:
        self._state = xxhash.xxh32(seed=seed)

    def update(self, data: bytes) -> None:
        self._state.update(data)

    def finish(self) -> int:
        return self._state.intdigest()

    def reset(self) -> None:
        self._state.reset()


@dataclass(frozen=True, slots=True)
class XXH32:
    """
    XXH32 checksum algorithm.

    Attributes:
        seed: Hash seed. The frame format always uses 0.
    """

    seed: int = 0

    def new(self) -> XXH32Accumulator:
        return XXH32Accumulator(self.seed)

    def hash(self, data: bytes) -> int:
        return xxhash.xxh32_intdigest(data, seed=self.seed)


DEFAULT_CHECKSUM: XXH32 = XXH32()
"""The checksum algorithm mandated by the frame format."""

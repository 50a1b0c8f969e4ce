"""Exception hierarchy for LZ4 frame decoding and encoding."""

from __future__ import annotations

from enum import Enum


class FrameError(Exception):
    """
    Base exception for all frame protocol errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# =============================================================================
# Descriptor Errors
# =============================================================================


class DescriptorError(FrameError):
    """Base class for errors raised while parsing the frame descriptor."""


class InvalidMagicError(DescriptorError):
    """
    Raised when the stream does not start with the LZ4 frame magic number.

    Attributes:
        magic: The 32-bit value found in place of the magic number.
    """

    def __init__(self, magic: int) -> None:
        self.magic = magic
        super().__init__(f"Invalid frame magic number: {magic:#010x}")


class UnsupportedVersionError(DescriptorError):
    """
    Raised when the descriptor declares a frame version other than 1.

    Attributes:
        version: The declared version.
    """

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Unsupported frame version: {version}")


class Feature(Enum):
    """Frame features this codec refuses to decode."""

    DEPENDENT_BLOCKS = "dependent blocks"
    """Blocks referencing data of previous blocks."""

    CONTENT_SIZE = "content size"
    """An explicit uncompressed stream size in the descriptor."""

    DICTIONARY = "dictionary"
    """A preset dictionary identified in the descriptor."""


class UnsupportedFeatureError(DescriptorError):
    """
    Raised when the descriptor enables a feature this codec does not implement.

    Attributes:
        feature: The unsupported feature.
    """

    def __init__(self, feature: Feature) -> None:
        self.feature = feature
        super().__init__(f"Unsupported frame feature: {feature.value}")


class UnsupportedBlockSizeError(DescriptorError):
    """
    Raised when the block size code is below the smallest defined class.

    Attributes:
        code: The 3-bit block size code.
    """

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"Unsupported block size code: {code}")


class ReservedBitsError(DescriptorError):
    """
    Raised when a reserved descriptor bit is set.

    Attributes:
        field: Which reserved field was violated.
    """

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Reserved bits must be zero: {field}")


class DescriptorChecksumError(DescriptorError):
    """
    Raised when the header checksum byte does not match the descriptor.

    Attributes:
        expected: Checksum byte computed from FLG and BD.
        actual: Checksum byte stored in the stream.
    """

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Descriptor checksum mismatch: stored {actual:#04x}, computed {expected:#04x}"
        )


# =============================================================================
# Block and Stream Errors
# =============================================================================


class InvalidBlockSizeError(FrameError):
    """
    Raised when a block declares a body larger than the descriptor allows.

    Attributes:
        length: The declared body length.
        capacity: The maximum block size of the frame.
    """

    def __init__(self, length: int, capacity: int) -> None:
        self.length = length
        self.capacity = capacity
        super().__init__(f"Invalid block size: {length} bytes exceeds capacity of {capacity}")


class TruncatedStreamError(FrameError):
    """
    Raised when the stream ends in the middle of a framing element.

    Attributes:
        operation: What was being read (e.g., "block size", "block body").
        expected: Number of bytes needed.
        actual: Number of bytes received.
    """

    def __init__(self, operation: str, *, expected: int, actual: int) -> None:
        self.operation = operation
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Stream truncated while reading {operation}: expected {expected} bytes, got {actual}"
        )


class ChecksumMismatchError(FrameError):
    """
    Base class for block and content checksum failures.

    Attributes:
        expected: Checksum computed from the decoded data.
        actual: Checksum stored in the stream.
    """

    kind: str = "checksum"

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid {self.kind}: stored {actual:#010x}, computed {expected:#010x}"
        )


class BlockChecksumError(ChecksumMismatchError):
    """Raised when a block body does not match its trailing checksum."""

    kind = "block checksum"


class ContentChecksumError(ChecksumMismatchError):
    """Raised when the decoded content does not match the frame's content checksum."""

    kind = "content checksum"


class BlockCorruptError(FrameError):
    """
    Raised when the block codec rejects a compressed block.

    Attributes:
        detail: Description reported by the codec.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Corrupt block: {detail}")

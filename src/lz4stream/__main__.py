"""
Command line tool for LZ4 frames.

Usage::

    python -m lz4stream notes.txt            # writes notes.txt.lz4
    python -m lz4stream -l 9 notes.txt       # high compression
    python -m lz4stream -d notes.txt.lz4     # writes notes.txt

Options:
    -d, --decompress  Decompress instead of compress
    -l, --level       Compression level from -1 to 9 (default: LZ4STREAM_LEVEL)
    -v, --verbose     Enable debug logging
    --no-color        Disable colored logging output
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from lz4stream.config import LZ4STREAM_BUFFER_SIZE, LZ4STREAM_LEVEL
from lz4stream.constants import BEST_COMPRESSION, DEFAULT_COMPRESSION
from lz4stream.exceptions import FrameError
from lz4stream.reader import open_reader
from lz4stream.writer import open_writer

logger = logging.getLogger(__name__)

COMPRESSED_SUFFIX = ".lz4"
"""Suffix appended to compressed files."""

PARTIAL_SUFFIX = ".part"
"""Suffix of the temporary output written while decompressing."""


def compress_file(path: Path, level: int) -> Path:
    """
    Compress ``path`` into ``path.lz4``.

    The input is copied in chunks no larger than the frame's block capacity,
    so every chunk becomes exactly one block.

    Returns:
        The path of the compressed file.
    """
    target = path.with_name(path.name + COMPRESSED_SUFFIX)
    with path.open("rb") as source, target.open("wb") as sink:
        with open_writer(sink, level) as writer:
            chunk_size = min(LZ4STREAM_BUFFER_SIZE, writer.descriptor.block_capacity)
            shutil.copyfileobj(source, writer, chunk_size)
            logger.debug("Compressed %s into %d blocks", path, writer.blocks_written)
    return target


def decompress_file(path: Path) -> Path:
    """
    Decompress ``path`` into the same path with its last extension removed.

    The header is checked before anything is written. Output goes to a
    ``.part`` file that replaces the target only after the reader closes
    cleanly, so a bad frame never clobbers an existing file.

    Returns:
        The path of the decompressed file.
    """
    target = path.with_suffix("")
    if target == path:
        raise ValueError(f"Cannot derive output name from {path}: no extension to strip")
    partial = target.with_name(target.name + PARTIAL_SUFFIX)
    with path.open("rb") as source:
        reader = open_reader(source)
        try:
            with partial.open("wb") as sink:
                shutil.copyfileobj(reader, sink, LZ4STREAM_BUFFER_SIZE)
            reader.close()
        except BaseException:
            partial.unlink(missing_ok=True)
            raise
    partial.replace(target)
    logger.debug("Decompressed %s from %d blocks", path, reader.blocks_read)
    return target


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"
        return f"{levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the tool with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter("%(levelname)-8s %(name)s: %(message)s")
    else:
        formatter = ColoredFormatter()

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="lz4stream",
        description="Compress or decompress files in the LZ4 frame format",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("path", type=Path, help="File to compress or decompress")
    parser.add_argument(
        "-d",
        "--decompress",
        action="store_true",
        help="Decompress instead of compress",
    )
    parser.add_argument(
        "-l",
        "--level",
        type=int,
        default=LZ4STREAM_LEVEL,
        choices=range(DEFAULT_COMPRESSION, BEST_COMPRESSION + 1),
        metavar="LEVEL",
        help=f"Compression level from {DEFAULT_COMPRESSION} to {BEST_COMPRESSION}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        if args.decompress:
            target = decompress_file(args.path)
        else:
            target = compress_file(args.path, args.level)
    except (FrameError, OSError, ValueError) as e:
        logger.error("lz4: %s", e)
        return 1

    logger.info("Wrote %s", target)
    return 0


if __name__ == "__main__":
    sys.exit(main())

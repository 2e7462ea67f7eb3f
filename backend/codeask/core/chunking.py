"""Fixed-window text chunking with character overlap."""

from __future__ import annotations

import logging
from typing import List, Tuple

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CHARS_PER_LINE = 50


class LineEstimator:
    """Approximate line numbers for a chunk from its position alone.

    Lines are not counted: the estimate assumes every line holds
    ``chars_per_line`` characters, so ranges are only a navigational hint.
    """

    def __init__(self, chars_per_line: int = DEFAULT_CHARS_PER_LINE):
        if chars_per_line <= 0:
            raise ConfigurationError(f"chars_per_line must be positive, got {chars_per_line}")
        self.chars_per_line = chars_per_line

    def estimate(self, index: int, chunk: str, chunk_size: int, overlap: int) -> Tuple[int, int]:
        """Return 1-based (start_line, end_line) for the ``index``-th chunk."""
        start_line = (index * (chunk_size - overlap)) // self.chars_per_line + 1
        end_line = start_line + len(chunk) // self.chars_per_line
        return start_line, end_line


def check_window(chunk_size: int, overlap: int) -> None:
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0 or overlap >= chunk_size:
        raise ConfigurationError(
            f"overlap must be in [0, chunk_size), got overlap={overlap} chunk_size={chunk_size}"
        )


def split_into_chunks(text: str, chunk_size: int, overlap: int) -> List[str]:
    """Split ``text`` into windows of ``chunk_size`` characters.

    Consecutive windows share ``overlap`` characters; the last one may be
    shorter. Empty text yields no chunks.
    """
    check_window(chunk_size, overlap)

    chunks: List[str] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        chunks.append(text[start:end])
        if end == len(text):
            break
        start = end - overlap
    return chunks


class Chunker:
    """Abstract base class for text chunking."""

    def chunk(self, text: str) -> List[Tuple[int, int, str]]:
        """Chunk text into windows.

        Returns:
            List of (start_line, end_line, text) tuples
        """
        raise NotImplementedError


class DefaultChunker(Chunker):
    """Character-window chunker with estimated line ranges."""

    def __init__(
        self,
        chunk_size: int = 1000,
        overlap: int = 200,
        line_estimator: LineEstimator | None = None,
    ):
        check_window(chunk_size, overlap)
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.line_estimator = line_estimator or LineEstimator()

    def chunk(self, text: str) -> List[Tuple[int, int, str]]:
        pieces = split_into_chunks(text, self.chunk_size, self.overlap)
        result = []
        for i, piece in enumerate(pieces):
            start_line, end_line = self.line_estimator.estimate(i, piece, self.chunk_size, self.overlap)
            result.append((start_line, end_line, piece))
        logger.debug(f"Split {len(text)} chars into {len(result)} chunks")
        return result

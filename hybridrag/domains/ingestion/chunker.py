"""
Chunker - Overlapping, boundary-aware text segmentation.

Windows of ``chunk_size`` characters advance by ``chunk_size - overlap``.
Full-size windows that are not the last one are pulled back to the last
sentence end, or failing that the last space, found past 70% of the window.
"""

from __future__ import annotations

from collections.abc import Iterator

__all__ = ["Chunker", "chunk_text", "BOUNDARY_THRESHOLD"]

BOUNDARY_THRESHOLD = 0.7


def _validate(chunk_size: int, overlap: int) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ValueError(f"overlap must be non-negative, got {overlap}")
    if overlap >= chunk_size:
        raise ValueError(
            f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
        )


def chunk_text(text: str, chunk_size: int, overlap: int) -> Iterator[str]:
    """
    Split text into overlapping segments.

    Args:
        text: Raw document text
        chunk_size: Maximum characters per segment
        overlap: Characters shared by consecutive windows

    Returns:
        Lazy iterator of trimmed, non-empty segments in document order

    Raises:
        ValueError: If overlap is negative or not smaller than chunk_size
    """
    _validate(chunk_size, overlap)
    return _iter_windows(text, chunk_size, overlap)


def _iter_windows(text: str, chunk_size: int, overlap: int) -> Iterator[str]:
    if not text or not text.strip():
        return

    step = chunk_size - overlap
    threshold = chunk_size * BOUNDARY_THRESHOLD
    length = len(text)
    start = 0

    while start < length:
        window = text[start : start + chunk_size]

        if len(window) == chunk_size and start + chunk_size < length:
            last_period = window.rfind(".")
            last_space = window.rfind(" ")
            if last_period > threshold:
                window = window[: last_period + 1]
            elif last_space > threshold:
                window = window[:last_space]

        segment = window.strip()
        if segment:
            yield segment

        if start + len(window) >= length:
            break
        start += step


class Chunker:
    """
    Chunker bound to one chunking configuration.

    Example:
        >>> chunker = Chunker(chunk_size=500, overlap=50)
        >>> segments = chunker.chunk(document.content)
    """

    def __init__(self, chunk_size: int = 500, overlap: int = 50) -> None:
        _validate(chunk_size, overlap)
        self.chunk_size = chunk_size
        self.overlap = overlap

    def iter_chunks(self, text: str) -> Iterator[str]:
        """Lazily yield segments of text."""
        return chunk_text(text, self.chunk_size, self.overlap)

    def chunk(self, text: str) -> list[str]:
        """Return all segments of text."""
        return list(self.iter_chunks(text))

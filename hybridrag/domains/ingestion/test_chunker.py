"""
Tests for the boundary-aware chunker.
"""

from __future__ import annotations

import string

import pytest

from .chunker import Chunker, chunk_text


def _letters(n: int) -> str:
    """Text with no spaces or periods, so windows are never snapped."""
    return "".join(string.ascii_letters[i % 52] for i in range(n))


# --- Edge cases ---


def test_empty_text_yields_no_chunks() -> None:
    """Test empty and whitespace-only input produce nothing."""
    assert list(chunk_text("", 100, 10)) == []
    assert list(chunk_text("   \n\t  ", 100, 10)) == []


def test_short_text_yields_single_trimmed_chunk() -> None:
    """Test text shorter than chunk_size is one trimmed chunk."""
    assert list(chunk_text("  Escrow shortage explained.  ", 500, 50)) == [
        "Escrow shortage explained."
    ]


def test_text_exactly_chunk_size_is_single_chunk() -> None:
    """Test a text of exactly chunk_size characters is not split."""
    text = _letters(100)
    assert list(chunk_text(text, 100, 10)) == [text]


@pytest.mark.parametrize(
    ("chunk_size", "overlap"),
    [(0, 0), (-5, 0), (10, -1), (10, 10), (10, 20)],
)
def test_invalid_configuration_raises(chunk_size: int, overlap: int) -> None:
    """Test invalid size/overlap combinations are rejected eagerly."""
    with pytest.raises(ValueError):
        chunk_text("some text", chunk_size, overlap)


# --- Windowing ---


def test_raw_windows_overlap_and_cover_text() -> None:
    """Test fixed-size windows share exactly `overlap` characters."""
    text = _letters(1000)
    chunks = list(chunk_text(text, 100, 10))

    assert len(chunks) == 11
    assert all(len(c) == 100 for c in chunks)
    for current, following in zip(chunks, chunks[1:]):
        assert current[-10:] == following[:10]

    rebuilt = chunks[0] + "".join(c[10:] for c in chunks[1:])
    assert rebuilt == text


def test_snaps_to_sentence_boundary_after_threshold() -> None:
    """Test a period past 70% of the window ends the chunk."""
    text = "x" * 15 + "." + "y" * 30
    chunks = list(chunk_text(text, 20, 5))

    assert chunks[0] == "x" * 15 + "."
    assert chunks[-1] == "y" * 16


def test_snaps_to_word_boundary_when_no_late_period() -> None:
    """Test the last space past the threshold is used when no period qualifies."""
    text = "a" * 16 + " " + "b" * 30
    chunks = list(chunk_text(text, 20, 5))

    assert chunks[0] == "a" * 16


def test_early_period_is_ignored() -> None:
    """Test boundaries before 70% of the window keep the raw cut."""
    text = "a" * 5 + "." + "a" * 40
    chunks = list(chunk_text(text, 20, 5))

    assert chunks[0] == text[:20]


def test_final_window_is_not_snapped() -> None:
    """Test the last window keeps its text even if it contains a boundary."""
    text = "a" * 18 + " b. " + "c" * 10
    chunks = list(chunk_text(text, 20, 5))

    assert chunks[-1].endswith("c" * 10)


def test_whitespace_only_windows_are_skipped() -> None:
    """Test windows that trim to nothing are not emitted."""
    text = "abc" + " " * 50 + "def"
    assert list(chunk_text(text, 10, 0)) == ["abc", "def"]


def test_chunk_text_is_restartable() -> None:
    """Test calling again yields the same sequence."""
    text = "The escrow account pays taxes and insurance. " * 40
    first = list(chunk_text(text, 120, 20))
    second = list(chunk_text(text, 120, 20))
    assert first == second
    assert len(first) > 1


# --- Chunker class ---


def test_chunker_matches_function() -> None:
    """Test Chunker wraps chunk_text with its configuration."""
    text = "Monthly payments include principal, interest, and escrow. " * 30
    chunker = Chunker(chunk_size=200, overlap=40)

    assert chunker.chunk(text) == list(chunk_text(text, 200, 40))
    assert list(chunker.iter_chunks(text)) == chunker.chunk(text)


def test_chunker_validates_configuration() -> None:
    """Test Chunker rejects overlap >= chunk_size."""
    with pytest.raises(ValueError):
        Chunker(chunk_size=50, overlap=50)

"""Tests for the character-window chunker."""

import math

import pytest

from codeask.core.chunking import DefaultChunker, LineEstimator, split_into_chunks
from codeask.errors import ConfigurationError


def _reconstruct(chunks, overlap):
    if not chunks:
        return ""
    return chunks[0] + "".join(c[overlap:] for c in chunks[1:])


@pytest.mark.parametrize(
    "length,size,overlap",
    [
        (1, 10, 0),
        (10, 10, 3),
        (11, 10, 3),
        (999, 100, 20),
        (2500, 1000, 200),
        (4321, 512, 511),
        (3000, 1000, 0),
    ],
)
def test_chunks_reconstruct_text(length, size, overlap):
    text = "".join(chr(33 + (i * 7) % 90) for i in range(length))
    chunks = split_into_chunks(text, size, overlap)

    assert _reconstruct(chunks, overlap) == text
    assert all(len(c) <= size for c in chunks)
    # every chunk but the last is a full window
    assert all(len(c) == size for c in chunks[:-1])

    if length > size:
        assert len(chunks) == math.ceil((length - overlap) / (size - overlap))
    else:
        assert len(chunks) == 1


def test_consecutive_chunks_overlap_exactly():
    text = "abcdefghijklmnopqrstuvwxyz" * 10
    chunks = split_into_chunks(text, 40, 15)
    for prev, cur in zip(chunks, chunks[1:]):
        assert prev[-15:] == cur[:15]


def test_empty_text_yields_no_chunks():
    assert split_into_chunks("", 1000, 200) == []
    assert DefaultChunker(1000, 200).chunk("") == []


def test_reference_file_yields_three_chunks():
    text = "x" * 2500
    chunks = split_into_chunks(text, 1000, 200)
    assert [len(c) for c in chunks] == [1000, 1000, 900]


@pytest.mark.parametrize("size,overlap", [(100, 100), (100, 150), (0, 0), (10, -1)])
def test_invalid_window_is_a_configuration_error(size, overlap):
    with pytest.raises(ConfigurationError):
        split_into_chunks("some text", size, overlap)
    with pytest.raises(ConfigurationError):
        DefaultChunker(chunk_size=size, overlap=overlap)


class TestLineEstimator:

    def test_estimates_from_position_not_newlines(self):
        chunker = DefaultChunker(chunk_size=1000, overlap=200)
        text = "\n" * 2500
        lines = [(s, e) for s, e, _ in chunker.chunk(text)]
        assert lines == [(1, 21), (17, 37), (33, 51)]

    def test_custom_chars_per_line(self):
        estimator = LineEstimator(chars_per_line=10)
        assert estimator.estimate(2, "a" * 35, chunk_size=100, overlap=20) == (17, 20)

    def test_rejects_non_positive_width(self):
        with pytest.raises(ConfigurationError):
            LineEstimator(0)

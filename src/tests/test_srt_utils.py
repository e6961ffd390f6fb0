"""
Tests for caption chunking and SRT utilities.
"""

import math

import pytest

from explainer.models import CaptionChunk, Segment
from explainer.srt_utils import (
    chunk_segments,
    format_timestamp,
    parse_srt,
    parse_srt_text,
    parse_timestamp,
    render_srt,
    write_srt,
)


def test_chunk_proportional_timing():
    """Six words in a 3s segment with windows of four split 2s / 1s."""
    segments = [
        Segment(start=0.0, end=3.0, text="the quick brown fox jumps over"),
        Segment(start=3.0, end=4.0, text="the lazy dog"),
    ]

    chunks = chunk_segments(segments, max_words=4)

    assert [c.index for c in chunks] == [1, 2, 3]
    assert chunks[0].text == "the quick brown fox"
    assert chunks[0].start == 0.0
    assert chunks[0].end == pytest.approx(2.0)
    assert chunks[1].text == "jumps over"
    assert chunks[1].start == pytest.approx(2.0)
    assert chunks[1].end == 3.0
    assert chunks[2].text == "the lazy dog"
    assert (chunks[2].start, chunks[2].end) == (3.0, 4.0)

    srt = render_srt(chunks[:2])
    assert "1\n00:00:00,000 --> 00:00:02,000\nthe quick brown fox\n\n" in srt
    assert "2\n00:00:02,000 --> 00:00:03,000\njumps over\n\n" in srt


@pytest.mark.parametrize("n_words,window", [(1, 7), (7, 7), (8, 7), (13, 4), (20, 3)])
def test_chunks_partition_segment(n_words, window):
    """ceil(N/W) chunks that exactly cover the segment interval."""
    seg = Segment(start=1.25, end=9.75, text=" ".join(f"w{i}" for i in range(n_words)))

    chunks = chunk_segments([seg], max_words=window)

    assert len(chunks) == math.ceil(n_words / window)
    assert chunks[0].start == seg.start
    assert chunks[-1].end == seg.end
    for prev, nxt in zip(chunks, chunks[1:]):
        assert nxt.start == prev.end
    seg_dur = seg.end - seg.start
    for c in chunks:
        assert len(c.text.split()) <= window
        assert c.duration / seg_dur == pytest.approx(len(c.text.split()) / n_words)


def test_chunk_indices_global_and_empty_segments_skipped():
    """Indices run 1..N across segments; empty segments produce nothing."""
    segments = [
        Segment(start=0.0, end=1.0, text="one two three"),
        Segment(start=1.0, end=1.5, text="   "),
        Segment(start=1.5, end=3.0, text="four five six seven"),
    ]

    chunks = chunk_segments(segments, max_words=2)

    assert [c.index for c in chunks] == [1, 2, 3, 4]
    assert [c.text for c in chunks] == ["one two", "three", "four five", "six seven"]
    assert all(c.start >= 1.5 for c in chunks[2:])


def test_chunk_rejects_bad_window():
    with pytest.raises(ValueError):
        chunk_segments([Segment(0.0, 1.0, "a b")], max_words=0)


def test_format_and_parse_timestamp():
    """Zero-padded HH:MM:SS,mmm with a comma separator."""
    assert format_timestamp(0) == "00:00:00,000"
    assert format_timestamp(2.5) == "00:00:02,500"
    assert format_timestamp(3661.042) == "01:01:01,042"
    assert format_timestamp(1.9999999999) == "00:00:02,000"
    assert parse_timestamp("01:01:01,042") == pytest.approx(3661.042)
    with pytest.raises(ValueError):
        parse_timestamp("1:1:1.042")


def test_write_and_parse_srt(tmp_path):
    """SRT write/parse roundtrip keeps index, timing and text."""
    chunks = [
        CaptionChunk(index=1, start=0.0, end=2.5, text="Ahoj světe."),
        CaptionChunk(index=2, start=2.5, end=5.123, text="Tohle je test."),
        CaptionChunk(index=3, start=5.123, end=7.5, text="Na shledanou!"),
    ]
    srt_path = tmp_path / "subs.srt"

    write_srt(chunks, srt_path)
    parsed = parse_srt(srt_path)

    assert parsed == chunks


def test_parse_srt_text_tolerates_missing_index_and_noise():
    """Blocks without a number continue the sequence; junk blocks are skipped."""
    raw = (
        "Here are the corrected subtitles:\n\n"
        "1\r\n00:00:00,000 --> 00:00:01,000\r\nfirst line\r\nsecond line\r\n\r\n"
        "00:00:01,000 --> 00:00:02,000\nno index\n"
    )

    parsed = parse_srt_text(raw)

    assert [(c.index, c.text) for c in parsed] == [(1, "first line second line"), (2, "no index")]

"""
Tests for narration transcription and draft captions.
"""

from types import SimpleNamespace

import pytest

from explainer.errors import TranscriptionFailure
from explainer.models import Segment
from explainer.stt import segment_narration, segments_from_response, transcribe_whisper_api


def test_segments_from_response_objects_and_dicts():
    """Both SDK objects and plain dicts are accepted."""
    resp_obj = SimpleNamespace(
        segments=[SimpleNamespace(start=0, end=1.5, text=" Hello there ")]
    )
    resp_dict = {"segments": [{"start": 1.5, "end": 3.0, "text": "general Kenobi"}]}

    assert segments_from_response(resp_obj) == [Segment(0.0, 1.5, "Hello there")]
    assert segments_from_response(resp_dict) == [Segment(1.5, 3.0, "general Kenobi")]
    assert segments_from_response(SimpleNamespace(text="no segments")) == []


def test_transcribe_whisper_api_requests_segments(tmp_path):
    """verbose_json with segment granularity and the target language."""
    audio = tmp_path / "voice.mp3"
    audio.write_bytes(b"ID3")
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        return {"segments": [{"start": 0.0, "end": 2.0, "text": "ahoj"}]}

    client = SimpleNamespace(audio=SimpleNamespace(transcriptions=SimpleNamespace(create=create)))

    segs = transcribe_whisper_api(client, str(audio), language="cs")

    assert segs == [Segment(0.0, 2.0, "ahoj")]
    assert captured["response_format"] == "verbose_json"
    assert captured["timestamp_granularities"] == ["segment"]
    assert captured["language"] == "cs"


def test_segment_narration_builds_draft():
    """Transcribed segments are re-chunked with global indices."""
    segments = [
        Segment(start=0.0, end=3.0, text="the quick brown fox jumps over"),
        Segment(start=3.5, end=4.5, text="the lazy dog"),
    ]

    chunks = segment_narration(lambda path: segments, "voice.mp3", max_words_per_chunk=4)

    assert [(c.index, c.text) for c in chunks] == [
        (1, "the quick brown fox"),
        (2, "jumps over"),
        (3, "the lazy dog"),
    ]
    assert chunks[2].start == 3.5


def test_segment_narration_zero_segments():
    with pytest.raises(TranscriptionFailure, match="No transcription segments"):
        segment_narration(lambda path: [], "voice.mp3", max_words_per_chunk=7)


def test_segment_narration_only_blank_segments():
    with pytest.raises(TranscriptionFailure):
        segment_narration(lambda path: [Segment(0.0, 1.0, "  ")], "voice.mp3", max_words_per_chunk=7)


def test_segment_narration_wraps_errors():
    def broken(path: str) -> list[Segment]:
        raise RuntimeError("api error")

    with pytest.raises(TranscriptionFailure, match="api error"):
        segment_narration(broken, "voice.mp3", max_words_per_chunk=7)

"""
Narration transcription and draft caption building.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from .errors import TranscriptionFailure
from .models import CaptionChunk, Segment
from .srt_utils import chunk_segments

logger = logging.getLogger("explainer")

# Optional OpenAI SDK
try:
    from openai import OpenAI
except ImportError:
    OpenAI = None

TranscribeFunc = Callable[[str], list[Segment]]


def segments_from_response(resp) -> list[Segment]:
    """Read segment-level timestamps from a verbose_json transcription response."""
    segs = getattr(resp, "segments", None)
    if segs is None and isinstance(resp, dict):
        segs = resp.get("segments")
    out: list[Segment] = []
    for seg in segs or []:
        if isinstance(seg, dict):
            start = float(seg.get("start", 0.0))
            end = float(seg.get("end", 0.0))
            text = str(seg.get("text", "")).strip()
        else:
            start = float(getattr(seg, "start", 0.0))
            end = float(getattr(seg, "end", 0.0))
            text = str(getattr(seg, "text", "")).strip()
        out.append(Segment(start=start, end=end, text=text))
    return out


def transcribe_whisper_api(
    client: OpenAI, audio_path: str, model: str = "whisper-1", language: str | None = None
) -> list[Segment]:
    """Transcribe audio using OpenAI Whisper API with segment timestamps."""
    if client is None:
        raise RuntimeError("OpenAI client is not initialized (missing OPENAI_API_KEY)")

    with open(audio_path, "rb") as f:
        logger.info(f"Transcribing with {model} (language: {language or 'auto'}) …")
        kwargs = {
            "model": model,
            "file": f,
            "response_format": "verbose_json",
            "timestamp_granularities": ["segment"],
        }
        if language:
            kwargs["language"] = language
        resp = client.audio.transcriptions.create(**kwargs)
    return segments_from_response(resp)


def transcribe_local_faster_whisper(
    audio_path: str, local_model: str = "small", beam_size: int = 1, language: str | None = None
) -> list[Segment]:
    """Transcribe audio using local faster-whisper."""
    try:
        from faster_whisper import WhisperModel
    except ImportError as e:
        raise RuntimeError(
            "faster-whisper is not installed. Install with: pip install 'explainer-video[local]'"
        ) from e

    logger.info(f"Transcribing locally with faster-whisper ({local_model}, language: {language or 'auto'}) …")
    model = WhisperModel(local_model, device="cpu", compute_type="int8")
    segments_iter, _info = model.transcribe(
        audio_path,
        language=language,
        vad_filter=True,
        beam_size=beam_size,
        word_timestamps=False,
    )
    return [Segment(start=float(s.start), end=float(s.end), text=str(s.text).strip()) for s in segments_iter]


def make_transcribe_openai(client: OpenAI, model: str, language: str | None) -> TranscribeFunc:
    """Create Whisper API transcription function."""

    def _transcribe(audio_path: str) -> list[Segment]:
        return transcribe_whisper_api(client, audio_path, model=model, language=language)

    return _transcribe


def make_transcribe_local(local_model: str, language: str | None) -> TranscribeFunc:
    """Create faster-whisper transcription function."""

    def _transcribe(audio_path: str) -> list[Segment]:
        return transcribe_local_faster_whisper(audio_path, local_model=local_model, language=language)

    return _transcribe


def segment_narration(
    transcribe: TranscribeFunc, audio_path: str | Path, max_words_per_chunk: int
) -> list[CaptionChunk]:
    """Transcribe the narration and re-chunk it into a draft caption track."""
    try:
        segments = transcribe(str(audio_path))
    except Exception as e:
        raise TranscriptionFailure(f"Transcription failed: {e}") from e

    if not segments:
        raise TranscriptionFailure("No transcription segments were returned.")
    logger.info(f"Transcribed {len(segments)} segment(s)")

    chunks = chunk_segments(segments, max_words_per_chunk)
    if not chunks:
        raise TranscriptionFailure("Transcription segments contained no words.")
    logger.info(f"Draft captions: {len(chunks)} chunk(s) of at most {max_words_per_chunk} words")
    return chunks

"""
Data models for the explainer video pipeline.
"""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_MAX_WORDS = 7
CENTERED_MAX_WORDS = 4


@dataclass
class Segment:
    """A single transcribed segment with timing and text."""

    start: float  # seconds
    end: float  # seconds
    text: str


@dataclass
class CaptionChunk:
    """One displayable caption with its 1-based position in the track."""

    index: int
    start: float  # seconds
    end: float  # seconds
    text: str

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class PipelineContext:
    """Run configuration, resolved once before the first stage starts."""

    language: str
    workdir: Path
    output: Path
    source_path: Path | None = None
    custom_text: str | None = None
    background_video: Path | None = None
    videos_dir: Path = Path("videos")
    background_audio: Path | None = None
    background_volume: float = 0.15
    speed: float = 1.0
    centered: bool = False
    max_words: int | None = None
    target_resolution: tuple[int, int] | None = None
    skip_reconcile: bool = False

    @property
    def max_words_per_chunk(self) -> int:
        if self.max_words is not None:
            return self.max_words
        return CENTERED_MAX_WORDS if self.centered else DEFAULT_MAX_WORDS

    @property
    def audio_path(self) -> Path:
        return self.workdir / "voice.mp3"

    @property
    def script_path(self) -> Path:
        return self.workdir / "voiceover.txt"

    @property
    def draft_srt_path(self) -> Path:
        return self.workdir / "subtitles_draft.srt"

    @property
    def srt_path(self) -> Path:
        return self.workdir / "subtitles.srt"

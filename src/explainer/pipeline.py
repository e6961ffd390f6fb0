"""
Sequential orchestration of the explainer video pipeline.
"""

import logging
import random
from dataclasses import dataclass
from pathlib import Path

from .assemble import assemble_video, resolve_background_video
from .chat import ChatFunc
from .io_ffmpeg import ensure_dir
from .languages import get_language
from .models import CaptionChunk, PipelineContext
from .reconcile import reconcile_captions
from .script import synthesize_script
from .srt_utils import write_srt
from .stt import TranscribeFunc, segment_narration
from .tts import SynthFunc, audio_duration_s, render_narration

logger = logging.getLogger("explainer")


@dataclass
class Capabilities:
    """External services the pipeline calls, one callable each."""

    generate: ChatFunc
    synthesize: SynthFunc
    transcribe: TranscribeFunc
    correct: ChatFunc


@dataclass
class PipelineResult:
    """Artifacts of a finished run."""

    script: str
    audio_path: Path
    srt_path: Path
    video_path: Path
    captions: list[CaptionChunk]


def _log_narration_duration(audio_path: Path, speed: float) -> None:
    try:
        dur = audio_duration_s(audio_path)
    except Exception as e:
        logger.debug(f"Could not measure narration duration: {e}")
        return
    logger.info(f"[dur] narration = {dur:.3f}s, expected output ≈ {dur / speed:.3f}s")


def load_script(ctx: PipelineContext, generate: ChatFunc) -> str:
    """Custom text as-is, otherwise a script generated from the study material."""
    if ctx.custom_text:
        logger.info("Using custom voice-over text (generation skipped)")
        return ctx.custom_text
    if ctx.source_path is None:
        raise ValueError("Either custom text or a study material path is required")
    source_text = Path(ctx.source_path).read_text(encoding="utf-8")
    return synthesize_script(generate, source_text, ctx.language)


def run_pipeline(
    ctx: PipelineContext, caps: Capabilities, rng: random.Random | None = None
) -> PipelineResult:
    """Run every stage in order. Any stage failure propagates and stops the run."""
    profile = get_language(ctx.language)
    logger.info(f"=== Explainer pipeline ({profile.name}) ===")
    ensure_dir(ctx.workdir)

    # Resolve the clip before any paid call so an empty pool fails fast.
    video = resolve_background_video(ctx.background_video, ctx.videos_dir, rng)

    logger.info("[1/5] Voice-over script")
    script = load_script(ctx, caps.generate)
    ctx.script_path.write_text(script, encoding="utf-8")
    logger.info(f"Saved script -> {ctx.script_path}")

    logger.info("[2/5] Narration")
    audio_path = render_narration(caps.synthesize, script, ctx.language, ctx.audio_path)
    logger.info(f"Saved narration -> {audio_path}")
    _log_narration_duration(audio_path, ctx.speed)

    logger.info("[3/5] Draft captions")
    draft = segment_narration(caps.transcribe, audio_path, ctx.max_words_per_chunk)
    write_srt(draft, ctx.draft_srt_path)
    logger.info(f"Saved draft SRT -> {ctx.draft_srt_path}")

    logger.info("[4/5] Caption correction")
    if ctx.skip_reconcile:
        logger.info("Correction skipped; using draft captions")
        captions = draft
        if ctx.centered:
            captions = [CaptionChunk(c.index, c.start, c.end, c.text.upper()) for c in draft]
    else:
        captions = reconcile_captions(
            caps.correct, draft, script, ctx.language, uppercase=ctx.centered
        )
    write_srt(captions, ctx.srt_path)
    logger.info(f"Saved SRT -> {ctx.srt_path}")

    logger.info("[5/5] Rendering")
    video_path = assemble_video(
        video,
        audio_path,
        ctx.srt_path,
        ctx.output,
        videos_dir=ctx.videos_dir,
        background_audio=ctx.background_audio,
        background_volume=ctx.background_volume,
        speed=ctx.speed,
        centered=ctx.centered,
        target_resolution=ctx.target_resolution,
    )
    return PipelineResult(
        script=script,
        audio_path=audio_path,
        srt_path=ctx.srt_path,
        video_path=video_path,
        captions=captions,
    )

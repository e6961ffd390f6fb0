"""
Command-line interface for the explainer video pipeline.
"""

import argparse
import logging
import os
import pathlib
import random
import sys

from dotenv import load_dotenv

from .chat import make_chat_openai
from .errors import PipelineError
from .languages import DEFAULT_LANGUAGE, LANGUAGES, get_language
from .models import PipelineContext
from .pipeline import Capabilities, run_pipeline
from .stt import make_transcribe_local, make_transcribe_openai
from .tts import (
    XTTS_MODEL,
    make_synth_elevenlabs,
    make_synth_openai,
    make_synth_xtts,
    pick_elevenlabs_default_voice,
)

logger = logging.getLogger("explainer")

# Optional OpenAI SDK
try:
    from openai import OpenAI
except ImportError:
    OpenAI = None


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def _positive_float(value: str) -> float:
    f = float(value)
    if f <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return f


def _resolution(value: str) -> tuple[int, int]:
    try:
        w, h = value.lower().split("x")
        return int(w), int(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {value}") from None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(description="Narrated explainer video from study material")

    # Content
    ap.add_argument(
        "--language",
        choices=sorted(LANGUAGES),
        default=DEFAULT_LANGUAGE,
        help="Target spoken language",
    )
    ap.add_argument(
        "--source", default="study-material.txt", help="Study material used to write the script"
    )
    ap.add_argument("--text", default=None, help="Literal voice-over text (skips script generation)")
    ap.add_argument("--text-file", default=None, help="Read literal voice-over text from a file")

    # IO
    ap.add_argument("--video", default=None, help="Background video (random from --videos-dir if omitted)")
    ap.add_argument("--videos-dir", default="videos")
    ap.add_argument("--bg-audio", default=None, help="Background audio mixed under the narration")
    ap.add_argument(
        "--bg-volume", type=float, default=0.15, help="Background audio level relative to narration"
    )
    ap.add_argument("--workdir", default="output")
    ap.add_argument("--output", default=None, help="Final video (default: <workdir>/final_video.mp4)")

    # Rendering
    ap.add_argument("--speed", type=_positive_float, default=1.0, help="Playback speed factor")
    ap.add_argument(
        "--centered",
        action="store_true",
        help="Large upper-case captions centered in the frame (shorter chunks)",
    )
    ap.add_argument(
        "--max-words", type=int, default=None, help="Max words per caption (default 7, centered 4)"
    )
    ap.add_argument("--target-resolution", type=_resolution, default=None, help="Rescale output, e.g. 1080x1920")
    ap.add_argument("--seed", type=int, default=None, help="Seed for background video selection")

    # Models
    ap.add_argument("--gpt-model", default="gpt-4o-mini")
    ap.add_argument("--skip-reconcile", action="store_true", help="Keep draft captions as-is")
    ap.add_argument("--tts-provider", choices=["openai", "elevenlabs", "xtts"], default="openai")
    ap.add_argument("--tts-model", default="gpt-4o-mini-tts", help="Used when --tts-provider=openai")
    ap.add_argument("--voice", default=None, help="OpenAI TTS voice (default depends on language)")
    ap.add_argument(
        "--voice-instructions",
        default=os.getenv("OPENAI_TTS_INSTRUCTIONS"),
        help="Optional TTS tone instructions for OpenAI (default depends on language)",
    )
    ap.add_argument(
        "--elevenlabs-voice-id",
        default=None,
        help="ElevenLabs voice_id (defaults to $ELEVENLABS_VOICE_ID or auto-pick)",
    )
    ap.add_argument("--elevenlabs-model-id", default="eleven_multilingual_v2")
    ap.add_argument(
        "--speaker-wav", default=None, help="Reference voice WAV to clone (--tts-provider xtts)"
    )
    ap.add_argument("--xtts-model", default=XTTS_MODEL, help="Coqui model for --tts-provider xtts")
    ap.add_argument("--stt", choices=["openai", "local"], default="openai", help="Speech-to-text backend")
    ap.add_argument("--whisper-model", default="whisper-1")
    ap.add_argument("--local-model", default="small", help="faster-whisper model for --stt local")

    # Logging
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = ap.parse_args(argv)
    if args.tts_provider == "xtts" and not args.speaker_wav:
        ap.error("--speaker-wav is required with --tts-provider xtts")
    if args.max_words is not None and args.max_words < 1:
        ap.error("--max-words must be >= 1")
    return args


def build_context(args: argparse.Namespace) -> PipelineContext:
    """Freeze parsed arguments into the run configuration."""
    custom_text = args.text
    if args.text_file:
        custom_text = pathlib.Path(args.text_file).read_text(encoding="utf-8")
    if custom_text is not None and not custom_text.strip():
        custom_text = None

    workdir = pathlib.Path(args.workdir)
    return PipelineContext(
        language=args.language,
        workdir=workdir,
        output=pathlib.Path(args.output) if args.output else workdir / "final_video.mp4",
        source_path=None if custom_text else pathlib.Path(args.source),
        custom_text=custom_text,
        background_video=pathlib.Path(args.video) if args.video else None,
        videos_dir=pathlib.Path(args.videos_dir),
        background_audio=pathlib.Path(args.bg_audio) if args.bg_audio else None,
        background_volume=args.bg_volume,
        speed=args.speed,
        centered=args.centered,
        max_words=args.max_words,
        target_resolution=args.target_resolution,
        skip_reconcile=args.skip_reconcile,
    )


def build_capabilities(args: argparse.Namespace) -> Capabilities:
    """Wire the OpenAI / ElevenLabs / XTTS / faster-whisper backends."""
    if not OpenAI:
        raise RuntimeError("openai package not installed. Install with: pip install openai")
    openai_key = os.getenv("OPENAI_API_KEY")
    if not openai_key:
        raise RuntimeError("OPENAI_API_KEY is not set. Put it in .env or environment.")
    client = OpenAI(api_key=openai_key)

    if args.tts_provider == "openai":
        synth = make_synth_openai(
            client, args.tts_model, args.voice, args.voice_instructions, args.language
        )
    elif args.tts_provider == "xtts":
        synth = make_synth_xtts(args.speaker_wav, args.xtts_model, args.language)
    else:
        eleven_key = os.getenv("ELEVENLABS_API_KEY")
        if not eleven_key:
            raise RuntimeError("ELEVENLABS_API_KEY is not set. Put it in .env or environment.")
        voice_id = args.elevenlabs_voice_id or os.getenv("ELEVENLABS_VOICE_ID")
        if not voice_id:
            voice_id = pick_elevenlabs_default_voice(eleven_key)
            if voice_id:
                logger.info(f"Using ElevenLabs voice_id (auto): {voice_id}")
        if not voice_id:
            raise RuntimeError(
                "ElevenLabs voice_id not provided. Set ELEVENLABS_VOICE_ID or pass --elevenlabs-voice-id."
            )
        synth = make_synth_elevenlabs(eleven_key, voice_id, args.elevenlabs_model_id)

    if args.stt == "openai":
        transcribe = make_transcribe_openai(client, args.whisper_model, args.language)
    else:
        transcribe = make_transcribe_local(args.local_model, args.language)

    return Capabilities(
        generate=make_chat_openai(client, args.gpt_model, max_tokens=1000),
        synthesize=synth,
        transcribe=transcribe,
        correct=make_chat_openai(client, args.gpt_model, temperature=0.0),
    )


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    # Look for .env in the project root (parent of src directory)
    project_root = pathlib.Path(__file__).parent.parent.parent
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()

    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        ctx = build_context(args)
        logger.info(f"Language: {get_language(ctx.language).name}, captions: {'centered' if ctx.centered else 'bottom'}")
        caps = build_capabilities(args)
        rng = random.Random(args.seed) if args.seed is not None else None
        result = run_pipeline(ctx, caps, rng=rng)
    except PipelineError as e:
        logger.error(f"Pipeline failed: {e}")
        if e.__cause__ is not None:
            logger.debug("Underlying error", exc_info=e.__cause__)
        return 1
    except (RuntimeError, OSError) as e:
        logger.error(f"Pipeline aborted: {e}")
        return 1

    logger.info(f"Done -> {result.video_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

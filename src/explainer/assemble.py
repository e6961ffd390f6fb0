"""
Final video assembly: background clip, narration, optional music and burned captions.
"""

import logging
import random
from pathlib import Path

from .errors import NoVideoAvailable, RenderFailure
from .io_ffmpeg import build_filter_graph, build_render_command, ensure_dir, probe_resolution, run

logger = logging.getLogger("explainer")

VIDEO_EXTENSIONS = {".mp4", ".mov", ".mkv", ".webm"}


def list_background_videos(videos_dir: str | Path) -> list[Path]:
    """Candidate background clips in ``videos_dir``, sorted by name."""
    folder = Path(videos_dir)
    if not folder.is_dir():
        return []
    return sorted(p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in VIDEO_EXTENSIONS)


def resolve_background_video(
    explicit: str | Path | None, videos_dir: str | Path, rng: random.Random | None = None
) -> Path:
    """Use the explicit clip if given, otherwise pick one at random from the pool."""
    if explicit:
        return Path(explicit)
    pool = list_background_videos(videos_dir)
    if not pool:
        raise NoVideoAvailable(f"No video files found in {videos_dir}")
    choice = (rng or random).choice(pool)
    logger.info(f"Picked background video {choice.name} from {len(pool)} candidate(s)")
    return choice


def assemble_video(
    background_video: str | Path | None,
    narration: str | Path,
    subs_path: str | Path,
    output_video: str | Path,
    *,
    videos_dir: str | Path = "videos",
    background_audio: str | Path | None = None,
    background_volume: float = 0.15,
    speed: float = 1.0,
    centered: bool = False,
    target_resolution: tuple[int, int] | None = None,
    rng: random.Random | None = None,
) -> Path:
    """Render the final video and return its path."""
    if speed <= 0:
        raise ValueError(f"speed must be positive, got {speed}")

    if not background_audio or str(background_audio) in ("", "."):
        background_audio = None
    video = resolve_background_video(background_video, videos_dir, rng)
    resolution = probe_resolution(video)
    logger.info(f"Background video {video} at {resolution[0]}x{resolution[1]}")

    graph = build_filter_graph(
        subs_path,
        resolution,
        centered=centered,
        speed=speed,
        with_background_audio=background_audio is not None,
        background_volume=background_volume,
        target_resolution=target_resolution,
    )
    cmd = build_render_command(video, narration, output_video, graph, background_audio=background_audio)

    out = Path(output_video)
    ensure_dir(out.parent)
    logger.info(
        "Rendering %s (speed %.2fx, background audio: %s) …",
        out,
        speed,
        "yes" if background_audio else "no",
    )
    try:
        run(cmd)
    except RuntimeError as e:
        raise RenderFailure(f"Rendering {out} failed: {e}") from e
    logger.info(f"Final video created at: {out}")
    return out

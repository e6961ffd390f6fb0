"""
Video and audio processing utilities using ffmpeg/ffprobe.
"""

import json
import logging
import subprocess
from pathlib import Path

logger = logging.getLogger("explainer")

DEFAULT_RESOLUTION = (1920, 1080)

CAPTION_FONT = "Comic Sans MS"
CAPTION_FONT_SIZE = 36
CAPTION_PRIMARY = "&H00FFFFFF"
CAPTION_OUTLINE_COLOUR = "&H00000000"
CAPTION_OUTLINE = 2
ALIGN_BOTTOM_CENTER = 2
ALIGN_MIDDLE_CENTER = 5


def run(cmd: list[str], *, check: bool = True, env: dict[str, str] | None = None) -> str:
    """Run a command and return its combined stdout/stderr."""
    logger.debug("Running: %s", " ".join(map(str, cmd)))
    try:
        proc = subprocess.run(
            cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, check=False, env=env
        )
    except FileNotFoundError as e:
        raise RuntimeError(f"{cmd[0]} not found. Please install it and make sure it is on PATH.") from e
    if proc.returncode != 0 and check:
        logger.error("Command failed with code %d: %s", proc.returncode, proc.stdout)
        tail = "\n".join(proc.stdout.strip().splitlines()[-5:])
        raise RuntimeError(f"Command failed with code {proc.returncode}: {tail}")
    return proc.stdout


def ensure_dir(path: str | Path) -> None:
    """Ensure directory exists."""
    if path:
        Path(path).mkdir(parents=True, exist_ok=True)


def probe_resolution(
    input_video: str | Path, default: tuple[int, int] = DEFAULT_RESOLUTION
) -> tuple[int, int]:
    """Width and height of the first video stream, or ``default`` if unknown."""
    cmd = [
        "ffprobe",
        "-v",
        "error",
        "-select_streams",
        "v:0",
        "-show_entries",
        "stream=width,height",
        "-of",
        "json",
        str(input_video),
    ]
    try:
        data = json.loads(run(cmd))
    except (RuntimeError, json.JSONDecodeError) as e:
        logger.warning("ffprobe failed for %s (%s); using %dx%d", input_video, e, *default)
        return default
    streams = data.get("streams") or []
    if not streams:
        logger.warning("No video stream found in %s; using %dx%d", input_video, *default)
        return default
    width = int(streams[0].get("width") or default[0])
    height = int(streams[0].get("height") or default[1])
    return width, height


def atempo_chain(ratio: float) -> str:
    """
    Build an atempo filter chain for the given tempo ratio.
    atempo > 1.0 => speed up (shorter), atempo < 1.0 => slow down (longer).
    Each step is kept within 0.5..2.0.
    """
    if ratio <= 0:
        raise ValueError(f"Tempo ratio must be positive, got {ratio}")
    steps: list[float] = []
    r = ratio
    MIN_ATEMPO = 0.5
    MAX_ATEMPO = 2.0
    while r < MIN_ATEMPO or r > MAX_ATEMPO:
        step = MIN_ATEMPO if r < 1.0 else MAX_ATEMPO
        steps.append(step)
        r /= step
    steps.append(r)
    return ",".join(f"atempo={s:.6f}" for s in steps)


def _backslash_escape(value: str, special: str) -> str:
    return "".join(f"\\{c}" if c in special else c for c in value)


def escape_filter_path(path: str | Path) -> str:
    """
    Escape a file path used as a filter option inside -filter_complex.
    Escaped twice: once for the filter's option parser, then for the graph parser.
    """
    value = str(path).replace("\\", "/")
    value = _backslash_escape(value, "\\':")
    return _backslash_escape(value, "\\'[],;")


def subtitle_style(centered: bool = False) -> str:
    """ASS force_style for burned-in captions."""
    alignment = ALIGN_MIDDLE_CENTER if centered else ALIGN_BOTTOM_CENTER
    return (
        f"FontName={CAPTION_FONT},"
        f"FontSize={CAPTION_FONT_SIZE},"
        f"PrimaryColour={CAPTION_PRIMARY},"
        f"OutlineColour={CAPTION_OUTLINE_COLOUR},"
        f"Outline={CAPTION_OUTLINE},"
        f"Alignment={alignment}"
    )


def build_subtitle_filter(
    subs_path: str | Path, resolution: tuple[int, int], centered: bool = False
) -> str:
    """subtitles filter styled relative to the source resolution."""
    width, height = resolution
    return (
        f"subtitles=filename={escape_filter_path(subs_path)}"
        f":original_size={width}x{height}"
        f":force_style='{subtitle_style(centered)}'"
    )


def build_filter_graph(
    subs_path: str | Path,
    resolution: tuple[int, int],
    *,
    centered: bool = False,
    speed: float = 1.0,
    with_background_audio: bool = False,
    background_volume: float = 0.15,
    target_resolution: tuple[int, int] | None = None,
) -> str:
    """
    Filter graph over inputs 0 = background video, 1 = narration, 2 = background audio.
    Produces [v] and [a].
    """
    video = [build_subtitle_filter(subs_path, resolution, centered)]
    if speed != 1.0:
        # captions are burned before the PTS scale so they speed up with the video
        video.append(f"setpts=PTS/{speed:.6f}")
    if target_resolution:
        video.append(f"scale={target_resolution[0]}:{target_resolution[1]}")
    parts = [f"[0:v]{','.join(video)}[v]"]

    tempo = f",{atempo_chain(speed)}" if speed != 1.0 else ""
    if with_background_audio:
        parts.append("[1:a]volume=1.0[narr]")
        parts.append(f"[2:a]volume={background_volume:.4f}[bg]")
        parts.append(f"[narr][bg]amix=inputs=2:duration=shortest:dropout_transition=0:normalize=0{tempo}[a]")
    else:
        parts.append(f"[1:a]anull{tempo}[a]")
    return ";".join(parts)


def build_render_command(
    input_video: str | Path,
    narration: str | Path,
    output_video: str | Path,
    filter_graph: str,
    background_audio: str | Path | None = None,
    crf: int = 20,
    preset: str = "medium",
) -> list[str]:
    """ffmpeg command rendering the final video from a filter graph."""
    cmd = ["ffmpeg", "-y", "-i", str(input_video), "-i", str(narration)]
    if background_audio is not None:
        cmd += ["-i", str(background_audio)]
    cmd += [
        "-filter_complex",
        filter_graph,
        "-map",
        "[v]",
        "-map",
        "[a]",
        "-c:v",
        "libx264",
        "-crf",
        str(crf),
        "-preset",
        preset,
        "-c:a",
        "aac",
        "-shortest",
        str(output_video),
    ]
    return cmd

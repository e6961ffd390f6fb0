"""
Caption chunking plus SRT writing and parsing.
"""

import logging
import re
from pathlib import Path

from .models import CaptionChunk, Segment

logger = logging.getLogger("explainer")

_TIME_RE = re.compile(r"(\d{2,}):(\d{2}):(\d{2}),(\d{3})")
_CUE_RE = re.compile(r"(\d{2,}:\d{2}:\d{2},\d{3})\s+--\>\s+(\d{2,}:\d{2}:\d{2},\d{3})")


def chunk_segments(segments: list[Segment], max_words: int) -> list[CaptionChunk]:
    """Re-chunk transcript segments into captions of at most ``max_words`` words.

    Each chunk gets a share of its segment's duration proportional to its word
    count. Chunks never span segments, and indices run 1..N across the track.
    """
    if max_words < 1:
        raise ValueError(f"max_words must be >= 1, got {max_words}")

    chunks: list[CaptionChunk] = []
    index = 1
    for seg in segments:
        words = (seg.text or "").split()
        total = len(words)
        if total == 0:
            continue
        seg_dur = float(seg.end) - float(seg.start)
        cursor = float(seg.start)
        for i in range(0, total, max_words):
            window = words[i : i + max_words]
            start = cursor
            if i + max_words >= total:
                # last window closes the segment exactly
                end = float(seg.end)
            else:
                end = start + seg_dur * len(window) / total
            chunks.append(CaptionChunk(index=index, start=start, end=end, text=" ".join(window)))
            index += 1
            cursor = end
    logger.debug("Chunked %d segment(s) into %d caption(s)", len(segments), len(chunks))
    return chunks


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS,mmm``."""
    total_ms = max(0, int(round(seconds * 1000)))
    h, rest = divmod(total_ms, 3_600_000)
    m, rest = divmod(rest, 60_000)
    s, ms = divmod(rest, 1000)
    return f"{h:02}:{m:02}:{s:02},{ms:03}"


def parse_timestamp(ts: str) -> float:
    """Parse ``HH:MM:SS,mmm`` into seconds."""
    m = _TIME_RE.fullmatch(ts.strip())
    if not m:
        raise ValueError(f"Invalid SRT timestamp: {ts!r}")
    h, m_, s, ms = map(int, m.groups())
    return (h * 3_600_000 + m_ * 60_000 + s * 1000 + ms) / 1000.0


def render_srt(chunks: list[CaptionChunk]) -> str:
    """Serialize captions into SRT text."""
    return "".join(
        f"{c.index}\n{format_timestamp(c.start)} --> {format_timestamp(c.end)}\n{c.text}\n\n"
        for c in chunks
    )


def write_srt(chunks: list[CaptionChunk], path: str | Path) -> None:
    """Write captions to an SRT file."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_srt(chunks))


def parse_srt_text(raw: str) -> list[CaptionChunk]:
    """Parse SRT text into captions.

    Indices present in the text are kept as they are; blocks without one are
    numbered after the previous block. Blocks without a time line are skipped.
    """
    blocks = re.split(r"\n\s*\n", raw.replace("\r\n", "\n").strip())
    out: list[CaptionChunk] = []
    for b in blocks:
        lines = [ln for ln in b.splitlines() if ln.strip()]
        if not lines:
            continue
        index = out[-1].index + 1 if out else 1
        if re.match(r"^\d+$", lines[0].strip()):
            index = int(lines[0].strip())
            lines = lines[1:]
        if not lines:
            continue
        m = _CUE_RE.search(lines[0])
        if not m:
            logger.debug("Skipping SRT block without a time line: %r", lines[0])
            continue
        text = " ".join(ln.strip() for ln in lines[1:])
        out.append(
            CaptionChunk(
                index=index,
                start=parse_timestamp(m.group(1)),
                end=parse_timestamp(m.group(2)),
                text=text,
            )
        )
    return out


def parse_srt(path: str | Path) -> list[CaptionChunk]:
    """Parse an SRT file into captions."""
    with open(path, encoding="utf-8") as f:
        return parse_srt_text(f.read())

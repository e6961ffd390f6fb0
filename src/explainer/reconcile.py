"""
Caption correction against the known voice-over script.
"""

import logging
import re

from .chat import ChatFunc
from .errors import ReconciliationFailure
from .languages import get_language
from .models import CaptionChunk
from .srt_utils import parse_srt_text, render_srt

logger = logging.getLogger("explainer")

_FENCE_RE = re.compile(r"^\s*(```|~~~|''')[\w-]*\s*$")


def build_correction_prompt(draft_srt: str, script: str, language: str) -> str:
    """Embed the draft captions and the original script into the correction prompt."""
    return get_language(language).correction_prompt.format(
        script=script.strip(), captions=draft_srt.strip()
    )


def strip_fences(text: str) -> str:
    """Remove code fences and similar delimiter lines wrapped around model output."""
    lines = [ln for ln in text.splitlines() if not _FENCE_RE.match(ln)]
    return "\n".join(lines).strip()


def _report_drift(draft: list[CaptionChunk], corrected: list[CaptionChunk]) -> None:
    if len(draft) != len(corrected):
        logger.warning(
            f"Caption count changed during correction: {len(draft)} -> {len(corrected)}. Keeping corrected captions."
        )
        return
    drifted = [
        c.index
        for d, c in zip(draft, corrected, strict=True)
        if (d.index, round(d.start, 3), round(d.end, 3)) != (c.index, round(c.start, 3), round(c.end, 3))
    ]
    if drifted:
        logger.warning(f"Correction changed index or timing of {len(drifted)} caption(s): {drifted[:10]}")


def reconcile_captions(
    generate: ChatFunc,
    draft: list[CaptionChunk],
    script: str,
    language: str,
    uppercase: bool = False,
) -> list[CaptionChunk]:
    """Fix transcription errors in the draft captions using the original script.

    Indices and time codes are expected to come back unchanged; deviations are
    logged, not repaired.
    """
    profile = get_language(language)
    draft_srt = render_srt(draft)
    prompt = build_correction_prompt(draft_srt, script, language)

    logger.info(f"Correcting {len(draft)} caption(s) against the script …")
    try:
        content = generate(profile.correction_system_prompt, prompt)
    except Exception as e:
        raise ReconciliationFailure(f"Caption correction failed: {e}") from e

    corrected_srt = strip_fences(content or "")
    if not corrected_srt:
        raise ReconciliationFailure("Caption correction returned empty content")
    if uppercase:
        corrected_srt = corrected_srt.upper()

    corrected = parse_srt_text(corrected_srt)
    if not corrected:
        raise ReconciliationFailure("Caption correction returned no SRT blocks")
    _report_drift(draft, corrected)
    return corrected

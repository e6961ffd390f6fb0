"""
Voice-over script generation from study material.
"""

import logging
import re

from .chat import ChatFunc
from .errors import GenerationFailure
from .languages import get_language

logger = logging.getLogger("explainer")

_BASE_ALLOWED = r"\w\s.,!?;:()"


def filter_script_text(text: str, language: str) -> str:
    """Drop every character outside word chars, whitespace, basic punctuation and
    the language's accented letters. Idempotent."""
    accents = re.escape(get_language(language).accents)
    return re.sub(f"[^{_BASE_ALLOWED}{accents}]", "", text)


def build_script_prompt(source_text: str, language: str) -> str:
    """Build the language-specific script prompt around the study material."""
    return get_language(language).script_prompt.format(source=source_text.strip())


def synthesize_script(generate: ChatFunc, source_text: str, language: str) -> str:
    """Turn study material into a filtered voice-over script."""
    profile = get_language(language)
    prompt = build_script_prompt(source_text, language)
    logger.info("Writing %s voice-over script from %d chars of study material …", profile.name, len(source_text))
    try:
        text = generate(profile.system_prompt, prompt)
    except Exception as e:
        raise GenerationFailure(f"Script generation failed: {e}") from e

    if not text or not text.strip():
        raise GenerationFailure("Script generation returned empty content")
    logger.debug("Generated script:\n%s", text)

    cleaned = filter_script_text(text, language).strip()
    if not cleaned:
        raise GenerationFailure("Script was empty after character filtering")
    logger.info("Voice-over script ready (%d words)", len(cleaned.split()))
    return cleaned

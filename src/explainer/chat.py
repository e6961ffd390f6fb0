"""
Chat completion capability used for script writing and caption correction.
"""

import logging
from collections.abc import Callable

logger = logging.getLogger("explainer")

# Optional OpenAI SDK
try:
    from openai import OpenAI
except ImportError:
    OpenAI = None

ChatFunc = Callable[[str, str], str]


def chat_complete_openai(
    client: OpenAI,
    system: str,
    user: str,
    model: str,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> str:
    """Run one chat completion and return the stripped message content."""
    if client is None:
        raise RuntimeError("OpenAI client is not initialized (missing OPENAI_API_KEY)")

    kwargs = {
        "model": model,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
    }
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    if temperature is not None:
        kwargs["temperature"] = temperature
    chat = client.chat.completions.create(**kwargs)
    content = chat.choices[0].message.content or ""
    return content.strip()


def make_chat_openai(
    client: OpenAI,
    model: str,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> ChatFunc:
    """Create OpenAI chat function taking (system, user) and returning text."""

    def _chat(system: str, user: str) -> str:
        logger.debug("Chat completion with %s (%d prompt chars)", model, len(user))
        return chat_complete_openai(
            client, system, user, model, max_tokens=max_tokens, temperature=temperature
        )

    return _chat

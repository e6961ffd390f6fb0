"""
Narration synthesis with OpenAI, ElevenLabs and local Coqui XTTS.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

import httpx
from pydub import AudioSegment

from .errors import SynthesisFailure
from .io_ffmpeg import run
from .languages import get_language

logger = logging.getLogger("explainer")

# Optional OpenAI SDK
try:
    from openai import OpenAI
except ImportError:
    OpenAI = None

SynthFunc = Callable[[str, str], None]


def tts_speak_openai(
    client: OpenAI,
    text: str,
    model: str,
    voice: str,
    out_path: str,
    instructions: str | None = None,
) -> None:
    """Synthesize speech to an mp3 file using OpenAI TTS."""
    if client is None:
        raise RuntimeError("OpenAI client is not initialized (missing OPENAI_API_KEY)")

    with client.audio.speech.with_streaming_response.create(
        model=model,
        voice=voice,
        input=text,
        response_format="mp3",
        instructions=instructions,
    ) as resp:
        resp.stream_to_file(out_path)


def elevenlabs_tts_speak(
    api_key: str, voice_id: str, text: str, out_path: str, model_id: str = "eleven_multilingual_v2"
) -> None:
    """Synthesize speech to an mp3 file using ElevenLabs TTS."""
    if not api_key:
        raise RuntimeError("ELEVENLABS_API_KEY is not set.")
    if not voice_id:
        raise RuntimeError(
            "ElevenLabs voice_id is required (use --elevenlabs-voice-id or ELEVENLABS_VOICE_ID)."
        )

    url = f"https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"
    headers = {
        "xi-api-key": api_key,
        "accept": "audio/mpeg",
        "Content-Type": "application/json",
        "User-Agent": "explainer-video-pipeline/1.0",
    }
    payload = {
        "text": text,
        "model_id": model_id,
        "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
    }

    with httpx.Client(follow_redirects=True, timeout=None) as client:
        r = client.post(url, json=payload, headers=headers)
        ctype = r.headers.get("content-type", "")
        if r.status_code != 200 or not ctype.startswith(("audio/", "application/octet-stream")):
            raise RuntimeError(f"ElevenLabs TTS failed: {r.status_code} {r.text[:300]}")
        with open(out_path, "wb") as f:
            f.write(r.content)


def make_synth_openai(
    client: OpenAI, tts_model: str, voice: str | None, instructions: str | None, language: str
) -> SynthFunc:
    """Create OpenAI TTS synthesis function with the language's voice and tone."""
    profile = get_language(language)
    voice = voice or profile.voice
    instructions = instructions or profile.tone

    def _synth(text: str, out_path: str) -> None:
        tts_speak_openai(client, text, tts_model, voice, out_path, instructions=instructions)

    return _synth


def make_synth_elevenlabs(api_key: str, voice_id: str, model_id: str) -> SynthFunc:
    """Create ElevenLabs TTS synthesis function."""

    def _synth(text: str, out_path: str) -> None:
        elevenlabs_tts_speak(api_key, voice_id, text, out_path, model_id=model_id)

    return _synth


XTTS_MODEL = "tts_models/multilingual/multi-dataset/xtts_v2"


def xtts_speak(
    text: str,
    out_path: str,
    speaker_wav: str,
    language: str,
    model_name: str = XTTS_MODEL,
) -> None:
    """Clone the reference speaker with the local Coqui ``tts`` command and write mp3."""
    if not speaker_wav or not Path(speaker_wav).exists():
        raise RuntimeError(f"Speaker reference WAV not found: {speaker_wav}")

    profile = get_language(language)
    wav_path = str(Path(out_path).with_suffix(".wav"))
    env = {**os.environ, "LC_ALL": profile.locale, "LANG": profile.locale}
    run(
        [
            "tts",
            "--text",
            text,
            "--model_name",
            model_name,
            "--language_idx",
            profile.code,
            "--speaker_wav",
            str(speaker_wav),
            "--out_path",
            wav_path,
        ],
        env=env,
    )
    AudioSegment.from_wav(wav_path).export(out_path, format="mp3")
    try:
        Path(wav_path).unlink()
    except OSError:
        pass


def make_synth_xtts(speaker_wav: str, model_name: str, language: str) -> SynthFunc:
    """Create local XTTS voice-cloning synthesis function."""

    def _synth(text: str, out_path: str) -> None:
        xtts_speak(text, out_path, speaker_wav, language, model_name=model_name)

    return _synth


def pick_elevenlabs_default_voice(api_key: str) -> str | None:
    """Auto-pick first available ElevenLabs voice."""
    try:
        r = httpx.get(
            "https://api.elevenlabs.io/v1/voices",
            headers={
                "xi-api-key": api_key,
                "accept": "application/json",
                "User-Agent": "explainer-video-pipeline/1.0",
            },
            timeout=30.0,
        )
        r.raise_for_status()
        voices = r.json().get("voices", []) or []
        if voices and isinstance(voices, list):
            vid = voices[0].get("voice_id")
            return str(vid) if vid else None
    except httpx.HTTPError as e:
        logger.warning("Failed to auto-pick ElevenLabs voice: %s", e)
    return None


def render_narration(synth: SynthFunc, script: str, language: str, out_path: str | Path) -> Path:
    """Synthesize the whole script into one audio file and return its path."""
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    logger.info(
        "Synthesizing %s narration (%d chars) -> %s", get_language(language).name, len(script), out
    )
    try:
        synth(script, str(out))
    except Exception as e:
        raise SynthesisFailure(f"Speech synthesis failed: {e}") from e

    if not out.exists() or out.stat().st_size == 0:
        raise SynthesisFailure(f"Speech synthesis produced no audio at {out}")
    return out


def audio_duration_s(path: str | Path) -> float:
    """Duration of an audio file in seconds."""
    return len(AudioSegment.from_file(str(path))) / 1000.0

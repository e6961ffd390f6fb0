"""
Explainer Video Pipeline - Narrated short videos from study material.

A sequential pipeline for:
- Writing a voice-over script from study text with GPT
- Synthesizing the narration with OpenAI or ElevenLabs TTS
- Transcribing the narration (OpenAI Whisper or local faster-whisper)
- Re-chunking transcript segments into short word-group captions
- Correcting the captions against the original script
- Burning captions onto a background video with ffmpeg
"""

__version__ = "0.1.0"

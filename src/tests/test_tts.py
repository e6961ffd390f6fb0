"""
Tests for narration rendering.
"""

import pytest

from explainer.errors import SynthesisFailure
from explainer import tts
from explainer.tts import XTTS_MODEL, make_synth_openai, make_synth_xtts, render_narration


def test_render_narration_writes_file(tmp_path):
    """The synth callable writes the audio; its path is returned."""
    out = tmp_path / "out" / "voice.mp3"
    received = {}

    def fake_synth(text: str, out_path: str) -> None:
        received["text"] = text
        with open(out_path, "wb") as f:
            f.write(b"ID3fake-mp3")

    path = render_narration(fake_synth, "Ahoj světe.", "cs", out)

    assert path == out
    assert out.read_bytes() == b"ID3fake-mp3"
    assert received["text"] == "Ahoj světe."


def test_render_narration_error(tmp_path):
    def broken(text: str, out_path: str) -> None:
        raise RuntimeError("quota exceeded")

    with pytest.raises(SynthesisFailure, match="quota exceeded"):
        render_narration(broken, "text", "en", tmp_path / "voice.mp3")


def test_render_narration_no_audio(tmp_path):
    """A provider that returns without writing anything is a failure."""
    with pytest.raises(SynthesisFailure):
        render_narration(lambda text, out_path: None, "text", "en", tmp_path / "voice.mp3")

    empty = tmp_path / "empty.mp3"
    with pytest.raises(SynthesisFailure):
        render_narration(lambda text, out_path: open(out_path, "wb").close(), "text", "en", empty)


def test_openai_synth_uses_language_voice_and_tone(tmp_path):
    """Voice and tone default to the language profile."""
    captured = {}

    class FakeStream:
        def __init__(self, **kwargs):
            captured.update(kwargs)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def stream_to_file(self, path):
            captured["path"] = path

    class FakeSpeech:
        class with_streaming_response:
            create = FakeStream

    class FakeClient:
        class audio:
            speech = FakeSpeech

    synth = make_synth_openai(FakeClient(), "gpt-4o-mini-tts", None, None, "de")
    synth("Hallo Welt", str(tmp_path / "voice.mp3"))

    assert captured["voice"] == "onyx"
    assert captured["input"] == "Hallo Welt"
    assert captured["response_format"] == "mp3"
    assert "Deutsch" in captured["instructions"]
    assert captured["path"].endswith("voice.mp3")


def test_xtts_runs_local_command(tmp_path, monkeypatch):
    """Coqui tts is called with the model, language, speaker and a UTF-8 locale."""
    speaker = tmp_path / "speaker.wav"
    speaker.write_bytes(b"RIFF")
    out = tmp_path / "voice.mp3"
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append((cmd, kwargs))
        with open(cmd[cmd.index("--out_path") + 1], "wb") as f:
            f.write(b"RIFFwav")
        return ""

    class FakeAudio:
        @classmethod
        def from_wav(cls, path):
            assert path.endswith("voice.wav")
            return cls()

        def export(self, path, format):
            assert format == "mp3"
            with open(path, "wb") as f:
                f.write(b"ID3mp3")

    monkeypatch.setattr(tts, "run", fake_run)
    monkeypatch.setattr(tts, "AudioSegment", FakeAudio)

    synth = make_synth_xtts(str(speaker), XTTS_MODEL, "cs")
    path = render_narration(synth, "Ahoj světe.", "cs", out)

    assert path.read_bytes() == b"ID3mp3"
    assert not (tmp_path / "voice.wav").exists()
    cmd, kwargs = calls[0]
    assert cmd[0] == "tts"
    assert cmd[cmd.index("--text") + 1] == "Ahoj světe."
    assert cmd[cmd.index("--model_name") + 1] == XTTS_MODEL
    assert cmd[cmd.index("--language_idx") + 1] == "cs"
    assert cmd[cmd.index("--speaker_wav") + 1] == str(speaker)
    assert kwargs["env"]["LC_ALL"] == "cs_CZ.UTF-8"
    assert kwargs["env"]["LANG"] == "cs_CZ.UTF-8"


def test_xtts_failure(tmp_path, monkeypatch):
    """A non-zero exit of the tts command is a synthesis failure."""
    speaker = tmp_path / "speaker.wav"
    speaker.write_bytes(b"RIFF")

    def failing(cmd, **kwargs):
        raise RuntimeError("Command failed with code 1: CUDA out of memory")

    monkeypatch.setattr(tts, "run", failing)

    with pytest.raises(SynthesisFailure, match="CUDA out of memory"):
        render_narration(make_synth_xtts(str(speaker), XTTS_MODEL, "en"), "hi", "en", tmp_path / "voice.mp3")
    with pytest.raises(SynthesisFailure, match="Speaker reference"):
        render_narration(
            make_synth_xtts(str(tmp_path / "missing.wav"), XTTS_MODEL, "en"), "hi", "en", tmp_path / "voice.mp3"
        )

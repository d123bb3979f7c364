"""Tests for chime synthesis and the sound manager."""

from __future__ import annotations

import io
import wave

import pytest

from pomogate.audio.sounds import (
    SAMPLE_RATE,
    SOUND_NAMES,
    SoundManager,
    _GENERATORS,
    _generate_bell,
    _generate_chime,
    _generate_double_tap,
)


# ═══════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════


class TestSoundGeneration:

    def test_every_name_has_a_generator(self):
        assert set(_GENERATORS) == set(SOUND_NAMES)

    @pytest.mark.parametrize("gen_fn", [
        _generate_bell,
        _generate_chime,
        _generate_double_tap,
    ])
    def test_generates_mono_pcm_wav(self, gen_fn):
        data = gen_fn()
        assert data[:4] == b"RIFF"
        with wave.open(io.BytesIO(data), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == SAMPLE_RATE
            assert wf.getnframes() > 0

    def test_bell_lasts_one_second(self):
        with wave.open(io.BytesIO(_generate_bell()), "rb") as wf:
            assert wf.getnframes() == SAMPLE_RATE

    def test_heads_up_is_short(self):
        with wave.open(io.BytesIO(_generate_double_tap()), "rb") as wf:
            assert wf.getnframes() < SAMPLE_RATE // 2


# ═══════════════════════════════════════════════════════════════════════
#  MANAGER
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestSoundManager:

    def test_caches_wav_files(self, tmp_path):
        SoundManager(parent=None, sounds_dir=tmp_path)
        for name in SOUND_NAMES:
            assert (tmp_path / f"{name}.wav").stat().st_size > 100

    def test_existing_files_are_reused(self, tmp_path):
        cached = tmp_path / "break_start.wav"
        cached.write_bytes(_generate_double_tap())
        SoundManager(parent=None, sounds_dir=tmp_path)
        assert cached.read_bytes() == _generate_double_tap()

    def test_all_sounds_loaded(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        assert set(mgr._effects) == set(SOUND_NAMES)

    @pytest.mark.parametrize("level, expected", [(30, 30), (200, 100), (-10, 0)])
    def test_volume_is_clamped(self, tmp_path, level, expected):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.set_volume(level)
        assert mgr.volume == expected

    def test_disable(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.set_enabled(False)
        assert mgr.enabled is False
        mgr.play("break_start")

    def test_unknown_name_is_ignored(self, tmp_path):
        SoundManager(parent=None, sounds_dir=tmp_path).play("fanfare")

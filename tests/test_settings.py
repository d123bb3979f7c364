"""Tests for settings parsing, validation and persistence."""

import json

import pytest

from pomogate.errors import SettingsError
from pomogate.settings import (
    Settings, default_settings_json, format_duration, load_settings,
    parse_duration, save_settings, settings_from_dict, write_default_settings,
)


class TestDefaults:
    def test_pomodoro_durations(self):
        s = Settings()
        assert s.work_duration == 20 * 60
        assert s.break_duration == 5 * 60
        assert s.long_break_duration == 10 * 60
        assert s.long_break_every == 4

    def test_accounting_durations(self):
        s = Settings()
        assert s.notification_duration == 60
        assert s.forgive_duration == 8
        assert s.overtime_duration == 120

    def test_goal_required(self):
        assert Settings().require_work_goal is True

    def test_font_is_per_instance(self):
        a, b = Settings(), Settings(font_family="Inter")
        assert a.font_family == "sans-serif"
        assert b.font_family == "Inter"


class TestDurations:
    @pytest.mark.parametrize("raw, seconds", [
        (90, 90),
        ("20m", 1200),
        ("8s", 8),
        ("1m30s", 90),
        (" 2m 5s ", 125),
        ("0s", 0),
    ])
    def test_parse(self, raw, seconds):
        assert parse_duration(raw) == seconds

    @pytest.mark.parametrize("raw", ["", "m", "20", "1h", "-5s", 1.5, True, None])
    def test_parse_rejects(self, raw):
        with pytest.raises(SettingsError):
            parse_duration(raw)

    @pytest.mark.parametrize("seconds, text", [
        (1200, "20m"), (8, "8s"), (90, "1m30s"), (0, "0s"),
    ])
    def test_format(self, seconds, text):
        assert format_duration(seconds) == text


class TestValidation:
    def test_partial_config_keeps_defaults(self):
        s = settings_from_dict({"work_duration": "25m", "accent": "#ff0000"})
        assert s.work_duration == 1500
        assert s.accent == "#ff0000"
        assert s.break_duration == 300

    @pytest.mark.parametrize("data", [
        {"no_such_key": 1},
        {"work_duration": "0s"},
        {"forgive_duration": -1},
        {"long_break_every": 0},
        {"long_break_every": True},
        {"sound_volume": 101},
        {"require_work_goal": "yes"},
        {"accent": "purple"},
        {"font_family": "   "},
    ])
    def test_invalid(self, data):
        with pytest.raises(SettingsError):
            settings_from_dict(data)

    def test_not_an_object(self):
        with pytest.raises(SettingsError):
            settings_from_dict([1, 2, 3])


class TestPersistence:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "nope.json") == Settings()

    def test_bad_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SettingsError):
            load_settings(path)

    def test_error_names_the_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"colour": "#fff"}), encoding="utf-8")
        with pytest.raises(SettingsError, match="config.json"):
            load_settings(path)

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "sub" / "config.json"
        s = Settings(work_duration=25 * 60, sound_volume=30, font_family="Inter")
        save_settings(s, path)
        assert load_settings(path) == s

    def test_durations_saved_readably(self, tmp_path):
        path = tmp_path / "config.json"
        save_settings(Settings(), path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["work_duration"] == "20m"
        assert data["forgive_duration"] == "8s"

    def test_default_json_loads_back(self):
        assert settings_from_dict(json.loads(default_settings_json())) == Settings()

    def test_write_default(self, tmp_path):
        path = write_default_settings(tmp_path / "pomogate" / "config.json")
        assert path.read_text(encoding="utf-8") == default_settings_json()

import json

import pytest

from core.config import (
    CELLS_TO_REMOVE, TIMER_DURATIONS, Difficulty, GameSettings, to_difficulty,
)


def test_default_tables():
    assert CELLS_TO_REMOVE == {"easy": 30, "medium": 40, "hard": 50}
    assert TIMER_DURATIONS == {"easy": 900, "medium": 600, "hard": 300}


def test_difficulty_accepts_strings():
    assert to_difficulty("medium") is Difficulty.MEDIUM
    assert to_difficulty(Difficulty.HARD) is Difficulty.HARD
    assert Difficulty.EASY.label == "Easy"
    with pytest.raises(ValueError):
        to_difficulty("expert")


def test_settings_defaults():
    settings = GameSettings()
    assert settings.removal_count("easy") == 30
    assert settings.timer_duration(Difficulty.HARD) == 300


def test_from_file_writes_defaults_when_missing(tmp_path):
    path = tmp_path / "cfg" / "settings.json"
    settings = GameSettings.from_file(str(path))
    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == GameSettings.default_settings()
    assert settings.to_dict() == GameSettings.default_settings()


def test_from_file_partial_override(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"cells_to_remove": {"hard": 55}, "timer_durations": {"Easy": 1200}}),
                    encoding="utf-8")
    settings = GameSettings.from_file(str(path))
    assert settings.removal_count("hard") == 55
    assert settings.removal_count("easy") == 30
    assert settings.timer_duration("easy") == 1200
    assert settings.timer_duration("medium") == 600


@pytest.mark.parametrize("kwargs", [
    {"cells_to_remove": {"easy": 82}},
    {"cells_to_remove": {"easy": -1}},
    {"cells_to_remove": {"easy": "30"}},
    {"timer_durations": {"hard": 0}},
    {"timer_durations": {"insane": 10}},
])
def test_invalid_settings_are_rejected(kwargs):
    with pytest.raises(ValueError):
        GameSettings(**kwargs)


@pytest.mark.parametrize("content", [
    [],
    [30, 40, 50],
    {"cells_to_remove": [30, 40, 50]},
    {"timer_durations": 900},
])
def test_malformed_settings_file_is_rejected(tmp_path, content):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(content), encoding="utf-8")
    with pytest.raises(ValueError):
        GameSettings.from_file(str(path))


def test_non_mapping_levels_name_the_key():
    with pytest.raises(ValueError, match="cells_to_remove"):
        GameSettings(cells_to_remove=[30, 40, 50])

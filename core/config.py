"""
Difficulty settings for Sudoku.
Loads cell-removal counts and countdown durations from JSON, so levels can be
tuned without touching code. Defaults are written to the file when it is missing.
"""
from __future__ import annotations
import json
import logging
import os
from enum import Enum
from typing import Dict, Optional, Union

from core.grid import GRID_SIZE

log = logging.getLogger(__name__)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def label(self) -> str:
        return self.value.capitalize()


DifficultyLike = Union[Difficulty, str]

# Cells blanked out of the solution per level (51/41/31 givens remain)
CELLS_TO_REMOVE: Dict[str, int] = {"easy": 30, "medium": 40, "hard": 50}
# Countdown per level, in seconds
TIMER_DURATIONS: Dict[str, int] = {"easy": 900, "medium": 600, "hard": 300}
# Timer turns red at or below this many seconds
URGENT_SECONDS = 30


def to_difficulty(value: DifficultyLike) -> Difficulty:
    try:
        return Difficulty(value)
    except ValueError:
        raise ValueError(f"unknown difficulty {value!r}; expected one of "
                         f"{', '.join(d.value for d in Difficulty)}") from None


def _normalize_levels(raw: Dict, defaults: Dict[str, int], name: str) -> Dict[str, int]:
    out = dict(defaults)
    if raw is None:
        return out
    if not isinstance(raw, dict):
        raise ValueError(f"{name} must map difficulty names to integers, got {raw!r}")
    for key, value in raw.items():
        level = to_difficulty(str(key).lower()).value
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name}.{key} must be an integer, got {value!r}")
        out[level] = value
    return out


class GameSettings:
    """Per-difficulty tuning: how many cells to carve and how long the clock runs."""

    def __init__(self, cells_to_remove: Optional[Dict[str, int]] = None,
                 timer_durations: Optional[Dict[str, int]] = None):
        self.cells_to_remove = _normalize_levels(cells_to_remove, CELLS_TO_REMOVE, "cells_to_remove")
        self.timer_durations = _normalize_levels(timer_durations, TIMER_DURATIONS, "timer_durations")
        total = GRID_SIZE * GRID_SIZE
        for level, count in self.cells_to_remove.items():
            if not 0 <= count <= total:
                raise ValueError(f"cells_to_remove.{level} must be within 0..{total}, got {count}")
        for level, seconds in self.timer_durations.items():
            if seconds <= 0:
                raise ValueError(f"timer_durations.{level} must be positive, got {seconds}")

    def removal_count(self, difficulty: DifficultyLike) -> int:
        return self.cells_to_remove[to_difficulty(difficulty).value]

    def timer_duration(self, difficulty: DifficultyLike) -> int:
        return self.timer_durations[to_difficulty(difficulty).value]

    def to_dict(self) -> Dict:
        return {
            "cells_to_remove": dict(self.cells_to_remove),
            "timer_durations": dict(self.timer_durations),
        }

    @staticmethod
    def default_settings() -> Dict:
        return {
            "cells_to_remove": dict(CELLS_TO_REMOVE),
            "timer_durations": dict(TIMER_DURATIONS),
        }

    @classmethod
    def from_file(cls, path: str) -> "GameSettings":
        """Load settings from JSON, creating the file with defaults if missing."""
        if not os.path.exists(path):
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(cls.default_settings(), f, indent=2)
            log.info("Wrote default settings to %s", path)

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{path}: settings must be a JSON object, got {type(data).__name__}")
        return cls(data.get("cells_to_remove"), data.get("timer_durations"))

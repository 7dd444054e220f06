"""
Configurable key bindings for the Sudoku board.
Loads action -> key mappings from JSON using symbolic key names (not characters).
Digits 1-9 (top row and numpad) are always recognized and are not rebindable.
"""
from __future__ import annotations
import json
import logging
import os
from typing import Dict, Optional
import pygame

log = logging.getLogger(__name__)

ACTIONS = ("up", "down", "left", "right", "erase", "give_up")

_ARROWS = {
    "LEFT": "K_LEFT", "ARROWLEFT": "K_LEFT",
    "RIGHT": "K_RIGHT", "ARROWRIGHT": "K_RIGHT",
    "UP": "K_UP", "ARROWUP": "K_UP",
    "DOWN": "K_DOWN", "ARROWDOWN": "K_DOWN",
}


def _normalize_key_name(name: str) -> Optional[str]:
    """Map a readable key name to a pygame constant name.

    "G", "K_G" -> "K_g"; "ArrowUp" -> "K_UP"; "NUMPAD5", "KP_5", "KP5" -> "K_KP5";
    "K_BACKSPACE" passes through. Returns None when the name is not recognized.
    """
    if not name:
        return None
    s = name.strip().upper()
    if s in _ARROWS:
        return _ARROWS[s]

    for prefix in ("NUMPAD", "K_KP_", "K_KP", "KP_", "KP"):
        if s.startswith(prefix) and s[len(prefix):].isdigit():
            return f"K_KP{s[len(prefix):]}"

    if s.startswith("K_"):
        # pygame letter constants are lowercase (K_g)
        if len(s) == 3 and s[2].isalpha():
            return f"K_{s[2].lower()}"
        return s
    if len(s) == 1 and s.isalpha():
        return f"K_{s.lower()}"
    return None


def _key_code(key_name: str) -> int:
    attr_name = _normalize_key_name(key_name)
    if attr_name:
        return getattr(pygame, attr_name, -1)
    try:
        return pygame.key.key_code(str(key_name))
    except (ValueError, pygame.error):
        return -1


def _digit_keys() -> Dict[int, int]:
    keys: Dict[int, int] = {}
    for d in range(1, 10):
        keys[getattr(pygame, f"K_{d}")] = d
        keys[getattr(pygame, f"K_KP{d}")] = d
    return keys


class InputHandler:
    """Data-driven key bindings for board navigation and commands.

    Example JSON structure:
    {
        "actions": {"up": "K_UP", "down": "K_DOWN", "left": "K_LEFT",
                    "right": "K_RIGHT", "erase": "K_BACKSPACE", "give_up": "K_G"}
    }
    """

    def __init__(self, mappings: Dict[str, int]):
        # mappings: {action: key_code}
        self._mappings = mappings
        self._digits = _digit_keys()
        self._erase_keys = {pygame.K_0, pygame.K_KP0, pygame.K_DELETE, pygame.K_BACKSPACE}

    @staticmethod
    def default_bindings() -> Dict:
        return {
            "actions": {
                "up": "K_UP",
                "down": "K_DOWN",
                "left": "K_LEFT",
                "right": "K_RIGHT",
                "erase": "K_BACKSPACE",
                "give_up": "K_G",
            }
        }

    @classmethod
    def from_file(cls, path: str) -> "InputHandler":
        """Load key mappings from JSON, writing defaults first if the file is missing."""
        if not os.path.exists(path):
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(cls.default_bindings(), f, indent=2)

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{path}: key bindings must be a JSON object, got {type(data).__name__}")
        actions = data.get("actions", {})
        if not isinstance(actions, dict):
            raise ValueError(f"{path}: actions must map action names to key names, got {actions!r}")
        names = dict(cls.default_bindings()["actions"])
        names.update(actions)
        mappings: Dict[str, int] = {}
        for action in ACTIONS:
            if not isinstance(names[action], str):
                raise ValueError(f"{path}: actions.{action} must be a key name, got {names[action]!r}")
            code = _key_code(names[action])
            if code == -1:
                log.warning("Unrecognized key %r for action %r", names[action], action)
            mappings[action] = code
        return cls(mappings)

    def key_for(self, action: str) -> int:
        return self._mappings.get(action, -1)

    def action_for_key(self, key: int) -> Optional[str]:
        for action in ACTIONS:
            if self._mappings.get(action, -1) == key:
                return action
        return None

    def digit_for_key(self, key: int) -> Optional[int]:
        """1-9 for a digit key, 0 for an erase key, None otherwise."""
        if key in self._digits:
            return self._digits[key]
        if key in self._erase_keys or self._mappings.get("erase", -1) == key:
            return 0
        return None

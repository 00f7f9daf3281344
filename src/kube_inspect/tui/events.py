"""Input events understood by the widget tree.

The tree never sees Textual events directly; the app converts terminal keys
and resizes into this small vocabulary before dispatching.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Key(Enum):
    """Non-printable keys the widgets react to."""

    ESCAPE = "escape"
    ENTER = "enter"
    CURSOR_UP = "up"
    CURSOR_DOWN = "down"
    CURSOR_LEFT = "left"
    CURSOR_RIGHT = "right"
    BACKSPACE = "backspace"


@dataclass(frozen=True)
class Printable:
    """A printable character typed by the user."""

    text: str


@dataclass(frozen=True)
class Resize:
    """The terminal changed size."""

    width: int
    height: int


Keypress = Key | Printable
Event = Keypress | Resize

_KEY_NAMES = {key.value: key for key in Key}


def to_keypress(key: str, character: str | None = None) -> Keypress | None:
    """Convert a Textual key name and character to a Keypress.

    Args:
        key: Textual key name (e.g. ``"up"``, ``"escape"``, ``"a"``).
        character: The printable character for the key, if any.

    Returns:
        The matching Keypress, or None for keys outside the vocabulary.
    """
    if named := _KEY_NAMES.get(key):
        return named
    if character and len(character) == 1 and character.isprintable():
        return Printable(character)
    return None

from __future__ import annotations

import enum
import typing

import msgspec


class KeyPress(enum.IntEnum):
    RELEASED = 0
    PRESSED = 1
    REPEATED = 2


class KeyEvent(msgspec.Struct, frozen=True):
    key: str
    press: KeyPress

    @classmethod
    def pressed(cls, key: str):
        return cls(key=key, press=KeyPress.PRESSED)

    @classmethod
    def released(cls, key: str):
        return cls(key=key, press=KeyPress.RELEASED)


class FocusLost(msgspec.Struct, frozen=True):
    pass


class ChordMatched(msgspec.Struct, frozen=True):
    action: typing.Any
    keys: tuple[str, ...]
    timestamp: float


class ChordInvalid(msgspec.Struct, frozen=True):
    keys: tuple[str, ...]
    timestamp: float


InputEvent = KeyEvent | FocusLost
ChordEvent = ChordMatched | ChordInvalid

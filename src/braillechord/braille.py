"""Braille cells as chords.

The six home-row keys stand for the six dots of a braille cell, the way a Perkins braillewriter is laid out: f d s
under the left hand are dots 1 2 3, and j k l under the right hand are dots 4 5 6.
"""
from __future__ import annotations

import collections.abc

KEY_TO_DOT = {"f": 1, "d": 2, "s": 3, "j": 4, "k": 5, "l": 6}
DOT_TO_KEY = {dot: key for key, dot in KEY_TO_DOT.items()}

BRAILLE_PATTERNS_BASE = 0x2800

# Grade 1 (uncontracted) letters, by dot numbers.
LETTER_DOTS = {
    "a": "1",
    "b": "12",
    "c": "14",
    "d": "145",
    "e": "15",
    "f": "124",
    "g": "1245",
    "h": "125",
    "i": "24",
    "j": "245",
    "k": "13",
    "l": "123",
    "m": "134",
    "n": "1345",
    "o": "135",
    "p": "1234",
    "q": "12345",
    "r": "1235",
    "s": "234",
    "t": "2345",
    "u": "136",
    "v": "1236",
    "w": "2456",
    "x": "1346",
    "y": "13456",
    "z": "1356",
}


def keys_to_dots(keys: collections.abc.Iterable[str]) -> frozenset[int]:
    return frozenset(KEY_TO_DOT[key.casefold()] for key in keys if key.casefold() in KEY_TO_DOT)


def dots_to_keys(dots: str | collections.abc.Iterable[int]) -> tuple[str, ...]:
    if isinstance(dots, str):
        dots = [int(d) for d in dots]
    return tuple(DOT_TO_KEY[dot] for dot in sorted(set(dots)))


def dots_to_cell(dots: collections.abc.Iterable[int]) -> str:
    "Return the Unicode braille pattern character for a set of dots (dot n is bit n-1)."
    mask = 0
    for dot in dots:
        if not 1 <= dot <= 6:
            raise ValueError(f"Six-dot braille has no dot {dot}")
        mask |= 1 << (dot - 1)
    return chr(BRAILLE_PATTERNS_BASE + mask)


def keys_to_cell(keys: collections.abc.Iterable[str]) -> str:
    return dots_to_cell(keys_to_dots(keys))


def letter_chords() -> dict[str, str]:
    "Letter to space-separated keys, in the form settings files use."
    return {letter: " ".join(dots_to_keys(dots)) for letter, dots in LETTER_DOTS.items()}

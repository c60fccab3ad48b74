from __future__ import annotations

import collections.abc
import typing

from .commontypes import ChordConfigError

# Six home-row keys, in braille dot order: f d s for dots 1-3, j k l for dots 4-6.
DEFAULT_ALPHABET = "fdsjkl"

# Canonical chords are bitmasks, so keep them within a machine word.
MAX_ALPHABET_SIZE = 32


class KeyAlphabet:
    """The fixed set of keys a recognizer listens to.

    Keys are single characters compared case-insensitively. The order keys are given in is the canonical order used
    for bitmask positions and for reporting raw key sets.
    """

    keys: tuple[str, ...]

    def __init__(self, keys: collections.abc.Iterable[str] = DEFAULT_ALPHABET):
        folded = []
        for key in keys:
            if not isinstance(key, str) or len(key) != 1:
                raise ChordConfigError(f"Alphabet keys must be single characters, not {key!r}")
            key = key.casefold()
            if len(key) != 1:
                raise ChordConfigError(f"Alphabet key {key!r} does not fold to a single character")
            if key not in folded:
                folded.append(key)
        if not folded:
            raise ChordConfigError("Alphabet must contain at least one key")
        if len(folded) > MAX_ALPHABET_SIZE:
            raise ChordConfigError(f"Alphabet may contain at most {MAX_ALPHABET_SIZE} keys")
        self.keys = tuple(folded)
        self._positions = {key: i for i, key in enumerate(self.keys)}

    def __repr__(self):
        return f"KeyAlphabet({''.join(self.keys)!r})"

    def __eq__(self, other):
        if not isinstance(other, KeyAlphabet):
            return NotImplemented
        return self.keys == other.keys

    def __hash__(self):
        return hash(self.keys)

    def __len__(self):
        return len(self.keys)

    def __iter__(self):
        return iter(self.keys)

    def __contains__(self, key: object):
        return isinstance(key, str) and key.casefold() in self._positions

    def normalize(self, raw: typing.Any) -> typing.Optional[str]:
        # Anything outside the alphabet (including non-strings and named keys like "Shift") is simply not ours.
        if not isinstance(raw, str) or len(raw) != 1:
            return None
        key = raw.casefold()
        if key not in self._positions:
            return None
        return key

    def index(self, key: str) -> int:
        return self._positions[key.casefold()]

    def sort(self, keys: collections.abc.Iterable[str]) -> tuple[str, ...]:
        return tuple(sorted(keys, key=self.index))

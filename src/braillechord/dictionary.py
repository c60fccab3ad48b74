from __future__ import annotations

import collections.abc
import logging
import typing

from .alphabet import KeyAlphabet
from .commontypes import ChordConfigError

logger = logging.getLogger(__name__)

A = typing.TypeVar("A", bound=collections.abc.Hashable)

KeySpec = str | collections.abc.Iterable[str]


def split_keys(keys: KeySpec) -> list[str]:
    "Accept either an iterable of keys or a string such as 's d k' (whitespace optional, so 'sdk' works too)."
    if isinstance(keys, str):
        return [ch for ch in keys if not ch.isspace()]
    return list(keys)


class ChordDictionary(typing.Generic[A]):
    """An immutable mapping from chords to actions.

    Chords are canonicalized to a bitmask over the alphabet, so lookup ignores the order keys were pressed in.
    Registering two different actions for the same chord is a configuration error and is rejected here, before any
    recognizer can use the dictionary.
    """

    alphabet: KeyAlphabet

    def __init__(self, patterns: collections.abc.Iterable[tuple[KeySpec, A]], alphabet: typing.Optional[KeyAlphabet] = None):
        self.alphabet = KeyAlphabet() if alphabet is None else alphabet
        by_mask: dict[int, A] = {}
        by_action: dict[A, int] = {}
        for keys, action in patterns:
            mask = self._pattern_mask(keys)
            if mask in by_mask and by_mask[mask] != action:
                raise ChordConfigError(
                    f"Chord {'+'.join(self._mask_keys(mask))} is registered for both {by_mask[mask]!r} and {action!r}"
                )
            by_mask[mask] = action
            by_action.setdefault(action, mask)
        self._by_mask = by_mask
        self._by_action = by_action
        logger.debug("Built chord dictionary with %d chords over %r", len(by_mask), self.alphabet)

    @classmethod
    def from_mapping(cls, mapping: collections.abc.Mapping[A, KeySpec], alphabet: typing.Optional[KeyAlphabet] = None):
        return cls(((keys, action) for action, keys in mapping.items()), alphabet=alphabet)

    def _pattern_mask(self, keys: KeySpec) -> int:
        mask = 0
        for key in split_keys(keys):
            normalized = self.alphabet.normalize(key)
            if normalized is None:
                raise ChordConfigError(f"Key {key!r} is not in {self.alphabet!r}")
            mask |= 1 << self.alphabet.index(normalized)
        if mask == 0:
            raise ChordConfigError("Chords must contain at least one key")
        return mask

    def _mask_keys(self, mask: int) -> tuple[str, ...]:
        return tuple(key for i, key in enumerate(self.alphabet.keys) if mask & (1 << i))

    def canonicalize(self, keys: KeySpec) -> int:
        # Unlike pattern construction, stray keys here just can't match anything.
        mask = 0
        for key in split_keys(keys):
            normalized = self.alphabet.normalize(key)
            if normalized is None:
                return -1
            mask |= 1 << self.alphabet.index(normalized)
        return mask

    def lookup(self, keys: KeySpec) -> typing.Optional[A]:
        return self._by_mask.get(self.canonicalize(keys))

    def keys_for(self, action: A) -> typing.Optional[tuple[str, ...]]:
        if action not in self._by_action:
            return None
        return self._mask_keys(self._by_action[action])

    def chord_string(self, action: A) -> str:
        keys = self.keys_for(action)
        if keys is None:
            return ""
        return "+".join(key.upper() for key in keys)

    def mappings(self) -> dict[A, tuple[str, ...]]:
        return {action: self._mask_keys(mask) for action, mask in self._by_action.items()}

    def __len__(self):
        return len(self._by_mask)

    def __iter__(self) -> collections.abc.Iterator[tuple[tuple[str, ...], A]]:
        for mask, action in self._by_mask.items():
            yield self._mask_keys(mask), action

    def __contains__(self, keys: object):
        if not isinstance(keys, collections.abc.Iterable):
            return False
        return self.canonicalize(keys) in self._by_mask

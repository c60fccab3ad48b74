import dataclasses
import datetime
import json
import logging
import pathlib
import typing

import cattrs
import cattrs.gen

from .alphabet import DEFAULT_ALPHABET, KeyAlphabet
from .braille import letter_chords
from .clock import DEFAULT_DEBOUNCE, DebounceProvider, clamp_debounce
from .commontypes import ChordConfigError
from .dictionary import ChordDictionary
from .durations import format_duration, parse_duration

logger = logging.getLogger(__name__)

BRAILLE_LETTERS = letter_chords()

DIRECTIONS = {
    "north": "s f j k",
    "east": "f k",
    "west": "d j k l",
    "south": "d j",
}

CHORD_PRESETS = {
    "braille": BRAILLE_LETTERS,
    "directions": DIRECTIONS,
}


def structure_duration(val: typing.Any, _: type) -> datetime.timedelta:
    if isinstance(val, datetime.timedelta):
        return val
    return parse_duration(val)


# ChordConfigError from __post_init__ has to reach callers as-is, not wrapped in a ClassValidationError.
settings_converter = cattrs.Converter(detailed_validation=False)
settings_converter.register_unstructure_hook(datetime.timedelta, format_duration)
settings_converter.register_structure_hook(datetime.timedelta, structure_duration)
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v))


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: pathlib.Path
    alphabet: str
    debounce: datetime.timedelta
    chord_preset: typing.Optional[str]
    chords: dict[str, str]

    def __post_init__(self):
        self.debounce = clamp_debounce(self.debounce)
        if self.chord_preset is not None:
            if self.chord_preset not in CHORD_PRESETS:
                raise ChordConfigError(f"Unknown chord preset {self.chord_preset!r}; expected one of {sorted(CHORD_PRESETS)}")

    def all_chords(self) -> dict[str, str]:
        "The preset's chords with the explicit ones layered on top. Only the explicit chords get saved."
        if self.chord_preset is None:
            return dict(self.chords)
        return {**CHORD_PRESETS[self.chord_preset], **self.chords}

    def set_debounce(self, new_debounce: datetime.timedelta):
        self.debounce = clamp_debounce(new_debounce)

    def debounce_provider(self) -> DebounceProvider:
        def provider():
            return self.debounce

        return provider

    def make_alphabet(self) -> KeyAlphabet:
        return KeyAlphabet(self.alphabet)

    def make_dictionary(self) -> ChordDictionary[str]:
        return ChordDictionary.from_mapping(self.all_chords(), alphabet=self.make_alphabet())

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        with dest.open("w") as outfile:
            json.dump(raw, outfile, indent=2)

    @classmethod
    def load(cls, src: pathlib.Path):
        with src.open() as infile:
            raw = json.load(infile)
        raw["_path"] = src
        raw.setdefault("alphabet", DEFAULT_ALPHABET)
        raw.setdefault("debounce", format_duration(DEFAULT_DEBOUNCE))
        raw.setdefault("chord_preset", None)
        raw.setdefault("chords", {})
        logger.debug("Loading settings from %s", src)
        return settings_converter.structure(raw, cls)

    @classmethod
    def default(cls, chord_preset: str = "braille", path: pathlib.Path = pathlib.Path("braillechord.settings.json")):
        return settings_converter.structure(
            {
                "_path": path,
                "alphabet": DEFAULT_ALPHABET,
                "debounce": format_duration(DEFAULT_DEBOUNCE),
                "chord_preset": chord_preset,
                "chords": {},
            },
            cls,
        )

    @classmethod
    def for_test(cls, chord_preset: str = "braille"):
        return cls.default(chord_preset=chord_preset, path=pathlib.Path("test.settings.json"))


settings_converter.register_structure_hook(Settings, cattrs.gen.make_dict_structure_fn(Settings, settings_converter))

import pytest

from braillechord.alphabet import KeyAlphabet
from braillechord.commontypes import ChordConfigError
from braillechord.dictionary import ChordDictionary, split_keys
from braillechord.settings import BRAILLE_LETTERS, DIRECTIONS


@pytest.fixture
def directions():
    return ChordDictionary.from_mapping(DIRECTIONS)


def test_lookup_ignores_order(directions: ChordDictionary):
    assert directions.lookup(["s", "f", "j", "k"]) == "north"
    assert directions.lookup(["k", "j", "f", "s"]) == "north"
    assert directions.lookup(("k", "f")) == "east"
    assert directions.lookup({"j", "d"}) == "south"


def test_lookup_is_case_insensitive(directions: ChordDictionary):
    assert directions.lookup(["K", "F"]) == "east"


def test_lookup_requires_exact_match(directions: ChordDictionary):
    # subset and superset of north
    assert directions.lookup(["s", "f", "j"]) is None
    assert directions.lookup(["s", "f", "j", "k", "l"]) is None
    assert directions.lookup([]) is None
    assert directions.lookup(["f", "k", "q"]) is None


def test_lookup_is_pure(directions: ChordDictionary):
    first = directions.lookup(["d", "j", "k", "l"])
    second = directions.lookup(["l", "k", "j", "d"])
    assert first == second == "west"
    assert directions.lookup(["d", "j", "k", "l"]) == first


def test_colliding_actions_are_rejected():
    with pytest.raises(ChordConfigError):
        ChordDictionary([("d k", "one"), ("k d", "two")])


def test_same_action_twice_is_allowed():
    dictionary = ChordDictionary([("d k", "one"), ("kd", "one")])
    assert len(dictionary) == 1
    assert dictionary.lookup("dk") == "one"


@pytest.mark.parametrize("keys", ("", "s q", ["s", "Shift"]))
def test_bad_patterns_are_rejected(keys):
    with pytest.raises(ChordConfigError):
        ChordDictionary([(keys, "nope")])


def test_single_key_chord():
    dictionary = ChordDictionary([("d", "dot two")])
    assert dictionary.lookup(["d"]) == "dot two"
    assert dictionary.lookup(["d", "s"]) is None


def test_chord_strings(directions: ChordDictionary):
    assert directions.chord_string("north") == "F+S+J+K"
    assert directions.chord_string("east") == "F+K"
    assert directions.chord_string("up") == ""
    assert directions.keys_for("south") == ("d", "j")
    assert directions.keys_for("up") is None


def test_mappings_and_iteration(directions: ChordDictionary):
    assert directions.mappings() == {
        "north": ("f", "s", "j", "k"),
        "east": ("f", "k"),
        "west": ("d", "j", "k", "l"),
        "south": ("d", "j"),
    }
    assert sorted(action for _, action in directions) == ["east", "north", "south", "west"]
    assert "k f" in directions
    assert ["f"] not in directions
    assert 7 not in directions


def test_custom_alphabet():
    alphabet = KeyAlphabet("asdf")
    dictionary = ChordDictionary([("a f", "outer")], alphabet=alphabet)
    assert dictionary.alphabet is alphabet
    assert dictionary.lookup("fa") == "outer"
    with pytest.raises(ChordConfigError):
        ChordDictionary([("j", "nope")], alphabet=alphabet)


def test_braille_letters_have_no_collisions():
    dictionary = ChordDictionary.from_mapping(BRAILLE_LETTERS)
    assert len(dictionary) == 26
    assert dictionary.lookup("f") == "a"
    assert dictionary.lookup("f d") == "b"
    assert dictionary.lookup("d s j") == "s"


def test_split_keys():
    assert split_keys("s d k") == ["s", "d", "k"]
    assert split_keys("sdk") == ["s", "d", "k"]
    assert split_keys(("s", "d")) == ["s", "d"]

import pytest

from braillechord.braille import dots_to_cell, dots_to_keys, keys_to_cell, keys_to_dots, letter_chords


def test_keys_to_dots():
    assert keys_to_dots("fds") == frozenset({1, 2, 3})
    assert keys_to_dots(["J", "k", "l"]) == frozenset({4, 5, 6})
    assert keys_to_dots(["q"]) == frozenset()


def test_dots_to_keys():
    assert dots_to_keys("1345") == ("f", "s", "j", "k")
    assert dots_to_keys([4, 1]) == ("f", "j")


@pytest.mark.parametrize(
    "dots,expected",
    (
        ((), "⠀"),
        ((1,), "⠁"),
        ((1, 2), "⠃"),
        ((1, 4, 5), "⠙"),
        ((1, 2, 3, 4, 5, 6), "⠿"),
    ),
)
def test_dots_to_cell(dots, expected):
    assert dots_to_cell(dots) == expected


def test_dots_to_cell_rejects_eight_dot_braille():
    with pytest.raises(ValueError):
        dots_to_cell([7])


def test_keys_to_cell():
    assert keys_to_cell(("f", "j", "k")) == "⠙"


def test_letter_chords():
    chords = letter_chords()
    assert len(chords) == 26
    assert chords["a"] == "f"
    assert chords["d"] == "f j k"
    assert chords["w"] == "d j k l"
    assert len(set(chords.values())) == 26

# tests/test_buffer.py

import pytest

from notecheck.buffer import TextBuffer
from notecheck.errors import RangeError


def test_slice_and_length():
    buf = TextBuffer("Teh cat sat.")
    assert buf.length() == 12
    assert buf.slice(0, 3) == "Teh"
    assert buf.slice(4, 4) == ""


def test_splice_tracks_length_and_revision():
    buf = TextBuffer("Teh cat sat.")
    buf.splice(0, 3, "The")
    assert buf.text == "The cat sat."
    buf.splice(4, 7, "dog!")
    assert buf.text == "The dog! sat."
    assert buf.length() == len(buf.text) == 13
    assert buf.revision == 2


def test_offsets_are_code_points():
    buf = TextBuffer("naïve 😀 café")
    assert buf.length() == 12
    assert buf.slice(6, 7) == "😀"
    buf.splice(6, 7, "🙂🙂")
    assert buf.text == "naïve 🙂🙂 café"
    assert buf.length() == 13


@pytest.mark.parametrize("start,end", [(3, 2), (-1, 2), (0, 13)])
def test_invalid_range_raises_and_leaves_buffer(start, end):
    buf = TextBuffer("Teh cat sat.")
    with pytest.raises(RangeError):
        buf.slice(start, end)
    with pytest.raises(RangeError):
        buf.splice(start, end, "x")
    assert buf.text == "Teh cat sat."
    assert buf.revision == 0


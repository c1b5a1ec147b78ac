import pytest

from genoidx.index import IndexEntry
from genoidx.utils import byte_span, embedded_terminators, strip_terminators


SEQ1 = IndexEntry("seq1", 16, 6, 10, 11)


@pytest.mark.parametrize("start, length, expected", [
    (0, 10, (0, 0)),
    (0, 16, (0, 1)),
    (10, 6, (0, 1)),
    (9, 2, (0, 1)),
    (11, 5, (1, 0)),
    (20, 1, (1, 1)),
    (21, 1, (2, 0)),
])
def test_embedded_terminators(start, length, expected):
    assert embedded_terminators(start, length, 10) == expected


def test_byte_span_for_second_line():
    # starts on the terminator ending the first line
    assert byte_span(SEQ1, 10, 6) == (16, 7)


def test_byte_span_for_whole_record():
    assert byte_span(SEQ1, 0, 16) == (6, 17)


def test_strip_terminators():
    assert strip_terminators(b"\nGTAC\nGT\n") == b"GTACGT"
    assert strip_terminators(b"") == b""

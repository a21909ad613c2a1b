#  HPGLParser is a software allowing to decode HP-GL plotter control
#  language files (.plt) into a stream of drawing commands.
#  Copyright (C) 2024-2025  Ysard
#
#  This program is free software: you can redistribute it and/or modify
#  it under the terms of the GNU Affero General Public License as published by
#  the Free Software Foundation, either version 3 of the License, or
#  (at your option) any later version.
#
#  This program is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU Affero General Public License for more details.
#
#  You should have received a copy of the GNU Affero General Public License
#  along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Test the buffered character source: refills, captures, locations"""
# Standard imports
import io

# Custom imports
import pytest

# Local imports
from hpglparser.exceptions import Location
from hpglparser.reader import CharReader, END_OF_TEXT
from .misc import ChunkedSource


def read_all(reader: CharReader) -> str:
    """Consume the reader and return every character seen"""
    chars = []
    while reader.advance() is not END_OF_TEXT:
        chars.append(reader.current)
    return "".join(chars)


@pytest.mark.parametrize("buffer_size", [1, 2, 3, 10, 1024])
def test_advance(buffer_size):
    """All characters are seen once, whatever the buffer size"""
    text = "IN;PA10,20;\nPD;"
    reader = CharReader(io.StringIO(text), buffer_size)

    assert read_all(reader) == text
    assert reader.at_end
    assert reader.current is END_OF_TEXT


def test_end_of_text_is_terminal():
    """Once exhausted, the source is never read again"""
    source = ChunkedSource("AB", max_chars=10)
    reader = CharReader(source, 10)

    assert reader.advance() == "A"
    assert reader.advance() == "B"
    assert reader.advance() is END_OF_TEXT
    nb_reads = len(source.reads)

    for _ in range(3):
        assert reader.advance() is END_OF_TEXT
    assert len(source.reads) == nb_reads


def test_empty_source():
    reader = CharReader(io.StringIO(""))

    assert not reader.at_end
    assert reader.advance() is END_OF_TEXT
    assert reader.at_end
    assert reader.location() == Location(0, 1, 1)


@pytest.mark.parametrize("buffer_size", [0, -1])
def test_wrong_buffer_size(buffer_size):
    with pytest.raises(ValueError, match="buffer_size"):
        _ = CharReader(io.StringIO("IN;"), buffer_size)


@pytest.mark.parametrize(
    "buffer_size",
    [1, 2, 3, 4, 5, 7, 64],
)
def test_capture_across_refills(buffer_size):
    """Tokens spanning several refills are rebuilt identically"""
    text = "xx-1234567890;"
    reader = CharReader(io.StringIO(text), buffer_size)
    reader.advance()
    reader.advance()
    reader.advance()
    assert reader.current == "-"

    reader.start_capture()
    while reader.current != ";":
        reader.advance()

    assert reader.end_capture() == "-1234567890"
    # Capture is cleared
    assert reader.capture_start is None
    assert reader.capture_parts == []

    # Next capture is independent of the previous one
    reader.start_capture()
    reader.advance()
    assert reader.end_capture() == ";"


def test_capture_overflow_parts():
    """With a 2 chars buffer, the token is split in the overflow list"""
    reader = CharReader(io.StringIO("123456;"), 2)
    reader.advance()
    reader.start_capture()
    reader.advance()
    reader.advance()
    reader.advance()
    # The first chunk ("12") has been flushed during the refill
    assert reader.capture_parts == ["12"]
    assert reader.current == "4"

    assert reader.end_capture() == "123"


def test_capture_until_end_of_text():
    """A capture interrupted by the end of the stream keeps its content"""
    reader = CharReader(io.StringIO("PA12"), 3)
    reader.advance()
    reader.advance()
    reader.advance()
    reader.start_capture()
    reader.advance()
    reader.advance()

    assert reader.at_end
    assert reader.end_capture() == "12"


def test_capture_at_end_of_text():
    """A capture started at the end of the stream is empty"""
    reader = CharReader(io.StringIO("P"), 1)
    reader.advance()
    reader.advance()
    reader.start_capture()
    reader.advance()

    assert reader.end_capture() == ""


def test_short_reads():
    """Sources returning less characters than requested are supported"""
    source = ChunkedSource("-98765,", max_chars=2)
    reader = CharReader(source, 10)
    reader.advance()
    reader.start_capture()
    while reader.read_digit() or reader.read_char("-"):
        pass

    assert reader.end_capture() == "-98765"
    assert reader.current == ","


@pytest.mark.parametrize("buffer_size", [1, 4, 1024])
def test_location(buffer_size):
    """Offsets are absolute; lines & columns follow the newlines"""
    text = "IN;\nPD;\n\n  PU;"
    reader = CharReader(io.StringIO(text), buffer_size)

    locations = {}
    while reader.advance() is not END_OF_TEXT:
        location = reader.location()
        locations[location.offset] = location

    # I
    assert locations[0] == Location(0, 1, 1)
    # ; of IN;
    assert locations[2] == Location(2, 1, 3)
    # P of PD
    assert locations[4] == Location(4, 2, 1)
    # Empty line
    assert locations[8] == Location(8, 3, 1)
    # P of PU after 2 spaces
    assert locations[11] == Location(11, 4, 3)

    # End of text: just after the last char
    assert reader.location() == Location(len(text), 4, 6)


def test_skip_whitespace():
    reader = CharReader(io.StringIO(" \t\r\n\x0b PA"), 2)
    reader.advance()
    reader.skip_whitespace()

    assert reader.current == "P"
    assert reader.location().line == 2


def test_read_helpers():
    reader = CharReader(io.StringIO("1;"))
    reader.advance()

    assert not reader.read_char(";")
    assert reader.read_digit()
    assert not reader.read_digit()
    assert reader.read_char(";")
    assert reader.at_end
    # Nothing to read anymore
    assert not reader.read_char(";")
    assert not reader.read_digit()
    reader.skip_whitespace()

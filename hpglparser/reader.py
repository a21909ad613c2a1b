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
"""Buffered character source with token capture and location tracking"""
# Standard imports
from logging import DEBUG

# Local imports
from hpglparser.commons import logger, DEFAULT_BUFFER_SIZE
from hpglparser.exceptions import Location
from hpglparser.grammar import DIGITS

LOGGER = logger()

# Lookahead value once the source is exhausted
END_OF_TEXT = None


class CharReader:
    """Single character lookahead over a text stream read by fixed-size chunks

    The reader keeps one chunk of the stream in memory. The lookahead
    character (:attr:`current`) is the last character loaded from the
    chunk; the chunk is refilled from the source when every character has
    been consumed.

    A capture marks the beginning of a token (see :meth:`start_capture`).
    When the chunk is refilled during a capture, the part of the token that
    is still in the old chunk is moved into an overflow list before the
    chunk is replaced; :meth:`end_capture` then rebuilds the token from this
    list and the remainder found in the current chunk.

    A reader is bound to one parse; it must not be reused.

    :param source: Text stream; only its `read(size)` method is used.
    :key buffer_size: Number of characters requested for each refill.
    :type source: io.TextIOBase
    :type buffer_size: int
    """

    def __init__(self, source, buffer_size=DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive ({buffer_size})")

        self.source = source
        self.buffer_size = buffer_size
        self.buffer = ""
        # Offset of the first character of the buffer in the whole stream
        self.buffer_offset = 0
        # Index of the next unread character in the buffer
        self.index = 0
        # Number of valid characters in the buffer
        self.fill = 0
        self.line = 1
        # Offset of the first character of the current line
        self.line_offset = 0
        self.current = END_OF_TEXT
        self.exhausted = False
        # Capture span: start index in the buffer & parts saved on refills
        self.capture_start = None
        self.capture_parts = []

    @property
    def at_end(self) -> bool:
        """True when the source is exhausted and the lookahead is END_OF_TEXT"""
        return self.exhausted

    def advance(self):
        """Load the next character of the stream into :attr:`current`

        :return: The new lookahead character, or END_OF_TEXT when the source
            is exhausted. Once the end is reached, the source is never read
            again.
        :rtype: str | None
        """
        if self.exhausted:
            return END_OF_TEXT

        if self.index == self.fill and not self.refill():
            self.current = END_OF_TEXT
            return END_OF_TEXT

        if self.current == "\n":
            self.line += 1
            self.line_offset = self.buffer_offset + self.index

        self.current = self.buffer[self.index]
        self.index += 1
        return self.current

    def refill(self) -> bool:
        """Replace the consumed buffer by the next chunk of the source

        The active capture (if any) is flushed into the overflow list, then
        rebased at the start of the new chunk.

        :return: False if the source is exhausted.
        """
        if self.capture_start is not None:
            self.capture_parts.append(self.buffer[self.capture_start : self.fill])
            self.capture_start = 0

        self.buffer_offset += self.fill
        chunk = self.source.read(self.buffer_size)
        self.index = 0

        if not chunk:
            self.buffer = ""
            self.fill = 0
            self.exhausted = True
            LOGGER.debug("End of text at offset %d", self.buffer_offset)
            return False

        self.buffer = chunk
        self.fill = len(chunk)
        if LOGGER.level == DEBUG:
            LOGGER.debug("Refill: %d chars at offset %d", self.fill, self.buffer_offset)
        return True

    @property
    def current_index(self) -> int:
        """Index of the lookahead character in the buffer

        At the end of the stream, this is the index just after the last
        character, i.e. 0 in the empty buffer.
        """
        return self.index if self.exhausted else self.index - 1

    def start_capture(self):
        """Start a token at the lookahead character"""
        self.capture_start = self.current_index

    def end_capture(self) -> str:
        """Get the token from the capture start to the lookahead character

        The lookahead character is excluded. The capture is cleared.
        """
        start = self.capture_start
        end = self.current_index
        self.capture_start = None

        if self.capture_parts:
            self.capture_parts.append(self.buffer[start:end])
            captured = "".join(self.capture_parts)
            self.capture_parts = []
            return captured
        return self.buffer[start:end]

    def location(self) -> Location:
        """Get the location of the lookahead character"""
        offset = self.buffer_offset + self.current_index
        return Location(offset, self.line, offset - self.line_offset + 1)

    def read_char(self, char: str) -> bool:
        """Consume the lookahead character if it is the given one"""
        if self.current != char:
            return False
        self.advance()
        return True

    def read_digit(self) -> bool:
        """Consume the lookahead character if it is an ASCII digit"""
        if self.current not in DIGITS:
            return False
        self.advance()
        return True

    def is_whitespace(self) -> bool:
        return self.current is not END_OF_TEXT and self.current.isspace()

    def skip_whitespace(self):
        while self.is_whitespace():
            self.advance()

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
"""Positions in the parsed stream & structural parse errors"""
# Standard imports
from dataclasses import dataclass

# Custom imports
from lark.exceptions import UnexpectedInput


@dataclass(frozen=True)
class Location:
    """Position of a character in the parsed stream

    :ivar offset: Absolute offset of the character (0-indexed).
    :ivar line: Line number (1-indexed).
    :ivar column: Column number (1-indexed).
    """

    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column} (offset {self.offset})"


class HPGLSyntaxError(UnexpectedInput):
    """The stream violates the command grammar

    Always fatal for the current parse. The location is also exposed through
    the attributes of lark's :class:`UnexpectedInput`, so
    :meth:`get_context` can be used on the original text to point the
    faulty character.

    :param message: Description of what was expected.
    :param location: Location of the lookahead character when the error
        was detected.
    :type message: str
    :type location: Location
    """

    def __init__(self, message: str, location: Location):
        self.message = message
        self.location = location
        self.pos_in_stream = location.offset
        self.line = location.line
        self.column = location.column
        super().__init__(message, location)

    def __str__(self) -> str:
        return f"{self.message} at {self.location}"

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
"""Opcodes and lexical definitions of the supported HP-GL subset

Informal grammar of a .plt file::

    plt: PREAMBLE "IN" ";" command*
    command: "PD" ";" | "PU" ";" | "IN" ";"
        | "SP" [INT] ";"
        | "PA" INT "," INT ";"
        | OPCODE /[^;]*/ ";"     -> unsupported, skipped

    INT: "-"? ("0" | /[1-9][0-9]*/)
    OPCODE: /../

Whitespace is allowed between tokens, never inside an INT.
"""
# Standard imports
from enum import Enum


# Only ASCII digits; str.isdigit() also accepts superscripts
DIGITS = frozenset("0123456789")
TERMINATOR = ";"
SEPARATOR = ","
MINUS = "-"

# Integers are 32 bits signed values
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


class Operation(Enum):
    """HP-GL opcodes relevant for the reconstruction of vector drawings

    Values are the two characters codes found in the stream.
    """

    PLOT_ABSOLUTE = "PA"
    PLOT_RELATIVE = "PR"
    PEN_DOWN = "PD"
    PEN_UP = "PU"
    INITIALIZE = "IN"
    SELECT_PEN = "SP"
    LINE_TYPE = "LT"
    SCALE = "SC"
    INPUT = "IP"
    PAGE = "PG"
    UNKNOWN = "**"

    @classmethod
    def from_code(cls, code: str) -> "Operation":
        """Get the operation identified by the given opcode

        The comparison is case-sensitive; codes that are not in the table
        (including truncated codes at the end of the stream) are UNKNOWN.
        """
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    def __str__(self):
        return self.value
# Longer literals are out of range whatever their digits
INT_MAX_DIGITS = len(str(INT_MAX))

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
"""Main HP-GL parser routines used to feed a command handler"""
# Standard imports
import io
import codecs

# Local imports
from hpglparser.commons import (
    logger,
    MIN_BUFFER_SIZE,
    DEFAULT_BUFFER_SIZE,
    DEFAULT_ENCODING,
)
from hpglparser.exceptions import HPGLSyntaxError
from hpglparser.grammar import (
    Operation,
    DIGITS,
    TERMINATOR,
    SEPARATOR,
    MINUS,
    INT_MIN,
    INT_MAX,
    INT_MAX_DIGITS,
)
from hpglparser.reader import CharReader

LOGGER = logger()

# Handler methods called for each supported opcode
EVENTS = {
    Operation.INITIALIZE: "initialize",
    Operation.PEN_DOWN: "pen_down",
    Operation.PEN_UP: "pen_up",
    Operation.SELECT_PEN: "select_pen",
    Operation.PLOT_ABSOLUTE: "plot_absolute",
}


def log_diagnostic(message, location):
    """Default diagnostics sink: log the message as a warning"""
    LOGGER.warning("%s at %s", message, location)


class HPGLParser:
    """Parser for .plt files using the AutoCAD version of the HP-GL format

    Only the commands needed to recreate the vector image are extracted;
    they are passed to the handler in the order of the stream.
    Other opcodes are skipped up to their terminator and reported to the
    diagnostics sink.

    The parser works in one pass over a buffered character source
    (see :class:`hpglparser.reader.CharReader`); a new reader is built for
    each call of :meth:`parse`. An instance must not be used by two parses
    at the same time.

    :param handler: Receiver of the decoded commands.
    :key diagnostics: Callable receiving non fatal conditions as
        `(message, location)`. Default: warning in the logger.
    :type handler: hpglparser.handler.PltHandler
    :type diagnostics: Callable[[str, hpglparser.exceptions.Location], None]
    """

    def __init__(self, handler, diagnostics=None):
        self.handler = handler
        handler.parser = self
        self.diagnostics = diagnostics or log_diagnostic
        self.reader: None | CharReader = None
        # Raw code & location of the last opcode read
        self.opcode = None
        self.opcode_location = None

        self.readers = {
            Operation.INITIALIZE: self.read_op_only,
            Operation.PEN_DOWN: self.read_op_only,
            Operation.PEN_UP: self.read_op_only,
            Operation.SELECT_PEN: self.read_op_with_opt_int_arg,
            Operation.PLOT_ABSOLUTE: self.read_op_two_int_args,
        }

    @property
    def location(self):
        """Location of the lookahead character, None outside of a parse

        :rtype: hpglparser.exceptions.Location | None
        """
        return self.reader.location() if self.reader else None

    def parse(self, source, buffer_size=None, encoding=DEFAULT_ENCODING) -> int:
        """Parse the input and forward the extracted commands to the handler

        This function is the entry point of the parser.

        :param source: HP-GL data. Strings are parsed as is; bytes and binary
            streams are decoded with the given encoding; any other object
            with a `read(size)` method returning strings is used directly.
        :key buffer_size: Size of the buffer used to store intermediate
            chunks of data. By default, the length of a string source
            bounded to [MIN_BUFFER_SIZE, DEFAULT_BUFFER_SIZE], or
            DEFAULT_BUFFER_SIZE for other sources.
        :key encoding: Encoding of bytes or binary streams.
        :type source: str | bytes | bytearray | io.IOBase
        :type buffer_size: int | None
        :type encoding: str
        :return: Number of commands read after the initial IN command.
        :raises HPGLSyntaxError: If the stream violates the grammar.
        :raises ValueError: If buffer_size is zero or negative.
        """
        if isinstance(source, str):
            if buffer_size is None:
                buffer_size = max(
                    MIN_BUFFER_SIZE, min(DEFAULT_BUFFER_SIZE, len(source))
                )
            stream = io.StringIO(source)
        elif isinstance(source, (bytes, bytearray)):
            stream = io.StringIO(bytes(source).decode(encoding))
        elif isinstance(source, (io.RawIOBase, io.BufferedIOBase)):
            # The stream stays owned (and closed) by the caller
            stream = codecs.getreader(encoding)(source)
        elif hasattr(source, "read"):
            stream = source
        else:
            raise TypeError(f"Unsupported source type: {type(source).__name__}")

        if buffer_size is None:
            buffer_size = DEFAULT_BUFFER_SIZE

        self.reader = CharReader(stream, buffer_size)
        try:
            return self.run_hpgl()
        finally:
            self.reader = None

    def run_hpgl(self) -> int:
        """Skip the preamble, then read commands until the end of the stream"""
        reader = self.reader
        # Skip the first part which holds some AutoCAD specific stuff until
        # the initialize opcode
        self.skip_to_initialize()
        reader.skip_whitespace()

        nb_commands = 0
        while not reader.at_end:
            self.read_command()
            nb_commands += 1
            reader.skip_whitespace()

        LOGGER.info("Parsed %d commands", nb_commands)
        return nb_commands

    def skip_to_initialize(self) -> bool:
        """Discard everything before the first IN opcode, then read it

        If the stream ends before any IN opcode, nothing is emitted and no
        error is raised.

        :return: True if the initialize command has been found.
        """
        reader = self.reader
        previous = None
        while not (previous == "I" and reader.current == "N"):
            if reader.at_end:
                self.diagnostics("No initialize command found", reader.location())
                return False
            previous = reader.current
            reader.advance()

        # Consume N
        reader.advance()
        self.read_op_only(Operation.INITIALIZE)
        return True

    def read_command(self):
        """Execute specific parsing functions depending on the opcode"""
        operation = self.read_operation()
        command_reader = self.readers.get(operation, self.read_unsupported_command)
        command_reader(operation)

    def read_operation(self) -> Operation:
        """Read a two characters opcode

        Never fails: unknown or truncated codes give Operation.UNKNOWN.
        """
        reader = self.reader
        self.opcode_location = reader.location()
        reader.start_capture()
        reader.advance()
        reader.advance()
        self.opcode = reader.end_capture()
        return Operation.from_code(self.opcode)

    def read_unsupported_command(self, operation: Operation):
        """Skip the command up to its terminator"""
        reader = self.reader
        while reader.current != TERMINATOR:
            if reader.at_end:
                raise self.expected(f"'{TERMINATOR}'")
            reader.advance()
        reader.advance()
        self.diagnostics(
            f"Unsupported operation: {self.opcode}", self.opcode_location
        )

    def read_op_only(self, operation: Operation):
        """<opcode> ;"""
        self.reader.skip_whitespace()
        self.read_required_char(TERMINATOR)
        getattr(self.handler, EVENTS[operation])()

    def read_op_with_opt_int_arg(self, operation: Operation):
        """<opcode> [<int>] ;

        Without argument, :meth:`reset_pen` of the handler is called instead.
        """
        reader = self.reader
        reader.skip_whitespace()
        arg = None
        if reader.current in DIGITS or reader.current == MINUS:
            arg = self.read_int()
            reader.skip_whitespace()
        self.read_required_char(TERMINATOR)

        if arg is None:
            self.handler.reset_pen()
        else:
            getattr(self.handler, EVENTS[operation])(arg)

    def read_op_two_int_args(self, operation: Operation):
        """<opcode> <int> , <int> ;"""
        reader = self.reader
        reader.skip_whitespace()
        arg1 = self.read_int()
        reader.skip_whitespace()
        self.read_required_char(SEPARATOR)
        reader.skip_whitespace()
        arg2 = self.read_int()
        reader.skip_whitespace()
        self.read_required_char(TERMINATOR)
        getattr(self.handler, EVENTS[operation])(arg1, arg2)

    def read_int(self) -> int:
        """Read a signed 32 bits integer: -? (0 | [1-9][0-9]*)

        Leading zeros are not part of the literal: "012" is read as 0,
        the next character being "1".
        The literal is rejected as soon as it has more digits than INT_MAX,
        so it is never held in memory beyond that length.
        """
        reader = self.reader
        location = reader.location()
        reader.start_capture()
        reader.read_char(MINUS)
        first_digit = reader.current
        if not reader.read_digit():
            raise self.expected("digit")
        if first_digit != "0":
            nb_digits = 1
            while reader.read_digit():
                nb_digits += 1
                if nb_digits > INT_MAX_DIGITS:
                    reader.end_capture()
                    raise HPGLSyntaxError(
                        f"Expected integer in [{INT_MIN}, {INT_MAX}]", location
                    )

        literal = reader.end_capture()
        value = int(literal)
        if not INT_MIN <= value <= INT_MAX:
            raise HPGLSyntaxError(
                f"Expected integer in [{INT_MIN}, {INT_MAX}], got {literal}",
                location,
            )
        return value

    def read_required_char(self, char: str):
        if not self.reader.read_char(char):
            raise self.expected(f"'{char}'")

    def expected(self, expected: str) -> HPGLSyntaxError:
        return HPGLSyntaxError(f"Expected {expected}", self.reader.location())


def parse(source, handler, diagnostics=None, **kwargs) -> int:
    """Shortcut to parse the given source with a new parser

    See :meth:`HPGLParser.parse` for the keyword arguments.
    """
    return HPGLParser(handler, diagnostics=diagnostics).parse(source, **kwargs)

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
"""Receivers of the commands decoded by the parser"""
# Local imports
from hpglparser.commons import logger

LOGGER = logger()


class PltHandler:
    """Base handler of parser events

    An instance is given to :class:`hpglparser.parser.HPGLParser` which calls
    the methods below while reading the input, in the order of the commands
    in the stream. Each method is called after the terminator of its command
    has been consumed.

    All methods do nothing; subclasses override only the ones they are
    interested in. An exception raised by a method aborts the parse.

    :ivar parser: Parser that feeds this handler; set by the parser.
    """

    parser = None

    @property
    def location(self):
        """Current location of the parser, None outside of a parse

        :rtype: hpglparser.exceptions.Location | None
        """
        return self.parser.location if self.parser else None

    def initialize(self):
        """IN: initialize the plotter"""

    def pen_down(self):
        """PD: lower the pen"""

    def pen_up(self):
        """PU: raise the pen"""

    def select_pen(self, pen: int):
        """SP n: select the given pen"""

    def reset_pen(self):
        """SP without pen number: put the pen back

        Typically found at the end of .plt files.
        """

    def plot_absolute(self, x: int, y: int):
        """PA x,y: move to the given absolute position"""


class LoggingHandler(PltHandler):
    """Log each command at the INFO level"""

    def initialize(self):
        LOGGER.info("init")

    def pen_down(self):
        LOGGER.info("pen down")

    def pen_up(self):
        LOGGER.info("pen up")

    def select_pen(self, pen: int):
        LOGGER.info("select pen %d", pen)

    def reset_pen(self):
        LOGGER.info("reset pen")

    def plot_absolute(self, x: int, y: int):
        LOGGER.info("plot absolute x: %d, y: %d", x, y)


class CommandRecorder(PltHandler):
    """Keep every command as a tuple (method name, *arguments)

    Example: ``[("initialize",), ("select_pen", 3), ("plot_absolute", 10, 20)]``
    """

    def __init__(self):
        self.commands = []

    def initialize(self):
        self.commands.append(("initialize",))

    def pen_down(self):
        self.commands.append(("pen_down",))

    def pen_up(self):
        self.commands.append(("pen_up",))

    def select_pen(self, pen: int):
        self.commands.append(("select_pen", pen))

    def reset_pen(self):
        self.commands.append(("reset_pen",))

    def plot_absolute(self, x: int, y: int):
        self.commands.append(("plot_absolute", x, y))

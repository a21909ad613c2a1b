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
"""HPGLParser entry point"""

# Standard imports
import argparse
from pathlib import Path
import sys
import shutil

# Custom imports
from hpglparser import __version__
from hpglparser.config_parser import load_config, build_parser_params
from hpglparser.exceptions import HPGLSyntaxError
from hpglparser.handler import LoggingHandler
from hpglparser.parser import HPGLParser
import hpglparser.commons as cm
from hpglparser.commons import CONFIG_FILES, USER_CONFIG_FILE, EMBEDDED_CONFIG_FILE

LOGGER = cm.logger()


def choose_config_file(config_file: [Path | None]) -> Path:
    """Get an existing configuration file

    Search the config file in the current directory, then in
    `~/.local/share/hpglparser`.
    If none has been found: create a config file from the embedded one, in the
    user configuration folder and use it.
    The filename is defined in :meth:`hpglparser.commons.CONFIG_FILE`.

    :param config_file: Configuration file path from the cli. Can be None if the
        argument is not used.
    :return: A Path for a valid configuration file, ready to be loaded in the
        ConfigParser.
    """
    if isinstance(config_file, Path):
        # Config file from command line
        if not config_file.exists():
            LOGGER.critical("Configuration file <%s> not found!", config_file)
            raise SystemExit
        return config_file

    # Search the config file in the current directory, then in ~/.local/share/
    g = [path for path in CONFIG_FILES if path.exists()]
    if not g:
        # If none has been found: create the config file from the embedded one
        LOGGER.info("Initialize new default config at <%s>", USER_CONFIG_FILE)
        USER_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy(EMBEDDED_CONFIG_FILE, USER_CONFIG_FILE)
        return USER_CONFIG_FILE
    else:
        # Use the first file found
        config_file = g[0]
        LOGGER.info("Use config at <%s>", config_file)
        return config_file


def is_empty(plt_file) -> bool:
    """Test if the binary input file has no data, without consuming it"""
    if hasattr(plt_file, "peek"):
        return not plt_file.peek(1)
    first_byte = plt_file.read(1)
    plt_file.seek(0)
    return not first_byte


def hpglparser_entry_point(**kwargs) -> int:
    """The main routine.

    The input file is streamed through the parser, `buffer_size` characters
    at a time.

    :return: Number of commands parsed after the initial IN command.
    """
    # Open input file
    plt_file = kwargs["plt"]
    if is_empty(plt_file):
        LOGGER.critical("Input file is empty!")
        raise SystemExit

    # Parse the config file
    config = load_config(config_file=kwargs["config"])

    params = build_parser_params(config)
    params.update(
        {key: kwargs[key] for key in ("buffer_size", "encoding") if key in kwargs}
    )
    if kwargs.get("debug"):
        cm.log_level("info")

    LOGGER.info("HPGLParser start; %s", __version__)
    try:
        return HPGLParser(LoggingHandler()).parse(plt_file, **params)
    except UnicodeDecodeError as exc:
        LOGGER.error("Input file can't be decoded with %s: %s", params["encoding"], exc)
        raise SystemExit(1) from exc
    except HPGLSyntaxError as exc:
        LOGGER.error("%s", exc)
        if plt_file.seekable():
            # stdin can't be read twice
            plt_file.seek(0)
            text = plt_file.read().decode(params["encoding"], errors="replace")
            LOGGER.error("Context:\n%s", exc.get_context(text))
        raise SystemExit(1) from exc


def args_to_params(args):  # pragma: no cover
    """Return argparse namespace as a dict {variable name: value}"""
    return dict(vars(args).items())


def main():  # pragma: no cover
    """Entry point and argument parser"""
    parser = argparse.ArgumentParser(
        prog="hpglparser",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        "plt",
        help="HP-GL plotter file (.plt). - to read from stdin.",
        type=argparse.FileType("rb"),
        default=sys.stdin.buffer
    )

    parser.add_argument(
        "-b",
        "--buffer_size",
        nargs="?",
        help="Number of characters read from the file at once. (default: 1024)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
        type=int,
    )

    parser.add_argument(
        "-e",
        "--encoding",
        nargs="?",
        help="Encoding of the input file. (default: latin-1)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
    )

    parser.add_argument(
        "-c",
        "--config",
        nargs="?",
        help="Configuration file to use. "
            "(default: ./hpglparser.conf, ~/.local/share/hpglparser/hpglparser.conf)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
        type=Path,
    )

    parser.add_argument(
        "-d",
        "--debug",
        help="Log every decoded command (INFO level).",
        action="store_true",
    )

    parser.add_argument(
        "-v", "--version", action="version", version=__version__
    )

    # Get program args and launch associated command
    args = parser.parse_args()

    params = args_to_params(args)

    # Handle configuration file
    params["config"] = choose_config_file(params.get("config"))

    # Do magic
    hpglparser_entry_point(**params)


if __name__ == "__main__":  # pragma: no cover
    main()

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
"""Load configuration file, check and set default values"""

# Standard imports
import configparser
import codecs
from logging import DEBUG

# Local imports
from hpglparser.commons import (
    logger,
    log_level,
    EMBEDDED_CONFIG_FILE,
    LOG_LEVEL,
    DEFAULT_BUFFER_SIZE,
    DEFAULT_ENCODING,
)

LOGGER = logger()


def load_config(config_file=EMBEDDED_CONFIG_FILE):
    """Load configuration file and set default settings

    :key config_file: Path of the configuration file to load.
        Default: EMBEDDED_CONFIG_FILE from commons module.
    :type config_file: Path
    :return: Configuration updated object.
    :rtype: configparser.ConfigParser
    """
    config = configparser.ConfigParser(allow_no_value=True)
    config.read(config_file)
    return parse_config(config)


def parse_config(config: configparser.ConfigParser):
    """Read config file, check and set default values

    .. note:: All values are of type string; they must be cast
        (with dedicated methods) if necessary.

        The syntax `if not xxx:` handles None and '' data retrieved from file.

    The misc section is mandatory.

    :param config: Opened ConfigParser object
    :type config: configparser.ConfigParser
    :return: Processed ConfigParser object
    :rtype: configparser.ConfigParser
    """
    ## Misc section
    misc_section = config["misc"]
    loglevel = misc_section.get("loglevel")
    if not loglevel:
        misc_section["loglevel"] = LOG_LEVEL.lower()
    log_level(misc_section["loglevel"])


    buffer_size = misc_section.get("buffer_size")
    if not buffer_size:
        misc_section["buffer_size"] = str(DEFAULT_BUFFER_SIZE)
    elif not buffer_size.isdecimal() or int(buffer_size) < 1:
        LOGGER.error(
            "buffer_size: A positive number of characters is expected (%s).",
            buffer_size,
        )
        raise SystemExit


    encoding = misc_section.get("encoding")
    if not encoding:
        misc_section["encoding"] = DEFAULT_ENCODING
    else:
        try:
            codecs.lookup(encoding)
        except LookupError as exc:
            LOGGER.error("encoding: Unknown encoding (%s).", encoding)
            raise SystemExit from exc

    debug_config_file(config)
    return config


def debug_config_file(config: configparser.ConfigParser):
    """Display sections, keys and values of config file

    :param config: Opened ConfigParser object
    :type config: configparser.ConfigParser
    """
    if LOGGER.level > DEBUG:
        return
    for section in config.sections():
        LOGGER.debug("[%s]", section)

        for key, value in config[section].items():
            LOGGER.debug("%s : %s", key, value)

        LOGGER.debug("")


def build_parser_params(config) -> dict:
    """Get dict of params that match the kwargs of HPGLParser.parse().

    :param config: Configuration object.
    :type config: configparser.ConfigParser
    """
    misc_section = config["misc"]
    return {
        "buffer_size": misc_section.getint("buffer_size", DEFAULT_BUFFER_SIZE),
        "encoding": misc_section.get("encoding", DEFAULT_ENCODING),
    }

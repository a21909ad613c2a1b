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
"""Miscellaneous tests (global loglevel settings)"""
# Standard imports
from pathlib import Path

# Custom imports
import pytest

# Local imports
from hpglparser.commons import log_level, LOG_LEVEL
from hpglparser.handler import LoggingHandler
from hpglparser.parser import HPGLParser
from .misc import DIR_DATA


@pytest.fixture
def set_loglevel(request):
    """Fixture to safely change the loglevel

    Default loglevel is restored in the tear down for further tests
    """
    log_level(request.param)

    yield None

    # Restore loglevel
    log_level(LOG_LEVEL)


@pytest.mark.parametrize("set_loglevel", ["NONE"], indirect=True)
def test_no_loglevel(capsys, caplog, set_loglevel: None):
    """Test loglevel NONE

    No output on stdout & no log record are expected, even for
    unsupported commands.

    :param capsys: pytest capsys-fixture
    :type capsys: _pytest.capture.CaptureFixture
    """
    code = Path(DIR_DATA + "square.plt").read_bytes()
    _ = HPGLParser(LoggingHandler()).parse(code)

    captured = capsys.readouterr()
    print(captured)
    assert not (
        captured.out or captured.err
    ), "stdout,stderr should be empty in loglevel None"
    assert not caplog.records


@pytest.mark.parametrize("set_loglevel", ["debug"], indirect=True)
def test_debug_loglevel(caplog, set_loglevel: None):
    """Refills of the reader are visible in debug mode"""
    _ = HPGLParser(LoggingHandler()).parse("IN;PD;PU;", buffer_size=3)

    assert "Refill: 3 chars at offset 6" in caplog.text
    assert "End of text at offset 9" in caplog.text
    assert "pen down" in caplog.text

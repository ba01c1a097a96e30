#
# Copyright (c) 2019 Matthias Tafelmeier.
#
# This file is part of godon
#
# godon is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# godon is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this godon. If not, see <http://www.gnu.org/licenses/>.
#

import pytest
import sys
import os
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../..'))

from kernel_tunables.config import DisplayMode, TunablesConfig, DEFAULT_MAX_DEPTH


class TestTunablesConfig:
    """Test environment driven configuration"""

    def test_defaults(self):
        """Test defaults point at the live kernel"""
        config = TunablesConfig.from_env()

        assert config.proc_path == '/proc/sys/'
        assert config.preload_file == '/etc/sysctl.conf'
        assert config.max_depth == DEFAULT_MAX_DEPTH
        assert config.log_level == 'WARNING'

    @patch.dict(os.environ, {
        'SYSCTL_PROC_PATH': '/srv/fake/sys',
        'SYSCTL_PRELOAD_FILE': '/srv/fake/sysctl.conf',
        'SYSCTL_MAX_DEPTH': '4',
        'SYSCTL_LOG_LEVEL': 'debug',
    })
    def test_from_env(self):
        """Test every setting can be overridden from the environment"""
        config = TunablesConfig.from_env()

        assert config.proc_path == '/srv/fake/sys/'
        assert config.preload_file == '/srv/fake/sysctl.conf'
        assert config.max_depth == 4
        assert config.log_level == 'DEBUG'

    @patch.dict(os.environ, {'SYSCTL_MAX_DEPTH': 'deep'})
    def test_invalid_max_depth_falls_back(self):
        """Test a non-numeric depth uses the default"""
        assert TunablesConfig.from_env().max_depth == DEFAULT_MAX_DEPTH

    def test_proc_path_gets_trailing_slash(self):
        """Test the root always ends with a separator"""
        assert TunablesConfig(proc_path='/proc/sys').proc_path == '/proc/sys/'
        assert TunablesConfig(proc_path='/proc/sys/').proc_path == '/proc/sys/'


class TestDisplayMode:
    """Test output formatting flags"""

    def test_defaults(self):
        """Test names and newlines are on by default"""
        mode = DisplayMode()
        assert mode.print_name is True
        assert mode.print_newline is True

    def test_from_flags(self):
        """Test -n and -b map to the right modes"""
        assert DisplayMode.from_flags() == DisplayMode(True, True)
        assert DisplayMode.from_flags(no_name=True) == DisplayMode(False, True)
        assert DisplayMode.from_flags(binary=True) == DisplayMode(False, False)
        assert DisplayMode.from_flags(no_name=True, binary=True) == DisplayMode(False, False)

    def test_immutable(self):
        """Test flags cannot be changed after construction"""
        mode = DisplayMode()
        with pytest.raises(AttributeError):
            mode.print_name = False

    @pytest.mark.parametrize('mode,expected', [
        (DisplayMode(True, True), 'kernel.ostype = Linux\n'),
        (DisplayMode(False, True), 'Linux\n'),
        (DisplayMode(False, False), 'Linux'),
        (DisplayMode(True, False), 'kernel.ostype = Linux'),
    ])
    def test_format_line(self, mode, expected):
        """Test each flag combination"""
        assert mode.format_line('kernel.ostype', 'Linux\n') == expected

    def test_format_line_without_terminator(self):
        """Test a last line without newline is left as is"""
        assert DisplayMode(False, False).format_line('k', 'v') == 'v'

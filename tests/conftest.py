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

"""
Pytest configuration for kernel_tunables unit tests.

Builds a fake /proc/sys hierarchy under tmp_path so reads, writes and
enumeration run against plain files instead of the live kernel.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from kernel_tunables.config import DisplayMode, TunablesConfig


FAKE_TUNABLES = {
    'kernel/ostype': 'Linux\n',
    'kernel/hostname': 'godon-test\n',
    'net/ipv4/ip_forward': '0\n',
    'net/ipv4/ip_local_port_range': '32768\t60999\n',
    'net/ipv4/conf/eth0.100/rp_filter': '1\n',
    'vm/swappiness': '60\n',
}


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep host settings for the tool out of the tests"""
    for var in ('SYSCTL_PROC_PATH', 'SYSCTL_PRELOAD_FILE', 'SYSCTL_MAX_DEPTH',
                'SYSCTL_LOG_LEVEL', 'SYSCTL_PUSH_METRICS_ENABLED', 'PUSH_GATEWAY_URL'):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def proc_root(tmp_path):
    """Fake /proc/sys populated with FAKE_TUNABLES"""
    root = tmp_path / 'proc' / 'sys'
    for relative, value in FAKE_TUNABLES.items():
        entry = root / relative
        entry.parent.mkdir(parents=True, exist_ok=True)
        entry.write_text(value)
    return root


@pytest.fixture
def tunables_config(proc_root):
    return TunablesConfig(proc_path=f"{proc_root}/", preload_file=str(proc_root.parent / 'sysctl.conf'))


@pytest.fixture
def named_mode():
    return DisplayMode(print_name=True, print_newline=True)


@pytest.fixture
def value_mode():
    return DisplayMode(print_name=False, print_newline=True)


@pytest.fixture
def binary_mode():
    return DisplayMode(print_name=False, print_newline=False)

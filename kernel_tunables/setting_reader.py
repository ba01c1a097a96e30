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

import sys
import logging
from typing import Optional, TextIO

from kernel_tunables import errors
from kernel_tunables.config import DisplayMode, TunablesConfig, default_config
from kernel_tunables.key_translation import storage_path, to_display_key
from kernel_tunables.metrics_client import TunablesMetricsClient

logger = logging.getLogger(__name__)

READ_OK = 0
ERR_READ_FAILED = -1


def read_setting(key: str, mode: DisplayMode, config: Optional[TunablesConfig] = None,
                 out: Optional[TextIO] = None,
                 metrics: Optional[TunablesMetricsClient] = None) -> int:
    """
    Print the current value of one tunable.

    Args:
        key: Key in dotted (or slashed) notation, e.g. 'kernel.ostype'
        mode: Display mode for the output lines
        config: Tunables configuration (default from env)
        out: Data stream (default sys.stdout)
        metrics: Optional metrics client

    Returns:
        READ_OK on success, ERR_READ_FAILED otherwise
    """
    config = default_config(config)
    out = out if out is not None else sys.stdout

    if not key:
        logger.error(errors.ERR_INVALID_KEY.format(key))
        _count(metrics, errors.UNKNOWN_KEY)
        return ERR_READ_FAILED

    path = storage_path(config.proc_path, key)
    name = to_display_key(key)
    logger.debug(f"Reading {name} from {path}")

    try:
        with open(path, "r", encoding="utf-8", errors="replace", newline="\n") as entry:
            # Whole value first, so a failing read prints nothing at all
            lines = entry.readlines()
    except OSError as e:
        _count(metrics, errors.report_os_error(e, name, errors.READING))
        return ERR_READ_FAILED

    for line in lines:
        out.write(mode.format_line(name, line))

    _count(metrics, errors.SUCCESS)
    return READ_OK


def _count(metrics: Optional[TunablesMetricsClient], status: str):
    if metrics is not None:
        metrics.inc_read(status)

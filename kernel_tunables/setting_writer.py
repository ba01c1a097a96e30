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
from typing import Optional, TextIO, Tuple

from kernel_tunables import errors
from kernel_tunables.config import DisplayMode, TunablesConfig, default_config
from kernel_tunables.key_translation import storage_path, to_display_key
from kernel_tunables.metrics_client import TunablesMetricsClient

logger = logging.getLogger(__name__)

WRITE_OK = 0
ERR_OPEN_FAILED = -1
ERR_MALFORMED = -2
ERR_NO_SEPARATOR = -3


def split_setting(setting: str) -> Tuple[str, str]:
    """
    Split 'name=value' at the first '='.

    The value may itself contain '=' characters.

    Raises:
        ValueError: no separator, or an empty name or value
    """
    name, sep, value = setting.partition("=")
    if not sep:
        raise ValueError(errors.ERR_NO_EQUALS.format(setting))
    if not name or not value:
        raise ValueError(errors.ERR_MALFORMED_SETTING.format(setting))
    return name, value


def write_setting(setting: str, mode: DisplayMode, config: Optional[TunablesConfig] = None,
                  out: Optional[TextIO] = None,
                  metrics: Optional[TunablesMetricsClient] = None) -> int:
    """
    Set one tunable from a 'name=value' string and echo the new value.

    Args:
        setting: Assignment in the form name=value
        mode: Display mode for the confirmation
        config: Tunables configuration (default from env)
        out: Data stream (default sys.stdout)
        metrics: Optional metrics client

    Returns:
        WRITE_OK, ERR_NO_SEPARATOR, ERR_MALFORMED or ERR_OPEN_FAILED
    """
    config = default_config(config)
    out = out if out is not None else sys.stdout

    if "=" not in setting:
        logger.error(errors.ERR_NO_EQUALS.format(setting))
        _count(metrics, errors.NO_SEPARATOR)
        return ERR_NO_SEPARATOR

    try:
        key, value = split_setting(setting)
    except ValueError as e:
        logger.error(str(e))
        _count(metrics, errors.MALFORMED)
        return ERR_MALFORMED

    path = storage_path(config.proc_path, key)
    name = to_display_key(key)
    logger.debug(f"Writing {name} to {path}")

    try:
        with open(path, "w", encoding="utf-8") as entry:
            entry.write(f"{value}\n")
    except OSError as e:
        # The kernel validates on write, so a rejected value surfaces here too
        _count(metrics, errors.report_os_error(e, name, errors.SETTING))
        return ERR_OPEN_FAILED

    out.write(mode.format_line(name, f"{value}\n"))

    _count(metrics, errors.SUCCESS)
    return WRITE_OK


def _count(metrics: Optional[TunablesMetricsClient], status: str):
    if metrics is not None:
        metrics.inc_write(status)

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

import os
import stat
import logging
from typing import Optional, TextIO

from kernel_tunables import errors
from kernel_tunables.config import DisplayMode, TunablesConfig, default_config
from kernel_tunables.metrics_client import TunablesMetricsClient
from kernel_tunables.setting_reader import read_setting

logger = logging.getLogger(__name__)

ERR_SUBTREE_FAILED = -1


def display_all(path: str, mode: DisplayMode, config: Optional[TunablesConfig] = None,
                show_opaque: bool = False, out: Optional[TextIO] = None,
                metrics: Optional[TunablesMetricsClient] = None, depth: int = 0) -> int:
    """
    Print every tunable below path, depth first.

    A directory that cannot be opened fails only its own subtree; an entry
    that cannot be stat'ed is reported and skipped.

    Args:
        path: Directory under the proc root, ending with '/'
        mode: Display mode for the output lines
        config: Tunables configuration (default from env)
        show_opaque: Include opaque entries (-A/-X); passed through unchanged
        out: Data stream (default sys.stdout)
        metrics: Optional metrics client
        depth: Current recursion level

    Returns:
        0 if every leaf was read, otherwise the OR of the failing results
    """
    config = default_config(config)

    if depth > config.max_depth:
        logger.error(errors.ERR_MAX_DEPTH.format(config.max_depth, path))
        return ERR_SUBTREE_FAILED

    try:
        with os.scandir(path) as it:
            names = sorted(entry.name for entry in it)
    except OSError as e:
        logger.error(errors.ERR_OPENING_DIR.format(path))
        logger.debug(f"opening {path} failed: {e}")
        return ERR_SUBTREE_FAILED

    rc = 0
    for name in names:
        full_path = f"{path}{name}"

        try:
            st = os.stat(full_path)
        except OSError as e:
            logger.error(f"{full_path}: {e.strerror}")
            continue

        if stat.S_ISDIR(st.st_mode):
            logger.debug(f"Descending into {full_path}/")
            rc |= display_all(f"{full_path}/", mode, config, show_opaque=show_opaque,
                              out=out, metrics=metrics, depth=depth + 1)
        else:
            rc |= read_setting(full_path[len(config.proc_path):], mode, config,
                               out=out, metrics=metrics)

    return rc

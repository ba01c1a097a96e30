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

import logging
from typing import Dict, Any, Optional, TextIO, Tuple

from kernel_tunables import errors
from kernel_tunables.config import DisplayMode, TunablesConfig, default_config
from kernel_tunables.metrics_client import TunablesMetricsClient
from kernel_tunables.setting_writer import write_setting

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", ";")


def parse_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Parse one line of a sysctl.conf style file.

    Args:
        line: Raw line, terminator included or not

    Returns:
        (name, value) with surrounding whitespace removed, or None for
        blank and comment lines

    Raises:
        ValueError: the line is not of the form name = value
    """
    line = line.strip()
    if not line or line.startswith(COMMENT_PREFIXES):
        return None

    name, sep, value = line.partition("=")
    name = name.strip()
    value = value.strip()
    if not sep or not name or not value:
        raise ValueError(f"invalid syntax: {line!r}")

    return name, value


def preload(filename: Optional[str] = None, mode: Optional[DisplayMode] = None,
            config: Optional[TunablesConfig] = None, out: Optional[TextIO] = None,
            metrics: Optional[TunablesMetricsClient] = None) -> Dict[str, Any]:
    """
    Apply every setting found in a preload file

    Args:
        filename: Preload source (default: config.preload_file)
        mode: Display mode for the write confirmations
        config: Tunables configuration (default from env)
        out: Data stream (default sys.stdout)
        metrics: Optional metrics client

    Returns:
        Dictionary with aggregated results; 'return_code' is the last
        failing write's code, -1 if the file could not be opened, else 0
    """
    config = default_config(config)
    mode = mode if mode is not None else DisplayMode()
    filename = filename or config.preload_file

    logger.info(f"Preloading settings from {filename}")

    all_results = []
    warnings = 0
    return_code = 0

    try:
        source = open(filename, "r", encoding="utf-8", errors="replace")
    except OSError as e:
        logger.error(errors.ERR_PRELOAD_FILE.format(filename))
        logger.debug(f"opening {filename} failed: {e}")
        return {
            'status': 'failed',
            'source': filename,
            'applied': 0,
            'failed': 0,
            'warnings': 0,
            'return_code': -1,
            'results': []
        }

    with source:
        for lineno, line in enumerate(source, start=1):
            try:
                parsed = parse_line(line)
            except ValueError as e:
                logger.warning(errors.WARN_BAD_LINE.format(filename, lineno))
                logger.debug(f"{filename}({lineno}): {e}")
                warnings += 1
                _count(metrics, "invalid")
                continue

            if parsed is None:
                _count(metrics, "skipped")
                continue

            name, value = parsed
            rc = write_setting(f"{name}={value}", mode, config, out=out, metrics=metrics)
            if rc:
                return_code = rc
            _count(metrics, "applied" if rc == 0 else "failed")

            all_results.append({
                'line': lineno,
                'key': name,
                'success': rc == 0,
                'return_code': rc
            })

    success_count = sum(1 for r in all_results if r['success'])
    total_count = len(all_results)

    summary = {
        'status': 'completed',
        'source': filename,
        'applied': success_count,
        'failed': total_count - success_count,
        'warnings': warnings,
        'return_code': return_code,
        'results': all_results
    }

    logger.info(f"Preload completed: {success_count}/{total_count} applied, {warnings} invalid lines")

    return summary


def _count(metrics: Optional[TunablesMetricsClient], outcome: str):
    if metrics is not None:
        metrics.inc_preload_line(outcome)

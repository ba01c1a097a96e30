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
import logging
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

DEFAULT_PROC_PATH = "/proc/sys/"
DEFAULT_PRELOAD = "/etc/sysctl.conf"
DEFAULT_MAX_DEPTH = 32
DEFAULT_LOG_LEVEL = "WARNING"


class TunablesConfig:
    """Where the tunables live and how deep the tree may be walked"""

    def __init__(self, proc_path: str = DEFAULT_PROC_PATH,
                 preload_file: str = DEFAULT_PRELOAD,
                 max_depth: int = DEFAULT_MAX_DEPTH,
                 log_level: str = DEFAULT_LOG_LEVEL):
        """
        Args:
            proc_path: Root of the tunables hierarchy, always ends with '/'
            preload_file: File used by preload when none is given
            max_depth: Deepest directory level the enumeration descends into
            log_level: Level name for the diagnostic logger
        """
        if not proc_path.endswith("/"):
            proc_path += "/"
        self.proc_path = proc_path
        self.preload_file = preload_file
        self.max_depth = max_depth
        self.log_level = log_level.upper()

    @classmethod
    def from_env(cls) -> "TunablesConfig":
        max_depth = os.environ.get("SYSCTL_MAX_DEPTH", str(DEFAULT_MAX_DEPTH))
        try:
            max_depth = int(max_depth)
        except ValueError:
            logger.warning(f"Ignoring invalid SYSCTL_MAX_DEPTH={max_depth!r}, using {DEFAULT_MAX_DEPTH}")
            max_depth = DEFAULT_MAX_DEPTH

        return cls(
            proc_path=os.environ.get("SYSCTL_PROC_PATH", DEFAULT_PROC_PATH),
            preload_file=os.environ.get("SYSCTL_PRELOAD_FILE", DEFAULT_PRELOAD),
            max_depth=max_depth,
            log_level=os.environ.get("SYSCTL_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )

    def __repr__(self):
        return (f"TunablesConfig(proc_path={self.proc_path!r}, preload_file={self.preload_file!r}, "
                f"max_depth={self.max_depth}, log_level={self.log_level!r})")


class DisplayMode(NamedTuple):
    """
    Output format shared by every read and write.

    Built once from the command line flags and handed to each operation;
    being a tuple it cannot be changed afterwards.
    """

    print_name: bool = True
    print_newline: bool = True

    @classmethod
    def from_flags(cls, no_name: bool = False, binary: bool = False) -> "DisplayMode":
        """-b is "binary" output: no trailing newline, and therefore no name either"""
        if binary:
            return cls(print_name=False, print_newline=False)
        return cls(print_name=not no_name, print_newline=True)

    def format_line(self, name: str, text: str) -> str:
        """
        Format one line of a value for output.

        Args:
            name: Key in dotted notation
            text: Line as read from the tunable, including its terminator

        Returns:
            Text ready to be written to the data stream
        """
        if not self.print_newline and text.endswith("\n"):
            text = text[:-1]
        if self.print_name:
            return f"{name} = {text}"
        return text


def default_config(config: Optional[TunablesConfig]) -> TunablesConfig:
    return config if config is not None else TunablesConfig.from_env()

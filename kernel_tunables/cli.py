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

"""ksysctl: read and modify kernel parameters under /proc/sys.

    ksysctl [-n|-b] variable ...          print values
    ksysctl [-n] -w variable=value ...    set values
    ksysctl [-n] -a                       print everything
    ksysctl [-n] -A | -X                  print everything, opaque entries included
    ksysctl -p [file]                     apply a preload file (default /etc/sysctl.conf)
"""

import sys
import logging
from typing import Optional, Tuple

import click

from effectuation.preload import preload
from kernel_tunables import errors
from kernel_tunables.config import DisplayMode, TunablesConfig
from kernel_tunables.metrics_client import TunablesMetricsClient
from kernel_tunables.setting_reader import read_setting
from kernel_tunables.setting_writer import write_setting
from kernel_tunables.tree_enumerator import display_all

logger = logging.getLogger(__name__)

USAGE_STATUS = -1

_log_handler: Optional[logging.Handler] = None


def configure_logging(level: str):
    """Send diagnostics to stderr; replaces the handler of a previous call"""
    global _log_handler

    root = logging.getLogger()
    if _log_handler is not None:
        root.removeHandler(_log_handler)

    _log_handler = logging.StreamHandler(sys.stderr)
    _log_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(_log_handler)

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    root.setLevel(numeric_level)


def usage(name: str, default_preload: str) -> int:
    click.echo(
        f"usage:  {name} [-n] variable ... \n"
        f"        {name} [-n] -w variable=value ... \n"
        f"        {name} [-n] -a \n"
        f"        {name} [-n] -p <file>   (default {default_preload}) \n"
        f"        {name} [-n] -A"
    )
    return USAGE_STATUS


def exit_status(rc: int) -> int:
    """Negative results map to 8-bit exit codes, -1 -> 255"""
    return rc & 0xFF


def run_batch(variables: Tuple[str, ...], write: bool, mode: DisplayMode,
              config: TunablesConfig, metrics: TunablesMetricsClient) -> int:
    """Read or write each variable in turn; the last failure is the batch status"""
    status = 0
    for variable in variables:
        if write:
            rc = write_setting(variable, mode, config, metrics=metrics)
        else:
            rc = read_setting(variable, mode, config, metrics=metrics)
        if rc:
            status = rc
    return status


class TunablesCommand(click.Command):
    """Answers unknown switches with the ksysctl usage text instead of click's"""

    def parse_args(self, ctx: click.Context, args):
        try:
            return super().parse_args(ctx, args)
        except click.NoSuchOption as e:
            config = TunablesConfig.from_env()
            configure_logging(config.log_level)
            logger.error(errors.ERR_UNKNOWN_PARAMETER.format(e.option_name))
            ctx.exit(exit_status(usage(ctx.info_name or "ksysctl", config.preload_file)))


@click.command(cls=TunablesCommand, context_settings={"help_option_names": []})
@click.option("-n", "no_name", is_flag=True, help="Print values without names")
@click.option("-b", "binary", is_flag=True, help="Print values without names and without newline")
@click.option("-w", "write", is_flag=True, help="Treat arguments as variable=value settings")
@click.option("-a", "show_all", is_flag=True, help="Print all variables")
@click.option("-A", "show_all_opaque", is_flag=True, help="Print all variables, opaque ones included")
@click.option("-X", "show_all_hex", is_flag=True, help="Same as -A")
@click.option("-p", "preload_mode", is_flag=True,
              help="Apply settings from the file given as argument (default from SYSCTL_PRELOAD_FILE)")
@click.option("-h", "-?", "show_usage", is_flag=True, help="Show usage and exit")
@click.argument("variables", nargs=-1)
@click.pass_context
def cli(ctx: click.Context, no_name: bool, binary: bool, write: bool, show_all: bool,
        show_all_opaque: bool, show_all_hex: bool, preload_mode: bool,
        show_usage: bool, variables: Tuple[str, ...]) -> None:
    """Read and modify kernel parameters at runtime."""
    config = TunablesConfig.from_env()
    configure_logging(config.log_level)
    logger.debug(f"Using {config!r}")

    name = ctx.info_name or "ksysctl"
    mode = DisplayMode.from_flags(no_name=no_name, binary=binary)
    enumerate_all = show_all or show_all_opaque or show_all_hex

    if show_usage:
        ctx.exit(exit_status(usage(name, config.preload_file)))

    if preload_mode:
        metrics = TunablesMetricsClient(command="preload")
        preload_file = variables[0] if variables else None
        summary = preload(preload_file, mode, config, metrics=metrics)
        rc = summary['return_code']
    elif enumerate_all:
        metrics = TunablesMetricsClient(command="all")
        rc = display_all(config.proc_path, mode, config,
                         show_opaque=show_all_opaque or show_all_hex, metrics=metrics)
    elif variables or no_name or binary or write:
        # Switches alone are a valid, empty batch
        metrics = TunablesMetricsClient(command="write" if write else "read")
        rc = run_batch(variables, write, mode, config, metrics)
    else:
        ctx.exit(exit_status(usage(name, config.preload_file)))

    metrics.push()
    ctx.exit(exit_status(rc))


def main():
    cli(prog_name="ksysctl")


if __name__ == "__main__":
    main()

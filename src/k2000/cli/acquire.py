from pathlib import Path
from typing import Optional

import click
from click_option_group import optgroup

from k2000._version import __version__
from k2000.device import Keithley2000, MockKeithley2000
from k2000.session import AcquisitionSession, clean_comment
from k2000.types import ConfigError, MeasurementMode, SessionConfig, SessionStatus
from k2000.util import (
    DEFAULT_FLUSH_EVERY,
    DEFAULT_GNUPLOT,
    DEFAULT_GPIB_ADDRESS,
    DEFAULT_LOGLEVEL,
    get_log_filename,
    shutdown_log,
    start_log,
)

DISCLAIMER = f"""
k2000 - Data acquisition using the Keithley 2000 over GPIB. {__version__}.
Copyright (C) 2004...2025 by Joerg Hau.

This program is free software; you can redistribute it and/or modify it under
the terms of the GNU General Public License, version 2, as published by the
Free Software Foundation.

This program is distributed in the hope that it will be useful, but WITHOUT ANY
WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR A
PARTICULAR PURPOSE. See the GNU General Public License for details.
"""


def print_settings(config: SessionConfig) -> None:
    """Summary shown before the first sample."""
    click.echo(f"\n GPIB address :  {config.visa_resource}")
    click.echo(f"  Output file :  {config.output}")
    if config.comment:
        click.echo(f"      Comment :  {config.comment}")
    click.echo(f"         Mode :  {config.mode.description}")
    click.echo(f"      Refresh :  {config.flush_every}")
    if config.stop_after > 0:
        click.echo(f"   Halt after :  {config.stop_after:g} min")
    click.echo("         Stop :  Press 'q' or ESC.\n")
    click.echo("     Count           Time      Reading")


@click.command(name="acquire")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@optgroup.group("Instrument")
@optgroup.option(
    "--address",
    "-a",
    type=click.IntRange(0, 30),
    default=DEFAULT_GPIB_ADDRESS,
    help=f"GPIB primary address of the instrument (default: {DEFAULT_GPIB_ADDRESS})",
)
@optgroup.option(
    "--resource",
    "-r",
    type=str,
    default="",
    help="Full VISA resource string, overrides --address",
)
@optgroup.option(
    "--mode",
    "-m",
    type=click.IntRange(0, 5),
    default=0,
    help="Measurement mode, see `k2000 modes` (default: 0 = DCV)",
)
@optgroup.option(
    "--blank-display",
    "-d",
    is_flag=True,
    default=False,
    help="Disable the instrument display while acquiring",
)
@optgroup.option(
    "--mock",
    is_flag=True,
    default=False,
    help="Use a simulated instrument instead of real hardware",
)
@optgroup.group("Acquisition")
@optgroup.option(
    "--delay",
    "-t",
    type=click.IntRange(0, 600),
    default=10,
    help="Delay between measurements in 0.1 s, 0 = free-running (default: 10 = 1 s)",
)
@optgroup.option(
    "--flush-every",
    "-w",
    type=click.IntRange(min=1),
    default=DEFAULT_FLUSH_EVERY,
    help=f"Force write to disk every x samples (default: {DEFAULT_FLUSH_EVERY})",
)
@optgroup.option(
    "--stop-after",
    "-T",
    type=click.FloatRange(min=0),
    default=0.0,
    help="Stop acquisition after this time in minutes (default: 0 = endless)",
)
@optgroup.option("--comment", "-c", type=str, default="", help="Comment text")
@optgroup.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite an existing file without asking",
)
@optgroup.group("Graphics")
@optgroup.option(
    "--gnuplot",
    "-g",
    type=str,
    default=DEFAULT_GNUPLOT,
    help="Path to the gnuplot executable (if not in your PATH)",
)
@optgroup.option(
    "--no-graph", "-n", is_flag=True, default=False, help="No live graphics"
)
@optgroup.group("Logging")
@optgroup.option(
    "--log-to-file/--no-log-to-file",
    default=True,
    help="Enable/disable logging to file (default: enabled)",
)
@optgroup.option(
    "--log-to-stdout/--no-log-to-stdout",
    default=False,
    help="Enable/disable console logging (default: disabled)",
)
@optgroup.option(
    "--log-path", "-lp", default="", help="Custom path for log file"
)
@optgroup.option(
    "--log-level",
    "-ll",
    default=DEFAULT_LOGLEVEL,
    help="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR) (default: INFO)",
)
@optgroup.option(
    "--quiet", "-q", is_flag=True, default=False, help="Do not show the banner"
)
@click.pass_context
def acquire(
    ctx: click.Context,
    output: Path,
    address: int,
    resource: str,
    mode: int,
    blank_display: bool,
    mock: bool,
    delay: int,
    flush_every: int,
    stop_after: float,
    comment: str,
    force: bool,
    gnuplot: str,
    no_graph: bool,
    log_to_file: bool,
    log_to_stdout: bool,
    log_path: str,
    log_level: str,
    quiet: bool,
):
    """Log readings of a Keithley 2000 to OUTPUT.

    Readings are taken every --delay tenths of a second and written as
    `minutes<TAB>reading` lines. Press 'q' or ESC to stop.

    Exit status: 0 on success, 1 for a usage problem, 4 if the output file
    cannot be written, 5 for an instrument or bus failure.

    Usage
    `k2000 acquire -m 2 -t 5 -T 60 -c "sample 3, 4-wire" run3.dat`
    """
    if not quiet:
        click.echo(DISCLAIMER, err=True)

    start_log(
        log_to_file=log_to_file,
        log_to_stdout=log_to_stdout,
        log_path=log_path,
        log_level=log_level,
    )

    try:
        config = SessionConfig(
            output=output,
            address=address,
            resource=resource,
            mode=MeasurementMode.from_index(mode),
            interval=delay / 10.0,
            blank_display=blank_display,
            flush_every=flush_every,
            stop_after=stop_after,
            comment=clean_comment(comment),
            graphics=not no_graph,
            gnuplot=gnuplot,
        )
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        shutdown_log()
        ctx.exit(int(SessionStatus.CONFIG_ERROR))

    if output.exists() and not force:
        if not click.confirm(f"\a\nFile '{output}' exists - Overwrite?", err=True):
            shutdown_log()
            ctx.exit(int(SessionStatus.CONFIG_ERROR))

    instrument: Keithley2000
    if mock:
        instrument = MockKeithley2000(config.visa_resource)
    else:
        instrument = Keithley2000(config.visa_resource)

    print_settings(config)
    result = AcquisitionSession(config, instrument).run()
    click.echo("\n")
    if not result.ok and get_log_filename():
        click.echo(f"Details in {get_log_filename()}", err=True)
    shutdown_log()
    ctx.exit(int(result.status))

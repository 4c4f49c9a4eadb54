from typing import Optional

import click

from k2000.types import MeasurementMode
from k2000.util.check_hw import list_visa_devices


def print_tree(cmd, prefix="", parent_ctx=None):
    """Print command tree starting from given command."""
    ctx = click.Context(cmd, info_name=cmd.name, parent=parent_ctx)

    # Only print root name if no parent
    if not parent_ctx:
        click.echo(cmd.name)

    for sub in sorted(cmd.list_commands(ctx)):
        sub_cmd = cmd.get_command(ctx, sub)
        click.echo(f"{prefix}└── {sub}")
        if isinstance(sub_cmd, click.Group):
            print_tree(sub_cmd, prefix + "    ", ctx)


def tree_option(f):
    """Add --tree option to command."""

    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        print_tree(ctx.command)
        ctx.exit()

    return click.option(
        "--tree",
        is_flag=True,
        help="Show command tree from this point",
        expose_value=False,
        is_eager=True,
        callback=callback,
    )(f)


@click.group()
@tree_option
def cli():
    """k2000 - Data acquisition using the Keithley 2000 over GPIB.

    Logs readings to a text file, optionally with a live gnuplot chart.
    """
    pass


@cli.command()
def modes():
    """List the measurement modes accepted by `acquire --mode`."""
    click.echo("\nMeasurement modes:")
    click.echo("------------------")
    for mode in MeasurementMode:
        click.echo(
            f"  {mode.index} = {mode.name:<6} {mode.description:<12} "
            f"(:func '{mode.function}', unit {mode.unit})"
        )
    click.echo("")


@cli.command()
@click.option(
    "--filter", "-f", help='Filter devices by resource string (e.g. "GPIB")'
)
@click.option("--model", "-m", help='Filter devices by model string (e.g. "MODEL 2000")')
def visa(filter: Optional[str], model: Optional[str]):
    """List all available VISA devices.

    Displays information about connected VISA instruments:
    - Resource address (e.g. GPIB0::16::INSTR)
    - Device identification string
    - Connection errors
    """
    with click.progressbar(length=100, label="Scanning devices") as bar:

        def progress_callback(current, total, msg):
            bar.update(int(100 * current / max(total, 1)))

        devices = list_visa_devices(
            filter_string=filter,
            model_filter=model,
            progress_callback=progress_callback,
        )

    click.echo("\nAvailable VISA devices:")
    click.echo("----------------------")

    if not devices:
        click.echo("No VISA devices found")
        click.echo("")
        return

    for addr, info in devices.items():
        click.echo(f"\nAddress: {addr}")
        click.echo(f"Status: {info['status']}")

        if info["status"] == "connected":
            click.echo(f"Device: {info['idn']}")
        elif info["error"]:
            click.echo(f"Error: {info['error']}")

    click.echo("")

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from k2000.session import PlotPipeline
from k2000.types import PlotLaunchError


class FakeStdin(io.StringIO):
    pass


@pytest.fixture
def mock_popen():
    with patch("k2000.session.plot.subprocess.Popen") as popen:
        proc = popen.return_value
        proc.stdin = FakeStdin()
        proc.stdin.close = MagicMock()
        proc.pid = 4242
        proc.returncode = 0
        yield popen


def test_start_failure():
    plot = PlotPipeline("/nonexistent/path/to/gnuplot")
    with pytest.raises(PlotLaunchError, match="Cannot launch"):
        plot.start()
    assert not plot.active


def test_commands(mock_popen):
    plot = PlotPipeline("gnuplot").start()
    plot.setup(title="run.dat", ylabel="Ohm")
    plot.refresh(Path("run.dat"))

    assert mock_popen.call_args.args[0] == ["gnuplot"]
    assert plot.proc.stdin.getvalue().splitlines() == [
        "set mouse;set mouse labels; set style data lines; set title 'run.dat'",
        "set grid xt; set grid yt; set xlabel 'min'; set ylabel 'Ohm'",
        "plot 'run.dat' with lines title ''",
    ]


def test_stop_closes_and_waits(mock_popen):
    plot = PlotPipeline().start()
    proc = plot.proc
    plot.stop()
    proc.stdin.close.assert_called_once()
    proc.wait.assert_called_once()
    assert not plot.active
    plot.stop()  # no-op once stopped


def test_broken_pipe_disables_graphics(mock_popen):
    plot = PlotPipeline().start()
    proc = plot.proc
    proc.stdin.write = MagicMock(side_effect=BrokenPipeError())
    plot.refresh(Path("run.dat"))
    assert not plot.active
    proc.wait.assert_called_once()
    plot.refresh(Path("run.dat"))  # silently ignored

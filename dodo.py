# -*- coding: utf-8 -*-
# pydoit task file, run `doit list` to see the tasks (pip install -e .[dev] 1st)
#   doit test_logic -k session -s fast
#   doit test_hardware
#   doit format

from doit.action import CmdAction

SOURCES = ["src/k2000", "test", "dodo.py"]

TEST_PARAMS = [
    {"name": "keyword", "short": "k", "default": "", "help": "pytest -k expression"},
    {
        "name": "speed",
        "short": "s",
        "default": "all",
        "help": "'fast' skips tests marked slow, 'slow' runs only those",
    },
    {
        "name": "retry",
        "short": "r",
        "default": False,
        "type": bool,
        "help": "only rerun last failures",
    },
    {
        "name": "print_logs",
        "short": "p",
        "default": False,
        "type": bool,
        "help": "do not capture output",
    },
]

MARKERS = {"all": "", "fast": "not slow", "slow": "slow"}


def pytest_command(test_dir, keyword, speed, retry, print_logs):
    """Build the pytest command line for one test directory."""
    if speed not in MARKERS:
        raise ValueError(f"speed must be one of {', '.join(MARKERS)} (got {speed})")
    cmd = ["pytest", "--color=yes", "-vv"]
    if print_logs:
        cmd.append("--capture=no")
    if retry:
        cmd.append("--lf")
    if keyword:
        cmd += ["-k", f'"{keyword}"']
    if MARKERS[speed]:
        cmd += ["-m", f'"{MARKERS[speed]}"']
    cmd.append(test_dir)
    return " ".join(cmd)


def _test_task(test_dir):
    def action(keyword, speed, retry, print_logs):
        return pytest_command(test_dir, keyword, speed, retry, print_logs)

    return {
        "actions": [CmdAction(action)],
        "params": TEST_PARAMS,
        "verbosity": 2,
    }


def task_test_logic():
    """Tests that need no instrument (test/logic/)."""
    return _test_task("test/logic/")


def task_test_hardware():
    """Tests against a connected Keithley 2000 (test/hardware/)."""
    return _test_task("test/hardware/")


def task_format():
    """Sort imports and format with ruff."""
    return {
        "actions": [f"ruff check --select I --fix {src}" for src in SOURCES]
        + [f"ruff format {src}" for src in SOURCES],
        "verbosity": 2,
    }

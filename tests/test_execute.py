import pytest

from chd.errors import ChdError, InvalidArgumentError
from chd.execute import execute_command


def test_success_returns_zero():
    assert execute_command("true") == 0


def test_exit_status_is_returned():
    assert execute_command("exit 3") == 3


def test_missing_command_returns_127():
    assert execute_command("no-such-command-here-xyz >/dev/null 2>&1") == 127


def test_command_runs_in_shell(tmp_path):
    target = tmp_path / "out.txt"
    assert execute_command(f"echo hi > '{target}'") == 0
    assert target.read_text() == "hi\n"


def test_none_command_rejected():
    with pytest.raises(InvalidArgumentError):
        execute_command(None)


def test_signal_termination_raises():
    with pytest.raises(ChdError):
        execute_command("kill -9 $$")
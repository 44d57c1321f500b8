import time

from barutil.command import (
    CommandResult,
    close_command,
    exec_command,
    exec_no_read,
    fork_exec,
    open_command,
    read_output,
    reap_children,
)


def test_exec_command_captures_output():
    assert exec_command("echo hello") == CommandResult(0, "hello")


def test_exec_command_reports_exit_code():
    result = exec_command("echo out; exit 3")
    assert result.exit_code == 3
    assert result.out == "out"


def test_exec_command_strips_only_one_newline():
    assert exec_command("printf 'a\\n\\n'").out == "a\n"


def test_exec_command_empty_command():
    assert exec_command("") == CommandResult(-1, "")


def test_exec_no_read_keeps_exit_code_only():
    assert exec_no_read("exit 5") == CommandResult(5, "")


def test_exec_no_read_empty_command():
    assert exec_no_read("").exit_code == -1


def test_open_command_empty_returns_none():
    assert open_command("") is None


def test_open_read_close_round_trip():
    process = open_command("echo first; echo second")
    assert process is not None
    assert read_output(process.stdout) == "first\nsecond"
    assert close_command(process) == 0


def test_fork_exec_empty_command():
    assert fork_exec("") == -1


def test_fork_exec_is_reaped():
    pid = fork_exec("true")
    assert pid > 0
    reaped: list[int] = []
    deadline = time.monotonic() + 5
    while pid not in reaped and time.monotonic() < deadline:
        reaped.extend(reap_children())
        time.sleep(0.01)
    assert pid in reaped
    assert pid not in reap_children()
"""Running shell commands and collecting their output."""

from __future__ import annotations

import logging
import subprocess
import threading
from dataclasses import dataclass
from typing import IO

log = logging.getLogger(__name__)

_SHELL = "/bin/sh"

_reap_lock = threading.Lock()
_reap: list[subprocess.Popen] = []


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured standard output of a finished command."""

    exit_code: int
    out: str


def _exit_status(returncode: int) -> int:
    # A child ended by a signal carries no exit status of its own.
    return returncode if returncode >= 0 else 0


def open_command(cmd: str) -> subprocess.Popen | None:
    """Start ``cmd`` in a shell of its own process group, with stdout piped.

    Returns None when the command is empty or cannot be started.
    """
    if not cmd:
        return None
    try:
        return subprocess.Popen(
            [_SHELL, "-c", cmd],
            stdout=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            start_new_session=True,
        )
    except OSError as exc:
        log.error("Unable to exec cmd %s, error %s", cmd, exc)
        return None


def read_output(stream: IO[str]) -> str:
    """Read a stream to its end and drop one trailing newline."""
    output = stream.read()
    return output.removesuffix("\n")


def close_command(process: subprocess.Popen) -> int:
    """Close the command's output pipe, wait for it and return its exit status."""
    if process.stdout is not None:
        process.stdout.close()
    returncode = process.wait()
    if returncode >= 0:
        log.debug("Cmd exited with code %d", returncode)
    else:
        log.debug("Cmd killed by %d", -returncode)
    return _exit_status(returncode)


def exec_command(cmd: str) -> CommandResult:
    """Run ``cmd`` to completion and capture its output."""
    process = open_command(cmd)
    if process is None:
        return CommandResult(-1, "")
    assert process.stdout is not None
    output = read_output(process.stdout)
    return CommandResult(close_command(process), output)


def exec_no_read(cmd: str) -> CommandResult:
    """Run ``cmd`` without reading its output; only the exit status is kept."""
    process = open_command(cmd)
    if process is None:
        return CommandResult(-1, "")
    return CommandResult(close_command(process), "")


def fork_exec(cmd: str) -> int:
    """Start ``cmd`` in the background and return its pid, or -1 if it is empty.

    The child is remembered so that :func:`reap_children` can collect it.
    """
    if not cmd:
        return -1
    try:
        process = subprocess.Popen([_SHELL, "-c", cmd], start_new_session=True)
    except OSError as exc:
        log.error("Unable to exec cmd %s, error %s", cmd, exc)
        return -1
    with _reap_lock:
        _reap.append(process)
    log.debug("Added child to reap list: %d", process.pid)
    return process.pid


def reap_children() -> list[int]:
    """Collect background children that have finished and return their pids."""
    with _reap_lock:
        finished = [process for process in _reap if process.poll() is not None]
        for process in finished:
            _reap.remove(process)
    return [process.pid for process in finished]
"""Background runner that feeds a command's output to callbacks."""

from __future__ import annotations

import logging
import os
import signal as _signal
import subprocess
from typing import Any, Callable, Mapping

from barutil.command import close_command, exec_command, exec_no_read, open_command
from barutil.sleeper_thread import SleeperThread

log = logging.getLogger(__name__)

_ONCE_SECONDS = 100_000_000
_SIGRTMIN = getattr(_signal, "SIGRTMIN", 34)


def _is_uint(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, float) and value.is_integer() and value >= 0


def _is_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


class WorkerThread:
    """Runs the configured ``exec`` command and reports its output.

    With a positive ``interval`` the command is run once per interval (gated
    by ``exec_if``); otherwise it runs continuously and every output line is
    reported, optionally restarted after ``restart-interval`` seconds.
    """

    def __init__(
        self,
        config: Mapping[str, Any],
        output_callback: Callable[[str], None],
        exit_callback: Callable[[int], None],
    ) -> None:
        self._output_callback = output_callback
        self._exit_callback = exit_callback
        self._exec = config["exec"] if isinstance(config.get("exec"), str) else ""
        self._exec_if = config["exec_if"] if isinstance(config.get("exec_if"), str) else ""

        interval = config.get("interval")
        if _is_uint(interval):
            self._interval = int(interval)
        elif interval == "once":
            self._interval = _ONCE_SECONDS
        else:
            self._interval = 0

        restart = config.get("restart-interval")
        self._restart_interval: int | None = int(restart) if _is_uint(restart) else None

        sig = config.get("signal")
        self._signal: int | None = _SIGRTMIN + int(sig) if _is_int(sig) else None

        self._process: subprocess.Popen | None = None
        self._thread = SleeperThread()
        if self._interval > 0:
            self._thread.start(self._delay_worker)
        elif self._exec:
            self._thread.start(self._continuous_worker)

    def refresh(self, signal: int) -> None:
        """Run the command early if ``signal`` is the configured one."""
        if self._signal is not None and self._signal == signal:
            self.wake_up()

    def wake_up(self) -> None:
        """End the current wait between runs."""
        self._thread.wake_up()

    def stop(self) -> None:
        """Terminate a running child's process group and stop the loop."""
        process = self._process
        self._process = None
        self._thread.stop()
        if process is not None:
            try:
                os.killpg(process.pid, _signal.SIGTERM)
            except ProcessLookupError:
                pass

    def __enter__(self) -> WorkerThread:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _delay_worker(self) -> None:
        can_update = True
        if self._exec_if:
            result = exec_no_read(self._exec_if)
            if result.exit_code != 0:
                can_update = False
                self._exit_callback(result.exit_code)
        if can_update and self._exec:
            result = exec_command(self._exec)
            if result.exit_code == 0:
                self._output_callback(result.out)
            else:
                self._exit_callback(result.exit_code)
        self._thread.sleep_for(self._interval)

    def _open(self) -> subprocess.Popen:
        process = open_command(self._exec)
        if process is None:
            raise RuntimeError(f"Unable to open {self._exec}")
        self._process = process
        return process

    def _continuous_worker(self) -> None:
        process = self._open()
        while True:
            assert process.stdout is not None
            line = process.stdout.readline()
            if line:
                self._output_callback(line.removesuffix("\n"))
                continue
            exit_code = close_command(process)
            self._process = None
            if not self._thread.is_running():
                return
            if exit_code != 0:
                log.error("'%s' stopped unexpectedly, is it endless?", self._exec)
                self._exit_callback(exit_code)
            if self._restart_interval is None:
                self._thread.stop()
                return
            self._thread.sleep_for(self._restart_interval)
            if not self._thread.is_running():
                return
            process = self._open()
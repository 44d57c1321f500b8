"""Watching the rfkill control device for radio block state changes."""

from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

log = logging.getLogger(__name__)

_EVENT = struct.Struct("=IBBBB")
EVENT_SIZE_V1 = _EVENT.size


class RfkillType(IntEnum):
    """Kinds of radio switched by rfkill."""

    ALL = 0
    WLAN = 1
    BLUETOOTH = 2
    UWB = 3
    WIMAX = 4
    WWAN = 5
    GPS = 6
    FM = 7
    NFC = 8


class RfkillOp(IntEnum):
    """Operations reported by rfkill events."""

    ADD = 0
    DEL = 1
    CHANGE = 2
    CHANGE_ALL = 3


@dataclass(frozen=True)
class RfkillEvent:
    """One event read from the rfkill control device."""

    idx: int
    type: int
    op: int
    soft: bool
    hard: bool


def _enum_or_int(enum: type[IntEnum], value: int) -> int:
    try:
        return enum(value)
    except ValueError:
        return value


def parse_event(data: bytes) -> RfkillEvent:
    """Decode an rfkill event; extra trailing bytes are ignored."""
    if len(data) < EVENT_SIZE_V1:
        raise ValueError(f"Wrong size of RFKILL event: {len(data)} < {EVENT_SIZE_V1}")
    idx, kind, op, soft, hard = _EVENT.unpack_from(data)
    return RfkillEvent(
        idx=idx,
        type=_enum_or_int(RfkillType, kind),
        op=_enum_or_int(RfkillOp, op),
        soft=bool(soft),
        hard=bool(hard),
    )


class Rfkill:
    """Tracks whether radios of one type are blocked.

    A device that cannot be opened is logged and leaves the state unblocked.
    """

    def __init__(self, rfkill_type: RfkillType, device: str | os.PathLike = "/dev/rfkill") -> None:
        self._type = rfkill_type
        self._state = False
        self._callbacks: list[Callable[[RfkillEvent], None]] = []
        self._fd: int | None = None
        try:
            self._fd = os.open(device, os.O_RDONLY | os.O_NONBLOCK)
        except OSError:
            log.error("Can't open RFKILL control device")

    def connect(self, callback: Callable[[RfkillEvent], None]) -> Callable[[RfkillEvent], None]:
        """Call ``callback`` with each event that changes this radio type."""
        self._callbacks.append(callback)
        return callback

    def handle_data(self, data: bytes) -> bool:
        """Apply raw event bytes; True while the device is worth watching."""
        try:
            event = parse_event(data)
        except ValueError:
            log.error("Wrong size of RFKILL event: %d < %d", len(data), EVENT_SIZE_V1)
            return True
        if event.type == self._type and event.op in (RfkillOp.ADD, RfkillOp.CHANGE):
            self._state = event.soft or event.hard
            for callback in list(self._callbacks):
                callback(event)
        return True

    def read_event(self) -> bool:
        """Read and apply one event; False once the device cannot be read."""
        if self._fd is None:
            log.error("Failed to poll RFKILL control device")
            return False
        try:
            data = os.read(self._fd, EVENT_SIZE_V1)
        except BlockingIOError:
            return True
        except OSError as exc:
            log.error("Reading of RFKILL events failed: %s", exc.errno)
            return False
        return self.handle_data(data)

    def get_state(self) -> bool:
        """Whether the radio is soft- or hard-blocked."""
        return self._state

    def close(self) -> None:
        """Close the control device."""
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> Rfkill:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
"""Client for the i3/sway IPC protocol and the swaybar configuration it reports."""

from __future__ import annotations

import logging
import os
import socket
import struct
import threading
from dataclasses import dataclass
from enum import IntEnum

from barutil.jsonparse import parse_json
from barutil.safe_signal import SafeSignal

log = logging.getLogger(__name__)

IPC_MAGIC = b"i3-ipc"
_HEADER = struct.Struct("=II")
IPC_HEADER_SIZE = len(IPC_MAGIC) + _HEADER.size


class IpcCommand(IntEnum):
    """Message and event types of the IPC protocol."""

    COMMAND = 0
    GET_WORKSPACES = 1
    SUBSCRIBE = 2
    GET_OUTPUTS = 3
    GET_TREE = 4
    GET_MARKS = 5
    GET_BAR_CONFIG = 6
    GET_VERSION = 7
    GET_BINDING_MODES = 8
    GET_CONFIG = 9
    SEND_TICK = 10
    GET_INPUTS = 100
    GET_SEATS = 101
    EVENT_WORKSPACE = (1 << 31) | 0
    EVENT_OUTPUT = (1 << 31) | 1
    EVENT_MODE = (1 << 31) | 2
    EVENT_WINDOW = (1 << 31) | 3
    EVENT_BARCONFIG_UPDATE = (1 << 31) | 4
    EVENT_BINDING = (1 << 31) | 5
    EVENT_SHUTDOWN = (1 << 31) | 6
    EVENT_TICK = (1 << 31) | 7
    EVENT_BAR_STATE_UPDATE = (1 << 31) | 20
    EVENT_INPUT = (1 << 31) | 21


class IpcError(RuntimeError):
    """Raised when the IPC socket cannot be used or a message is malformed."""


@dataclass(frozen=True)
class IpcResponse:
    """One message received from the compositor."""

    size: int
    type: int
    payload: str


@dataclass(frozen=True)
class SwaybarConfig:
    """The supported subset of a swaybar configuration object."""

    id: str = ""
    mode: str = ""
    hidden_state: str = ""


def event_mask(event: int) -> int:
    """Bit that stands for ``event`` in a subscription mask."""
    return 1 << (int(event) & 0x7F)


def encode_message(msg_type: int, payload: str | bytes = "") -> bytes:
    """Frame ``payload`` as an IPC message of type ``msg_type``."""
    data = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
    return IPC_MAGIC + _HEADER.pack(len(data), int(msg_type)) + data


def decode_header(data: bytes) -> tuple[int, int]:
    """Return ``(payload size, message type)`` from an IPC header."""
    if len(data) < IPC_HEADER_SIZE:
        raise IpcError(f"IPC header too short: {len(data)} < {IPC_HEADER_SIZE}")
    if data[: len(IPC_MAGIC)] != IPC_MAGIC:
        raise IpcError("Invalid IPC magic")
    size, msg_type = _HEADER.unpack_from(data, len(IPC_MAGIC))
    return size, msg_type


def parse_swaybar_config(payload: str) -> SwaybarConfig:
    """Read the bar id, mode and hidden state from a bar configuration payload."""
    value = parse_json(payload)
    if not isinstance(value, dict):
        return SwaybarConfig()

    def text(key: str) -> str:
        item = value.get(key)
        return item if isinstance(item, str) else ""

    return SwaybarConfig(id=text("id"), mode=text("mode"), hidden_state=text("hidden_state"))


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < size:
        try:
            chunk = sock.recv(size - len(chunks))
        except OSError as exc:
            raise IpcError(f"Unable to receive IPC data: {exc}") from exc
        if not chunk:
            raise IpcError("Unable to receive IPC data: connection closed")
        chunks += chunk
    return bytes(chunks)


class Ipc:
    """Two connections to the compositor: one for commands, one for events.

    Replies to commands are also delivered to ``signal_cmd`` slots and events
    to ``signal_event`` slots.
    """

    def __init__(self, socket_path: str | os.PathLike | None = None) -> None:
        path = socket_path or os.environ.get("SWAYSOCK", "")
        if not path:
            raise IpcError("Socket path is empty")
        self.signal_event = SafeSignal()
        self.signal_cmd = SafeSignal()
        self._lock = threading.Lock()
        self._sock = self._open(os.fspath(path))
        try:
            self._event_sock = self._open(os.fspath(path))
        except IpcError:
            self._sock.close()
            raise

    @staticmethod
    def _open(path: str) -> socket.socket:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(path)
        except OSError as exc:
            sock.close()
            raise IpcError(f"Unable to connect to {path}: {exc}") from exc
        return sock

    @staticmethod
    def _recv(sock: socket.socket) -> IpcResponse:
        size, msg_type = decode_header(_recv_exact(sock, IPC_HEADER_SIZE))
        payload = _recv_exact(sock, size) if size else b""
        return IpcResponse(size, msg_type, payload.decode("utf-8", errors="replace"))

    def _send(self, sock: socket.socket, msg_type: int, payload: str) -> IpcResponse:
        try:
            sock.sendall(encode_message(msg_type, payload))
        except OSError as exc:
            raise IpcError(f"Unable to send IPC message: {exc}") from exc
        return self._recv(sock)

    def send_cmd(self, msg_type: int, payload: str = "") -> IpcResponse:
        """Send a command and return the reply, also passing it to ``signal_cmd``."""
        with self._lock:
            response = self._send(self._sock, msg_type, payload)
        self.signal_cmd.emit(response)
        return response

    def subscribe(self, payload: str) -> IpcResponse:
        """Subscribe the event connection to the events named in ``payload``."""
        return self._send(self._event_sock, IpcCommand.SUBSCRIBE, payload)

    def handle_event(self) -> IpcResponse:
        """Wait for the next event, pass it to ``signal_event`` and return it."""
        response = self._recv(self._event_sock)
        self.signal_event.emit(response)
        return response

    def close(self) -> None:
        """Close both connections."""
        for sock in (self._sock, self._event_sock):
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            sock.close()

    def __enter__(self) -> Ipc:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
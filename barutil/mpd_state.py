"""State machine tracking a music player connection.

States: Disconnected (retry connecting), Idle (await player activity) and the
non-idle Playing, Paused and Stopped. Entry and exit actions run on every
transition.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, Protocol

log = logging.getLogger(__name__)


class PlayerState(IntEnum):
    """Playback state as reported by the player."""

    UNKNOWN = 0
    STOP = 1
    PLAY = 2
    PAUSE = 3


class _Player(Protocol):
    connection: Any
    state: PlayerState

    def try_connect(self) -> None: ...

    def fetch_state(self) -> None: ...

    def set_label(self) -> None: ...

    def emit(self) -> None: ...


class State:
    """Base state: transitions are ignored.

    ``active`` is true between the state's entry and exit actions. The
    transition methods return whether the transition was taken.
    """

    def __init__(self, ctx: Context | None = None) -> None:
        self._ctx = ctx
        self.active = False

    def entry(self) -> None:
        self.active = True
        log.debug("mpd: entering %s", type(self).__name__)

    def exit(self) -> None:
        self.active = False
        log.debug("mpd: leaving %s", type(self).__name__)

    def _ignore(self, action: str) -> bool:
        log.debug("mpd: ignore %s state transition in %s", action, type(self).__name__)
        return False

    def play(self) -> bool:
        return self._ignore("play")

    def stop(self) -> bool:
        return self._ignore("stop")

    def pause(self) -> bool:
        return self._ignore("pause")

    def update(self) -> None:
        """Request that the state refresh the display."""
        log.debug("mpd: ignoring update method request")


class _Connected(State):
    """A state reached while connected; update follows the player's state."""

    _ctx: Context

    def _go(self, target: type[State]) -> bool:
        self._ctx.set_state(target(self._ctx))
        return True

    def update(self) -> None:
        if self._ctx._refresh():
            self._ctx._follow_player()
        self._ctx._do_update()


class Idle(_Connected):
    """Connected and waiting for player activity."""

    def play(self) -> bool:
        return self._go(Playing)

    def stop(self) -> bool:
        return self._go(Stopped)

    def pause(self) -> bool:
        return self._go(Paused)


class Playing(_Connected):
    """A song is producing audio."""

    def pause(self) -> bool:
        return self._go(Paused)

    def stop(self) -> bool:
        return self._go(Stopped)


class Paused(_Connected):
    """The current song is paused."""

    def play(self) -> bool:
        return self._go(Playing)

    def stop(self) -> bool:
        return self._go(Stopped)


class Stopped(_Connected):
    """No song is playing."""

    def play(self) -> bool:
        return self._go(Playing)

    def pause(self) -> bool:
        return self._go(Paused)


class Disconnected(State):
    """Not connected; each update attempts to (re)connect."""

    _ctx: Context

    def update(self) -> None:
        self._ctx._try_connect()
        if self._ctx._is_connected():
            self._ctx.set_state(Idle(self._ctx))
            self._ctx._emit()
        else:
            self._ctx._do_update()


_STATE_FOR = {
    PlayerState.PLAY: Playing,
    PlayerState.PAUSE: Paused,
    PlayerState.STOP: Stopped,
}


class Context:
    """Holds the current state and forwards actions to it.

    ``player`` supplies ``connection`` (None when disconnected), ``state``
    and the methods ``try_connect``, ``fetch_state``, ``set_label`` and ``emit``.
    """

    def __init__(self, player: _Player) -> None:
        self._player = player
        self._state: State = Disconnected(self)
        self._state.entry()

    @property
    def state(self) -> State:
        """The current state."""
        return self._state

    def set_state(self, new_state: State) -> None:
        """Leave the current state and enter ``new_state``."""
        self._state.exit()
        self._state = new_state
        new_state.entry()

    def play(self) -> bool:
        return self._state.play()

    def stop(self) -> bool:
        return self._state.stop()

    def pause(self) -> bool:
        return self._state.pause()

    def update(self) -> None:
        self._state.update()

    def _is_connected(self) -> bool:
        return self._player.connection is not None

    def _try_connect(self) -> None:
        try:
            self._player.try_connect()
        except OSError as exc:
            log.warning("mpd: connection failed: %s", exc)
            self._player.connection = None

    def _refresh(self) -> bool:
        """Fetch the player's state; on failure drop to Disconnected."""
        if self._is_connected():
            try:
                self._player.fetch_state()
                return True
            except OSError as exc:
                log.error("mpd: %s", exc)
                self._player.connection = None
        self.set_state(Disconnected(self))
        return False

    def _follow_player(self) -> None:
        target = _STATE_FOR.get(self._player.state, Idle)
        if type(self._state) is not target:
            self.set_state(target(self))

    def _do_update(self) -> None:
        self._player.set_label()

    def _emit(self) -> None:
        self._player.emit()
"""Value types describing how a bar is layered and placed."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class BarLayer(IntEnum):
    """Layer-shell layer a bar is drawn on, from lowest to highest."""

    BOTTOM = 0
    TOP = 1
    OVERLAY = 2


@dataclass(frozen=True)
class BarMargins:
    """Gaps between the bar and the output edges, in pixels."""

    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0


@dataclass(frozen=True)
class BarMode:
    """How a bar behaves: its layer, exclusive zone, input and visibility."""

    layer: BarLayer
    exclusive: bool
    passthrough: bool
    visible: bool
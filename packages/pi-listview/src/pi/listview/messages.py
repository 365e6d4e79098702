"""Messages delivered to ``LazyList.update`` by the host event loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

WheelButton = Literal["up", "down"]


@dataclass(frozen=True)
class KeyPressMsg:
    """A key press, already resolved to a key id such as ``"down"`` or ``"ctrl+d"``."""

    key: str


@dataclass(frozen=True)
class MouseWheelMsg:
    button: WheelButton
    col: int = 0
    line: int = 0


@dataclass(frozen=True)
class MouseClickMsg:
    """Mouse button press at list-relative coordinates.

    ``clicks`` is 1 for a single click, 2 for a double click (select word)
    and 3 for a triple click (select paragraph).
    """

    col: int
    line: int
    clicks: int = 1


@dataclass(frozen=True)
class MouseMotionMsg:
    """Pointer moved while a button is held."""

    col: int
    line: int


@dataclass(frozen=True)
class MouseReleaseMsg:
    col: int
    line: int


@dataclass(frozen=True)
class AnimStepMsg:
    """Periodic animation tick."""

    frame: int = 0


@dataclass(frozen=True)
class ContinueRenderMsg:
    """Posted back by the deferred continuation render.

    ``generation`` identifies the first pass that scheduled it; a list that
    has been reset or fully rendered since then drops the message.
    """

    generation: int
    finish_index: int

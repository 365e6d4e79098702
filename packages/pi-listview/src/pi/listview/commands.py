"""Follow-up actions returned by list mutators.

A ``Cmd`` is a zero-argument callable that performs a side effect and returns
a message (or ``None``).  It may also be an ``async def`` function.  Mutators
never block; they return commands for the host to run, and the resulting
messages are fed back through ``update``.

``batch`` combines commands that may run in any order (concurrently under
``CommandRunner``); ``sequence`` combines commands that must run strictly one
after another.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Protocol

Cmd = Callable[[], Any]


@dataclass(frozen=True)
class BatchMsg:
    cmds: tuple[Cmd, ...]


@dataclass(frozen=True)
class SequenceMsg:
    cmds: tuple[Cmd, ...]


def _compact(cmds: tuple[Cmd | None, ...]) -> tuple[Cmd, ...]:
    return tuple(c for c in cmds if c is not None)


def batch(*cmds: Cmd | None) -> Cmd | None:
    """Combine *cmds* into one command whose children may run in any order."""
    valid = _compact(cmds)
    if not valid:
        return None
    if len(valid) == 1:
        return valid[0]

    def run_batch() -> BatchMsg:
        return BatchMsg(valid)

    return run_batch


def sequence(*cmds: Cmd | None) -> Cmd | None:
    """Combine *cmds* into one command whose children run strictly in order."""
    valid = _compact(cmds)
    if not valid:
        return None
    if len(valid) == 1:
        return valid[0]

    def run_sequence() -> SequenceMsg:
        return SequenceMsg(valid)

    return run_sequence


class Model(Protocol):
    def update(self, msg: object) -> Cmd | None:
        ...


def execute(model: Model, cmd: Cmd | None) -> None:
    """Run *cmd* synchronously, feeding every message back into *model*.

    Batches run in declaration order.  Follow-up commands returned by
    ``model.update`` are executed until nothing is left.  Async commands
    need ``CommandRunner``.
    """
    if cmd is None:
        return
    msg = cmd()
    if inspect.isawaitable(msg):
        close = getattr(msg, "close", None)
        if close is not None:
            close()
        raise TypeError("async commands require CommandRunner")
    if isinstance(msg, (BatchMsg, SequenceMsg)):
        for child in msg.cmds:
            execute(model, child)
        return
    if msg is None:
        return
    execute(model, model.update(msg))


class CommandRunner:
    """Run commands on an asyncio loop and dispatch their messages.

    *dispatch* is called on the loop for every resulting message, one at a
    time, and may return a follow-up command which is run in turn.
    """

    def __init__(self, dispatch: Callable[[object], Cmd | None]) -> None:
        self._dispatch = dispatch

    async def run(self, cmd: Cmd | None) -> None:
        if cmd is None:
            return
        msg = cmd()
        if inspect.isawaitable(msg):
            msg = await msg
        if isinstance(msg, BatchMsg):
            await asyncio.gather(*(self.run(child) for child in msg.cmds))
            return
        if isinstance(msg, SequenceMsg):
            for child in msg.cmds:
                await self.run(child)
            return
        if msg is None:
            return
        await self.run(self._dispatch(msg))

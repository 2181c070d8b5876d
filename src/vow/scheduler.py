# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T
from abc import ABCMeta, abstractmethod
from asyncio import AbstractEventLoop, get_running_loop
from weakref import WeakKeyDictionary
from functools import partial
from collections import deque

# External
import typing_extensions as Te

# Project
from .errors import NoSchedulerError


class Scheduler(metaclass=ABCMeta):
    """Defers callbacks to a later turn.

    A scheduler must never run a callback synchronously inside :meth:`call_soon`,
    and must run callbacks in the order they were queued.
    """

    @abstractmethod
    def call_soon(self, callback: T.Callable[..., T.Any], *args: T.Any) -> None:
        """Queue callback to be called with args on the next turn.

        Arguments:
            callback: Callable to be scheduled.
            args: Positional arguments for callback.

        Raises:
            NotImplementedError

        """
        raise NotImplementedError


class LoopScheduler(Scheduler):
    """Scheduler that delegates turns to an asyncio event loop."""

    def __init__(self, loop: T.Optional[AbstractEventLoop] = None) -> None:
        """LoopScheduler constructor.

        Arguments:
            loop: Event loop to schedule on. Defaults to the running loop.

        Raises:
            RuntimeError: When no loop is given and none is running.

        """
        self._loop = get_running_loop() if loop is None else loop

    def __repr__(self) -> str:
        return f"<{type(self).__name__} loop={self._loop!r}>"

    @property
    def loop(self) -> AbstractEventLoop:
        return self._loop

    def call_soon(self, callback: T.Callable[..., T.Any], *args: T.Any) -> None:
        try:
            running: T.Optional[AbstractEventLoop] = get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._loop.call_soon(callback, *args)
        else:
            self._loop.call_soon_threadsafe(callback, *args)


class ManualScheduler(Scheduler):
    """Scheduler backed by an explicit FIFO queue that the owner drains.

    Nothing runs until :meth:`run_once` or :meth:`drain` is called, which makes
    it suitable for hosts without an asyncio loop and for deterministic tests.
    """

    def __init__(self) -> None:
        self._queue: Te.Deque[T.Callable[[], T.Any]] = deque()

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} queued={len(self._queue)}>"

    def call_soon(self, callback: T.Callable[..., T.Any], *args: T.Any) -> None:
        self._queue.append(partial(callback, *args) if args else callback)

    def run_once(self) -> int:
        """Run a single turn.

        Only tasks queued before the turn started run; tasks they queue are left
        for the next turn.

        Returns:
            Number of tasks executed.

        """
        count = len(self._queue)
        for _ in range(count):
            self._queue.popleft()()

        return count

    def drain(self, limit: T.Optional[int] = None) -> int:
        """Run turns until the queue is empty.

        Arguments:
            limit: Maximum number of turns, None for no limit.

        Raises:
            RuntimeError: When the queue is still not empty after limit turns.

        Returns:
            Total number of tasks executed.

        """
        total = 0
        turns = 0
        while self._queue:
            if limit is not None and turns >= limit:
                raise RuntimeError(f"Scheduler queue not drained after {limit} turns")

            total += self.run_once()
            turns += 1

        return total


_scheduler: T.Optional[Scheduler] = None
_loop_schedulers: "WeakKeyDictionary[AbstractEventLoop, LoopScheduler]" = WeakKeyDictionary()


def set_scheduler(scheduler: T.Optional[Scheduler]) -> None:
    """Install the process-wide scheduler, or remove it with None."""
    global _scheduler

    if scheduler is not None and not isinstance(scheduler, Scheduler):
        raise TypeError(f"A Scheduler or None is expected, got {scheduler!r}")

    _scheduler = scheduler


def get_scheduler() -> Scheduler:
    """Retrieve the scheduler new promises should use.

    Raises:
        NoSchedulerError: When no scheduler is installed and no asyncio loop is running.

    Returns:
        The installed scheduler, or the scheduler bound to the running event loop.

    """
    if _scheduler is not None:
        return _scheduler

    try:
        loop = get_running_loop()
    except RuntimeError:
        raise NoSchedulerError(
            "No scheduler installed and no running event loop, use set_scheduler()"
        ) from None

    scheduler = _loop_schedulers.get(loop)
    if scheduler is None:
        scheduler = _loop_schedulers[loop] = LoopScheduler(loop)

    return scheduler


__all__ = (
    "Scheduler",
    "LoopScheduler",
    "ManualScheduler",
    "set_scheduler",
    "get_scheduler",
)

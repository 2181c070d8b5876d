# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T
from asyncio import (
    Future,
    CancelledError,
    AbstractEventLoop,
    isfuture,
    ensure_future,
    get_running_loop,
)
from inspect import iscoroutine

# Project
from .scheduler import Scheduler, LoopScheduler, get_scheduler
from .chain_link import ChainLink

# Generic types
K = T.TypeVar("K")


class Promise(ChainLink[K]):
    """A Promise implementation. Consumers chain on it, a :class:`~.deferred.Deferred` settles it."""

    @classmethod
    def wrap(
        cls,
        awaitable: T.Awaitable[K],
        *,
        loop: T.Optional[AbstractEventLoop] = None,
        scheduler: T.Optional[Scheduler] = None,
        **kwargs: T.Any,
    ) -> "Promise[K]":
        """Create a promise settled by an asyncio awaitable.

        Arguments:
            awaitable: Coroutine, Task or Future to be encapsulated.
            loop: Event loop used to schedule a coroutine. Retrieved from the
                awaitable, the scheduler, or the running loop when omitted.
            scheduler: Scheduler for the new promise.
            kwargs: Keyword parameters for the promise constructor.

        Raises:
            RuntimeError: Raised when no event loop can be determined.

        Returns:
            Promise resolved with the awaitable result, or rejected with its exception.
            A cancelled awaitable rejects the promise with :class:`~asyncio.CancelledError`.

        """
        if loop is None:
            # Retrieve loop from awaitable if available
            if isinstance(awaitable, Future):
                loop = awaitable.get_loop()
            elif isfuture(awaitable):
                loop = getattr(awaitable, "_loop", None)

        if loop is None and isinstance(scheduler, LoopScheduler):
            loop = scheduler.loop

        try:
            if loop is None:
                loop = get_running_loop()

            fut = ensure_future(awaitable, loop=loop)
        except BaseException:
            if iscoroutine(awaitable):
                # Avoid 'coroutine was never awaited' warning
                awaitable.close()
            raise

        if scheduler is None:
            scheduler = LoopScheduler(loop) if _current_loop() is not loop else get_scheduler()

        promise: Promise[K] = cls(scheduler=scheduler, **kwargs)
        fut.add_done_callback(promise._settle_from_future)

        return promise

    def _settle_from_future(self, fut: "Future[K]") -> None:
        if fut.cancelled():
            self._reject(CancelledError())
            return

        exc = fut.exception()
        if exc is None:
            self._resolve(fut.result())
        else:
            self._reject(exc)


def _current_loop() -> T.Optional[AbstractEventLoop]:
    try:
        return get_running_loop()
    except RuntimeError:
        return None


__all__ = ("Promise",)

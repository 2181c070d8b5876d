# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T
from inspect import iscoroutine, isawaitable

# Project
from ._helper import caller_stack
from .promise import Promise
from .abstract import AbstractPromise
from .scheduler import Scheduler

# Generic types
K = T.TypeVar("K")


class Deferred(T.Generic[K]):
    """Producer side handle of a :class:`~.promise.Promise`.

    Only the first call to :meth:`resolve` or :meth:`reject` has any effect,
    later calls are silently ignored. :meth:`notify` works until the promise
    settles.
    """

    __slots__ = ("_promise",)

    def __init__(
        self, *, scheduler: T.Optional[Scheduler] = None, log_unhandled_rejection: bool = True
    ) -> None:
        """Deferred constructor.

        Arguments:
            scheduler: Scheduler for the owned promise and everything chained on it.
            log_unhandled_rejection: Flag indicating whether a rejection nobody
                observes should be reported to the exception handler.

        """
        self._promise: Promise[K] = Promise(
            scheduler=scheduler,
            log_unhandled_rejection=log_unhandled_rejection,
            stack=caller_stack(),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} promise={self._promise!r}>"

    @property
    def promise(self) -> Promise[K]:
        return self._promise

    def resolve(self, value: T.Union[K, T.Awaitable[K]]) -> bool:
        """Resolve the promise with given value.

        A promise value is adopted: the owned promise settles like it. Other
        asyncio awaitables are wrapped with :meth:`~.promise.Promise.wrap` first.
        A coroutine passed to an ignored call is closed without running.

        Arguments:
            value: Value to resolve the promise with.

        Returns:
            Boolean indicating whether the call took effect.

        """
        if self._promise._claimed:
            if iscoroutine(value):
                # Ignored, so it must not start running
                value.close()
            return False

        if isawaitable(value) and not isinstance(value, AbstractPromise):
            value = Promise.wrap(value, scheduler=self._promise.scheduler)

        return self._promise._resolve(value)

    def reject(self, reason: T.Any) -> bool:
        """Reject the promise with given reason, stored verbatim.

        Arguments:
            reason: Anything, usually an exception.

        Returns:
            Boolean indicating whether the call took effect.

        """
        return self._promise._reject(reason)

    def notify(self, update: T.Any) -> bool:
        """Emit a progress update to every notify callback currently attached.

        Returns:
            False when the promise is already settled.

        """
        return self._promise._notify(update)


def create_deferred(
    *, scheduler: T.Optional[Scheduler] = None, log_unhandled_rejection: bool = True
) -> Deferred[T.Any]:
    return Deferred(scheduler=scheduler, log_unhandled_rejection=log_unhandled_rejection)


def reject_with(reason: T.Any, *, scheduler: T.Optional[Scheduler] = None) -> Promise[T.Any]:
    """Create an already rejected promise.

    Returning it from a callback turns the derived promise into a rejection.

    Arguments:
        reason: Rejection reason.
        scheduler: Scheduler for the new promise.

    Returns:
        Promise rejected with reason.

    """
    deferred: Deferred[T.Any] = Deferred(scheduler=scheduler)
    deferred.reject(reason)
    return deferred.promise


def resolve_with(value: T.Any, *, scheduler: T.Optional[Scheduler] = None) -> Promise[T.Any]:
    """Create a promise resolved with value, or following it when value is a promise."""
    deferred: Deferred[T.Any] = Deferred(scheduler=scheduler)
    deferred.resolve(value)
    return deferred.promise


__all__ = ("Deferred", "create_deferred", "reject_with", "resolve_with")

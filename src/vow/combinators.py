# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T

# Project
from .promise import Promise
from .deferred import Deferred
from .abstract import AbstractPromise
from .scheduler import Scheduler


def gather(
    promises: T.Iterable[AbstractPromise[T.Any]], *, scheduler: T.Optional[Scheduler] = None
) -> Promise[T.List[T.Any]]:
    """Combine promises into one resolved with the list of their values.

    Arguments:
        promises: Promises to wait on.
        scheduler: Scheduler for the combined promise.

    Returns:
        Promise resolved with the values in input order once every promise
        resolves, or rejected with the first rejection reason.

    """
    promises = list(promises)
    deferred: Deferred[T.List[T.Any]] = Deferred(scheduler=_pick_scheduler(promises, scheduler))
    if not promises:
        deferred.resolve([])
        return deferred.promise

    values: T.List[T.Any] = [None] * len(promises)
    remaining = len(promises)

    def collect(index: int) -> T.Callable[[T.Any], None]:
        def on_resolve(value: T.Any) -> None:
            nonlocal remaining
            values[index] = value
            remaining -= 1
            if remaining == 0:
                deferred.resolve(values)

        return on_resolve

    for index, promise in enumerate(promises):
        promise.chain(collect(index), deferred.reject)

    return deferred.promise


def race(
    promises: T.Iterable[AbstractPromise[T.Any]], *, scheduler: T.Optional[Scheduler] = None
) -> Promise[T.Any]:
    """Settle like whichever promise settles first.

    An empty input gives a promise that never settles. Combined with a timer
    backed promise this implements a timeout.

    """
    promises = list(promises)
    deferred: Deferred[T.Any] = Deferred(scheduler=_pick_scheduler(promises, scheduler))
    for promise in promises:
        promise.chain(deferred.resolve, deferred.reject)

    return deferred.promise


def _pick_scheduler(
    promises: T.Sequence[AbstractPromise[T.Any]], scheduler: T.Optional[Scheduler]
) -> T.Optional[Scheduler]:
    if scheduler is None and promises:
        # Inherit from the inputs, like derived promises do
        scheduler = getattr(promises[0], "scheduler", None)

    return scheduler


__all__ = ("gather", "race")

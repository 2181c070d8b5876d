# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T
from inspect import isawaitable, currentframe
from traceback import FrameSummary, StackSummary, extract_stack

# Project
from .abstract import AbstractPromise
from .exception_handler import call_exception_handler

if T.TYPE_CHECKING:
    from .scheduler import Scheduler

_PACKAGE = __name__.partition(".")[0]

# Fake stacktrace information for use when no stack can be recovered
_FAKE_STACK = list(StackSummary.from_list([("unknown", 0, "unknown", "invalid")]))


class Value(T.NamedTuple):
    """Callback returned a plain value, the derived promise resolves with it."""

    value: T.Any


class Adopt(T.NamedTuple):
    """Callback returned a promise, the derived promise follows it."""

    promise: AbstractPromise[T.Any]


class Failure(T.NamedTuple):
    """Callback raised, the derived promise rejects with the exception."""

    reason: T.Any


Outcome = T.Union[Value, Adopt, Failure]


def attempt(
    callback: T.Callable[..., T.Any],
    *args: T.Any,
    promise: T.Optional[AbstractPromise[T.Any]] = None,
    scheduler: T.Optional["Scheduler"] = None,
) -> Outcome:
    """Invoke a user callback and classify what it did.

    Exceptions raised by callback are reported to the process exception handler
    and returned as a :class:`Failure`. Awaitables that are not promises are
    wrapped with :meth:`~.promise.Promise.wrap` so they can be adopted.

    Arguments:
        callback: User supplied callback.
        args: Arguments for callback.
        promise: Derived promise the outcome belongs to, used only for reporting.
        scheduler: Scheduler for promises wrapping returned awaitables.

    Returns:
        Outcome of the invocation.

    """
    try:
        result = callback(*args)
        if isinstance(result, AbstractPromise):
            return Adopt(result)

        if isawaitable(result):
            from .promise import Promise

            return Adopt(Promise.wrap(result, scheduler=scheduler))
    except Exception as exc:
        call_exception_handler(
            {
                "message": f"Exception raised inside promise callback {callback!r}",
                "exception": exc,
                "reason": exc,
                "promise": promise,
            }
        )
        return Failure(exc)

    return Value(result)


def caller_stack() -> T.List[FrameSummary]:
    """Summary of the first frame outside this package, i.e. the user call site."""
    frame = currentframe()
    while frame is not None and frame.f_globals.get("__name__", "").partition(".")[0] == _PACKAGE:
        frame = frame.f_back

    if frame is None:
        return list(_FAKE_STACK)

    return extract_stack(f=frame, limit=1)


__all__ = ("Value", "Adopt", "Failure", "Outcome", "attempt", "caller_stack")

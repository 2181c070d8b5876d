# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T

# Project
from .._helper import Adopt, Failure, attempt
from ..abstract import State, AbstractLink, AbstractPromise

if T.TYPE_CHECKING:
    from ..chain_link import ChainLink


class ResolutionLink(AbstractLink):
    """Link created by :meth:`~.chain_link.ChainLink.always`.

    The callback runs on either disposition. Its return value is discarded: the
    derived promise settles like the source, unless the callback raises or
    returns a promise that rejects, in which case that rejection wins.
    """

    __slots__ = ("derived", "on_finally")

    def __init__(
        self, derived: "ChainLink[T.Any]", on_finally: T.Optional[T.Callable[[], T.Any]]
    ) -> None:
        self.derived = derived
        self.on_finally = on_finally

    def settled(self, source: AbstractPromise[T.Any]) -> None:
        on_finally, self.on_finally = self.on_finally, None
        if on_finally is None:
            self.derived._mirror(source)
            return

        outcome = attempt(on_finally, promise=self.derived, scheduler=self.derived.scheduler)
        if isinstance(outcome, Failure):
            self.derived._reject(outcome.reason)
        elif isinstance(outcome, Adopt):
            if self.derived._claim():
                self.derived._follow(outcome.promise, _RestorationLink(self.derived, source))
        else:
            self.derived._mirror(source)


class _RestorationLink(AbstractLink):
    """Waits for the promise returned by a finally callback, then restores the source outcome."""

    __slots__ = ("derived", "source")

    def __init__(self, derived: "ChainLink[T.Any]", source: AbstractPromise[T.Any]) -> None:
        self.derived = derived
        self.source = source

    def settled(self, returned: AbstractPromise[T.Any]) -> None:
        if returned.state is State.REJECTED:
            self.derived._settle(State.REJECTED, returned.reason)
        elif self.source.state is State.RESOLVED:
            self.derived._settle(State.RESOLVED, self.source.value)
        else:
            self.derived._settle(State.REJECTED, self.source.reason)


__all__ = ("ResolutionLink",)

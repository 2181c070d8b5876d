# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T

# Project
from .._helper import Failure, attempt
from ..abstract import State, AbstractLink, AbstractPromise

if T.TYPE_CHECKING:
    from ..chain_link import ChainLink


class FulfillmentLink(AbstractLink):
    """Link created by :meth:`~.chain_link.ChainLink.chain`.

    Runs the callback matching the source disposition and settles the derived
    promise with its outcome. A missing callback passes the source disposition
    and result through unchanged.
    """

    __slots__ = ("derived", "on_resolve", "on_reject", "on_notify")

    def __init__(
        self,
        derived: "ChainLink[T.Any]",
        on_resolve: T.Optional[T.Callable[[T.Any], T.Any]],
        on_reject: T.Optional[T.Callable[[T.Any], T.Any]],
        on_notify: T.Optional[T.Callable[[T.Any], T.Any]],
    ) -> None:
        self.derived = derived
        self.on_resolve = on_resolve
        self.on_reject = on_reject
        self.on_notify = on_notify

    def settled(self, source: AbstractPromise[T.Any]) -> None:
        if source.state is State.RESOLVED:
            callback, result = self.on_resolve, source.value
        else:
            callback, result = self.on_reject, source.reason

        # Don't retain callbacks in memory
        self.on_resolve = self.on_reject = self.on_notify = None

        if self.derived._claimed:
            # Already rejected by a failing progress callback
            return

        if callback is None:
            self.derived._mirror(source)
            return

        self.derived._apply(
            attempt(callback, result, promise=self.derived, scheduler=self.derived.scheduler)
        )

    def notify(self, update: T.Any) -> None:
        if self.on_notify is None or self.derived._claimed:
            return

        # Progress callbacks don't settle anything, except by raising
        outcome = attempt(
            self.on_notify, update, promise=self.derived, scheduler=self.derived.scheduler
        )
        if isinstance(outcome, Failure):
            self.derived._reject(outcome.reason)


__all__ = ("FulfillmentLink",)

# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T
from asyncio import Future

# Project
from ..errors import RejectionError
from ..abstract import State, AbstractLink, AbstractPromise


class AwaitingLink(AbstractLink):
    """Transfers a promise outcome into an asyncio future being awaited."""

    __slots__ = ("fut",)

    def __init__(self, fut: "Future[T.Any]") -> None:
        self.fut = fut

    def settled(self, source: AbstractPromise[T.Any]) -> None:
        fut = self.fut
        if fut.done():
            # Awaiting coroutine was cancelled
            return

        if source.state is State.RESOLVED:
            fut.set_result(source.value)
        else:
            fut.set_exception(_as_exception(source.reason))


def _as_exception(reason: T.Any) -> BaseException:
    if isinstance(reason, BaseException) and not isinstance(reason, StopIteration):
        return reason

    if isinstance(reason, type) and issubclass(reason, BaseException):
        if not issubclass(reason, StopIteration):
            return reason()

    return RejectionError(reason)


__all__ = ("AwaitingLink",)

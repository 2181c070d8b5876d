# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T
from asyncio import get_running_loop
from threading import RLock
from traceback import FrameSummary, format_list
from collections import deque

# External
import typing_extensions as Te

# Project
from .errors import InvalidStateError, ChainingCycleError
from ._helper import Adopt, Value, Failure, Outcome, caller_stack
from .abstract import State, AbstractLink, AbstractPromise
from .scheduler import Scheduler, get_scheduler
from .exception_handler import call_exception_handler
from .chain_links import AdoptionLink, AwaitingLink, ResolutionLink, FulfillmentLink

# Generic types
K = T.TypeVar("K")


class ChainLink(AbstractPromise[K]):
    """Promise state machine.

    Holds the disposition, the settled value or reason, and the ordered list of
    links attached while pending. Settlement happens at most once; links are
    always invoked through the scheduler, never from the call that attached or
    settled them.
    """

    def __init__(
        self,
        *,
        scheduler: T.Optional[Scheduler] = None,
        log_unhandled_rejection: bool = True,
        **kwargs: T.Any,
    ) -> None:
        """ChainLink constructor.

        Arguments:
            scheduler: Scheduler that runs this promise's links. Defaults to
                :func:`~.scheduler.get_scheduler`.
            log_unhandled_rejection: Flag indicating whether a rejection nobody
                observes should be reported to the exception handler.
            kwargs: Keyword parameters for super.

        """
        stack: T.Optional[T.List[FrameSummary]] = kwargs.pop("stack", None)

        super().__init__(**kwargs)

        self._scheduler = get_scheduler() if scheduler is None else scheduler

        # --- Internal ---
        self._lock = RLock()
        self._state = State.PENDING
        self._result: T.Any = None
        self._links: Te.Deque[AbstractLink] = deque()
        self._claimed = False  # A resolution is locked in, may still be pending on adoption
        self._adoptee: T.Optional[AbstractPromise[T.Any]] = None
        self._observed = not log_unhandled_rejection
        self._stack: T.List[FrameSummary] = caller_stack() if stack is None else stack

    def __repr__(self) -> str:
        info = [self._state.value]
        if self._state is State.RESOLVED:
            info.append(f"value={self._result!r}")
        elif self._state is State.REJECTED:
            info.append(f"reason={self._result!r}")

        return f"<{type(self).__name__} {' '.join(info)}>"

    def __await__(self) -> T.Generator[T.Any, None, K]:
        """Python magic method called when awaiting an asynchronous object.

        Indirectly invoked by:
        >>> p = create_deferred().promise
        >>> await p # Internally python will call p.__await__

        Returns:
            A generator used internally by the async loop to manage the an awaitable life-cycle.
            A Promise redirects to the __await__() of a future settled by an awaiting link.
        """
        fut = get_running_loop().create_future()
        self.add_link(AwaitingLink(fut))

        return (yield from fut.__await__())

    # make Promise compatible with 'yield from'.
    __iter__ = __await__

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def state(self) -> State:
        return self._state

    @property
    def value(self) -> K:
        """Resolved value.

        Raises:
            InvalidStateError: Raised when promise is not resolved.

        """
        if self._state is not State.RESOLVED:
            raise InvalidStateError(f"Promise is {self._state.value}, not resolved")

        return T.cast(K, self._result)

    @property
    def reason(self) -> T.Any:
        """Rejection reason.

        Raises:
            InvalidStateError: Raised when promise is not rejected.

        """
        if self._state is not State.REJECTED:
            raise InvalidStateError(f"Promise is {self._state.value}, not rejected")

        return self._result

    def add_link(self, link: AbstractLink) -> None:
        with self._lock:
            self._observed = True
            if self._state is State.PENDING:
                self._links.append(link)
                return

        self._scheduler.call_soon(link.settled, self)

    def chain(
        self,
        on_resolve: T.Optional[T.Callable[[K], T.Any]] = None,
        on_reject: T.Optional[T.Callable[[T.Any], T.Any]] = None,
        on_notify: T.Optional[T.Callable[[T.Any], T.Any]] = None,
    ) -> "ChainLink[T.Any]":
        """Concrete implementation that attaches a :class:`~.chain_links.FulfillmentLink`.

        See: :meth:`~.abstract.promise.AbstractPromise.chain` for more information.

        """
        derived: ChainLink[T.Any] = self._derive()
        self.add_link(FulfillmentLink(derived, on_resolve, on_reject, on_notify))
        return derived

    def always(self, on_finally: T.Optional[T.Callable[[], T.Any]] = None) -> "ChainLink[K]":
        """Concrete implementation that attaches a :class:`~.chain_links.ResolutionLink`.

        The derived promise keeps this promise's value or reason unless
        on_finally raises or returns a promise that rejects.

        See: :meth:`~.abstract.promise.AbstractPromise.always` for more information.

        """
        derived: ChainLink[K] = self._derive()
        self.add_link(ResolutionLink(derived, on_finally))
        return derived

    def _derive(self) -> "ChainLink[T.Any]":
        return type(self)(scheduler=self._scheduler, stack=self._stack + caller_stack())

    def _claim(self) -> bool:
        with self._lock:
            if self._claimed or self._state is not State.PENDING:
                return False

            self._claimed = True
            return True

    def _resolve(self, value: T.Any) -> bool:
        """Resolve with value, adopting it when it is a promise. First call wins."""
        if not self._claim():
            return False

        if isinstance(value, AbstractPromise):
            self._follow(value, AdoptionLink(self))
        else:
            self._settle(State.RESOLVED, value)

        return True

    def _reject(self, reason: T.Any) -> bool:
        if not self._claim():
            return False

        self._settle(State.REJECTED, reason)
        return True

    def _notify(self, update: T.Any) -> bool:
        with self._lock:
            if self._state is not State.PENDING:
                return False

            links = tuple(self._links)

        if links:
            self._scheduler.call_soon(_dispatch_notify, links, update)

        return True

    def _apply(self, outcome: Outcome) -> None:
        if isinstance(outcome, Failure):
            self._reject(outcome.reason)
        elif isinstance(outcome, Adopt):
            self._resolve(outcome.promise)
        else:
            assert isinstance(outcome, Value)
            self._resolve(outcome.value)

    def _mirror(self, source: AbstractPromise[T.Any]) -> None:
        """Take source's disposition and result unchanged (pass-through)."""
        if source.state is State.RESOLVED:
            self._resolve(source.value)
        else:
            self._reject(source.reason)

    def _follow(self, other: AbstractPromise[T.Any], link: AbstractLink) -> None:
        """Make the settlement of this (claimed) promise depend on other through link."""
        target: T.Optional[AbstractPromise[T.Any]] = other
        while target is not None:
            if target is self:
                exc = ChainingCycleError(f"{self!r} cannot adopt itself")
                call_exception_handler(
                    {
                        "message": "Chaining cycle detected for promise:\n" + self._format_stack(),
                        "exception": exc,
                        "reason": exc,
                        "promise": self,
                    }
                )
                return

            target = getattr(target, "_adoptee", None)

        with self._lock:
            self._adoptee = other

        other.add_link(link)

    def _settle(self, state: State, result: T.Any) -> None:
        assert state is not State.PENDING

        with self._lock:
            if self._state is not State.PENDING:
                return

            self._state = state
            self._result = result
            self._claimed = True
            self._adoptee = None
            links, self._links = self._links, deque()
            unobserved = state is State.REJECTED and not self._observed

        for link in links:
            self._scheduler.call_soon(link.settled, self)

        if unobserved:
            # Queued to allow a slightly delayed observer to take over the rejection
            self._scheduler.call_soon(self._report_unhandled_rejection)

    def _report_unhandled_rejection(self) -> None:
        with self._lock:
            if self._observed:
                return

            self._observed = True

        reason = self._result
        call_exception_handler(
            {
                "message": "Unhandled rejection propagated through promise:\n" + self._format_stack(),
                "exception": reason if isinstance(reason, BaseException) else None,
                "reason": reason,
                "promise": self,
            }
        )

    def _format_stack(self) -> str:
        return "".join(format_list(self._stack))[:-1]


def _dispatch_notify(links: T.Sequence[AbstractLink], update: T.Any) -> None:
    for link in links:
        link.notify(update)


__all__ = ("ChainLink",)

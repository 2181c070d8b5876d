# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T
from abc import ABCMeta, abstractmethod
from enum import Enum, unique

# Project
from .link import AbstractLink

# Generic types
K = T.TypeVar("K")


@unique
class State(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class AbstractPromise(T.Awaitable[K], metaclass=ABCMeta):
    """Read-only view of a single-resolution asynchronous result.

    Being an instance of this class is what makes an object adoptable by the
    chain resolver.

    .. Warning::

        This class is abstract in the sense that no implementation is made as to
        how links are stored or how the promise settles.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def state(self) -> State:
        raise NotImplementedError

    @property
    @abstractmethod
    def value(self) -> K:
        raise NotImplementedError

    @property
    @abstractmethod
    def reason(self) -> T.Any:
        raise NotImplementedError

    def done(self) -> bool:
        """Check if promise is settled.

        Returns:
            Boolean indicating if promise is resolved or rejected.

        """
        return self.state is not State.PENDING

    def is_pending(self) -> bool:
        return self.state is State.PENDING

    def is_resolved(self) -> bool:
        return self.state is State.RESOLVED

    def is_rejected(self) -> bool:
        return self.state is State.REJECTED

    @abstractmethod
    def add_link(self, link: AbstractLink) -> None:
        """Attach an observer to this promise.

        Arguments:
            link: Observer to be attached. If the promise is already settled
                the link is notified on the next turn, never synchronously.

        Raises:
            NotImplementedError

        """
        raise NotImplementedError

    @abstractmethod
    def chain(
        self,
        on_resolve: T.Optional[T.Callable[[K], T.Any]] = None,
        on_reject: T.Optional[T.Callable[[T.Any], T.Any]] = None,
        on_notify: T.Optional[T.Callable[[T.Any], T.Any]] = None,
    ) -> "AbstractPromise[T.Any]":
        """Chain callbacks to be executed when the Promise settles or reports progress.

        Arguments:
            on_resolve: The callback, it must receive a single argument that
                is the result of the Promise.
            on_reject: The callback, it must receive a single argument that
                is the reason of the Promise rejection.
            on_notify: The callback, it must receive a single argument that
                is the progress update.

        Raises:
            NotImplementedError

        Returns:
            Promise that will be settled by the outcome of the callback.

        """
        raise NotImplementedError

    @abstractmethod
    def always(self, on_finally: T.Optional[T.Callable[[], T.Any]] = None) -> "AbstractPromise[K]":
        """Chain a callback to be executed when the Promise settles, either way.

        Arguments:
            on_finally: The callback. No argument is passed to it.

        Raises:
            NotImplementedError

        Returns:
            Promise that settles like this one once the callback finishes executing.

        """
        raise NotImplementedError

    def then(
        self,
        on_resolve: T.Callable[[K], T.Any],
        on_reject: T.Optional[T.Callable[[T.Any], T.Any]] = None,
    ) -> "AbstractPromise[T.Any]":
        return self.chain(on_resolve, on_reject)

    def catch(self, on_reject: T.Callable[[T.Any], T.Any]) -> "AbstractPromise[T.Any]":
        return self.chain(None, on_reject)

    def progress(self, on_notify: T.Callable[[T.Any], T.Any]) -> "AbstractPromise[K]":
        return self.chain(None, None, on_notify)

    def lastly(self, on_finally: T.Callable[[], T.Any]) -> "AbstractPromise[K]":
        return self.always(on_finally)


__all__ = ("State", "AbstractPromise")

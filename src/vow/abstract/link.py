# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T
from abc import ABCMeta, abstractmethod

if T.TYPE_CHECKING:
    from .promise import AbstractPromise


class AbstractLink(metaclass=ABCMeta):
    """Observer attached to a promise.

    A link is notified once, on a scheduler turn, when the promise it is
    attached to settles. It may also receive progress updates while the
    promise is pending.
    """

    __slots__ = ()

    @abstractmethod
    def settled(self, source: "AbstractPromise[T.Any]") -> None:
        """Called on the turn after source settles.

        Arguments:
            source: The settled promise this link was attached to.

        Raises:
            NotImplementedError

        """
        raise NotImplementedError

    def notify(self, update: T.Any) -> None:
        """Called for every progress update emitted while source was pending."""


__all__ = ("AbstractLink",)

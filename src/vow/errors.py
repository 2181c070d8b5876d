# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Internal
import typing as T


class PromiseError(Exception):
    """Base class for errors raised by vow."""


class InvalidStateError(PromiseError):
    """Promise is not in the state required by the operation."""


class ChainingCycleError(PromiseError, TypeError):
    """A promise was asked to adopt itself, directly or through other promises."""


class NoSchedulerError(PromiseError, RuntimeError):
    """No scheduler was given, installed, or available from a running event loop."""


class RejectionError(PromiseError):
    """Raised when awaiting a promise rejected with a reason that is not an exception.

    Arguments:
        reason: The verbatim rejection reason.

    """

    def __init__(self, reason: T.Any) -> None:
        super().__init__(reason)
        self.reason = reason


__all__ = (
    "PromiseError",
    "InvalidStateError",
    "ChainingCycleError",
    "NoSchedulerError",
    "RejectionError",
)

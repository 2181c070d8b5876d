# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# External
from importlib_metadata import version

# Project
from .errors import (
    PromiseError,
    RejectionError,
    NoSchedulerError,
    InvalidStateError,
    ChainingCycleError,
)
from .promise import Promise
from .abstract import State, AbstractPromise
from .deferred import Deferred, reject_with, resolve_with, create_deferred
from .scheduler import Scheduler, LoopScheduler, ManualScheduler, get_scheduler, set_scheduler
from .combinators import race, gather
from .exception_handler import (
    get_exception_handler,
    set_exception_handler,
    call_exception_handler,
    logging_exception_handler,
)

try:
    __version__ = version(__name__)
except Exception:  # pragma: no cover
    import traceback
    from warnings import warn

    warn(f"Failed to set version due to:\n{traceback.format_exc()}", ImportWarning)
    __version__ = "0.0a0"

__all__ = (
    "__version__",
    "State",
    "Promise",
    "AbstractPromise",
    "Deferred",
    "create_deferred",
    "reject_with",
    "resolve_with",
    "gather",
    "race",
    "Scheduler",
    "LoopScheduler",
    "ManualScheduler",
    "get_scheduler",
    "set_scheduler",
    "get_exception_handler",
    "set_exception_handler",
    "call_exception_handler",
    "logging_exception_handler",
    "PromiseError",
    "RejectionError",
    "NoSchedulerError",
    "InvalidStateError",
    "ChainingCycleError",
)

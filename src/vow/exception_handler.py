# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Process-wide hook used to report errors that never reach a consumer.

The hook follows the contract of :meth:`asyncio.AbstractEventLoop.call_exception_handler`:
it receives a single context mapping with the keys ``message``, ``exception``,
``reason`` and ``promise``.
"""

# Internal
import typing as T
import logging
from threading import local

# External
import typing_extensions as Te

logger = logging.getLogger(__name__.partition(".")[0])


class ExceptionHandler(Te.Protocol):
    def __call__(self, context: T.Mapping[str, T.Any]) -> None:
        ...


_handler: T.Optional[ExceptionHandler] = None
_state = local()


def set_exception_handler(handler: T.Optional[ExceptionHandler]) -> None:
    """Install the process-wide exception handler.

    Arguments:
        handler: Callable receiving the context mapping, or None to disable reporting.

    Raises:
        TypeError: When handler is neither callable nor None.

    """
    global _handler

    if handler is not None and not callable(handler):
        raise TypeError(f"A callable object or None is expected, got {handler!r}")

    _handler = handler


def get_exception_handler() -> T.Optional[ExceptionHandler]:
    return _handler


def call_exception_handler(context: T.Mapping[str, T.Any]) -> None:
    """Dispatch context to the installed handler.

    Errors raised by the handler, and reports issued while the handler is still
    running, are logged and never propagated to the caller.

    Arguments:
        context: Mapping describing the error.

    """
    handler = _handler
    if handler is None:
        return

    if getattr(_state, "running", False):
        logger.error(
            "Exception reported while running the exception handler: %s",
            context.get("message"),
            exc_info=_exc_info(context),
        )
        return

    _state.running = True
    try:
        handler(context)
    except Exception:
        logger.exception("Unhandled error in exception handler %r", handler)
    finally:
        _state.running = False


def logging_exception_handler(context: T.Mapping[str, T.Any]) -> None:
    """Exception handler that logs the context at ERROR level."""
    details = [context.get("message", "Unhandled error in promise")]
    for key in sorted(context):
        if key in ("message", "exception"):
            continue
        details.append(f"{key}: {context[key]!r}")

    logger.error("\n".join(details), exc_info=_exc_info(context))


def _exc_info(context: T.Mapping[str, T.Any]) -> T.Any:
    exc = context.get("exception")
    if isinstance(exc, BaseException):
        return (type(exc), exc, exc.__traceback__)
    return None


__all__ = (
    "ExceptionHandler",
    "set_exception_handler",
    "get_exception_handler",
    "call_exception_handler",
    "logging_exception_handler",
)

"""
Policies for handlers that raise during broadcast.

Left alone, a raising handler aborts the broadcast and its exception reaches
whoever called broadcast() or set_data_point(). A policy installed with
NerveCenter.set_subscriber_exception_handler() takes the exception instead
and decides whether the rest of the channel's handlers still hear the message.

    nc.set_subscriber_exception_handler(handlers.log_and_skip_failed_handler)

    failures = []
    nc.set_subscriber_exception_handler(
        handlers.make_collecting_subscriber_exception_handler(failures)
    )
"""

import logging
from dataclasses import dataclass
from typing import Any
from typing import Callable

from nerve_center import subscriber


logger = logging.getLogger(__name__)


SUBSCRIBER_EXCEPTION_HANDLER = Callable[[subscriber.HANDLER, str, Exception], bool]
"""(failed handler, channel name, exception) -> True to end the broadcast."""

END_BROADCAST = True
KEEP_BROADCASTING = False


@dataclass(frozen=True)
class SubscriberFailure(object):
    """One handler exception, as recorded by a collecting policy."""

    handler: str
    channel_name: str
    exception: Exception


def describe_handler(handler: Any) -> str:
    """
    Name a handler for logs and introspection.

    Bound methods read as 'Class.method', functions by their name, and data
    point subscriptions by the handler they forward to. Anything else falls
    back to its repr.
    """
    if isinstance(handler, subscriber.DataPointSubscriber):
        return describe_handler(handler.handler)

    name = getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None)
    owner = getattr(handler, "__self__", None)
    if name is None:
        return repr(handler)
    if owner is not None:
        return f"{type(owner).__name__}.{handler.__name__}"

    return name.rsplit("<locals>.", 1)[-1]


def log_and_end_broadcast(
    handler: subscriber.HANDLER, channel_name: str, exception: Exception
) -> bool:
    """Log the failure with its traceback and drop the remaining handlers."""
    logger.error(
        f"Handler {describe_handler(handler)} failed on '{channel_name}', "
        f"ending broadcast: {type(exception).__name__}: {exception}",
        exc_info=exception,
    )
    return END_BROADCAST


def log_and_skip_failed_handler(
    handler: subscriber.HANDLER, channel_name: str, exception: Exception
) -> bool:
    """Log the failure and carry on with the next handler."""
    logger.warning(
        f"Handler {describe_handler(handler)} failed on '{channel_name}', "
        f"skipping it: {type(exception).__name__}: {exception}"
    )
    return KEEP_BROADCASTING


def ignore_failed_handler(
    handler: subscriber.HANDLER, channel_name: str, exception: Exception
) -> bool:
    return KEEP_BROADCASTING


def make_collecting_subscriber_exception_handler(
    sink: list,
) -> SUBSCRIBER_EXCEPTION_HANDLER:
    """
    Build a policy that keeps broadcasting and records each failure.

    Args:
        sink (list): Receives a SubscriberFailure per exception. The caller
            owns it, so it can be inspected or cleared between broadcasts.
    Returns:
        SUBSCRIBER_EXCEPTION_HANDLER: The policy to install.
    """

    def collect(
        handler: subscriber.HANDLER, channel_name: str, exception: Exception
    ) -> bool:
        sink.append(
            SubscriberFailure(
                handler=describe_handler(handler),
                channel_name=channel_name,
                exception=exception,
            )
        )
        return KEEP_BROADCASTING

    return collect

"""
# Channel Registry

Subscription bookkeeping and synchronous broadcast.

Subscriptions are kept as ``{name: {namespace: [handler, ...]}}``. Handlers
subscribed without a namespace live in the default bucket (''). Broadcasting
on a bare name reaches every bucket under that name, in bucket creation
order and then subscription order.
"""

import contextlib
import json
import logging
import threading
from typing import Any
from typing import Callable
from typing import ContextManager
from typing import Optional

from nerve_center import channels
from nerve_center import handlers
from nerve_center import subscriber


logger = logging.getLogger(__name__)

NAMESPACE_BUCKETS = dict[str, list[subscriber.HANDLER]]
"""The subscriber lists for one bare channel name, keyed by namespace."""


class ChannelRegistry(object):
    """
    Subscribe, unsubscribe and broadcast on namespaced channels.

    Dispatch is synchronous: broadcast() calls every handler before it
    returns. Handler exceptions propagate to the broadcaster unless a
    subscriber exception handler has been set.
    """

    def __init__(self, thread_safe: bool = False) -> None:
        self._subscriptions: dict[str, NAMESPACE_BUCKETS] = {}

        self._lock: ContextManager[Any] = (
            threading.RLock() if thread_safe else contextlib.nullcontext()
        )

        self._subscriber_exception_handler: Optional[
            handlers.SUBSCRIBER_EXCEPTION_HANDLER
        ] = None

    # -----Subscriber Management-----------------------------------------------

    def subscribe(
        self, channel_name: str, handler: Optional[subscriber.HANDLER] = None
    ) -> Any:
        """
        Subscribe a handler to a channel.

        Can also be used as a decorator by omitting the handler:

            @nc.subscribe('my-widget.howdy')
            def on_howdy(channel_name, message): ...

        Args:
            channel_name (str): Channel name, optionally namespaced as
                'namespace.channelName'. Namespacing subscriptions is
                recommended so they can be removed as a group.
            handler (HANDLER): Called with (channel_name, message) on each
                broadcast. Subscribing the same handler twice calls it twice.
        Raises:
            InvalidChannelNameError: If channel_name is malformed.
        """
        if handler is None:

            def decorator(func: subscriber.HANDLER) -> subscriber.HANDLER:
                self.subscribe(channel_name, func)
                return func

            return decorator

        channel = channels.split_channel_name(channel_name)

        with self._lock:
            buckets = self._subscriptions.setdefault(channel.name, {})
            buckets.setdefault(channel.bucket, []).append(handler)

        logger.debug(
            f"Subscribed {handlers.describe_handler(handler)} to '{channel}'"
        )
        return None

    def unsubscribe(
        self, channel_name: str, handler: Optional[subscriber.HANDLER] = None
    ) -> None:
        """
        Unsubscribe from a channel.

        With a namespace, only that namespace's subscriptions are affected.
        Without one, every namespace on the channel is. Passing a handler
        removes only that handler, otherwise all handlers in scope are
        removed. Unknown channels are ignored.

        Args:
            channel_name (str): Channel name, optionally namespaced.
            handler (HANDLER): The handler to remove.
        Raises:
            InvalidChannelNameError: If channel_name is malformed.
        """
        channel = channels.split_channel_name(channel_name)

        with self._lock:
            buckets = self._subscriptions.get(channel.name)
            if buckets is None:
                return

            if channel.namespace:
                scope = [channel.namespace] if channel.namespace in buckets else []
            elif handler is None:
                self._subscriptions[channel.name] = {}
                scope = []
            else:
                scope = list(buckets.keys())

            for namespace in scope:
                if handler is None:
                    buckets[namespace] = []
                else:
                    buckets[namespace] = [
                        h for h in buckets[namespace] if h != handler
                    ]

        logger.debug(f"Unsubscribed from '{channel}'")

    def set_subscriber_exception_handler(
        self, handler: Optional[handlers.SUBSCRIBER_EXCEPTION_HANDLER]
    ) -> None:
        """
        Set the exception handler for subscriber errors.
        The handler is called when a subscriber raises an exception during
        broadcast.

        Args:
            Optional[handlers.SUBSCRIBER_EXCEPTION_HANDLER]:
                Callable with signature (HANDLER, str, Exception) -> bool.
                Returns True to stop delivery, False to continue.
                Pass None to restore default behavior (re-raise exceptions).
        """
        self._subscriber_exception_handler = handler

    # -----Broadcasting--------------------------------------------------------

    def broadcast(self, channel_name: str, message: Any = None) -> None:
        """
        Broadcast a message to every subscriber of a channel.

        Handlers in all namespaces of the channel are collected before any is
        called, so subscribing or unsubscribing from within a handler only
        affects later broadcasts. A handler that broadcasts itself runs that
        broadcast to completion before the remaining handlers are called.

        Args:
            channel_name (str): Bare channel name. Don't namespace: qualified
                names reach no subscribers.
            message (Any): Passed as the second argument to each handler.
        """
        with self._lock:
            targets = self._collect_handlers(channel_name)
            logger.debug(
                f"Broadcasting on '{channel_name}' to {len(targets)} handler(s)"
            )

            for handler in targets:
                if not callable(handler):
                    logger.warning(
                        f"Skipping non-callable subscriber on '{channel_name}': "
                        f"{handler!r}"
                    )
                    continue

                try:
                    handler(channel_name, message)
                except Exception as e:
                    if self._subscriber_exception_handler is None:
                        raise

                    stop = self._subscriber_exception_handler(handler, channel_name, e)
                    if stop:
                        break

    def _collect_handlers(self, channel_name: str) -> list[subscriber.HANDLER]:
        """Flatten every namespace bucket under a bare name into one list."""
        collected: list[subscriber.HANDLER] = []
        for bucket in self._subscriptions.get(channel_name, {}).values():
            collected.extend(bucket)

        return collected

    # -----Introspection API---------------------------------------------------

    def _scoped_handlers(self, channel_name: str) -> list[subscriber.HANDLER]:
        channel = channels.split_channel_name(channel_name)
        if channel.namespace:
            buckets = self._subscriptions.get(channel.name, {})
            return list(buckets.get(channel.namespace, []))

        return self._collect_handlers(channel.name)

    def get_channels(self) -> list[str]:
        """Get all bare channel names that have at least one subscriber."""
        with self._lock:
            return sorted(
                name
                for name, buckets in self._subscriptions.items()
                if any(buckets.values())
            )

    def get_subscriber_count(self, channel_name: str) -> int:
        """
        Get the number of subscriptions on a channel.

        Args:
            channel_name (str): A bare name counts every namespace, a
                qualified name counts only that namespace.
        Returns:
            int: Number of subscriptions, duplicates included.
        """
        with self._lock:
            return len(self._scoped_handlers(channel_name))

    def is_subscribed(self, handler: Callable, channel_name: str) -> bool:
        """
        Check if a specific handler is subscribed to a channel.

        Args:
            handler (Callable): The handler to look for.
            channel_name (str): A bare name checks every namespace, a
                qualified name checks only that namespace.
        Returns:
            bool: True if the handler is subscribed, False otherwise.
        """
        with self._lock:
            return any(h == handler for h in self._scoped_handlers(channel_name))

    def to_dict(self) -> dict:
        """Convert the subscription table to a dictionary of handler names."""
        with self._lock:
            data = {}
            for name in sorted(self._subscriptions.keys()):
                namespaces = {
                    namespace: [handlers.describe_handler(h) for h in bucket]
                    for namespace, bucket in self._subscriptions[name].items()
                    if bucket
                }
                if namespaces:
                    data[name] = namespaces

            return data

    def to_string(self) -> str:
        """Returns a string representation of the subscription table."""
        return json.dumps(self.to_dict(), indent=4)

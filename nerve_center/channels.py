"""
Channel name parsing.

Channel names take the form ``[namespace.]name`` where both parts may only
contain letters, digits, dashes and underscores. The namespace selects a
subscriber group on the bare channel name; it never changes which broadcasts
reach the subscriber.

Data point keys share this grammar. A data point's change channel is derived
by prefixing the bare name with ``data-`` and keeping the namespace in front.
"""

import re
from dataclasses import dataclass
from typing import Any
from typing import Optional

from nerve_center.exceptions import InvalidChannelNameError


_CHANNEL_PATTERN = re.compile(r"(?:([a-z0-9\-_]*)\.)?([a-z0-9\-_]*)", re.IGNORECASE)

DEFAULT_NAMESPACE = ""
"""Bucket key for subscriptions made without a namespace."""

DATA_CHANNEL_PREFIX = "data-"


@dataclass(frozen=True)
class ChannelName(object):
    """A parsed channel name."""

    namespace: Optional[str]
    """The namespace qualifier, or None when the name is unqualified."""

    name: str
    """The bare channel name broadcasts are made on."""

    @property
    def bucket(self) -> str:
        """The registry bucket key for this namespace."""
        return self.namespace or DEFAULT_NAMESPACE

    def __str__(self) -> str:
        if self.namespace is None:
            return self.name
        return f"{self.namespace}.{self.name}"


def split_channel_name(channel_name: Any) -> ChannelName:
    """
    Split a channel name into its namespace and bare name.

    Args:
        channel_name (str): e.g. 'howdy' or 'my-widget.howdy'.
    Returns:
        ChannelName: The parsed name. namespace is None when not given.
    Raises:
        InvalidChannelNameError: If the whole string doesn't match the
            channel name grammar.
    """
    if not isinstance(channel_name, str):
        raise InvalidChannelNameError(
            f"Invalid channel name: expected str, got {type(channel_name).__name__}"
        )

    match = _CHANNEL_PATTERN.fullmatch(channel_name)
    if match is None:
        raise InvalidChannelNameError(f"Invalid channel name: '{channel_name}'")

    return ChannelName(namespace=match.group(1), name=match.group(2))


def data_channel_name(key: str) -> ChannelName:
    """
    Get the subscription channel for a data point key.

    'greeting' becomes 'data-greeting' and 'ns.greeting' becomes
    'ns.data-greeting'.
    """
    split_key = split_channel_name(key)
    return ChannelName(
        namespace=split_key.namespace,
        name=f"{DATA_CHANNEL_PREFIX}{split_key.name}",
    )

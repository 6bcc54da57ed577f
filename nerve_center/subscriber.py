"""
Subscriber type definitions and the data point handler wrapper.

Channel handlers receive ``(channel_name, message)``. Data point handlers only
receive the DataPointChange, so they are registered on their data channel
wrapped in a DataPointSubscriber.

The wrapper is a frozen dataclass and therefore compares by value: two
wrappers around equal handlers are equal. This is what lets
unsubscribe_from_data_point() find a wrapper again from the original handler
without keeping a side table.
"""

from dataclasses import dataclass
from typing import Any
from typing import Callable

from nerve_center.datapoints import DataPointChange


HANDLER = Callable[[str, Any], Any]
"""
A channel subscriber. Called with the bare channel name that was broadcast on
and the message. Return values are ignored.
"""

DATA_POINT_HANDLER = Callable[[DataPointChange], Any]
"""A data point subscriber. Called with the change that occurred."""


@dataclass(frozen=True)
class DataPointSubscriber(object):
    """Adapts a data point handler to the channel handler signature."""

    handler: DATA_POINT_HANDLER
    """The end point the change is forwarded to."""

    def __call__(self, channel_name: str, message: DataPointChange) -> None:
        self.handler(message)

"""
# Nerve Center

An in-process publish/subscribe event bus with a typed, observable key-value
store.

Components talk through a NerveCenter instance instead of holding references
to each other: one part broadcasts on a channel or changes a data point, and
any number of other parts react. All dispatch is synchronous.

    >>> import nerve_center
    >>> nc = nerve_center.NerveCenter()
    >>> nc.subscribe('my-widget.howdy', lambda channel, message: print(message))
    >>> nc.broadcast('howdy', 'hello world')
    hello world

Every NerveCenter owns its own subscription table and data store, so
independent instances never see each other's messages.
"""

from nerve_center import handlers
from nerve_center.center import NerveCenter
from nerve_center.channels import ChannelName
from nerve_center.channels import split_channel_name
from nerve_center.datapoints import DataPointChange
from nerve_center.datapoints import DataPointType
from nerve_center.exceptions import DataPointAlreadyDefinedError
from nerve_center.exceptions import InvalidChannelNameError
from nerve_center.exceptions import InvalidDataPointTypeError
from nerve_center.exceptions import MissingElementsError
from nerve_center.exceptions import NerveCenterError
from nerve_center.exceptions import NotAnArrayError
from nerve_center.exceptions import StrictModeViolationError
from nerve_center.exceptions import TypeMismatchError
from nerve_center.options import Options
from nerve_center.registry import ChannelRegistry


version_major = 1
version_minor = 0
version_patch = 0
__version__ = f"{version_major}.{version_minor}.{version_patch}"

__all__ = [
    "ChannelName",
    "ChannelRegistry",
    "DataPointAlreadyDefinedError",
    "DataPointChange",
    "DataPointType",
    "InvalidChannelNameError",
    "InvalidDataPointTypeError",
    "MissingElementsError",
    "NerveCenter",
    "NerveCenterError",
    "NotAnArrayError",
    "Options",
    "StrictModeViolationError",
    "TypeMismatchError",
    "handlers",
    "split_channel_name",
]

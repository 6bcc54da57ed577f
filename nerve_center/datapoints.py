"""
Data point types and change records.

A data point is declared with one of five type tags. Values written to it are
tagged at runtime the way a dynamic language's ``typeof`` would tag them, and
must match the declared tag unless the point accepts 'any' or the value is
None.
"""

import numbers
from collections.abc import MutableSequence
from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import Union

from nerve_center.exceptions import InvalidDataPointTypeError


class DataPointType(str, Enum):
    """Declared type of a data point."""

    OBJECT = "object"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ANY = "any"


FUNCTION_TAG = "function"
"""Runtime tag of callables. Never a valid declared type."""


@dataclass(frozen=True)
class DataPointChange(object):
    """Message delivered to data point subscribers when a value changes."""

    key: str
    """The bare name of the data point that changed."""

    old_value: Any
    """The value before the change. None if the point was never set."""

    new_value: Any
    """The value after the change."""


def to_data_point_type(type_: Union[str, DataPointType]) -> DataPointType:
    """
    Coerce a type tag to a DataPointType.

    Raises:
        InvalidDataPointTypeError: If the tag isn't a supported type.
    """
    try:
        return DataPointType(type_)
    except ValueError:
        supported = ", ".join(t.value for t in DataPointType)
        raise InvalidDataPointTypeError(
            f"Invalid data point type '{type_}'. Expected one of: {supported}"
        ) from None


def type_tag_of(value: Any) -> str:
    """Returns the runtime type tag of a value."""
    # bool before number: bool is an int subclass.
    if isinstance(value, bool):
        return DataPointType.BOOLEAN.value
    if isinstance(value, numbers.Number):
        return DataPointType.NUMBER.value
    if isinstance(value, str):
        return DataPointType.STRING.value
    if callable(value):
        return FUNCTION_TAG
    return DataPointType.OBJECT.value


def matches_type(declared: DataPointType, value: Any) -> bool:
    """Check whether a value may be stored in a point of the declared type."""
    if declared is DataPointType.ANY or value is None:
        return True
    return type_tag_of(value) == declared.value


def is_array(value: Any) -> bool:
    """Check whether a value supports the list mutation helpers."""
    return isinstance(value, MutableSequence)

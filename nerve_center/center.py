"""
# Nerve Center

The channel registry extended with typed, observable data points.

Every data point write is announced on the point's data channel: a change to
'greeting' is broadcast on 'data-greeting' with a DataPointChange message.
subscribe_to_data_point() listens there, so data point subscriptions get the
same namespace handling as plain channel subscriptions.
"""

import logging
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional
from typing import Union

from nerve_center import channels
from nerve_center import datapoints
from nerve_center import options as options_
from nerve_center import subscriber
from nerve_center.exceptions import DataPointAlreadyDefinedError
from nerve_center.exceptions import MissingElementsError
from nerve_center.exceptions import NotAnArrayError
from nerve_center.exceptions import StrictModeViolationError
from nerve_center.exceptions import TypeMismatchError
from nerve_center.registry import ChannelRegistry


logger = logging.getLogger(__name__)

TYPE_TAG = Union[str, datapoints.DataPointType]

LIST_METHOD = Callable[[Any, tuple], Any]
"""Mutates a list data point in place, given the elements to add."""


class NerveCenter(ChannelRegistry):
    """
    In-process event bus with an observable data store.

    Channels:
        subscribe(), unsubscribe(), broadcast()

    Data points:
        initialize_data_point(), set_data_point(), get_data_point(),
        subscribe_to_data_point(), unsubscribe_from_data_point()

    List data points:
        pop_data_point(), push_data_point(), shift_data_point(),
        unshift_data_point()

    Instances share nothing; create one per independent message domain.
    """

    def __init__(self, options: options_.OPTIONS = None) -> None:
        self._options = options_.resolve_options(options)
        super().__init__(thread_safe=self._options.thread_safe)

        self._data_formats: dict[str, datapoints.DataPointType] = {}
        self._data: dict[str, Any] = {}

    @property
    def options(self) -> options_.Options:
        return self._options

    # -----Data Point Values---------------------------------------------------

    def initialize_data_point(
        self, key: str, type: TYPE_TAG = "any", initial_value: Any = None
    ) -> None:
        """
        Declare a data point's type and give it its first value.

        The first value is written through set_data_point(), so subscribers
        are told about it with an old value of None.

        Args:
            key (str): The data point key.
            type (str): One of 'object', 'boolean', 'number', 'string' or
                'any'.
            initial_value (Any): The first value. Defaults to None.
        Raises:
            InvalidDataPointTypeError: If type is not supported.
            DataPointAlreadyDefinedError: If the point already has a type.
            TypeMismatchError: If initial_value doesn't match the type.
        """
        type_ = datapoints.to_data_point_type(type or datapoints.DataPointType.ANY)
        name = self._data_point_name(key)

        with self._lock:
            if name in self._data_formats:
                raise DataPointAlreadyDefinedError(
                    f"Data point '{name}' is already defined as "
                    f"'{self._data_formats[name].value}'"
                )

            self._check_type(name, type_, initial_value)
            self._data_formats[name] = type_
            logger.debug(f"Initialized data point '{name}' as '{type_.value}'")

            self.set_data_point(name, initial_value)

    def set_data_point(self, key: str, value: Any) -> None:
        """
        Set the value of a data point and notify its subscribers.

        An uninitialized point is initialized as 'any' on its first write,
        unless strict mode is active.

        Raises:
            StrictModeViolationError: If the point is uninitialized in strict
                mode.
            TypeMismatchError: If the value doesn't match the declared type.
                None is always allowed.
        """
        name = self._data_point_name(key)

        with self._lock:
            if name not in self._data_formats:
                self._check_initialized(name)
                self.initialize_data_point(name, datapoints.DataPointType.ANY, value)
                return

            self._check_type(name, self._data_formats[name], value)

            old_value = self._data.get(name)
            self._data[name] = value
            self._trigger_data_point_change(name, old_value, value)

    def get_data_point(self, key: str, default: Any = None) -> Any:
        """
        Get the value of a data point.

        Args:
            key (str): The data point key.
            default (Any): Returned when the point has never been set.
        """
        name = self._data_point_name(key)
        with self._lock:
            return self._data.get(name, default)

    def initialize_data_points(self, types: Mapping[str, TYPE_TAG]) -> None:
        """
        Initialize several data points at once, each with a value of None.

        Every key is validated before any point is initialized, so one bad
        entry leaves the store unchanged.

        Args:
            types (Mapping[str, str]): Data point key to type tag.
        Raises:
            InvalidDataPointTypeError: If any type is not supported.
            DataPointAlreadyDefinedError: If any point already has a type, or
                two keys name the same point ('a' and 'ns.a').
        """
        resolved: dict[str, datapoints.DataPointType] = {}
        for key, type_ in types.items():
            name = self._data_point_name(key)
            if name in resolved:
                raise DataPointAlreadyDefinedError(
                    f"Data point '{name}' is given more than once"
                )
            resolved[name] = datapoints.to_data_point_type(type_)

        with self._lock:
            for name in resolved:
                if name in self._data_formats:
                    raise DataPointAlreadyDefinedError(
                        f"Data point '{name}' is already defined as "
                        f"'{self._data_formats[name].value}'"
                    )

            for name, type_ in resolved.items():
                self.initialize_data_point(name, type_)

    def set_data_points(self, values: Mapping[str, Any]) -> None:
        """
        Set several data points at once.

        Every write is validated before any is made, so a rejected value
        leaves all of the points unchanged. Each write then notifies its own
        subscribers, in mapping order.

        Args:
            values (Mapping[str, Any]): Data point key to new value.
        """
        with self._lock:
            resolved = {self._data_point_name(k): v for k, v in values.items()}
            for name, value in resolved.items():
                if name in self._data_formats:
                    self._check_type(name, self._data_formats[name], value)
                else:
                    self._check_initialized(name)

            for name, value in resolved.items():
                self.set_data_point(name, value)

    # -----Data Point Subscriptions--------------------------------------------

    def subscribe_to_data_point(
        self, key: str, handler: Optional[subscriber.DATA_POINT_HANDLER] = None
    ) -> Any:
        """
        Subscribe to changes in a data point.

        Subscriptions may be made before the point is initialized. The key
        may be namespaced ('my-widget.greeting') so the subscription can be
        removed as part of that namespace. Can be used as a decorator by
        omitting the handler.

        Args:
            key (str): The data point key, optionally namespaced.
            handler (DATA_POINT_HANDLER): Called with a DataPointChange.
        """
        if handler is None:

            def decorator(
                func: subscriber.DATA_POINT_HANDLER,
            ) -> subscriber.DATA_POINT_HANDLER:
                self.subscribe_to_data_point(key, func)
                return func

            return decorator

        channel = channels.data_channel_name(key)
        self.subscribe(str(channel), subscriber.DataPointSubscriber(handler))
        return None

    def unsubscribe_from_data_point(
        self,
        key: str,
        handler: Optional[subscriber.DATA_POINT_HANDLER] = None,
    ) -> None:
        """
        Unsubscribe from changes in a data point.

        Follows the same namespace and handler rules as unsubscribe().

        Args:
            key (str): The data point key, optionally namespaced.
            handler (DATA_POINT_HANDLER): The handler given to
                subscribe_to_data_point(). Omit to remove all handlers in
                scope.
        """
        channel = channels.data_channel_name(key)

        wrapped_handler = None
        if handler is not None:
            wrapped_handler = subscriber.DataPointSubscriber(handler)

        self.unsubscribe(str(channel), wrapped_handler)

    # -----List Data Points----------------------------------------------------

    def pop_data_point(self, key: str) -> Any:
        """
        Remove and return the last element of a list data point.
        Returns None if the list is empty.
        """
        return self._perform_list_method(key, _pop)

    def push_data_point(self, key: str, *elements: Any) -> int:
        """
        Append elements to the end of a list data point.

        Returns:
            int: The new length of the list.
        """
        return self._perform_list_method(key, _push, elements, needs_elements=True)

    def shift_data_point(self, key: str) -> Any:
        """
        Remove and return the first element of a list data point.
        Returns None if the list is empty.
        """
        return self._perform_list_method(key, _shift)

    def unshift_data_point(self, key: str, *elements: Any) -> int:
        """
        Insert elements at the start of a list data point, keeping their order.

        Returns:
            int: The new length of the list.
        """
        return self._perform_list_method(
            key, _unshift, elements, needs_elements=True
        )

    def _perform_list_method(
        self,
        key: str,
        method: LIST_METHOD,
        elements: tuple = (),
        needs_elements: bool = False,
    ) -> Any:
        """
        Mutate a list data point in place and notify its subscribers.

        The change carries a shallow copy of the list from before the
        mutation as old_value, and the live list as new_value.

        Raises:
            NotAnArrayError: If the point doesn't hold a mutable sequence.
            MissingElementsError: If needs_elements and no elements are given.
        """
        name = self._data_point_name(key)

        with self._lock:
            current = self._data.get(name)
            if not datapoints.is_array(current):
                raise NotAnArrayError(
                    f"Data point '{name}' holds "
                    f"{type(current).__name__}, not a list"
                )

            if needs_elements and not elements:
                raise MissingElementsError(
                    f"At least one element is required to add to '{name}'"
                )

            old_value = list(current)
            result = method(current, elements)
            self._trigger_data_point_change(name, old_value, current)

            return result

    # -----Store Introspection-------------------------------------------------

    def has_data_point(self, key: str) -> bool:
        """Check if a data point has been set, even if only to None."""
        name = self._data_point_name(key)
        with self._lock:
            return name in self._data

    def get_data_point_type(self, key: str) -> Optional[datapoints.DataPointType]:
        """Get the declared type of a data point, or None if uninitialized."""
        name = self._data_point_name(key)
        with self._lock:
            return self._data_formats.get(name)

    def get_data_point_keys(self) -> list[str]:
        """Get all initialized data point keys."""
        with self._lock:
            return sorted(self._data_formats.keys())

    # -----Helpers-------------------------------------------------------------

    @staticmethod
    def _data_point_name(key: str) -> str:
        """Data points are identified by the bare name of their key."""
        return channels.split_channel_name(key).name

    def _check_initialized(self, name: str) -> None:
        if self._options.strict_mode:
            raise StrictModeViolationError(
                f"Strict mode is active. Data point '{name}' must be "
                f"initialized before use."
            )

    @staticmethod
    def _check_type(
        name: str, declared: datapoints.DataPointType, value: Any
    ) -> None:
        if not datapoints.matches_type(declared, value):
            raise TypeMismatchError(
                f"Unexpected data type for '{name}': expected "
                f"'{declared.value}', got '{datapoints.type_tag_of(value)}'"
            )

    def _trigger_data_point_change(
        self, name: str, old_value: Any, new_value: Any
    ) -> None:
        logger.debug(f"Data point '{name}' changed")
        self.broadcast(
            f"{channels.DATA_CHANNEL_PREFIX}{name}",
            datapoints.DataPointChange(
                key=name, old_value=old_value, new_value=new_value
            ),
        )


# -----List Methods------------------------------------------------------------


def _pop(sequence: Any, _: tuple) -> Any:
    return sequence.pop() if sequence else None


def _push(sequence: Any, elements: tuple) -> int:
    sequence.extend(elements)
    return len(sequence)


def _shift(sequence: Any, _: tuple) -> Any:
    return sequence.pop(0) if sequence else None


def _unshift(sequence: Any, elements: tuple) -> int:
    for index, element in enumerate(elements):
        sequence.insert(index, element)
    return len(sequence)

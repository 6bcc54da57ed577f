"""
Unit tests for the list data point helpers.

pop, push, shift and unshift mutate the stored list in place, then notify
subscribers with a snapshot of the list from before the mutation as the old
value and the live list as the new value.
"""

import pytest

import nerve_center
from nerve_center import DataPointChange


def test_pop() -> None:
    """Test that pop returns the last element and notifies once."""
    nc = nerve_center.NerveCenter()
    changes: list[DataPointChange] = []

    nc.initialize_data_point("greetings", "object", ["hello", "hola"])
    nc.subscribe_to_data_point("greetings", changes.append)

    result = nc.pop_data_point("greetings")

    assert result == "hola"
    assert nc.get_data_point("greetings") == ["hello"]
    assert len(changes) == 1
    assert changes[0].old_value == ["hello", "hola"]
    assert changes[0].new_value == ["hello"]


def test_push() -> None:
    """Test that push appends and returns the new length."""
    nc = nerve_center.NerveCenter()
    changes: list[DataPointChange] = []

    nc.initialize_data_point("greetings", "object", ["hello"])
    nc.subscribe_to_data_point("greetings", changes.append)

    result = nc.push_data_point("greetings", "hola")

    assert result == 2
    assert nc.get_data_point("greetings") == ["hello", "hola"]
    assert len(changes) == 1


def test_push_multiple_elements() -> None:
    """Test that push appends every element in order."""
    nc = nerve_center.NerveCenter()

    nc.initialize_data_point("arr", "object", ["a"])

    assert nc.push_data_point("arr", "x", "y") == 3
    assert nc.get_data_point("arr") == ["a", "x", "y"]


def test_shift() -> None:
    """Test that shift returns the first element."""
    nc = nerve_center.NerveCenter()
    changes: list[DataPointChange] = []

    nc.initialize_data_point("greetings", "object", ["hello", "hola"])
    nc.subscribe_to_data_point("greetings", changes.append)

    result = nc.shift_data_point("greetings")

    assert result == "hello"
    assert nc.get_data_point("greetings") == ["hola"]
    assert changes[0].old_value == ["hello", "hola"]


def test_unshift() -> None:
    """Test that unshift prepends and returns the new length."""
    nc = nerve_center.NerveCenter()
    changes: list[DataPointChange] = []

    nc.initialize_data_point("greetings", "object", ["hello"])
    nc.subscribe_to_data_point("greetings", changes.append)

    result = nc.unshift_data_point("greetings", "hola")

    assert result == 2
    assert nc.get_data_point("greetings") == ["hola", "hello"]
    assert len(changes) == 1


def test_unshift_multiple_keeps_argument_order() -> None:
    """Test that unshifted elements keep the order they were given in."""
    nc = nerve_center.NerveCenter()

    nc.initialize_data_point("arr", "object", ["c"])

    assert nc.unshift_data_point("arr", "a", "b") == 3
    assert nc.get_data_point("arr") == ["a", "b", "c"]


def test_list_is_mutated_in_place() -> None:
    """Test that the stored list keeps its identity and old_value is a copy."""
    nc = nerve_center.NerveCenter()
    changes: list[DataPointChange] = []
    greetings = ["hello"]

    nc.initialize_data_point("greetings", "object", greetings)
    nc.subscribe_to_data_point("greetings", changes.append)
    nc.push_data_point("greetings", "hola")

    assert nc.get_data_point("greetings") is greetings
    assert changes[0].new_value is greetings
    assert changes[0].old_value is not greetings
    assert changes[0].old_value == ["hello"]


def test_pop_and_shift_on_empty_list() -> None:
    """Test that removing from an empty list returns None and still notifies."""
    nc = nerve_center.NerveCenter()
    changes: list[DataPointChange] = []

    nc.initialize_data_point("empty", "object", [])
    nc.subscribe_to_data_point("empty", changes.append)

    assert nc.pop_data_point("empty") is None
    assert nc.shift_data_point("empty") is None
    assert len(changes) == 2


@pytest.mark.parametrize("value", ["not a list", 42, {"a": 1}, None, ("a", "b")])
def test_helpers_require_a_list(value: object) -> None:
    """Test that every helper rejects non-list values."""
    nc = nerve_center.NerveCenter()
    nc.set_data_point("thing", value)

    with pytest.raises(nerve_center.NotAnArrayError):
        nc.pop_data_point("thing")
    with pytest.raises(nerve_center.NotAnArrayError):
        nc.shift_data_point("thing")
    with pytest.raises(nerve_center.NotAnArrayError):
        nc.push_data_point("thing", 1)
    with pytest.raises(TypeError):
        nc.unshift_data_point("thing", 1)


def test_helpers_on_unset_point() -> None:
    """Test that a never-set point isn't treated as a list."""
    nc = nerve_center.NerveCenter()

    with pytest.raises(nerve_center.NotAnArrayError):
        nc.push_data_point("missing", 1)


def test_push_and_unshift_need_elements() -> None:
    """Test that adding nothing is rejected and the list is left alone."""
    nc = nerve_center.NerveCenter()
    changes: list[DataPointChange] = []

    nc.initialize_data_point("arr", "object", ["a"])
    nc.subscribe_to_data_point("arr", changes.append)

    with pytest.raises(nerve_center.MissingElementsError):
        nc.push_data_point("arr")
    with pytest.raises(nerve_center.MissingElementsError):
        nc.unshift_data_point("arr")

    assert nc.get_data_point("arr") == ["a"]
    assert changes == []

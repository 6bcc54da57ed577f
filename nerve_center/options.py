"""
Configuration for a nerve center instance.

Options can be given as an Options instance or as a plain mapping. Mapping
keys may use either the snake_case field names or their camelCase spellings
('strictMode'). Missing or None keys take their defaults, unknown keys are
ignored with a warning, and every other value must be a bool.
"""

import logging
import re
from dataclasses import dataclass
from dataclasses import fields
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Union


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Options(object):
    """Behavior switches for a NerveCenter."""

    strict_mode: bool = False
    """
    If True, data points must be initialized with initialize_data_point()
    before they can be written.
    """

    thread_safe: bool = False
    """
    If True, every operation on the instance, handler dispatch included, runs
    under a single re-entrant lock.
    """

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "Options":
        """
        Build options from a mapping, filling in defaults.

        Raises:
            TypeError: If options isn't a mapping, or a value isn't a bool.
        """
        if options is None:
            return cls()
        if not isinstance(options, Mapping):
            raise TypeError(
                f"Nerve center options must be a mapping or Options, "
                f"not {type(options).__name__}"
            )

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in options.items():
            name = _to_snake_case(key)
            if name not in known:
                logger.warning(f"Ignoring unknown nerve center option '{key}'")
                continue
            if value is None:
                continue
            if not isinstance(value, bool):
                raise TypeError(
                    f"Nerve center option '{key}' must be a bool, "
                    f"not {type(value).__name__}"
                )
            values[name] = value

        return cls(**values)


OPTIONS = Union[Options, Mapping[str, Any], None]


def resolve_options(options: OPTIONS) -> Options:
    """Returns options as an Options instance."""
    if isinstance(options, Options):
        return options
    return Options.from_mapping(options)


def _to_snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()

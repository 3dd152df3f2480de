"""Flattening and unflattening of nested locale maps."""

from typing import Dict, Mapping, Optional, Union

NestedMap = Dict[str, Union[str, 'NestedMap']]
FlatIndex = Dict[str, str]


def flatten(nested: Mapping, prefix: str = '') -> FlatIndex:
    """
    Flatten a nested locale map into dotted keys.

    Args:
        nested: Nested map (leaves are strings)
        prefix: Prefix prepended to every emitted key

    Returns:
        FlatIndex in depth-first order

    Example:
        >>> flatten({'menu': {'save': 'Save'}, 'title': 'Blog'})
        {'menu.save': 'Save', 'title': 'Blog'}
    """
    result: FlatIndex = {}
    _flatten_into(nested, prefix, result)
    return result


def _flatten_into(nested: Mapping, prefix: str, result: FlatIndex):
    for key, value in nested.items():
        if isinstance(value, str):
            result[f"{prefix}{key}"] = value
        elif isinstance(value, Mapping):
            _flatten_into(value, f"{prefix}{key}.", result)
        else:
            raise TypeError(
                f"Locale value for '{prefix}{key}' must be a string or a mapping, "
                f"got {type(value).__name__}"
            )


def unflatten(flat: Mapping[str, Optional[str]]) -> NestedMap:
    """
    Rebuild a nested locale map from dotted keys.

    Blank values (None, empty or whitespace only) are skipped, so a
    translation that was cleared is not written back. When a key needs a
    level where a string already sits, the later entry wins.

    Args:
        flat: Dotted key -> value mapping

    Returns:
        NestedMap in the order the keys were first seen
    """
    result: NestedMap = {}

    for key, value in flat.items():
        if value is None or not value.strip():
            continue

        segments = key.split('.')
        walker = result
        for segment in segments[:-1]:
            child = walker.get(segment)
            if not isinstance(child, dict):
                child = {}
                walker[segment] = child
            walker = child

        walker[segments[-1]] = value

    return result


def deep_copy(nested: Mapping) -> NestedMap:
    """Copy a nested map level by level (leaves are immutable strings)."""
    return {
        key: deep_copy(value) if isinstance(value, Mapping) else value
        for key, value in nested.items()
    }

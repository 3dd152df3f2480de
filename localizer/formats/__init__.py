"""Locale file format backends."""

from typing import Dict, Type

from .base import BaseFormat
from .php import PhpArrayFormat, PhpCliFormat, escape_php_string
from .yaml_format import YamlFormat
from .json_format import JsonFormat

FORMATS: Dict[str, Type[BaseFormat]] = {
    PhpArrayFormat.name: PhpArrayFormat,
    PhpCliFormat.name: PhpCliFormat,
    YamlFormat.name: YamlFormat,
    JsonFormat.name: JsonFormat,
}


def get_format(name: str, parse_timeout: float = 10.0) -> BaseFormat:
    """
    Create a format backend by name.

    Args:
        name: Backend name ('php', 'php-cli', 'yaml', 'json')
        parse_timeout: Timeout for backends that run an external parser

    Raises:
        ValueError: If the backend name is unknown
    """
    if name not in FORMATS:
        raise ValueError(f"Unknown locale format '{name}'. Valid options: {', '.join(FORMATS)}")

    if name == PhpCliFormat.name:
        return PhpCliFormat(timeout=parse_timeout)
    return FORMATS[name]()


__all__ = [
    'BaseFormat',
    'PhpArrayFormat',
    'PhpCliFormat',
    'YamlFormat',
    'JsonFormat',
    'FORMATS',
    'get_format',
    'escape_php_string',
]

"""Core modules of the localizer engine."""

from .errors import (
    LocalizerError,
    InitializationError,
    ParseError,
    WriteError,
    DuplicateInitializationError,
    InvalidRequestError,
)
from .nested_map import NestedMap, FlatIndex, flatten, unflatten, deep_copy
from .source_scanner import SourceChunk, SourceScanner
from .locale_store import LocaleStore
from .writer import LocaleWriter
from .localizer import FileStrings, Localizer, LocalizerHost, LocalizerOptions

__all__ = [
    'LocalizerError',
    'InitializationError',
    'ParseError',
    'WriteError',
    'DuplicateInitializationError',
    'InvalidRequestError',
    'NestedMap',
    'FlatIndex',
    'flatten',
    'unflatten',
    'deep_copy',
    'SourceChunk',
    'SourceScanner',
    'LocaleStore',
    'LocaleWriter',
    'FileStrings',
    'Localizer',
    'LocalizerHost',
    'LocalizerOptions',
]

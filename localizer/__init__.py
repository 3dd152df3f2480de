"""
Localizer
=========

Translation coverage and editing for PHP locale files.

Reads the locale files of a project (``lang/<locale>/<file>.php``), finds
where each key is referenced in the sources (``acme.blog::lang.menu.save``)
and reports which keys are translated, untranslated or missing.

Usage:
    from localizer import Localizer, LocalizerOptions

    localizer = Localizer(LocalizerOptions(root='.', namespace='acme.blog'))
    localizer.initialize()
    print(localizer.stats('de')['de'].percentage)

CLI:
    localizer stats
    localizer strings de --status untranslated
    localizer set de lang.php menu.save Speichern
    localizer serve --port 3005
"""

from .__version__ import __version__, __author__, __description__

# Core exports
from .core.errors import (
    LocalizerError,
    InitializationError,
    ParseError,
    WriteError,
    DuplicateInitializationError,
    InvalidRequestError,
)
from .core.localizer import Localizer, LocalizerHost, LocalizerOptions, FileStrings
from .core.nested_map import flatten, unflatten
from .core.source_scanner import SourceChunk

# Features
from .features.diff import diff, key_status, is_short_literal
from .features.stats import LocaleStats, FileStats

# Formats
from .formats import get_format

__all__ = [
    '__version__',
    '__author__',
    '__description__',
    'LocalizerError',
    'InitializationError',
    'ParseError',
    'WriteError',
    'DuplicateInitializationError',
    'InvalidRequestError',
    'Localizer',
    'LocalizerHost',
    'LocalizerOptions',
    'FileStrings',
    'flatten',
    'unflatten',
    'SourceChunk',
    'diff',
    'key_status',
    'is_short_literal',
    'LocaleStats',
    'FileStats',
    'get_format',
]

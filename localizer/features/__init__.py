"""Feature modules."""

from .diff import DiffResult, KeyStatus, LocaleDiff, diff, is_short_literal, key_status
from .stats import FileStats, LocaleStats, StatsCalculator

__all__ = [
    'DiffResult',
    'KeyStatus',
    'LocaleDiff',
    'diff',
    'is_short_literal',
    'key_status',
    'FileStats',
    'LocaleStats',
    'StatsCalculator',
]

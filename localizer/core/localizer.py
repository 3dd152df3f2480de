"""The localizer engine: locales, source references, coverage and edits."""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..features.diff import DiffResult, LocaleDiff, key_status
from ..features.stats import LocaleStats, StatsCalculator
from ..formats import get_format
from .errors import DuplicateInitializationError, InitializationError
from .locale_store import LocaleStore
from .nested_map import FlatIndex
from .source_scanner import SourceChunk, SourceScanner
from .writer import LocaleWriter

log = logging.getLogger(__name__)


@dataclass
class LocalizerOptions:
    """Settings of a localizer instance."""
    root: Path
    default_locale: str = 'en'
    namespace: str = ''
    locale_dir: str = 'lang'
    files: List[str] = field(default_factory=lambda: ['**/*.php', '**/*.htm'])
    file_format: str = 'php'
    parse_timeout: float = 10.0

    @property
    def locale_root(self) -> Path:
        return Path(self.root) / self.locale_dir


@dataclass
class FileStrings:
    """Strings of one locale file next to the default locale's values."""
    file: str
    defaults: FlatIndex = field(default_factory=dict)
    values: FlatIndex = field(default_factory=dict)  # "" for missing keys
    status: Dict[str, str] = field(default_factory=dict)
    references: Dict[str, List[SourceChunk]] = field(default_factory=dict)

    def count(self, status: str) -> int:
        """Number of keys with the given status."""
        return sum(1 for value in self.status.values() if value == status)

    def to_dict(self, default_locale: str, locale: str) -> Dict[str, Any]:
        """
        Convert to the JSON shape served to dashboards.

        The default values are keyed by the default locale identifier and the
        target values by the requested locale.
        """
        result: Dict[str, Any] = {default_locale: dict(self.defaults)}
        if locale != default_locale:
            result[locale] = dict(self.values)
        result['status'] = dict(self.status)
        result['references'] = {
            key: [chunk.to_dict() for chunk in chunks]
            for key, chunks in self.references.items()
        }
        return result


class Localizer:
    """
    Localization engine of one project.

    Reads the default locale as the coverage baseline, indexes key
    references found in the source files, reports per-locale coverage and
    writes single-key edits back to the locale files.

    Usage:
        localizer = Localizer(LocalizerOptions(root=Path('.'), namespace='acme.blog'))
        localizer.initialize()
        print(localizer.stats('de'))
    """

    def __init__(self, options: LocalizerOptions):
        """
        Initialize localizer.

        Args:
            options: LocalizerOptions

        Raises:
            InitializationError: If the project root does not exist or the
                locale format is unknown
        """
        self.options = options
        self.root = Path(options.root)

        if not self.root.is_dir():
            raise InitializationError(f"Project root not found: {self.root}")

        try:
            self.format = get_format(options.file_format, parse_timeout=options.parse_timeout)
        except ValueError as e:
            raise InitializationError(str(e)) from e

        self.store = LocaleStore(options.locale_root, options.default_locale, self.format)
        self.scanner = SourceScanner(
            self.root,
            options.namespace,
            options.files,
            extension=self.format.extension,
        )
        self.writer = LocaleWriter(self.store)
        self.stats_calculator = StatsCalculator(options.default_locale)

    @property
    def default_locale(self) -> str:
        return self.options.default_locale

    @property
    def index(self) -> Dict[str, FlatIndex]:
        """Flat strings of the default locale by file."""
        return self.store.index

    @property
    def sources(self) -> Dict[str, List[SourceChunk]]:
        """Key references by full dotted path."""
        return self.scanner.sources

    def initialize(self) -> 'Localizer':
        """Read the locales, then the source references."""
        self.read_locales()
        self.read_sources()
        return self

    def read_locales(self):
        """Load the default locale files and discover the other locales."""
        self.store.read_locales()

    def read_sources(self):
        """Scan the source files for key references."""
        self.scanner.scan()

    def list_locales(self) -> List[str]:
        """Known locales, excluding the default locale."""
        return list(self.store.locales)

    def references(self, key: str) -> List[SourceChunk]:
        """Source references of a full dotted key, e.g. "lang.menu.save"."""
        return self.scanner.references(key)

    def stats(self, locale: Optional[str] = None) -> Dict[str, LocaleStats]:
        """
        Coverage of one locale, or of every known locale.

        Args:
            locale: Restrict the result to this locale

        Returns:
            {locale: LocaleStats}

        Raises:
            InvalidRequestError: For an invalid locale identifier
            ParseError: If a locale file of the locale cannot be parsed
        """
        locales = [locale] if locale else self.list_locales()

        result = {}
        for name in locales:
            self.store.ensure_locale(name)
            strings = {file: self.store.get_flat(name, file) for file in self.store.files}
            result[name] = self.stats_calculator.calculate(name, self.store.index, strings)

        return result

    def fetch_strings(self, locale: str) -> Dict[str, FileStrings]:
        """
        Strings of every locale file of a locale, with status and references.

        Args:
            locale: Target locale

        Returns:
            {file: FileStrings} in default locale file order

        Raises:
            InvalidRequestError: For an invalid locale identifier
            ParseError: If a locale file of the locale cannot be parsed
        """
        self.store.ensure_locale(locale)

        result = {}
        for file, defaults in self.store.index.items():
            target = self.store.get_flat(locale, file)
            stem = Path(file).stem

            strings = FileStrings(file=file, defaults=dict(defaults))
            for key, default_value in defaults.items():
                strings.values[key] = target.get(key, '')
                strings.status[key] = key_status(default_value, target, key).value
                strings.references[key] = self.scanner.references(f"{stem}.{key}")

            result[file] = strings

        return result

    def compare(self, locale: str) -> DiffResult:
        """
        Detailed diff of a locale against the default locale over all files.

        Keys are reported as full dotted paths ("lang.menu.save").
        """
        self.store.ensure_locale(locale)

        differ = LocaleDiff()
        result = DiffResult(default_locale=self.default_locale, target_locale=locale)
        for file, defaults in self.store.index.items():
            target = self.store.get_flat(locale, file)
            differ.compare_into(result, defaults, target, prefix=f"{Path(file).stem}.")

        differ.sort(result)
        return result

    def update_string(self, locale: str, file: str, key: str, value: Optional[str]) -> bool:
        """
        Set one translation and write its locale file.

        Returns:
            True when the file was written, False when the write failed and
            the change was rolled back
        """
        self.store.ensure_locale(locale)
        return self.writer.update_string(locale, file, key, value)


class LocalizerHost:
    """
    Creates and holds the single Localizer of a process.

    Usage:
        host = LocalizerHost(options)
        localizer = host.get()  # built and initialized on first use
    """

    def __init__(self, options: LocalizerOptions):
        self.options = options
        self._instance: Optional[Localizer] = None
        self._lock = threading.Lock()

    @property
    def created(self) -> bool:
        return self._instance is not None

    def create(self) -> Localizer:
        """
        Build and initialize the Localizer.

        Raises:
            DuplicateInitializationError: If it was already created
            InitializationError: If the locale directories are missing
        """
        with self._lock:
            if self._instance is not None:
                raise DuplicateInitializationError("Localizer is already initialized")

            localizer = Localizer(self.options).initialize()
            self._instance = localizer

        log.info("Localizer ready for %s", self.options.root)
        return localizer

    def get(self) -> Localizer:
        """Return the Localizer, creating it on first use."""
        with self._lock:
            if self._instance is not None:
                return self._instance

        try:
            return self.create()
        except DuplicateInitializationError:
            # Created by another thread in the meantime
            return self._instance

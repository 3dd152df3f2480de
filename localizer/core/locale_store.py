"""In-memory store of locale files, loaded lazily."""

import logging
import threading
from pathlib import Path
from typing import Dict, List, Tuple

from ..formats.base import BaseFormat
from ..utils.validators import is_safe_file_name, is_valid_locale_code
from .errors import InitializationError, InvalidRequestError, ParseError
from .nested_map import FlatIndex, NestedMap, flatten

log = logging.getLogger(__name__)


class LocaleStore:
    """
    Holds the nested and flattened strings of every locale file.

    The default locale is read eagerly by ``read_locales()`` and is the
    baseline for coverage. Other locales are read one file at a time on
    first access and cached for the lifetime of the store. A locale file
    that does not exist is cached as an empty map.
    """

    def __init__(self, locale_root: Path, default_locale: str, file_format: BaseFormat):
        """
        Initialize store.

        Args:
            locale_root: Directory holding one subdirectory per locale
            default_locale: Baseline locale identifier
            file_format: Backend used to parse and render locale files
        """
        self.locale_root = Path(locale_root)
        self.default_locale = default_locale
        self.format = file_format

        self.locales: List[str] = []  # known locales, default excluded
        self.default_strings: Dict[str, NestedMap] = {}  # file -> nested
        self.index: Dict[str, FlatIndex] = {}  # file -> flat (default locale)
        self.strings: Dict[str, Dict[str, NestedMap]] = {}  # locale -> file -> nested

        self._locks: Dict[Tuple[str, str], threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def files(self) -> List[str]:
        """Locale file names of the default locale."""
        return list(self.index.keys())

    def read_locales(self):
        """
        Discover locales and load the default locale files.

        Raises:
            InitializationError: If the locale root or the default locale
                directory does not exist
        """
        if not self.locale_root.is_dir():
            raise InitializationError(f"Locale directory not found: {self.locale_root}")

        default_dir = self.locale_root / self.default_locale
        if not default_dir.is_dir():
            raise InitializationError(f"Default locale directory not found: {default_dir}")

        for file_path in sorted(default_dir.iterdir()):
            if not self.format.is_locale_file(file_path):
                continue
            try:
                content = self.format.parse_locale_file(file_path)
            except ParseError as e:
                log.error("Skipping default locale file %s: %s", file_path.name, e.message)
                continue

            self.default_strings[file_path.name] = content
            self.index[file_path.name] = flatten(content)

        for locale_dir in sorted(self.locale_root.iterdir()):
            name = locale_dir.name
            if not locale_dir.is_dir() or name == self.default_locale or name.startswith('.'):
                continue
            if not is_valid_locale_code(name):
                log.warning("Ignoring directory with invalid locale name: %s", name)
                continue
            self.ensure_locale(name)

        log.info(
            "Loaded %d default locale files (%d keys), found %d locales",
            len(self.index), sum(len(keys) for keys in self.index.values()), len(self.locales)
        )

    def ensure_locale(self, locale: str):
        """
        Register a locale and create its bucket if it is new.

        Raises:
            InvalidRequestError: If the identifier is not a valid locale code
        """
        if not is_valid_locale_code(locale):
            raise InvalidRequestError(f"Invalid locale: '{locale}'")

        with self._locks_guard:
            self.strings.setdefault(locale, {})
            if locale != self.default_locale and locale not in self.locales:
                self.locales.append(locale)

    def lock_for(self, locale: str, file: str) -> threading.Lock:
        """Lock serializing loads and writes of one (locale, file) entry."""
        with self._locks_guard:
            key = (locale, file)
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def file_path(self, locale: str, file: str) -> Path:
        """Backing file of a (locale, file) entry."""
        return self.locale_root / locale / file

    def get(self, locale: str, file: str) -> NestedMap:
        """
        Return the nested strings of a locale file, loading them on first use.

        Raises:
            InvalidRequestError: For unsafe locale or file names
            ParseError: If the backing file exists but cannot be parsed
        """
        self.ensure_locale(locale)
        if file in self.strings[locale]:
            return self.strings[locale][file]

        with self.lock_for(locale, file):
            return self.load_unlocked(locale, file)

    def get_flat(self, locale: str, file: str) -> FlatIndex:
        """Flattened strings of a locale file."""
        return flatten(self.get(locale, file))

    def load_unlocked(self, locale: str, file: str) -> NestedMap:
        """Load an entry; the caller must hold ``lock_for(locale, file)``."""
        self.ensure_locale(locale)
        if file in self.strings[locale]:
            return self.strings[locale][file]

        if not is_safe_file_name(file, self.format.extension):
            raise InvalidRequestError(f"Invalid locale file: '{file}'")

        file_path = self.file_path(locale, file)
        if file_path.exists():
            content = self.format.parse_locale_file(file_path)
            log.debug("Loaded %s/%s", locale, file)
        else:
            content = {}
            log.debug("No %s/%s file, using empty strings", locale, file)

        self.strings[locale][file] = content
        return content

    def set(self, locale: str, file: str, content: NestedMap):
        """Replace the cached strings of an entry."""
        self.ensure_locale(locale)
        self.strings[locale][file] = content

"""Applies single-key edits and writes locale files back to disk."""

import logging
import os
import shutil
import tempfile
from typing import Optional

from ..utils.validators import is_valid_key_path
from .errors import InvalidRequestError, WriteError
from .locale_store import LocaleStore
from .nested_map import FlatIndex, NestedMap, deep_copy, flatten, unflatten

log = logging.getLogger(__name__)


class LocaleWriter:
    """
    Updates one translation at a time and persists the whole locale file.

    The entry is flattened, edited, rebuilt and rendered by the store's
    format backend. Unrelated keys keep their order and values. A failed
    write restores the previous in-memory strings.
    """

    def __init__(self, store: LocaleStore):
        self.store = store

    def update_string(self, locale: str, file: str, key: str, value: Optional[str]) -> bool:
        """
        Set one translation and write the locale file.

        An empty value removes the key from the file.

        Args:
            locale: Target locale
            file: Locale file name, e.g. "lang.php"
            key: Dotted key inside the file
            value: New translation

        Returns:
            True once the file is written, False if writing failed (the
            in-memory strings are rolled back)

        Raises:
            InvalidRequestError: For unsafe locale, file or key input
            ParseError: If the existing locale file cannot be parsed
        """
        if not is_valid_key_path(key):
            raise InvalidRequestError(f"Invalid key: '{key}'")

        with self.store.lock_for(locale, file):
            current = self.store.load_unlocked(locale, file)

            flat = flatten(current)
            conflict = find_conflict(flat, key)
            if conflict is not None:
                raise InvalidRequestError(
                    f"Key '{key}' conflicts with existing key '{conflict}' in {locale}/{file}"
                )
            flat[key] = value if value is not None else ''

            backup = deep_copy(current)
            updated = unflatten(flat)
            self.store.set(locale, file, updated)

            try:
                self._write(locale, file, updated)
            except WriteError as e:
                self.store.set(locale, file, backup)
                log.error("Update of %s/%s [%s] rolled back: %s", locale, file, key, e.message)
                return False

        log.info("Updated %s/%s [%s]", locale, file, key)
        return True

    def _write(self, locale: str, file: str, content: NestedMap):
        """Render and encode first, then replace the file through a temporary sibling."""
        file_path = self.store.file_path(locale, file)

        try:
            data = self.store.format.render_locale_file(content).encode('utf-8')
        except (OSError, ValueError) as e:
            raise WriteError(f"Cannot render {file_path}: {e}") from e

        tmp_name = None
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f'.{file}.', suffix='.tmp', dir=file_path.parent)
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            if file_path.exists():
                shutil.copymode(file_path, tmp_name)
            else:
                os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, file_path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise WriteError(f"Cannot write {file_path}: {e}") from e


def find_conflict(flat: FlatIndex, key: str) -> Optional[str]:
    """
    Return an existing key that ``key`` would overwrite as a branch or a leaf.

    "menu" conflicts with "menu.save", and "menu.save.label" with "menu.save".
    """
    for existing in flat:
        if existing.startswith(key + '.') or key.startswith(existing + '.'):
            return existing
    return None

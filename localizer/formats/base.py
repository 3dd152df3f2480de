"""Base interface for locale file format backends."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping

from ..core.errors import ParseError
from ..core.nested_map import NestedMap


class BaseFormat(ABC):
    """
    Base backend for reading and writing one locale file format.

    A backend turns a persisted locale file into a NestedMap and renders a
    NestedMap back into text. The engine only talks to this interface, so the
    file syntax can be swapped without touching the core.
    """

    #: Short name used in configuration (e.g. 'php')
    name: str = ''

    #: Extension of the locale files, including the dot (e.g. '.php')
    extension: str = ''

    @abstractmethod
    def parse_locale_file(self, file_path: Path) -> NestedMap:
        """
        Parse a locale file.

        Args:
            file_path: Absolute path of the locale file

        Returns:
            NestedMap with string leaves

        Raises:
            ParseError: If the file is not valid for this format
        """
        pass

    @abstractmethod
    def render_locale_file(self, nested: Mapping) -> str:
        """
        Render a NestedMap as file content.

        Output must be deterministic and keep the NestedMap key order.

        Args:
            nested: NestedMap to render

        Returns:
            File content
        """
        pass

    def is_locale_file(self, file_path: Path) -> bool:
        """Check if a path looks like a locale file of this format."""
        return file_path.is_file() and file_path.suffix == self.extension

    def read_text(self, file_path: Path) -> str:
        """Read a locale file as UTF-8 text, wrapping I/O failures as ParseError."""
        try:
            return Path(file_path).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"Cannot read locale file: {e}", path=file_path) from e

    def normalize(self, data: Any, file_path: Path) -> NestedMap:
        """
        Coerce decoded data into a NestedMap.

        Numbers and booleans become strings, null becomes an empty string and
        lists become maps keyed by their index.

        Raises:
            ParseError: If the top level is not a mapping
        """
        if isinstance(data, list) and not data:
            return {}
        if not isinstance(data, (dict, list)):
            raise ParseError(
                f"Locale file must contain a map, got {type(data).__name__}",
                path=file_path
            )
        return self._normalize_node(data)

    def _normalize_node(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {str(key): self._normalize_node(value) for key, value in data.items()}
        if isinstance(data, list):
            return {str(index): self._normalize_node(value) for index, value in enumerate(data)}
        return self._scalar_to_str(data)

    @staticmethod
    def _scalar_to_str(value: Any) -> str:
        if value is None:
            return ''
        if isinstance(value, bool):
            return '1' if value else ''
        return str(value)

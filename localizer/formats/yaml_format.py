"""YAML locale files."""

from pathlib import Path
from typing import Mapping

import yaml

from ..core.errors import ParseError
from ..core.nested_map import NestedMap
from .base import BaseFormat


class YamlFormat(BaseFormat):
    """Backend for nested YAML locale files (e.g. ``lang/en/blog.yml``)."""

    name = 'yaml'
    extension = '.yml'

    def parse_locale_file(self, file_path: Path) -> NestedMap:
        """Parse a YAML locale file; an empty document is an empty map."""
        content = self.read_text(file_path)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            line = col = None
            mark = getattr(e, 'problem_mark', None)
            if mark is not None:
                line, col = mark.line + 1, mark.column + 1
            raise ParseError(f"Invalid YAML: {e}", path=file_path, line=line, col=col) from e

        if data is None:
            return {}
        return self.normalize(data, file_path)

    def render_locale_file(self, nested: Mapping) -> str:
        """Render a NestedMap as block-style YAML in map order."""
        if not nested:
            return '{}\n'
        return yaml.safe_dump(
            self._plain(nested),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    def _plain(self, nested: Mapping) -> dict:
        return {
            key: self._plain(value) if isinstance(value, Mapping) else value
            for key, value in nested.items()
        }

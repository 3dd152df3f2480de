"""JSON locale files."""

import json
from pathlib import Path
from typing import Mapping

from ..core.errors import ParseError
from ..core.nested_map import NestedMap
from .base import BaseFormat


class JsonFormat(BaseFormat):
    """Backend for nested JSON locale files."""

    name = 'json'
    extension = '.json'

    def parse_locale_file(self, file_path: Path) -> NestedMap:
        content = self.read_text(file_path)
        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON: {e.msg}", path=file_path, line=e.lineno, col=e.colno) from e

        return self.normalize(data, file_path)

    def render_locale_file(self, nested: Mapping) -> str:
        return json.dumps(nested, indent=4, ensure_ascii=False) + '\n'

"""PHP array locale files (``<?php return [...];``)."""

import json
import subprocess
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from ..core.errors import ParseError
from ..core.nested_map import NestedMap
from .base import BaseFormat

INDENT = '    '

# Escape sequences understood inside double quoted PHP strings
DOUBLE_QUOTE_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    'v': '\v',
    'e': '\x1b',
    'f': '\f',
    '\\': '\\',
    '$': '$',
    '"': '"',
}

HEX_DIGITS = '0123456789abcdefABCDEF'
OCTAL_DIGITS = '01234567'


def escape_php_string(text: str) -> str:
    """Escape text for a double quoted PHP string literal."""
    return text.replace('\\', '\\\\').replace('"', '\\"').replace('$', '\\$')


class PhpArrayFormat(BaseFormat):
    """
    Backend for PHP files that return a (nested) array of strings.

    Files are read by a small reader for the literal subset used by
    translation files, so no PHP interpreter is needed.

    Rendered files look like:

        <?php
        return [
            "title" => "Blog",
            "menu" => [
                "save" => "Save",
            ],
        ];
    """

    name = 'php'
    extension = '.php'

    def parse_locale_file(self, file_path: Path) -> NestedMap:
        """Parse a PHP locale file without running PHP."""
        content = self.read_text(file_path)
        data = _PhpArrayReader(content, file_path).read()
        return self.normalize(data, file_path)

    def render_locale_file(self, nested: Mapping) -> str:
        """Render a NestedMap as a PHP file returning a short-syntax array."""
        content: List[str] = ['<?php', 'return [']
        self._render_entries(nested, content, depth=1)
        content.append('];')
        return '\n'.join(content)

    def _render_entries(self, nested: Mapping, content: List[str], depth: int):
        indent = INDENT * depth
        for key, value in nested.items():
            key = escape_php_string(str(key))
            if isinstance(value, Mapping):
                content.append(f'{indent}"{key}" => [')
                self._render_entries(value, content, depth + 1)
                content.append(f'{indent}],')
            else:
                content.append(f'{indent}"{key}" => "{escape_php_string(value)}",')


class PhpCliFormat(PhpArrayFormat):
    """
    PHP backend that lets the PHP interpreter evaluate the locale file.

    Useful for files using constructs the built-in reader does not know
    (constants, function calls). Rendering is shared with PhpArrayFormat.
    """

    name = 'php-cli'

    SCRIPT = 'echo json_encode(require $argv[1]);'

    def __init__(self, php_binary: str = 'php', timeout: Optional[float] = 10.0):
        """
        Args:
            php_binary: PHP executable
            timeout: Seconds to wait for the interpreter (None waits forever)
        """
        self.php_binary = php_binary
        self.timeout = timeout

    def parse_locale_file(self, file_path: Path) -> NestedMap:
        """Parse a PHP locale file by running ``php -r``."""
        command = [self.php_binary, '-r', self.SCRIPT, '--', str(file_path)]

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding='utf-8',
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ParseError(f"PHP timed out after {self.timeout}s", path=file_path) from e
        except FileNotFoundError as e:
            raise ParseError(f"PHP executable not found: {self.php_binary}", path=file_path) from e

        if completed.returncode != 0:
            message = (completed.stderr or completed.stdout).strip() or f"exit code {completed.returncode}"
            raise ParseError(f"PHP failed: {message}", path=file_path)

        try:
            data = json.loads(completed.stdout)
        except json.JSONDecodeError as e:
            raise ParseError(f"PHP returned invalid JSON: {e.msg}", path=file_path) from e

        return self.normalize(data, file_path)


class _PhpArrayReader:
    """Reader for the literal subset of PHP used by translation files."""

    def __init__(self, text: str, path: Path):
        self.text = text.lstrip('\ufeff')
        self.path = path
        self.pos = 0

    def read(self) -> Any:
        self._skip_whitespace()
        if not self.text.startswith('<?php', self.pos):
            self._fail("Expected '<?php' open tag")
        self.pos += len('<?php')

        self._skip_trivia()
        if self._peek_word().lower() == 'declare':
            self._skip_declare()
            self._skip_trivia()

        if self._peek_word().lower() != 'return':
            self._fail("Expected 'return' statement")
        self.pos += len('return')

        value = self._read_expression()

        self._skip_trivia()
        self._expect(';')
        self._skip_trivia()
        if self.text.startswith('?>', self.pos):
            self.pos += 2
            self._skip_whitespace()
        if self.pos < len(self.text):
            self._fail("Unexpected content after return statement")

        return value

    # Positions and failures

    def _location(self, pos: int) -> Tuple[int, int]:
        line = self.text.count('\n', 0, pos) + 1
        col = pos - (self.text.rfind('\n', 0, pos) + 1) + 1
        return line, col

    def _fail(self, message: str, pos: Optional[int] = None):
        line, col = self._location(self.pos if pos is None else pos)
        raise ParseError(message, path=self.path, line=line, col=col)

    def _expect(self, token: str):
        if not self.text.startswith(token, self.pos):
            found = self.text[self.pos:self.pos + 10] or 'end of file'
            self._fail(f"Expected '{token}', found '{found}'")
        self.pos += len(token)

    # Whitespace and comments

    def _skip_whitespace(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _skip_trivia(self):
        while True:
            self._skip_whitespace()
            if self.text.startswith('/*', self.pos):
                end = self.text.find('*/', self.pos + 2)
                if end == -1:
                    self._fail("Unterminated comment")
                self.pos = end + 2
            elif self.text.startswith('//', self.pos) or self.text.startswith('#', self.pos):
                end = self.text.find('\n', self.pos)
                self.pos = len(self.text) if end == -1 else end + 1
            else:
                return

    def _peek_word(self) -> str:
        end = self.pos
        while end < len(self.text) and (self.text[end].isalnum() or self.text[end] == '_'):
            end += 1
        return self.text[self.pos:end]

    def _skip_declare(self):
        end = self.text.find(';', self.pos)
        if end == -1:
            self._fail("Unterminated declare statement")
        self.pos = end + 1

    # Values

    def _read_expression(self) -> Any:
        value = self._read_value()
        while True:
            self._skip_trivia()
            if not self.text.startswith('.', self.pos) or self.text.startswith('.=', self.pos):
                return value
            start = self.pos
            self.pos += 1
            right = self._read_value()
            if isinstance(value, dict) or isinstance(right, dict):
                self._fail("Cannot concatenate an array", start)
            value = self._concat_operand(value) + self._concat_operand(right)

    @staticmethod
    def _concat_operand(value: Any) -> str:
        return BaseFormat._scalar_to_str(value)

    def _read_value(self) -> Any:
        self._skip_trivia()
        if self.pos >= len(self.text):
            self._fail("Unexpected end of file")

        char = self.text[self.pos]
        if char == '[':
            self.pos += 1
            return self._read_entries(']')
        if char == "'":
            return self._read_single_quoted()
        if char == '"':
            return self._read_double_quoted()
        if char.isdigit() or (char in '+-' and self.text[self.pos + 1:self.pos + 2].isdigit()):
            return self._read_number()

        word = self._peek_word()
        lowered = word.lower()
        if lowered == 'array':
            self.pos += len(word)
            self._skip_trivia()
            self._expect('(')
            return self._read_entries(')')
        if lowered in ('true', 'false', 'null'):
            self.pos += len(word)
            return {'true': True, 'false': False, 'null': None}[lowered]

        self._fail(f"Unsupported value starting with '{self.text[self.pos:self.pos + 10]}'")

    def _read_entries(self, closing: str) -> dict:
        result: dict = {}
        next_index = 0

        while True:
            self._skip_trivia()
            if self.text.startswith(closing, self.pos):
                self.pos += 1
                return result

            key_pos = self.pos
            value = self._read_expression()
            self._skip_trivia()

            if self.text.startswith('=>', self.pos):
                self.pos += 2
                if isinstance(value, dict):
                    self._fail("Array keys must be scalars", key_pos)
                key = self._array_key(value)
                value = self._read_expression()
                self._skip_trivia()
            else:
                key = str(next_index)

            result[key] = value
            if key.lstrip('-').isdigit():
                next_index = max(next_index, int(key) + 1)

            if self.text.startswith(',', self.pos):
                self.pos += 1
            elif not self.text.startswith(closing, self.pos):
                self._fail(f"Expected ',' or '{closing}'")

    @staticmethod
    def _array_key(value: Any) -> str:
        if isinstance(value, bool):
            return '1' if value else '0'
        if value is None:
            return ''
        if isinstance(value, float):
            return str(int(value))
        return str(value)

    def _read_number(self) -> Any:
        start = self.pos
        if self.text[self.pos] in '+-':
            self.pos += 1
        while self.pos < len(self.text) and (self.text[self.pos].isalnum() or self.text[self.pos] in '._'):
            self.pos += 1

        literal = self.text[start:self.pos].replace('_', '')
        try:
            return int(literal)
        except ValueError:
            pass
        try:
            number = float(literal)
        except ValueError:
            self._fail(f"Invalid number '{literal}'", start)
        return int(number) if number.is_integer() else number

    def _read_single_quoted(self) -> str:
        start = self.pos
        self.pos += 1
        chars: List[str] = []

        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "'":
                self.pos += 1
                return ''.join(chars)
            if char == '\\' and self.text[self.pos + 1:self.pos + 2] in ("'", '\\'):
                chars.append(self.text[self.pos + 1])
                self.pos += 2
                continue
            chars.append(char)
            self.pos += 1

        self._fail("Unterminated string", start)

    def _read_double_quoted(self) -> str:
        start = self.pos
        self.pos += 1
        chars: List[str] = []

        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == '"':
                self.pos += 1
                return ''.join(chars)
            if char == '\\':
                chars.append(self._read_escape())
                continue
            if char == '$':
                following = self.text[self.pos + 1:self.pos + 2]
                if following == '{' or following.isalpha() or following == '_':
                    self._fail("Variable interpolation is not supported")
            chars.append(char)
            self.pos += 1

        self._fail("Unterminated string", start)

    def _read_escape(self) -> str:
        following = self.text[self.pos + 1:self.pos + 2]

        if following in DOUBLE_QUOTE_ESCAPES:
            self.pos += 2
            return DOUBLE_QUOTE_ESCAPES[following]

        if following and following in OCTAL_DIGITS:
            end = self.pos + 1
            while end < len(self.text) and end < self.pos + 4 and self.text[end] in OCTAL_DIGITS:
                end += 1
            code = int(self.text[self.pos + 1:end], 8) & 0xFF
            self.pos = end
            return chr(code)

        first_hex = self.text[self.pos + 2:self.pos + 3]
        if following == 'x' and first_hex and first_hex in HEX_DIGITS:
            end = self.pos + 2
            while end < len(self.text) and end < self.pos + 4 and self.text[end] in HEX_DIGITS:
                end += 1
            code = int(self.text[self.pos + 2:end], 16)
            self.pos = end
            return chr(code)

        if following == 'u' and self.text.startswith('{', self.pos + 2):
            end = self.text.find('}', self.pos + 3)
            digits = self.text[self.pos + 3:end] if end != -1 else ''
            if not digits or any(digit not in HEX_DIGITS for digit in digits):
                self._fail("Invalid unicode escape")
            self.pos = end + 1
            return chr(int(digits, 16))

        # Unknown escapes keep the backslash
        self.pos += 1
        return '\\'

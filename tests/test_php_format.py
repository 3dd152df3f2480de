"""Tests for the PHP locale file backends."""

import subprocess
import pytest
from pathlib import Path
from unittest.mock import patch

from localizer.core.errors import ParseError
from localizer.formats import get_format
from localizer.formats.php import PhpArrayFormat, PhpCliFormat, escape_php_string


def write(tmp_path: Path, content: str, name: str = 'lang.php') -> Path:
    path = tmp_path / name
    path.write_text(content, encoding='utf-8')
    return path


class TestPhpArrayParsing:
    """Test cases for reading PHP array files."""

    def setup_method(self):
        self.format = PhpArrayFormat()

    def test_short_syntax(self, tmp_path):
        """Short array syntax with nesting and trailing commas."""
        path = write(tmp_path, """<?php
return [
    'title' => 'Blog',
    'menu' => [
        'save' => 'Save',
    ],
];
""")
        assert self.format.parse_locale_file(path) == {'title': 'Blog', 'menu': {'save': 'Save'}}

    def test_long_syntax(self, tmp_path):
        """array() syntax is supported."""
        path = write(tmp_path, "<?php return array('a' => array('b' => \"B\"));")
        assert self.format.parse_locale_file(path) == {'a': {'b': 'B'}}

    def test_comments_and_declare(self, tmp_path):
        """Comments, declare and a closing tag are skipped."""
        path = write(tmp_path, """<?php declare(strict_types=1);
/**
 * Blog translations
 */
return [
    // Plugin name
    'name' => 'Blog', # inline
    /* disabled */
];
?>
""")
        assert self.format.parse_locale_file(path) == {'name': 'Blog'}

    def test_single_quoted_escapes(self, tmp_path):
        """Only \\' and \\\\ are escapes in single quotes."""
        path = write(tmp_path, r"""<?php return ['a' => 'it\'s', 'b' => 'back\\slash', 'c' => 'new\nline'];""")

        assert self.format.parse_locale_file(path) == {
            'a': "it's",
            'b': 'back\\slash',
            'c': 'new\\nline',
        }

    def test_double_quoted_escapes(self, tmp_path):
        """Double quoted escapes are decoded."""
        path = write(tmp_path, r"""<?php return [
    'tab' => "a\tb",
    'quote' => "say \"hi\"",
    'dollar' => "\$5",
    'hex' => "\x41",
    'octal' => "\101",
    'unicode' => "\u{1F600}",
    'unknown' => "\q",
];""")

        assert self.format.parse_locale_file(path) == {
            'tab': 'a\tb',
            'quote': 'say "hi"',
            'dollar': '$5',
            'hex': 'A',
            'octal': 'A',
            'unicode': '\U0001F600',
            'unknown': '\\q',
        }

    def test_scalars_become_strings(self, tmp_path):
        """Numbers, booleans and null are coerced to strings."""
        path = write(tmp_path, "<?php return ['n' => 5, 'f' => 1.5, 't' => true, 'x' => false, 'z' => null];")

        assert self.format.parse_locale_file(path) == {
            'n': '5',
            'f': '1.5',
            't': '1',
            'x': '',
            'z': '',
        }

    def test_concatenation(self, tmp_path):
        """String concatenation is evaluated."""
        path = write(tmp_path, "<?php return ['a' => 'Hello ' . 'World'];")
        assert self.format.parse_locale_file(path) == {'a': 'Hello World'}

    def test_list_values(self, tmp_path):
        """Lists are keyed by index."""
        path = write(tmp_path, "<?php return ['days' => ['Mon', 'Tue']];")
        assert self.format.parse_locale_file(path) == {'days': {'0': 'Mon', '1': 'Tue'}}

    def test_empty_array(self, tmp_path):
        path = write(tmp_path, "<?php\nreturn [];\n")
        assert self.format.parse_locale_file(path) == {}

    def test_bom(self, tmp_path):
        """A UTF-8 byte order mark is ignored."""
        path = write(tmp_path, "\ufeff<?php return ['a' => 'A'];")
        assert self.format.parse_locale_file(path) == {'a': 'A'}

    def test_missing_open_tag(self, tmp_path):
        path = write(tmp_path, "return ['a' => 'A'];")
        with pytest.raises(ParseError, match="<\\?php"):
            self.format.parse_locale_file(path)

    def test_interpolation_rejected(self, tmp_path):
        """Variables inside double quotes cannot be evaluated."""
        path = write(tmp_path, '<?php\nreturn [\n    "a" => "Hello $name",\n];')

        with pytest.raises(ParseError) as exc_info:
            self.format.parse_locale_file(path)

        assert 'interpolation' in exc_info.value.message
        assert exc_info.value.line == 3

    def test_error_location(self, tmp_path):
        """Syntax errors carry the file, line and column."""
        path = write(tmp_path, "<?php\nreturn [\n    'a' => ,\n];")

        with pytest.raises(ParseError) as exc_info:
            self.format.parse_locale_file(path)

        error = exc_info.value
        assert error.path == str(path)
        assert (error.line, error.col) == (3, 12)
        assert str(error).startswith(f"{path}:3:12: ")

    def test_unterminated_string(self, tmp_path):
        path = write(tmp_path, "<?php return ['a' => 'oops];")
        with pytest.raises(ParseError, match="Unterminated string"):
            self.format.parse_locale_file(path)

    def test_trailing_garbage(self, tmp_path):
        path = write(tmp_path, "<?php return ['a' => 'A']; echo 1;")
        with pytest.raises(ParseError, match="Unexpected content"):
            self.format.parse_locale_file(path)

    def test_top_level_must_be_array(self, tmp_path):
        path = write(tmp_path, "<?php return 'text';")
        with pytest.raises(ParseError, match="must contain a map"):
            self.format.parse_locale_file(path)

    def test_unreadable_file(self, tmp_path):
        """A missing file is reported as a ParseError."""
        with pytest.raises(ParseError):
            self.format.parse_locale_file(tmp_path / 'missing.php')


class TestPhpArrayRendering:
    """Test cases for rendering PHP array files."""

    def setup_method(self):
        self.format = PhpArrayFormat()

    def test_render(self):
        """Rendering is exact and keeps key order."""
        rendered = self.format.render_locale_file({'title': 'Blog', 'menu': {'save': 'Say "hi"'}})

        assert rendered == (
            '<?php\n'
            'return [\n'
            '    "title" => "Blog",\n'
            '    "menu" => [\n'
            '        "save" => "Say \\"hi\\"",\n'
            '    ],\n'
            '];'
        )

    def test_render_empty(self):
        assert self.format.render_locale_file({}) == '<?php\nreturn [\n];'

    def test_escape_php_string(self):
        """Backslash, quote and dollar are escaped."""
        assert escape_php_string('a\\b "c" $d') == 'a\\\\b \\"c\\" \\$d'

    def test_render_parse_round_trip(self, tmp_path):
        """Rendered files parse back to the same map."""
        nested = {
            'title': 'Blog',
            'price': 'Costs $5',
            'path': 'C:\\temp',
            'quote': 'He said "hi"',
            'multi': 'line one\nline two',
            'menu': {'save': 'Speichern', 'deep': {'x': 'ümlaut ✓'}},
        }
        path = write(tmp_path, self.format.render_locale_file(nested))

        assert self.format.parse_locale_file(path) == nested


class TestPhpCliFormat:
    """Test cases for the php interpreter backend."""

    def setup_method(self):
        self.format = PhpCliFormat(timeout=2)

    def _completed(self, stdout='', returncode=0, stderr=''):
        return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)

    def test_parse_output(self, tmp_path):
        """JSON output of php is decoded in order."""
        path = write(tmp_path, "<?php return [];")

        with patch('localizer.formats.php.subprocess.run') as run:
            run.return_value = self._completed('{"b": "B", "a": {"x": 1}}')
            result = self.format.parse_locale_file(path)

        assert result == {'b': 'B', 'a': {'x': '1'}}
        assert list(result) == ['b', 'a']
        command = run.call_args[0][0]
        assert command[0] == 'php'
        assert command[-1] == str(path)
        assert run.call_args[1]['timeout'] == 2

    def test_timeout(self, tmp_path):
        path = write(tmp_path, "<?php return [];")

        with patch('localizer.formats.php.subprocess.run', side_effect=subprocess.TimeoutExpired('php', 2)):
            with pytest.raises(ParseError, match="timed out"):
                self.format.parse_locale_file(path)

    def test_php_missing(self, tmp_path):
        path = write(tmp_path, "<?php return [];")

        with patch('localizer.formats.php.subprocess.run', side_effect=FileNotFoundError()):
            with pytest.raises(ParseError, match="not found"):
                self.format.parse_locale_file(path)

    def test_php_error(self, tmp_path):
        path = write(tmp_path, "<?php return [")

        with patch('localizer.formats.php.subprocess.run') as run:
            run.return_value = self._completed(returncode=255, stderr='PHP Parse error')
            with pytest.raises(ParseError, match="PHP Parse error"):
                self.format.parse_locale_file(path)

    def test_invalid_json(self, tmp_path):
        path = write(tmp_path, "<?php return [];")

        with patch('localizer.formats.php.subprocess.run') as run:
            run.return_value = self._completed('not json')
            with pytest.raises(ParseError, match="invalid JSON"):
                self.format.parse_locale_file(path)

    def test_empty_php_array(self, tmp_path):
        """json_encode([]) is a list, read as an empty map."""
        path = write(tmp_path, "<?php return [];")

        with patch('localizer.formats.php.subprocess.run') as run:
            run.return_value = self._completed('[]')
            assert self.format.parse_locale_file(path) == {}


class TestGetFormat:
    """Test cases for get_format()."""

    def test_known_formats(self):
        assert isinstance(get_format('php'), PhpArrayFormat)
        assert get_format('yaml').extension == '.yml'
        assert get_format('json').extension == '.json'

    def test_cli_timeout(self):
        """The parse timeout reaches the php-cli backend."""
        backend = get_format('php-cli', parse_timeout=3)
        assert isinstance(backend, PhpCliFormat)
        assert backend.timeout == 3

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown locale format"):
            get_format('xml')

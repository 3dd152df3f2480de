"""Tests for single-key updates and persistence."""

import threading
import pytest

from localizer.core.errors import InvalidRequestError
from localizer.core.locale_store import LocaleStore
from localizer.core.writer import LocaleWriter
from localizer.formats.php import PhpArrayFormat


@pytest.fixture
def store(project):
    store = LocaleStore(project / 'lang', 'en', PhpArrayFormat())
    store.read_locales()
    return store


@pytest.fixture
def writer(store):
    return LocaleWriter(store)


def read_back(project, locale, file='lang.php'):
    return PhpArrayFormat().parse_locale_file(project / 'lang' / locale / file)


class TestUpdateString:
    """Test cases for LocaleWriter.update_string()."""

    def test_update_existing_key(self, writer, project):
        """The file is rewritten with the new value."""
        assert writer.update_string('de', 'lang.php', 'menu.save', 'Sichern')

        assert read_back(project, 'de') == {
            'title': 'Blog',
            'description': 'A simple blog for your website',
            'menu': {'save': 'Sichern'},
        }

    def test_add_key_keeps_order(self, writer, project):
        """New keys are appended; existing keys keep their order."""
        writer.update_string('de', 'lang.php', 'menu.cancel', 'Abbrechen')

        result = read_back(project, 'de')
        assert list(result) == ['title', 'description', 'menu']
        assert list(result['menu']) == ['save', 'cancel']

    def test_exact_output(self, writer, project):
        """Written files use the renderer's layout."""
        writer.update_string('fr', 'lang.php', 'menu.save', 'Enregistrer')

        content = (project / 'lang' / 'fr' / 'lang.php').read_text(encoding='utf-8')
        assert content == (
            '<?php\n'
            'return [\n'
            '    "menu" => [\n'
            '        "save" => "Enregistrer",\n'
            '    ],\n'
            '];'
        )

    def test_creates_locale_directory(self, writer, project):
        """Writing to a new locale creates its directory."""
        assert writer.update_string('it', 'lang.php', 'title', 'Blog')
        assert read_back(project, 'it') == {'title': 'Blog'}

    def test_blank_value_removes_key(self, writer, project, store):
        """Clearing a translation drops the key."""
        writer.update_string('de', 'lang.php', 'menu.save', '   ')

        assert read_back(project, 'de') == {
            'title': 'Blog',
            'description': 'A simple blog for your website',
        }
        assert 'menu' not in store.get('de', 'lang.php')

    def test_none_value_removes_key(self, writer, project):
        writer.update_string('de', 'lang.php', 'title', None)
        assert 'title' not in read_back(project, 'de')

    def test_escaping(self, writer, project):
        """Quotes, backslashes and dollars survive a write."""
        value = 'Preis: "$5" C:\\temp'
        writer.update_string('de', 'lang.php', 'price', value)
        assert read_back(project, 'de')['price'] == value

    def test_memory_updated(self, writer, store):
        writer.update_string('de', 'lang.php', 'menu.save', 'Sichern')
        assert store.get_flat('de', 'lang.php')['menu.save'] == 'Sichern'

    @pytest.mark.parametrize('key', ['', 'menu..save', '.save', 'menu.', 'menu. .save', 'line\nbreak'])
    def test_invalid_key(self, writer, key):
        with pytest.raises(InvalidRequestError):
            writer.update_string('de', 'lang.php', key, 'x')

    def test_invalid_file(self, writer):
        with pytest.raises(InvalidRequestError):
            writer.update_string('de', '../../evil.php', 'a', 'x')

    def test_key_with_spaces_and_slash(self, writer, project):
        """Keys are written as given, including spaces and slashes."""
        assert writer.update_string('de', 'lang.php', 'Save changes', 'Änderungen speichern')
        assert writer.update_string('de', 'lang.php', 'terms.and/or', 'und/oder')

        result = read_back(project, 'de')
        assert result['Save changes'] == 'Änderungen speichern'
        assert result['terms'] == {'and/or': 'und/oder'}


class TestKeyConflicts:
    """A key must not replace a branch or a leaf of another key."""

    def test_branch_is_not_overwritten(self, writer, store, project):
        with pytest.raises(InvalidRequestError, match="conflicts with existing key 'menu.save'"):
            writer.update_string('de', 'lang.php', 'menu', 'Menü')

        assert store.get_flat('de', 'lang.php')['menu.save'] == 'Speichern'
        assert read_back(project, 'de')['menu'] == {'save': 'Speichern'}

    def test_leaf_is_not_overwritten(self, writer, store, project):
        with pytest.raises(InvalidRequestError, match="conflicts with existing key 'menu.save'"):
            writer.update_string('de', 'lang.php', 'menu.save.label', 'Speichern')

        assert read_back(project, 'de')['menu'] == {'save': 'Speichern'}

    def test_sibling_prefix_is_not_a_conflict(self, writer, project):
        """A key that only shares leading characters with another is accepted."""
        assert writer.update_string('de', 'lang.php', 'menu.saved', 'Gespeichert')
        assert read_back(project, 'de')['menu'] == {'save': 'Speichern', 'saved': 'Gespeichert'}


class TestRollback:
    """Test cases for failed writes."""

    def test_write_failure_rolls_back(self, writer, store, project, caplog):
        """A failed write returns False and restores the strings."""
        # A file where the locale directory should be makes mkdir fail
        (project / 'lang' / 'it').write_text('not a directory', encoding='utf-8')

        with caplog.at_level('ERROR', logger='localizer'):
            assert writer.update_string('it', 'lang.php', 'title', 'Blog') is False

        assert store.get('it', 'lang.php') == {}
        assert 'rolled back' in caplog.text

    def test_rollback_keeps_previous_values(self, writer, store, project, monkeypatch):
        """Earlier content survives a failed update."""
        store.get('de', 'lang.php')

        def fail(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(store.format, 'render_locale_file', fail)

        assert writer.update_string('de', 'lang.php', 'menu.save', 'Sichern') is False
        assert store.get_flat('de', 'lang.php')['menu.save'] == 'Speichern'
        assert read_back(project, 'de')['menu']['save'] == 'Speichern'

    def test_unencodable_value_keeps_file(self, writer, store, project):
        """A value that cannot be encoded leaves disk and memory untouched."""
        path = project / 'lang' / 'de' / 'lang.php'
        before = path.read_text(encoding='utf-8')

        assert writer.update_string('de', 'lang.php', 'menu.save', '\ud800') is False

        assert path.read_text(encoding='utf-8') == before
        assert store.get_flat('de', 'lang.php')['menu.save'] == 'Speichern'
        assert sorted(p.name for p in path.parent.iterdir()) == ['lang.php']

    def test_no_temporary_files_left(self, writer, project):
        assert writer.update_string('de', 'lang.php', 'menu.cancel', 'Abbrechen')
        assert sorted(p.name for p in (project / 'lang' / 'de').iterdir()) == ['lang.php']


class TestConcurrency:
    """Concurrent updates of one file."""

    def test_no_lost_updates(self, writer, project):
        """Parallel updates of different keys all end up in the file."""
        count = 20
        barrier = threading.Barrier(count)
        results = []

        def update(i):
            barrier.wait()
            results.append(writer.update_string('de', 'lang.php', f'generated.key_{i}', f'Wert {i}'))

        threads = [threading.Thread(target=update, args=(i,)) for i in range(count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == [True] * count
        generated = read_back(project, 'de')['generated']
        assert set(generated) == {f'key_{i}' for i in range(count)}
        assert read_back(project, 'de')['menu'] == {'save': 'Speichern'}

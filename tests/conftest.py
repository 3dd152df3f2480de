"""Shared fixtures: a small October CMS style plugin with two locales."""

import pytest
from pathlib import Path

from localizer.core.localizer import LocalizerOptions
from localizer.utils.logging import reset_logger

EN_LANG = """<?php
return [
    'title' => 'Blog',
    'description' => 'A simple blog for your website',
    'menu' => [
        'save' => 'Save',
        'cancel' => 'Cancel',
    ],
    'errors' => [
        'not_found' => 'The requested page could not be found',
    ],
];
"""

DE_LANG = """<?php
return [
    'title' => 'Blog',
    'description' => 'A simple blog for your website',
    'menu' => [
        'save' => 'Speichern',
    ],
];
"""

POST_HTM = """<div class="actions">
    <button>{{ 'acme.blog::lang.menu.save'|trans }}</button>
</div>
"""

PLUGIN_PHP = """<?php
return [
    'name' => 'acme.blog::lang.title',
    'description' => 'acme.blog::lang.description',
];
"""


@pytest.fixture(autouse=True)
def clean_logger():
    """Handlers must not outlive the captured streams of a test."""
    yield
    reset_logger()


@pytest.fixture
def project(tmp_path) -> Path:
    """Project root with en (default), de (partial) and fr (empty) locales."""
    (tmp_path / 'lang' / 'en').mkdir(parents=True)
    (tmp_path / 'lang' / 'de').mkdir()
    (tmp_path / 'lang' / 'fr').mkdir()
    (tmp_path / 'lang' / 'en' / 'lang.php').write_text(EN_LANG, encoding='utf-8')
    (tmp_path / 'lang' / 'de' / 'lang.php').write_text(DE_LANG, encoding='utf-8')

    (tmp_path / 'components').mkdir()
    (tmp_path / 'components' / 'post.htm').write_text(POST_HTM, encoding='utf-8')
    (tmp_path / 'Plugin.php').write_text(PLUGIN_PHP, encoding='utf-8')

    return tmp_path


@pytest.fixture
def options(project) -> LocalizerOptions:
    """Options for the fixture project."""
    return LocalizerOptions(
        root=project,
        default_locale='en',
        namespace='acme.blog',
        locale_dir='lang',
        files=['**/*.php', '**/*.htm'],
    )

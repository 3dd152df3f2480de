"""Tests for the localizer HTTP API."""

import json
import socket
import urllib.error
import urllib.request

import pytest

from localizer.core.errors import InvalidRequestError
from localizer.core.localizer import LocalizerHost
from localizer.utils.server import (
    NO_CACHE_HEADERS,
    LocalizerServer,
    find_free_port,
    parse_save_body,
)


@pytest.fixture
def server(options):
    with LocalizerServer(options, host='127.0.0.1', port=0) as running:
        yield running


def request(server, path, method='GET', body=None, content_type='text/plain; charset=utf-8'):
    """Send a request and return (status, headers, decoded JSON body)."""
    req = urllib.request.Request(server.url + path, data=body, method=method)
    if body is not None:
        req.add_header('Content-Type', content_type)

    try:
        with urllib.request.urlopen(req, timeout=10) as response:
            return response.status, response.headers, json.loads(response.read().decode('utf-8'))
    except urllib.error.HTTPError as e:
        return e.code, e.headers, json.loads(e.read().decode('utf-8'))


class TestFindFreePort:
    """Test cases for find_free_port function."""

    def test_port_in_range(self):
        port = find_free_port(start=9000, end=9100)
        assert 9000 <= port < 9100

    def test_skips_occupied_ports(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(('localhost', 0))
            occupied_port = s.getsockname()[1]

            port = find_free_port(start=occupied_port, end=occupied_port + 100)
            assert port != occupied_port

    def test_raises_when_no_port_available(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(('localhost', 0))
            occupied_port = s.getsockname()[1]

            with pytest.raises(RuntimeError, match="No free port found"):
                find_free_port(start=occupied_port, end=occupied_port + 1)


class TestParseSaveBody:
    """Test cases for parse_save_body()."""

    def test_plain_text(self):
        assert parse_save_body('Größe'.encode('utf-8')) == 'Größe'

    def test_plain_text_is_not_parsed_as_json(self):
        assert parse_save_body(b'{"value": "x"}', 'text/plain') == '{"value": "x"}'

    def test_json_string(self):
        assert parse_save_body(b'"Speichern"', 'application/json') == 'Speichern'

    def test_json_object(self):
        assert parse_save_body(b'{"value": "Speichern"}', 'application/json') == 'Speichern'

    @pytest.mark.parametrize('body', [b'', b'null', b'{}'])
    def test_json_without_value(self, body):
        assert parse_save_body(body, 'application/json') is None

    @pytest.mark.parametrize('body', [b'{', b'42', b'["a"]', b'{"value": 1}'])
    def test_invalid_json(self, body):
        with pytest.raises(InvalidRequestError):
            parse_save_body(body, 'application/json')

    def test_invalid_utf8(self):
        with pytest.raises(InvalidRequestError, match="UTF-8"):
            parse_save_body(b'\xff\xfe')


class TestLocalizerServer:
    """Test cases for LocalizerServer lifecycle."""

    def test_not_running_initially(self, options):
        server = LocalizerServer(options, port=0)
        assert not server.is_running
        assert not server.localizer_host.created

    def test_start_and_stop(self, options):
        server = LocalizerServer(options, host='127.0.0.1', port=0)
        url = server.start()

        assert server.is_running
        assert server.port != 0
        assert url == f"http://127.0.0.1:{server.port}"

        server.stop()
        assert not server.is_running

    def test_accepts_host(self, options):
        """An existing LocalizerHost is used as is."""
        localizer_host = LocalizerHost(options)
        server = LocalizerServer(localizer_host, port=0)
        assert server.localizer_host is localizer_host


class TestRoutes:
    """Test cases for the API routes."""

    def test_locales(self, server):
        status, headers, body = request(server, '/locales')

        assert status == 200
        assert body == {'status': 'success', 'result': ['de', 'fr']}

    def test_no_cache_headers(self, server):
        _, headers, _ = request(server, '/locales')

        for name, value in NO_CACHE_HEADERS.items():
            assert headers[name] == value
        assert headers['Content-Type'].startswith('application/json')

    def test_stats(self, server):
        status, _, body = request(server, '/stats')

        assert status == 200
        assert list(body['result']) == ['de', 'fr']
        assert body['result']['de']['percentage'] == 40.0

    def test_locale_stats(self, server):
        status, _, body = request(server, '/stats/de')

        assert status == 200
        assert body['result'] == {
            'lines': 5,
            'translated': 2,
            'percentage': 40.0,
            'files': {'lang.php': {'lines': 5, 'translated': 2, 'percentage': 40.0}},
        }

    def test_locale_is_lower_cased(self, server):
        _, _, upper = request(server, '/stats/DE')
        _, _, lower = request(server, '/stats/de')
        assert upper == lower

    def test_strings(self, server):
        status, _, body = request(server, '/strings/de')

        assert status == 200
        strings = body['result']['lang.php']
        assert strings['en']['menu.save'] == 'Save'
        assert strings['de']['menu.save'] == 'Speichern'
        assert strings['status']['menu.cancel'] == 'missing'
        assert strings['references']['menu.save'][0]['source'] == 'components/post.htm'

    def test_invalid_locale(self, server):
        status, headers, body = request(server, '/stats/..%2Fen')

        assert status == 400
        assert body['status'] == 'error'
        assert body['kind'] == 'invalid_request'
        assert 'Invalid locale' in body['message']
        assert headers['Cache-Control'] == NO_CACHE_HEADERS['Cache-Control']

    def test_unknown_route(self, server):
        status, _, body = request(server, '/translations')

        assert status == 404
        assert body['status'] == 'error'
        assert body['kind'] == 'not_found'

    def test_get_save_is_not_routed(self, server):
        status, _, _ = request(server, '/save/de/lang.php/menu.cancel')
        assert status == 404

    def test_parse_error(self, server, project):
        (project / 'lang' / 'fr' / 'lang.php').write_text("<?php return [", encoding='utf-8')

        status, _, body = request(server, '/stats/fr')

        assert status == 500
        assert body['kind'] == 'parse_error'


class TestSave:
    """Test cases for POST /save/<locale>/<file>/<key>."""

    def test_save_plain_text(self, server, project):
        status, _, body = request(server, '/save/de/lang.php/menu.cancel', 'POST', 'Abbrechen'.encode('utf-8'))

        assert status == 200
        assert body == {'status': 'success', 'result': True}
        assert '"Abbrechen"' in (project / 'lang' / 'de' / 'lang.php').read_text(encoding='utf-8')

        _, _, stats = request(server, '/stats/de')
        assert stats['result']['translated'] == 3

    def test_save_json(self, server):
        body = json.dumps({'value': 'Seite nicht gefunden'}).encode('utf-8')
        status, _, result = request(
            server, '/save/DE/lang.php/errors.not_found', 'POST', body, 'application/json'
        )

        assert status == 200
        _, _, strings = request(server, '/strings/de')
        assert strings['result']['lang.php']['de']['errors.not_found'] == 'Seite nicht gefunden'

    def test_save_empty_removes_key(self, server):
        status, _, _ = request(server, '/save/de/lang.php/menu.save', 'POST', b'')

        assert status == 200
        _, _, strings = request(server, '/strings/de')
        assert strings['result']['lang.php']['status']['menu.save'] == 'missing'

    def test_save_invalid_key(self, server):
        status, _, body = request(server, '/save/de/lang.php/menu..save', 'POST', b'x')

        assert status == 400
        assert body['kind'] == 'invalid_request'

    def test_save_invalid_file(self, server):
        status, _, body = request(server, '/save/de/lang.yml/title', 'POST', b'x')

        assert status == 400
        assert 'Invalid locale file' in body['message']

    def test_save_invalid_json(self, server):
        status, _, body = request(server, '/save/de/lang.php/title', 'POST', b'{', 'application/json')

        assert status == 400
        assert 'Invalid JSON' in body['message']

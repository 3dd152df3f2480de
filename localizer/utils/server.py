"""HTTP server exposing the localizer to translation dashboards."""

import http.server
import json
import logging
import socket
import socketserver
import threading
from functools import partial
from typing import Any, Dict, List, Optional, Union
from urllib.parse import unquote, urlparse

from ..core.errors import InvalidRequestError, LocalizerError
from ..core.localizer import Localizer, LocalizerHost, LocalizerOptions
from .colors import Colors

log = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    'Cache-Control': 'no-store, max-age=0, must-revalidate',
    'Expires': '0',
    'Pragma': 'no-cache',
    'Surrogate-Control': 'no-store',
}


def find_free_port(start: int = 3005, end: int = 4000, host: str = 'localhost') -> int:
    """
    Boş bir port bulur.

    Args:
        start: Başlangıç port numarası
        end: Bitiş port numarası
        host: Dinlenecek adres

    Returns:
        Kullanılabilir port numarası

    Raises:
        RuntimeError: Boş port bulunamazsa
    """
    for port in range(start, end):
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind((host, port))
                return port
        except OSError:
            continue
    raise RuntimeError(f"No free port found in range {start}-{end}")


def parse_save_body(body: bytes, content_type: str = '') -> Optional[str]:
    """
    Kaydedilecek değeri istek gövdesinden çıkarır.

    Accepted bodies:
    - plain text: the value itself
    - JSON string: "Speichern"
    - JSON object: {"value": "Speichern"}

    Raises:
        InvalidRequestError: Geçersiz JSON ya da beklenmeyen yapı
    """
    try:
        text = body.decode('utf-8')
    except UnicodeDecodeError as e:
        raise InvalidRequestError("Request body must be UTF-8") from e

    if 'json' not in content_type.lower():
        return text

    try:
        data = json.loads(text) if text.strip() else None
    except json.JSONDecodeError as e:
        raise InvalidRequestError(f"Invalid JSON body: {e.msg}") from e

    if isinstance(data, dict):
        data = data.get('value')

    if data is None or isinstance(data, str):
        return data
    raise InvalidRequestError("Request body must be a string or an object with a 'value' string")


class LocalizerHandler(http.server.BaseHTTPRequestHandler):
    """
    Localizer API handler'ı.

    Endpoint'ler:
    - GET /locales: Bilinen diller
    - GET /stats, GET /stats/<locale>: Çeviri kapsamı
    - GET /strings/<locale>: Dosya bazında çeviriler, durumlar ve referanslar
    - POST /save/<locale>/<file>/<key>: Tek çeviri kaydetme
    """

    server_version = 'Localizer'

    def __init__(self, *args, host: LocalizerHost, **kwargs):
        self.host = host
        super().__init__(*args, **kwargs)

    @property
    def localizer(self) -> Localizer:
        """Localizer nesnesi, ilk istekte oluşturulur."""
        return self.host.get()

    def do_GET(self):
        """GET isteklerini işler."""
        segments = self._segments()

        if segments == ['locales']:
            self._dispatch(lambda: self.localizer.list_locales())
        elif segments == ['stats']:
            self._dispatch(self._all_stats)
        elif len(segments) == 2 and segments[0] == 'stats':
            self._dispatch(lambda: self._locale_stats(segments[1].lower()))
        elif len(segments) == 2 and segments[0] == 'strings':
            self._dispatch(lambda: self._strings(segments[1].lower()))
        else:
            self._send_not_found()

    def do_POST(self):
        """POST isteklerini işler."""
        segments = self._segments()

        if len(segments) == 4 and segments[0] == 'save':
            _, locale, file, key = segments
            self._dispatch(lambda: self._save(locale.lower(), file, key))
        else:
            self._send_not_found()

    def _segments(self) -> List[str]:
        path = urlparse(self.path).path
        return [unquote(segment) for segment in path.split('/') if segment]

    def _all_stats(self) -> Dict[str, Any]:
        return {locale: stats.to_dict() for locale, stats in self.localizer.stats().items()}

    def _locale_stats(self, locale: str) -> Dict[str, Any]:
        return self.localizer.stats(locale)[locale].to_dict()

    def _strings(self, locale: str) -> Dict[str, Any]:
        localizer = self.localizer
        return {
            file: strings.to_dict(localizer.default_locale, locale)
            for file, strings in localizer.fetch_strings(locale).items()
        }

    def _save(self, locale: str, file: str, key: str) -> bool:
        value = parse_save_body(self._read_body(), self.headers.get('Content-Type', ''))
        return self.localizer.update_string(locale, file, key, value)

    def _read_body(self) -> bytes:
        try:
            length = int(self.headers.get('Content-Length', 0))
        except ValueError as e:
            raise InvalidRequestError("Invalid Content-Length header") from e
        return self.rfile.read(length) if length > 0 else b''

    def _dispatch(self, action):
        """İşlemi çalıştırır ve sonucu JSON zarfı içinde gönderir."""
        try:
            result = action()
        except InvalidRequestError as e:
            log.warning("%s %s: %s", self.command, self.path, e.message)
            self._send_json_response({'status': 'error', **e.to_dict()}, 400)
        except LocalizerError as e:
            log.error("%s %s: %s", self.command, self.path, e.message)
            self._send_json_response({'status': 'error', **e.to_dict()}, 500)
        except Exception as e:
            log.exception("%s %s failed", self.command, self.path)
            self._send_json_response({
                'status': 'error',
                'kind': 'internal_error',
                'message': str(e),
            }, 500)
        else:
            self._send_json_response({'status': 'success', 'result': result})

    def _send_not_found(self):
        self._send_json_response({
            'status': 'error',
            'kind': 'not_found',
            'message': f"No route for {self.command} {urlparse(self.path).path}",
        }, 404)

    def _send_json_response(self, data: dict, status: int = 200):
        """JSON yanıtı gönderir."""
        payload = json.dumps(data, ensure_ascii=False).encode('utf-8')

        self.send_response(status)
        self.send_header('Content-Type', 'application/json; charset=utf-8')
        self.send_header('Content-Length', str(len(payload)))
        for name, value in NO_CACHE_HEADERS.items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        """Erişim kayıtlarını localizer logger'ına yönlendirir."""
        log.debug("%s - %s", self.address_string(), format % args)


class ThreadingServer(socketserver.ThreadingTCPServer):
    """Her isteği ayrı bir thread'de işleyen TCP server."""

    allow_reuse_address = True
    daemon_threads = True


class LocalizerServer:
    """
    Localizer API server yöneticisi.

    Kullanım:
        server = LocalizerServer(options)
        server.start()
        # ...
        server.stop()

    Veya context manager ile:
        with LocalizerServer(options, port=0) as server:
            print(server.url)
    """

    def __init__(
        self,
        options: Union[LocalizerOptions, LocalizerHost],
        host: str = 'localhost',
        port: Optional[int] = None
    ):
        """
        Args:
            options: Localizer ayarları ya da hazır bir LocalizerHost
            host: Dinlenecek adres
            port: Port numarası (None ise otomatik, 0 ise işletim sistemi seçer)
        """
        self.localizer_host = options if isinstance(options, LocalizerHost) else LocalizerHost(options)
        self.host = host
        self.port = find_free_port(host=host) if port is None else port
        self._server: Optional[ThreadingServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def url(self) -> str:
        """Server URL'ini döndürür."""
        return f"http://{self.host}:{self.port}"

    @property
    def is_running(self) -> bool:
        """Server'ın çalışıp çalışmadığını döndürür."""
        return self._server is not None and self._thread is not None and self._thread.is_alive()

    def start(self) -> str:
        """
        Server'ı arka planda başlatır.

        Returns:
            Server URL'i
        """
        if self.is_running:
            return self.url

        handler = partial(LocalizerHandler, host=self.localizer_host)
        self._server = ThreadingServer((self.host, self.port), handler)
        # Port 0 asks the OS for a free port
        self.port = self._server.server_address[1]

        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

        log.info("Localizer server listening on %s", self.url)
        return self.url

    def stop(self):
        """Server'ı durdurur."""
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
            self._thread = None
            log.info("Localizer server stopped")

    def __enter__(self) -> 'LocalizerServer':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    def wait(self):
        """Kullanıcı Ctrl+C yapana kadar bekler."""
        print(f"{Colors.warning('⚠')} Durdurmak için Ctrl+C basın\n")
        try:
            while self.is_running:
                self._thread.join(timeout=0.5)
        except KeyboardInterrupt:
            print(f"\n{Colors.info('ℹ')} Server durduruluyor...")
            self.stop()


def serve(options: LocalizerOptions, host: str = 'localhost', port: Optional[int] = None):
    """
    Localizer API'sini başlatır ve Ctrl+C'ye kadar çalıştırır.

    The localizer is created before listening so configuration problems
    surface at startup instead of at the first request.

    Raises:
        InitializationError: Dil dizinleri bulunamazsa
    """
    localizer_host = LocalizerHost(options)
    localizer_host.create()

    server = LocalizerServer(localizer_host, host=host, port=port)
    url = server.start()
    print(f"\n{Colors.success('✓')} Server başlatıldı: {Colors.info(url)}")
    server.wait()

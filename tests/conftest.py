"""
Pytest fixtures: an in-process fake Docker daemon

The daemon records every request and answers from scripted routes, so
tests can check the exact request a call produced.
"""
import json
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List, Tuple
from urllib.parse import parse_qs, urlsplit

import pytest

from src.docker_api import DockerClient


@dataclass
class RecordedRequest:
    method: str
    path: str
    raw_query: str
    headers: Dict[str, str]
    body: bytes

    @property
    def query(self) -> Dict[str, str]:
        return {key: values[0] for key, values in parse_qs(self.raw_query).items()}


@dataclass
class FakeDaemon:
    url: str = ''
    requests: List[RecordedRequest] = field(default_factory=list)
    routes: Dict[Tuple[str, str], Tuple[int, str, bytes]] = field(default_factory=dict)

    def respond(self, method: str, path: str, status: int = 200, body=b'',
                content_type: str = 'application/json'):
        """Script the answer for METHOD path (query string ignored)"""
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode('utf-8')
        elif isinstance(body, str):
            body = body.encode('utf-8')
        self.routes[(method, path)] = (status, content_type, body)

    def respond_stream(self, method: str, path: str, messages, status: int = 200):
        """Script a JSON progress stream, one object per line"""
        body = ''.join(json.dumps(message) + '\r\n' for message in messages)
        self.respond(method, path, status=status, body=body)

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]

    def handler_class(self):
        daemon = self

        class Handler(BaseHTTPRequestHandler):
            def _read_body(self) -> bytes:
                if self.headers.get('Transfer-Encoding', '').lower() == 'chunked':
                    chunks = []
                    while True:
                        size = int(self.rfile.readline().strip().split(b';')[0], 16)
                        if size == 0:
                            while self.rfile.readline() not in (b'\r\n', b'\n', b''):
                                pass
                            break
                        chunks.append(self.rfile.read(size))
                        self.rfile.readline()
                    return b''.join(chunks)
                length = int(self.headers.get('Content-Length') or 0)
                return self.rfile.read(length) if length else b''

            def _handle(self):
                parts = urlsplit(self.path)
                daemon.requests.append(RecordedRequest(
                    method=self.command,
                    path=parts.path,
                    raw_query=parts.query,
                    headers={key.lower(): value for key, value in self.headers.items()},
                    body=self._read_body(),
                ))

                status, content_type, body = daemon.routes.get(
                    (self.command, parts.path),
                    (404, 'application/json', b'{"message": "page not found"}')
                )
                self.send_response(status)
                self.send_header('Content-Type', content_type)
                self.send_header('Content-Length', str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            do_GET = _handle
            do_POST = _handle
            do_PUT = _handle
            do_DELETE = _handle

            def log_message(self, format, *args):
                pass

        return Handler


@pytest.fixture
def daemon():
    """Fake daemon listening on a free local port"""
    fake = FakeDaemon()
    server = ThreadingHTTPServer(('127.0.0.1', 0), fake.handler_class())
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    fake.url = f"tcp://127.0.0.1:{server.server_address[1]}"

    yield fake

    server.shutdown()
    server.server_close()


@pytest.fixture
def client(daemon):
    """Docker client connected to the fake daemon"""
    return DockerClient(base_url=daemon.url, timeout=5)


@pytest.fixture(autouse=True)
def no_docker_host(monkeypatch):
    """Keep the caller's DOCKER_HOST out of the tests"""
    monkeypatch.delenv('DOCKER_HOST', raising=False)

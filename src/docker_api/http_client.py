"""
HTTP Client for the Docker daemon
Pure Python implementation using http.client and socket
"""

import socket
import http.client
import json
import logging
import platform
import os
from typing import Optional, Dict, Any, Tuple
from urllib.parse import urlencode, urlsplit

from . import __version__
from .exceptions import APIError, InvalidEndpoint
from .jsonmessage import CHUNK_SIZE, render_json_stream

logger = logging.getLogger(__name__)

USER_AGENT = f'ghost-docker-images/{__version__}'

DEFAULT_UNIX_SOCKET = '/var/run/docker.sock'


class UnixHTTPConnection(http.client.HTTPConnection):
    """HTTP connection over Unix socket"""

    def __init__(self, socket_path: str, timeout: int = 60):
        super().__init__('localhost', timeout=timeout)
        self.socket_path = socket_path

    def connect(self):
        """Connect to Unix socket"""
        self.sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self.sock.settimeout(self.timeout)
        self.sock.connect(self.socket_path)


def default_socket_path() -> str:
    """Local Docker socket for this platform"""
    if platform.system() == "Darwin":
        # Docker Desktop keeps its socket in the home directory
        path = os.path.expanduser('~/.docker/run/docker.sock')
        if os.path.exists(path):
            return path
    return DEFAULT_UNIX_SOCKET


def parse_endpoint(base_url: str) -> Tuple[str, str, Optional[int]]:
    """
    Split a Docker endpoint into (scheme, host or socket path, port)

    Accepted forms: unix:///var/run/docker.sock, /var/run/docker.sock,
    tcp://host:2375, http://host:2375, https://host:2376

    Raises:
        InvalidEndpoint: If the endpoint can't be used
    """
    if not base_url:
        raise InvalidEndpoint("Empty Docker endpoint")

    if base_url.startswith('/'):
        return 'unix', base_url, None

    parts = urlsplit(base_url)
    scheme = parts.scheme.lower()

    if scheme == 'unix':
        path = parts.path or parts.netloc
        if not path:
            raise InvalidEndpoint(f"Invalid Docker endpoint: {base_url}")
        return 'unix', path, None

    if scheme in ('tcp', 'http', 'https'):
        try:
            port = parts.port
        except ValueError as e:
            raise InvalidEndpoint(f"Invalid Docker endpoint: {base_url}") from e
        if not parts.hostname:
            raise InvalidEndpoint(f"Invalid Docker endpoint: {base_url}")
        if scheme == 'tcp':
            scheme = 'http'
        if port is None:
            port = 2376 if scheme == 'https' else 2375
        return scheme, parts.hostname, port

    raise InvalidEndpoint(f"Invalid Docker endpoint: {base_url}")


class DockerHTTPClient:
    """HTTP client for Docker daemon"""

    def __init__(self, base_url: Optional[str] = None, timeout: int = 60):
        """
        Initialize Docker HTTP client

        Args:
            base_url: Docker endpoint (default: auto-detect local socket)
            timeout: Request timeout in seconds
        """
        self.timeout = timeout

        if base_url is None:
            base_url = default_socket_path()

        self.scheme, self.host, self.port = parse_endpoint(base_url)
        self.socket_path = self.host if self.scheme == 'unix' else None

        if self.socket_path and not os.path.exists(self.socket_path):
            raise FileNotFoundError(f"Docker socket not found: {self.socket_path}")

    def __repr__(self):
        if self.socket_path:
            return f"<DockerHTTPClient: unix://{self.socket_path}>"
        return f"<DockerHTTPClient: {self.scheme}://{self.host}:{self.port}>"

    def _connection(self) -> http.client.HTTPConnection:
        if self.scheme == 'unix':
            return UnixHTTPConnection(self.socket_path, timeout=self.timeout)
        if self.scheme == 'https':
            return http.client.HTTPSConnection(self.host, self.port, timeout=self.timeout)
        return http.client.HTTPConnection(self.host, self.port, timeout=self.timeout)

    @staticmethod
    def build_url(path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Append query params to path, bools as true/false, containers as JSON"""
        if not params:
            return path

        query = {}
        for key, value in params.items():
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            elif isinstance(value, (list, dict)):
                value = json.dumps(value)
            query[key] = str(value)

        separator = '&' if '?' in path else '?'
        return f"{path}{separator}{urlencode(query)}"

    def _open(self, method: str, url: str, body=None,
              headers: Optional[Dict[str, str]] = None):
        """Send a request, return (connection, response)"""
        req_headers = {'User-Agent': USER_AGENT}
        if self.scheme == 'unix':
            req_headers['Host'] = 'localhost'
        if headers:
            req_headers.update(headers)

        logger.debug(f"{method} {url}")
        conn = self._connection()
        try:
            conn.request(method, url, body=body, headers=req_headers)
            response = conn.getresponse()
        except Exception:
            conn.close()
            raise
        return conn, response

    @staticmethod
    def _raise_for_status(response):
        """Raise APIError for error statuses, reading the daemon's message"""
        if 200 <= response.status < 400:
            return

        error_body = response.read().decode('utf-8', errors='replace')
        try:
            error_data = json.loads(error_body)
            error_msg = error_data.get('message', error_body)
        except (json.JSONDecodeError, AttributeError):
            error_msg = error_body.strip()

        logger.debug(f"Docker API returned {response.status}: {error_msg}")
        raise APIError(
            f"Docker API error: {error_msg}",
            response=response,
            status_code=response.status
        )

    def request(self, method: str, path: str, data: Any = None,
                params: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None,
                stream: bool = False) -> Any:
        """
        Make HTTP request to Docker daemon

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            path: API path
            data: JSON data for request body, or raw bytes
            params: URL query parameters
            headers: HTTP headers
            stream: If True, return response object for streaming

        Returns:
            Parsed JSON response or response object if stream=True
        """
        url = self.build_url(path, params)

        req_headers = dict(headers or {})
        body = None
        if data is not None:
            if isinstance(data, (bytes, bytearray)):
                body = bytes(data)
            else:
                body = json.dumps(data).encode('utf-8')
                req_headers.setdefault('Content-Type', 'application/json')

        conn, response = self._open(method, url, body=body, headers=req_headers)
        try:
            self._raise_for_status(response)
        except Exception:
            conn.close()
            raise

        # Caller reads and closes the response
        if stream:
            return response

        try:
            response_data = response.read()
        finally:
            conn.close()

        if not response_data:
            return None

        text = response_data.decode('utf-8')
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text

    def do(self, method: str, path: str, data: Any = None,
           params: Optional[Dict[str, Any]] = None) -> Tuple[bytes, int]:
        """
        Make a request and return the raw body with the status code

        Raises:
            APIError: If the daemon answers with an error status
        """
        url = self.build_url(path, params)

        headers = {}
        body = None
        if data is not None:
            body = json.dumps(data).encode('utf-8')
            headers['Content-Type'] = 'application/json'

        conn, response = self._open(method, url, body=body, headers=headers)
        try:
            self._raise_for_status(response)
            return response.read(), response.status
        finally:
            conn.close()

    def stream(self, method: str, path: str, in_stream=None, out=None,
               params: Optional[Dict[str, Any]] = None,
               headers: Optional[Dict[str, str]] = None):
        """
        Make a request that streams a body in and the response out

        Args:
            method: HTTP method
            path: API path, may already carry a query string
            in_stream: Request body, bytes or a binary file-like object
            out: Binary writable for the response, None discards it
            params: Extra URL query parameters
            headers: HTTP headers

        Raises:
            APIError: If the daemon answers with an error status
            StreamError: If a JSON progress stream reports an error
        """
        url = self.build_url(path, params)

        if in_stream is None and method in ('POST', 'PUT'):
            in_stream = b''

        req_headers = {}
        if method == 'POST':
            req_headers['Content-Type'] = 'plain/text'
        if headers:
            req_headers.update(headers)

        conn, response = self._open(method, url, body=in_stream, headers=req_headers)
        try:
            self._raise_for_status(response)

            content_type = response.getheader('Content-Type', '')
            if content_type.split(';')[0].strip() == 'application/json':
                render_json_stream(response, out)
                return

            while True:
                chunk = response.read(CHUNK_SIZE)
                if not chunk:
                    break
                if out is not None:
                    out.write(chunk)
        finally:
            conn.close()

    def get(self, path: str, **kwargs) -> Any:
        """Make GET request"""
        return self.request('GET', path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        """Make POST request"""
        return self.request('POST', path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        """Make DELETE request"""
        return self.request('DELETE', path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        """Make PUT request"""
        return self.request('PUT', path, **kwargs)

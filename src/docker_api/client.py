"""
Docker Client - Main API entry point
"""

from typing import Optional
from .http_client import DockerHTTPClient
from .images import ImageCollection


class DockerClient:
    """
    Docker API Client
    Pure Python implementation without external dependencies
    """

    def __init__(self, base_url: Optional[str] = None, timeout: int = 60):
        """
        Initialize Docker client

        Args:
            base_url: Docker endpoint, unix:// socket or tcp://host:port
                (default: auto-detect local socket)
            timeout: Request timeout in seconds
        """
        self.http = DockerHTTPClient(base_url=base_url, timeout=timeout)
        self.images = ImageCollection(self)

    def __repr__(self):
        return f"<DockerClient: {self.http!r}>"

    def version(self) -> dict:
        """Get Docker version info"""
        return self.http.get('/version')

    def info(self) -> dict:
        """Get Docker system info"""
        return self.http.get('/info')

    def ping(self) -> str:
        """Ping Docker daemon"""
        return self.http.get('/_ping')

    def close(self):
        """Close client (no-op, connections are per request)"""
        pass

"""
Docker image records and option bundles
"""

import json
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, List, Optional, Union

from .query import SKIP, qs

# Source value telling the daemon to read the image from the request body
STDIN_SOURCE = '-'


@dataclass(frozen=True)
class APIImages:
    """Image summary as returned by the listing endpoint"""

    id: str = ''
    repo_tags: List[str] = field(default_factory=list)
    created: int = 0
    size: int = 0
    virtual_size: int = 0
    parent_id: str = ''
    repository: str = ''
    tag: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'APIImages':
        return cls(
            id=data.get('Id') or '',
            repo_tags=list(data.get('RepoTags') or []),
            created=data.get('Created') or 0,
            size=data.get('Size') or 0,
            virtual_size=data.get('VirtualSize') or 0,
            parent_id=data.get('ParentId') or '',
            repository=data.get('Repository') or '',
            tag=data.get('Tag') or '',
        )

    @property
    def short_id(self) -> str:
        return _short_id(self.id)


class Image:
    """Docker Image object, as returned by inspection"""

    def __init__(self, attrs: Dict[str, Any], collection):
        self.attrs = attrs
        self.collection = collection
        self.id = self._get('Id', 'id', '')
        self.short_id = _short_id(self.id)
        self.tags = attrs.get('RepoTags') or []

    def _get(self, key: str, legacy_key: str, default):
        # Older daemons answer with lowercase keys
        return self.attrs.get(key) or self.attrs.get(legacy_key) or default

    def __repr__(self):
        return f"<Image: {self.tags[0] if self.tags else self.short_id}>"

    @property
    def parent(self) -> str:
        return self._get('Parent', 'parent', '')

    @property
    def comment(self) -> str:
        return self._get('Comment', 'comment', '')

    @property
    def created(self) -> str:
        return self._get('Created', 'created', '')

    @property
    def container(self) -> str:
        return self._get('Container', 'container', '')

    @property
    def container_config(self) -> Dict[str, Any]:
        return self._get('ContainerConfig', 'container_config', {})

    @property
    def docker_version(self) -> str:
        return self._get('DockerVersion', 'docker_version', '')

    @property
    def author(self) -> str:
        return self._get('Author', 'author', '')

    @property
    def config(self) -> Dict[str, Any]:
        return self._get('Config', 'config', {})

    @property
    def architecture(self) -> str:
        return self._get('Architecture', 'architecture', '')

    @property
    def size(self) -> int:
        return self._get('Size', 'size', 0)

    def remove(self):
        """Remove this image"""
        return self.collection.remove(self.id)

    def tag(self, repo: str, force: bool = False):
        """Tag this image into a repository"""
        return self.collection.tag(self.id, repo, force=force)


@dataclass
class AuthConfiguration:
    """Registry credentials sent in the push request body"""

    username: str = ''
    password: str = ''
    email: str = ''

    def to_dict(self) -> Dict[str, str]:
        data = {
            'username': self.username,
            'password': self.password,
            'email': self.email,
        }
        return {key: value for key, value in data.items() if value}

    def to_json(self) -> bytes:
        return (json.dumps(self.to_dict()) + '\n').encode('utf-8')


@dataclass
class PushImageOptions:
    name: str = field(default='', metadata=qs(SKIP))
    registry: str = ''
    output_stream: Optional[BinaryIO] = field(default=None, metadata=qs(SKIP))


@dataclass
class PullImageOptions:
    repository: str = field(default='', metadata=qs('fromImage'))
    registry: str = ''
    output_stream: Optional[BinaryIO] = field(default=None, metadata=qs(SKIP))


@dataclass
class ImportImageOptions:
    """
    Import from a URL, a local file or the input stream

    ``source`` is an http(s) URL, a path on this machine, or ``'-'`` to
    send ``input_stream`` as the image.
    """

    repository: str = field(default='', metadata=qs('repo'))
    source: str = field(default='', metadata=qs('fromSrc'))
    input_stream: Optional[Union[BinaryIO, bytes]] = field(default=None, metadata=qs(SKIP))
    output_stream: Optional[BinaryIO] = field(default=None, metadata=qs(SKIP))


@dataclass
class BuildImageOptions:
    """Build from a remote context (git repository or tarball URL)"""

    name: str = field(default='', metadata=qs('t'))
    remote: str = field(default='', metadata=qs('remote'))
    suppress_output: bool = field(default=False, metadata=qs('q'))
    output_stream: Optional[BinaryIO] = field(default=None, metadata=qs(SKIP))


@dataclass
class TagImageOptions:
    repo: str = field(default='', metadata=qs('repo'))
    force: bool = field(default=False, metadata=qs('force'))


def _short_id(image_id: str) -> str:
    if image_id.startswith('sha256:'):
        image_id = image_id[len('sha256:'):]
    return image_id[:12]

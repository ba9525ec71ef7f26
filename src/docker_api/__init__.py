"""
Docker image API - Pure Python client for the image endpoints of the
Docker Engine REST API, over a Unix socket or TCP
"""

__version__ = '1.0.0'

from .client import DockerClient
from .exceptions import (
    DockerException,
    APIError,
    InvalidEndpoint,
    ImageNotFound,
    MissingInput,
    MissingRepository,
    MissingOutputStream,
    StreamError,
    BuildError
)
from .models import (
    APIImages,
    Image,
    AuthConfiguration,
    PushImageOptions,
    PullImageOptions,
    ImportImageOptions,
    BuildImageOptions,
    TagImageOptions
)

__all__ = [
    'DockerClient',
    'DockerException',
    'APIError',
    'InvalidEndpoint',
    'ImageNotFound',
    'MissingInput',
    'MissingRepository',
    'MissingOutputStream',
    'StreamError',
    'BuildError',
    'APIImages',
    'Image',
    'AuthConfiguration',
    'PushImageOptions',
    'PullImageOptions',
    'ImportImageOptions',
    'BuildImageOptions',
    'TagImageOptions'
]

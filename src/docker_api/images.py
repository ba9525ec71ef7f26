"""
Docker Images API
"""

import json
import logging
from dataclasses import replace
from typing import BinaryIO, List, Optional
from urllib.parse import urlsplit

from .exceptions import (
    APIError,
    BuildError,
    ImageNotFound,
    MissingOutputStream,
    MissingRepository,
    StreamError,
)
from .models import (
    STDIN_SOURCE,
    APIImages,
    AuthConfiguration,
    BuildImageOptions,
    Image,
    ImportImageOptions,
    PullImageOptions,
    PushImageOptions,
    TagImageOptions,
)
from .query import query_string

logger = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    """True for http and https URLs"""
    try:
        return urlsplit(source).scheme in ('http', 'https')
    except ValueError:
        return False


def _with_query(path: str, options) -> str:
    query = query_string(options)
    return f"{path}?{query}" if query else path


class ImageCollection:
    """Docker Images collection"""

    def __init__(self, client):
        self.client = client

    @property
    def http(self):
        return self.client.http

    def list(self, all: bool = False) -> List[APIImages]:
        """
        List images

        Args:
            all: Show all images (including intermediates)

        Returns:
            List of APIImages summaries
        """
        path = '/images/json?all=' + ('1' if all else '0')
        body, _ = self.http.do('GET', path)
        images_data = json.loads(body) if body else []
        return [APIImages.from_dict(img_data) for img_data in images_data or []]

    def inspect(self, name: str) -> Image:
        """
        Get image details by name or ID

        Raises:
            ImageNotFound: If image not found
        """
        try:
            body, _ = self.http.do('GET', f'/images/{name}/json')
        except APIError as e:
            if e.status_code == 404:
                raise ImageNotFound() from e
            raise
        return Image(json.loads(body), self)

    get = inspect

    def remove(self, name: str):
        """
        Remove image by name or ID

        Raises:
            ImageNotFound: If image not found
        """
        logger.info(f"Removing image {name}")
        try:
            self.http.do('DELETE', f'/images/{name}')
        except APIError as e:
            if e.status_code == 404:
                raise ImageNotFound() from e
            raise

    def push(self, options: PushImageOptions, auth: Optional[AuthConfiguration] = None):
        """
        Push an image to a registry, writing progress to options.output_stream

        An empty AuthConfiguration (or None) pushes unauthenticated.

        Raises:
            ImageNotFound: If options.name is empty
        """
        if not options.name:
            raise ImageNotFound()

        auth = auth or AuthConfiguration()
        path = _with_query(f'/images/{options.name}/push', options)
        logger.info(f"Pushing image {options.name}")
        self.http.stream('POST', path, in_stream=auth.to_json(), out=options.output_stream)

    def pull(self, options: PullImageOptions):
        """
        Pull an image from a registry, writing progress to options.output_stream

        Raises:
            ImageNotFound: If options.repository is empty
        """
        if not options.repository:
            raise ImageNotFound()

        logger.info(f"Pulling image {options.repository}")
        self._create_image(options, None, options.output_stream)

    def import_image(self, options: ImportImageOptions):
        """
        Import an image from a URL, a local file or options.input_stream

        A local file is read into memory and sent as the request body.

        Raises:
            ImageNotFound: If options.repository is empty
            OSError: If the local file can't be read
        """
        if not options.repository:
            raise ImageNotFound()

        if options.source != STDIN_SOURCE:
            options = replace(options, input_stream=None)

        if options.source != STDIN_SOURCE and not is_url(options.source):
            logger.debug(f"Reading image from {options.source}")
            with open(options.source, 'rb') as f:
                data = f.read()
            options = replace(options, input_stream=data, source=STDIN_SOURCE)

        logger.info(f"Importing image into {options.repository}")
        self._create_image(options, options.input_stream, options.output_stream)

    def _create_image(self, options, in_stream, out: Optional[BinaryIO]):
        path = _with_query('/images/create', options)
        self.http.stream('POST', path, in_stream=in_stream, out=out)

    def build(self, options: BuildImageOptions):
        """
        Build an image from a remote context (git repository or tarball URL)

        The image is named after the remote when options.name is empty.

        Raises:
            MissingRepository: If options.remote is empty
            MissingOutputStream: If options.output_stream is None
            BuildError: If the daemon reports a build failure
        """
        if not options.remote:
            raise MissingRepository()
        if not options.name:
            options = replace(options, name=options.remote)
        if options.output_stream is None:
            raise MissingOutputStream()

        logger.info(f"Building image {options.name} from {options.remote}")
        try:
            self.http.stream('POST', _with_query('/build', options), out=options.output_stream)
        except StreamError as e:
            raise BuildError(f"Build failed: {e}") from e

    def get_tarball(self, name: str, out: BinaryIO):
        """
        Export an image (with its history) as a tarball written to out

        Raises:
            MissingOutputStream: If out is None
        """
        if out is None:
            raise MissingOutputStream()

        logger.info(f"Saving image {name}")
        self.http.stream('GET', f'/images/{name}/get', out=out)

    def load_tarball(self, in_stream):
        """Load images from a tarball produced by get_tarball"""
        logger.info("Loading images from tarball")
        self.http.stream('POST', '/images/load', in_stream=in_stream)

    def tag(self, name: str, repo: str, force: bool = False):
        """
        Tag an image into a repository

        Args:
            name: Image name or ID
            repo: Target repository
            force: Replace an existing tag
        """
        options = TagImageOptions(repo=repo, force=force)
        logger.info(f"Tagging image {name} as {repo}")
        self.http.stream('POST', _with_query(f'/images/{name}/tag', options))

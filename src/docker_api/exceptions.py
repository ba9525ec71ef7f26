"""
Docker API Exceptions
"""


class DockerException(Exception):
    """Base Docker exception"""
    pass


class APIError(DockerException):
    """Docker API error"""

    def __init__(self, message, response=None, status_code=None):
        super().__init__(message)
        self.response = response
        self.status_code = status_code


class InvalidEndpoint(DockerException):
    """Docker endpoint can't be used"""
    pass


class ImageNotFound(DockerException):
    """Image not found"""

    def __init__(self, message='No such image'):
        super().__init__(message)


class MissingInput(DockerException, ValueError):
    """Required option is empty, raised before any request is sent"""
    pass


class MissingRepository(MissingInput):
    """Build without a remote repository"""

    def __init__(self, message="Missing remote repository e.g. 'github.com/user/repo'"):
        super().__init__(message)


class MissingOutputStream(MissingInput):
    """Streaming call without an output stream"""

    def __init__(self, message='Missing output-stream'):
        super().__init__(message)


class StreamError(DockerException):
    """Error message received inside a JSON progress stream"""
    pass


class BuildError(StreamError):
    """Image build error"""
    pass

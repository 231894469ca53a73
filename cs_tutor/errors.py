"""
Error taxonomy for calls to the generation service.
"""

from typing import Optional


class TutorError(Exception):
    """Base class for failures of a tutoring operation"""

    kind = 'error'


class TransportError(TutorError):
    """Network failure or unexpected failure inside the client library"""

    kind = 'transport'


class UpstreamError(TutorError):
    """The API answered with an error (auth, quota, invalid request)"""

    kind = 'upstream'

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseFormatError(TutorError):
    """The response was missing text or did not match the expected shape"""

    kind = 'format'

"""
Error kinds raised by the deployment reconciler.
"""

from enum import Enum
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError


# AWS error codes that mean "the thing you asked about does not exist".
# Lambda says ResourceNotFoundException, API Gateway says NotFoundException.
NOT_FOUND_CODES = ('ResourceNotFoundException', 'NotFoundException')


class ErrorKind(Enum):
    NOT_FOUND = 'NOT_FOUND'
    UPSTREAM_ERROR = 'UPSTREAM_ERROR'
    OTHER = 'OTHER'


class RemoteError(Exception):
    """A failed call against a remote AWS API, tagged with its kind."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.OTHER,
                 code: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.code = code
        self.operation = operation

    @property
    def is_not_found(self) -> bool:
        return self.kind is ErrorKind.NOT_FOUND

    @classmethod
    def from_botocore(cls, error: Exception, operation: str) -> 'RemoteError':
        """Translate a botocore exception into a RemoteError."""
        if isinstance(error, ClientError):
            code = error.response.get('Error', {}).get('Code')
            kind = ErrorKind.NOT_FOUND if code in NOT_FOUND_CODES else ErrorKind.OTHER
            return cls(f"{operation} failed: {error}", kind=kind,
                       code=code, operation=operation)
        if isinstance(error, BotoCoreError):
            return cls(f"{operation} failed: {error}", operation=operation)
        raise TypeError(f"Not a botocore error: {error!r}")


class ResourceTreeError(Exception):
    """A parent resource was missing while walking a resource path."""

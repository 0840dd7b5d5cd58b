# docgate/errors.py
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    PATH_TRAVERSAL = "PathTraversal"
    ACCESS_DENIED = "AccessDenied"
    INVALID_PATH = "InvalidPath"
    NOT_A_DIRECTORY = "NotADirectory"
    IO_ERROR = "IOError"


class ConfigError(RuntimeError):
    """Raised at startup when the sandbox cannot be configured."""


class GatewayError(Exception):
    """
    Base for every failure the file gateway reports to a caller.
    Carries a closed `kind` so transports can branch without parsing text.
    """

    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}


class PathTraversal(GatewayError):
    kind = ErrorKind.PATH_TRAVERSAL


class AccessDenied(GatewayError):
    kind = ErrorKind.ACCESS_DENIED


class InvalidPath(GatewayError):
    kind = ErrorKind.INVALID_PATH


class NotADirectory(GatewayError):
    kind = ErrorKind.NOT_A_DIRECTORY


class FileIOError(GatewayError):
    kind = ErrorKind.IO_ERROR

    @classmethod
    def from_os_error(cls, action: str, exc: BaseException) -> "FileIOError":
        # keep the OS text, drop the traceback noise
        detail = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        return cls(f"Failed to {action}: {detail}")

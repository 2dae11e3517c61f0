"""Error taxonomy shared by services and the HTTP boundary."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping, Optional


class ErrorKind(str, Enum):
    """Closed set of failure categories a request can end in."""

    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    METHOD = "method"
    UNEXPECTED = "unexpected"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.CONFIGURATION: 503,
    ErrorKind.VALIDATION: 400,
    ErrorKind.METHOD: 405,
    ErrorKind.UNEXPECTED: 500,
}


class ServiceError(Exception):
    """Failure carrying an :class:`ErrorKind` and a client-safe message."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.headers = dict(headers or {})

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"ServiceError({self.kind.value!r}, {self.message!r})"


def configuration_error(message: str) -> ServiceError:
    return ServiceError(ErrorKind.CONFIGURATION, message)


def validation_error(message: str) -> ServiceError:
    return ServiceError(ErrorKind.VALIDATION, message)


def method_error(allowed: str) -> ServiceError:
    return ServiceError(ErrorKind.METHOD, "Method not allowed", headers={"Allow": allowed})


def unexpected_error(message: str = "Unexpected error") -> ServiceError:
    return ServiceError(ErrorKind.UNEXPECTED, message)


__all__ = [
    "ErrorKind",
    "STATUS_BY_KIND",
    "ServiceError",
    "configuration_error",
    "method_error",
    "unexpected_error",
    "validation_error",
]

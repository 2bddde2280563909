"""
Fetch outcome taxonomy.

Every remote read resolves to exactly one of:

- ``Success(value)``: payload decoded into the expected model
- ``SchemaMismatch(detail)``: the remote answered, but not with the expected
  shape (shown to the user as an invalid handle)
- ``TransportError(cause)``: anything else (timeout, connection failure,
  rate limiting, server errors)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class SchemaMismatch:
    detail: str = ""


@dataclass(frozen=True)
class TransportError:
    cause: BaseException

    def describe(self) -> str:
        return describe_error(self.cause)


FetchOutcome = Union[Success[T], SchemaMismatch, TransportError]


def describe_error(error: BaseException) -> str:
    """
    Human-readable message for a failure, never empty.

    httpx timeouts frequently carry no message, so the exception type is
    always included.
    """
    message = str(error).strip()
    name = type(error).__name__
    return f"{name}: {message}" if message else name


__all__ = ["Success", "SchemaMismatch", "TransportError", "FetchOutcome", "describe_error"]

"""Error types shared by the store layer, the services and the HTTP handlers.

Two families live here:

* ``StoreError`` is raised by a data store backend when a single round trip
  fails (network, SQL, HTTP status, unparseable count).
* ``ServiceError`` is what services hand upward. Its ``kind`` is one of a
  closed set (``ErrorKind``), so callers can branch on the kind instead of
  inspecting the error's shape.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class StoreError(Exception):
    def __init__(self, message: str, *, collection: Optional[str] = None) -> None:
        super().__init__(message)
        self.collection = collection


class ErrorKind(str, Enum):
    FETCH = "fetch_error"
    PARTIAL_AGGREGATION = "partial_aggregation_error"


class ServiceError(Exception):
    """Abstract base; raise one of the subclasses, which each set ``kind``."""

    kind: ErrorKind

    def __init__(self, message: str, details: Any = None) -> None:
        if not isinstance(getattr(type(self), "kind", None), ErrorKind):
            raise TypeError(f"{type(self).__name__} has no ErrorKind; raise FetchError or PartialAggregationError")
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = str(self.details)
        return body


class FetchError(ServiceError):
    """A whole-result query (base channels, articles) failed. Fatal to the request."""

    kind = ErrorKind.FETCH


class PartialAggregationError(ServiceError):
    """One per-channel count failed. Recorded and replaced by a default, never raised to callers."""

    kind = ErrorKind.PARTIAL_AGGREGATION

    def __init__(self, channel_id: Any, cause: BaseException) -> None:
        super().__init__(f"Failed to count subscribers for channel {channel_id}", details=cause)
        self.channel_id = channel_id
        self.cause = cause

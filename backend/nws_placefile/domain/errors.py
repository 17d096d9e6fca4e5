from __future__ import annotations

from typing import Optional


class PlacefileError(Exception):
    """Base class for errors raised while producing a placefile."""


class FetchError(PlacefileError):
    """The alerts feed could not be retrieved or decoded.

    ``status_code`` is the HTTP status for non-2xx answers and ``None`` for
    transport failures, so callers can tell the two apart from an empty feed.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedGeometryError(PlacefileError, ValueError):
    """A feature carries coordinate rings that cannot be turned into points."""


class SerializationInvariantError(PlacefileError, ValueError):
    """A document would render an invalid value into the placefile text."""

"""Exceptions raised by viarailmap."""

from typing import Any, Dict, List, Optional


class ViaRailError(Exception):
    """Base class for errors raised by this package."""

    pass


class FeedValidationError(ViaRailError, ValueError):
    """The feed payload does not match the expected train schema.

    The whole batch is rejected; ``path`` names the first offending field
    (e.g. ``"1234.times.2.departure"``) and ``errors`` holds every problem found.
    """

    def __init__(self, message: str, path: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


class FeedUnavailableError(ViaRailError):
    """The upstream feed could not be fetched or decoded."""

    pass

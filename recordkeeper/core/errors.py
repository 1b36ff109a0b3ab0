"""Errors raised by record sources and handled by the resolver."""
from typing import List, Optional


class RecordSourceError(Exception):
    """Base class for failures of a record source or of user input."""


class NetworkUnavailable(RecordSourceError):
    """A tier could not be reached (remote store down, file not served)."""


class NotFound(RecordSourceError):
    """Lookup or delete target does not exist."""


class MalformedPayload(RecordSourceError):
    """A tier answered, but not with a usable collection."""


class ValidationError(RecordSourceError):
    """Malformed user input, e.g. a non-numeric id."""


class AllSourcesExhausted(RecordSourceError):
    """Load failed on every tier."""

    def __init__(self, collection: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(f"Unable to load {collection} from JSON Server or local files.")
        self.collection = collection
        self.errors = list(errors or [])

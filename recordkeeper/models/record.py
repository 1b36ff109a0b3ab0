"""Record kinds and the defaults applied to submitted form values."""
import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

# Schema-less record: field name -> scalar value, plus an integer "id"
Record = Dict[str, Any]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_leading_int(value: Any) -> Optional[int]:
    """Parse the integer a form value starts with ("42 years" -> 42), or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def parse_leading_float(value: Any) -> Optional[float]:
    """Parse the number a form value starts with ("7.5/10" -> 7.5), or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    match = _LEADING_FLOAT.match(str(value))
    return float(match.group(1)) if match else None


def _text(form: Mapping[str, Any], field: str) -> str:
    value = form.get(field)
    return "" if value is None else str(value)


def build_contact(form: Mapping[str, Any], count: int) -> Record:
    """Contact from form values; count is the current collection size."""
    return {
        "name": _text(form, "name") or f"Contact {count + 1}",
        "email": _text(form, "email") or "unknown@example.com",
        "phone": _text(form, "phone") or "N/A",
        "address": _text(form, "address") or "N/A",
        "age": parse_leading_int(form.get("age")) or 0,
    }


def build_movie(form: Mapping[str, Any], count: int, today: Optional[date] = None) -> Record:
    """Movie from form values; a missing or zero year becomes the current year."""
    today = today or date.today()
    return {
        "title": _text(form, "title") or f"New Movie {count + 1}",
        "director": _text(form, "director") or "Unknown",
        "year": parse_leading_int(form.get("year")) or today.year,
        "genre": _text(form, "genre") or "Unknown",
        "rating": parse_leading_float(form.get("rating")) or 0,
    }


@dataclass(frozen=True)
class CollectionKind:
    """Static description of one record collection."""
    name: str  # collection/endpoint name, e.g. "contacts"
    label: str  # singular, used in user-facing messages
    fields: Tuple[str, ...]
    build: Callable[[Mapping[str, Any], int], Record]
    envelope: Optional[str] = None  # key wrapping the array in the fallback files
    supports_lookup: bool = False

    @property
    def file_name(self) -> str:
        return f"{self.name}.json"

    def empty_form(self) -> Dict[str, str]:
        return {f: "" for f in self.fields}


CONTACTS = CollectionKind(
    name="contacts",
    label="contact",
    fields=("name", "email", "phone", "address", "age"),
    build=build_contact,
    envelope="contacts",
    supports_lookup=True,
)

MOVIES = CollectionKind(
    name="movies",
    label="movie",
    fields=("title", "director", "year", "genre", "rating"),
    build=build_movie,
)

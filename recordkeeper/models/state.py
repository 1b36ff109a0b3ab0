"""Per-collection UI state."""
import enum
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from recordkeeper.models.record import CollectionKind, Record


class SortOrder(str, enum.Enum):
    """Age ordering of the contact list."""

    NONE = "none"
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class CollectionState:
    """Everything a list view renders from. Replaced, never mutated."""
    records: Tuple[Record, ...] = ()
    loading: bool = False
    error: Optional[str] = None  # blocking (load failed everywhere)
    notice: Optional[str] = None  # non-fatal (local-only mutation)
    source: Optional[str] = None  # tier the records came from
    form: Mapping[str, str] = field(default_factory=dict)
    search_id: str = ""
    search_result: Optional[Record] = None
    search_error: Optional[str] = None
    sort_order: SortOrder = SortOrder.NONE
    show_region: bool = False


def initial_state(kind: CollectionKind) -> CollectionState:
    return CollectionState(form=kind.empty_form())

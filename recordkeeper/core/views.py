"""Derived views over a collection: age ordering, region filter, snapshots."""
import math
import re
from typing import Any, Dict, Iterable, List, Optional

from recordkeeper.models.record import Record
from recordkeeper.models.state import CollectionState, SortOrder


def age_key(record: Record) -> Optional[float]:
    """Numeric age, or None when missing or not a number."""
    age = record.get("age")
    if isinstance(age, bool):
        return None
    if isinstance(age, (int, float)):
        return float(age) if math.isfinite(age) else None
    if isinstance(age, str):
        try:
            value = float(age.strip())
        except ValueError:
            return None
        return value if math.isfinite(value) else None
    return None


def sort_by_age(records: Iterable[Record], order: SortOrder) -> List[Record]:
    """Records ordered by age. Records without a usable age keep their
    relative order and always go last, ascending or descending."""
    records = list(records)
    if order is SortOrder.NONE:
        return records
    present = [r for r in records if age_key(r) is not None]
    missing = [r for r in records if age_key(r) is None]
    present.sort(key=age_key, reverse=order is SortOrder.DESC)
    return present + missing


def region_filter(records: Iterable[Record], region: str) -> List[Record]:
    """Records whose address contains region as a whole word, any case."""
    pattern = re.compile(rf"\b{re.escape(region)}\b", re.IGNORECASE)
    return [
        r for r in records
        if isinstance(r.get("address"), str) and pattern.search(r["address"])
    ]


def snapshot(state: CollectionState) -> Dict[str, Any]:
    """JSON-ready view of a collection, records in display order."""
    return {
        "records": sort_by_age(state.records, state.sort_order),
        "total": len(state.records),
        "loading": state.loading,
        "error": state.error,
        "notice": state.notice,
        "source": state.source,
        "form": dict(state.form),
    }


def contact_snapshot(state: CollectionState, region: str) -> Dict[str, Any]:
    """Snapshot plus the contact-only search, sort and region views."""
    matches = region_filter(state.records, region)
    out = snapshot(state)
    out["sort_order"] = state.sort_order.value
    out["search"] = {
        "id": state.search_id,
        "result": state.search_result,
        "error": state.search_error,
    }
    out["region"] = {
        "name": region,
        "visible": state.show_region,
        "count": len(matches),
        "records": matches if state.show_region else [],
        "message": (
            f"No contacts found for {region}."
            if state.show_region and not matches
            else None
        ),
    }
    return out

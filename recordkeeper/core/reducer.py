"""Single update entry point for CollectionState.

Every change to a collection's state is an action passed through reduce();
the resolver never edits state fields directly.
"""
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple, Union

from recordkeeper.models.record import Record
from recordkeeper.models.state import CollectionState, SortOrder


@dataclass(frozen=True)
class LoadStarted:
    pass


@dataclass(frozen=True)
class LoadSucceeded:
    records: Tuple[Record, ...]
    source: str


@dataclass(frozen=True)
class LoadFailed:
    message: str


@dataclass(frozen=True)
class MutationStarted:
    """Clears the previous error/notice before a create or delete."""


@dataclass(frozen=True)
class LocalRecordAdded:
    record: Record  # without id; one is assigned against the current records
    notice: str


@dataclass(frozen=True)
class LocalRecordRemoved:
    record_id: int
    notice: str


@dataclass(frozen=True)
class FormChanged:
    field: str
    value: str


@dataclass(frozen=True)
class FormCleared:
    pass


@dataclass(frozen=True)
class SearchStarted:
    search_id: str


@dataclass(frozen=True)
class SearchResolved:
    record: Record


@dataclass(frozen=True)
class SearchFailed:
    message: str


@dataclass(frozen=True)
class SortChanged:
    order: SortOrder


@dataclass(frozen=True)
class RegionToggled:
    pass


Action = Union[
    LoadStarted,
    LoadSucceeded,
    LoadFailed,
    MutationStarted,
    LocalRecordAdded,
    LocalRecordRemoved,
    FormChanged,
    FormCleared,
    SearchStarted,
    SearchResolved,
    SearchFailed,
    SortChanged,
    RegionToggled,
]


def next_local_id(records: Iterable[Record]) -> int:
    """max(existing ids) + 1, treating an empty collection as max 0."""
    ids = (r.get("id") for r in records)
    return max((i for i in ids if isinstance(i, int) and not isinstance(i, bool)), default=0) + 1


def find_record(records: Iterable[Record], record_id: int) -> Optional[Record]:
    for r in records:
        if r.get("id") == record_id:
            return r
    return None


def _cleared_form(state: CollectionState) -> dict:
    return {name: "" for name in state.form}


def reduce(state: CollectionState, action: Action) -> CollectionState:
    """Return the state that results from applying action to state."""
    if isinstance(action, LoadStarted):
        return replace(state, loading=True, error=None)
    if isinstance(action, LoadSucceeded):
        return replace(
            state,
            records=tuple(action.records),
            loading=False,
            error=None,
            source=action.source,
        )
    if isinstance(action, LoadFailed):
        return replace(state, records=(), loading=False, error=action.message, source=None)
    if isinstance(action, MutationStarted):
        return replace(state, error=None, notice=None)
    if isinstance(action, LocalRecordAdded):
        fields = {k: v for k, v in action.record.items() if k != "id"}
        record = {"id": next_local_id(state.records), **fields}
        return replace(
            state,
            records=state.records + (record,),
            form=_cleared_form(state),
            notice=action.notice,
        )
    if isinstance(action, LocalRecordRemoved):
        kept = tuple(r for r in state.records if r.get("id") != action.record_id)
        return replace(state, records=kept, notice=action.notice)
    if isinstance(action, FormChanged):
        if action.field not in state.form:
            return state
        return replace(state, form={**state.form, action.field: action.value})
    if isinstance(action, FormCleared):
        return replace(state, form=_cleared_form(state))
    if isinstance(action, SearchStarted):
        return replace(state, search_id=action.search_id, search_result=None, search_error=None)
    if isinstance(action, SearchResolved):
        return replace(state, search_result=action.record, search_error=None)
    if isinstance(action, SearchFailed):
        return replace(state, search_result=None, search_error=action.message)
    if isinstance(action, SortChanged):
        return replace(state, sort_order=action.order)
    if isinstance(action, RegionToggled):
        return replace(state, show_region=not state.show_region)
    raise TypeError(f"Unknown action: {action!r}")

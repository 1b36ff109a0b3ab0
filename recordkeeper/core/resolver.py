"""
Record source resolver: where one collection's records come from.

Loads try the remote store, then the static file, then the bundled asset,
stopping at the first tier that answers. Creates and deletes go to the remote
store and degrade to in-memory changes when it is unreachable; those local-only
changes stand until the next successful reload replaces them.

Calls are not coordinated: overlapping loads apply in completion order.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from recordkeeper.core.errors import AllSourcesExhausted, RecordSourceError, ValidationError
from recordkeeper.core.reducer import (
    Action,
    FormChanged,
    FormCleared,
    LoadFailed,
    LoadStarted,
    LoadSucceeded,
    LocalRecordAdded,
    LocalRecordRemoved,
    MutationStarted,
    RegionToggled,
    SearchFailed,
    SearchResolved,
    SearchStarted,
    SortChanged,
    find_record,
    reduce,
)
from recordkeeper.core.sources import RecordSource, RemoteStore
from recordkeeper.models.record import CollectionKind, parse_leading_int
from recordkeeper.models.state import CollectionState, SortOrder, initial_state

logger = logging.getLogger(__name__)


def parse_record_id(raw: Any) -> int:
    """Parse a user-typed id; raises ValidationError when it has no leading integer."""
    record_id = parse_leading_int(raw)
    if record_id is None:
        raise ValidationError("Please enter a valid numeric ID.")
    return record_id


class RecordSourceResolver:
    """Owns one collection's state and applies user actions to it."""

    def __init__(
        self,
        kind: CollectionKind,
        remote: RemoteStore,
        fallbacks: Sequence[RecordSource] = (),
    ) -> None:
        self.kind = kind
        self._remote = remote
        self._fallbacks: List[RecordSource] = list(fallbacks)
        self._state = initial_state(kind)

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def tiers(self) -> List[RecordSource]:
        """All load tiers in the order they are tried, remote first."""
        return [self._remote, *self._fallbacks]

    def dispatch(self, action: Action) -> CollectionState:
        self._state = reduce(self._state, action)
        return self._state

    def _local_notice(self, verb: str) -> str:
        return f"JSON Server not reachable; {self.kind.label} {verb} locally only."

    async def load(self, prefer_remote: bool = True) -> CollectionState:
        """Replace the collection with the first tier that answers."""
        self.dispatch(LoadStarted())
        tiers = self.tiers if prefer_remote else list(self._fallbacks)
        errors: List[str] = []
        for source in tiers:
            try:
                records = await source.fetch_all()
            except RecordSourceError as exc:
                logger.warning("%s: %s fetch failed: %s", self.kind.name, source.name, exc)
                errors.append(f"{source.name}: {exc}")
                continue
            except Exception:
                # never leave the view stuck in loading
                logger.exception("%s: %s fetch crashed", self.kind.name, source.name)
                self.dispatch(LoadFailed(str(AllSourcesExhausted(self.kind.name))))
                raise
            logger.info("%s: loaded %d records from %s", self.kind.name, len(records), source.name)
            return self.dispatch(LoadSucceeded(tuple(records), source.name))

        exhausted = AllSourcesExhausted(self.kind.name, errors)
        logger.error("%s (%s)", exhausted, "; ".join(exhausted.errors) or "no tiers")
        return self.dispatch(LoadFailed(str(exhausted)))

    async def create(self, candidate: Optional[Mapping[str, Any]] = None) -> CollectionState:
        """Add a record built from candidate (or the current form values)."""
        self.dispatch(MutationStarted())
        values = self._state.form if candidate is None else candidate
        record = self.kind.build(values, len(self._state.records))
        try:
            await self._remote.create(record)
        except RecordSourceError as exc:
            logger.warning("POST to remote store failed, adding %s locally: %s", self.kind.label, exc)
            return self.dispatch(LocalRecordAdded(record, self._local_notice("added")))
        self.dispatch(FormCleared())
        return await self.load()

    async def delete(self, record_id: int) -> CollectionState:
        self.dispatch(MutationStarted())
        try:
            await self._remote.delete(record_id)
        except RecordSourceError as exc:
            logger.warning("DELETE to remote store failed, removing %s locally: %s", self.kind.label, exc)
            return self.dispatch(LocalRecordRemoved(record_id, self._local_notice("removed")))
        return await self.load()

    async def lookup(self, raw_id: Any) -> CollectionState:
        """Find one record by a user-typed id, remote first, then in memory."""
        if not self.kind.supports_lookup:
            raise ValueError(f"{self.kind.name} does not support lookup by id")
        self.dispatch(SearchStarted("" if raw_id is None else str(raw_id)))
        try:
            record_id = parse_record_id(raw_id)
        except ValidationError as exc:
            return self.dispatch(SearchFailed(str(exc)))

        try:
            found = await self._remote.get(record_id)
        except RecordSourceError as exc:
            logger.warning("Lookup on remote store failed, falling back to local search: %s", exc)
            found = find_record(self._state.records, record_id)
            if found is None:
                return self.dispatch(SearchFailed(f"{self.kind.label.capitalize()} not found."))
        return self.dispatch(SearchResolved(found))

    def update_form(self, field: str, value: str) -> CollectionState:
        return self.dispatch(FormChanged(field, value))

    def set_sort(self, order: SortOrder) -> CollectionState:
        return self.dispatch(SortChanged(SortOrder(order)))

    def toggle_region(self) -> CollectionState:
        return self.dispatch(RegionToggled())

    async def aclose(self) -> None:
        await self._remote.aclose()

"""Data models for record kinds and collection state."""
from recordkeeper.models.record import CONTACTS, MOVIES, CollectionKind, Record
from recordkeeper.models.state import CollectionState, SortOrder, initial_state

__all__ = [
    "CONTACTS",
    "MOVIES",
    "CollectionKind",
    "CollectionState",
    "Record",
    "SortOrder",
    "initial_state",
]

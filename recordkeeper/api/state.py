"""Shared application state (injected into routes)."""
import asyncio

from recordkeeper.config import (
    BUNDLED_DATA_DIR,
    CONTACTS_REMOTE_URL,
    MOVIES_REMOTE_URL,
    STATIC_DATA_DIR,
)
from recordkeeper.core.resolver import RecordSourceResolver
from recordkeeper.core.sources import BundledAssetSource, RemoteRecordSource, StaticFileSource
from recordkeeper.models.record import CONTACTS, MOVIES, CollectionKind


def build_resolver(kind: CollectionKind, remote_url: str) -> RecordSourceResolver:
    """Resolver wired to the remote store, the served file and the bundled asset."""
    return RecordSourceResolver(
        kind,
        remote=RemoteRecordSource(kind.name, base_url=remote_url),
        fallbacks=[
            StaticFileSource(STATIC_DATA_DIR / kind.file_name, envelope=kind.envelope),
            BundledAssetSource(BUNDLED_DATA_DIR / kind.file_name, envelope=kind.envelope),
        ],
    )


class AppState:
    def __init__(self) -> None:
        self.contacts = build_resolver(CONTACTS, CONTACTS_REMOTE_URL)
        self.movies = build_resolver(MOVIES, MOVIES_REMOTE_URL)

    async def load_all(self) -> None:
        await asyncio.gather(self.contacts.load(), self.movies.load())

    async def aclose(self) -> None:
        await self.contacts.aclose()
        await self.movies.aclose()


_state = AppState()


def get_state() -> AppState:
    return _state

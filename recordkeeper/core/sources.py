"""
Record sources: the remote store and the two file fallbacks.

Every source exposes fetch_all(); only the remote store accepts writes and
point lookups. Sources translate their own failures into RecordSourceError
subclasses so the resolver can fall through to the next tier.
"""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional, Protocol, runtime_checkable

import httpx

from recordkeeper.config import HTTP_TIMEOUT_SEC
from recordkeeper.core.errors import MalformedPayload, NetworkUnavailable, NotFound
from recordkeeper.models.record import Record


@runtime_checkable
class RecordSource(Protocol):
    """Read-only tier."""

    @property
    def name(self) -> str: ...

    async def fetch_all(self) -> List[Record]:
        """Return the whole collection."""
        ...


@runtime_checkable
class RemoteStore(RecordSource, Protocol):
    """Authoritative tier: full CRUD over REST."""

    async def create(self, record: Record) -> Record:
        """Store a record; the store assigns its id."""
        ...

    async def get(self, record_id: int) -> Record: ...

    async def delete(self, record_id: int) -> None: ...

    async def aclose(self) -> None: ...


def unwrap_payload(payload: Any, envelope: Optional[str] = None) -> List[Record]:
    """Validate a decoded payload and return its records as fresh dicts.

    With an envelope key, {envelope: [...]} is unwrapped (a missing key means an
    empty collection). Records must carry unique integer ids.
    """
    if envelope is not None and isinstance(payload, dict):
        payload = payload.get(envelope) or []
    if not isinstance(payload, list):
        raise MalformedPayload(f"expected a list of records, got {type(payload).__name__}")
    seen = set()
    for item in payload:
        if not isinstance(item, dict):
            raise MalformedPayload(f"record is not an object: {item!r}")
        record_id = item.get("id")
        if isinstance(record_id, bool) or not isinstance(record_id, int):
            raise MalformedPayload(f"record without integer id: {item!r}")
        if record_id in seen:
            raise MalformedPayload(f"duplicate record id {record_id}")
        seen.add(record_id)
    return [dict(item) for item in payload]


class RemoteRecordSource:
    """REST collection on the remote store (json-server conventions)."""

    def __init__(
        self,
        collection: str,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = HTTP_TIMEOUT_SEC,
    ) -> None:
        if client is None and base_url is None:
            raise ValueError("RemoteRecordSource needs a base_url or a client")
        self._collection = collection
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @property
    def name(self) -> str:
        return "remote"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise NetworkUnavailable(f"{method} {path}: {type(exc).__name__}: {exc}") from exc
        if response.status_code == 404:
            raise NotFound(f"{method} {path}: HTTP 404")
        if not response.is_success:
            raise NetworkUnavailable(f"{method} {path}: HTTP {response.status_code}")
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedPayload(f"invalid JSON from {response.url}: {exc}") from exc

    async def fetch_all(self) -> List[Record]:
        response = await self._request("GET", f"/{self._collection}")
        return unwrap_payload(self._json(response))

    async def create(self, record: Record) -> Record:
        response = await self._request("POST", f"/{self._collection}", json=record)
        if not response.content:
            return {}
        created = self._json(response)
        return created if isinstance(created, dict) else {}

    async def get(self, record_id: int) -> Record:
        response = await self._request("GET", f"/{self._collection}/{record_id}")
        found = self._json(response)
        if not isinstance(found, dict):
            raise MalformedPayload(f"expected a record, got {type(found).__name__}")
        return found

    async def delete(self, record_id: int) -> None:
        await self._request("DELETE", f"/{self._collection}/{record_id}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class JsonFileSource:
    """Collection stored in a JSON file on disk."""

    def __init__(self, path: Path, envelope: Optional[str] = None, name: str = "file") -> None:
        self._path = Path(path)
        self._envelope = envelope
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    async def fetch_all(self) -> List[Record]:
        # off the event loop
        try:
            raw = await asyncio.to_thread(self._path.read_bytes)
        except OSError as exc:
            raise NetworkUnavailable(f"{self._path}: {exc}") from exc
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedPayload(f"{self._path}: {exc}") from exc
        return unwrap_payload(payload, self._envelope)


class StaticFileSource(JsonFileSource):
    """Second tier: the file the app also serves under /data."""

    def __init__(self, path: Path, envelope: Optional[str] = None) -> None:
        super().__init__(path, envelope, name="static-file")


class BundledAssetSource(JsonFileSource):
    """Third tier: the JSON shipped inside the package."""

    def __init__(self, path: Path, envelope: Optional[str] = None) -> None:
        super().__init__(path, envelope, name="bundled")

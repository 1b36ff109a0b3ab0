"""
Resolver behavior with fake tiers: load fallback order, remote-first mutations
with local fallback, lookup by id, and overlapping calls.
"""

from __future__ import annotations

import asyncio

import pytest

from recordkeeper.core.errors import MalformedPayload, ValidationError
from recordkeeper.core.resolver import RecordSourceResolver, parse_record_id
from recordkeeper.core.sources import BundledAssetSource, StaticFileSource
from recordkeeper.models.record import CONTACTS, MOVIES
from recordkeeper.models.state import SortOrder

from .fakes import FakeRemoteStore, FakeSource, FakeSourceAlwaysFail, FakeSourceCrash, GatedSource

pytestmark = pytest.mark.anyio


def _ids(state):
    return [r["id"] for r in state.records]


def _resolver(kind=CONTACTS, remote=None, static=None, bundled=None):
    return RecordSourceResolver(
        kind,
        remote=remote if remote is not None else FakeRemoteStore(),
        fallbacks=[
            static if static is not None else FakeSourceAlwaysFail("static-file"),
            bundled if bundled is not None else FakeSourceAlwaysFail("bundled"),
        ],
    )


class TestLoad:
    async def test_remote_first(self, contacts):
        static = FakeSource("static-file", [{"id": 99}])
        resolver = _resolver(remote=FakeRemoteStore(contacts), static=static)
        state = await resolver.load()
        assert state.records == tuple(contacts)
        assert state.source == "remote"
        assert static.call_count == 0

    async def test_remote_error_falls_back_to_static_file(self, contacts):
        resolver = _resolver(
            remote=FakeRemoteStore(reachable=False),
            static=FakeSource("static-file", contacts),
        )
        state = await resolver.load()
        assert state.records == tuple(contacts)
        assert state.source == "static-file"
        assert state.error is None

    async def test_both_fail_uses_bundled(self, movies):
        resolver = _resolver(
            MOVIES,
            remote=FakeRemoteStore(reachable=False),
            bundled=FakeSource("bundled", movies),
        )
        state = await resolver.load()
        assert state.records == tuple(movies)
        assert state.source == "bundled"

    async def test_malformed_tier_is_skipped(self, contacts):
        resolver = _resolver(
            static=FakeSourceAlwaysFail("static-file", MalformedPayload("duplicate record id 1")),
            bundled=FakeSource("bundled", contacts),
            remote=FakeRemoteStore(reachable=False),
        )
        assert (await resolver.load()).source == "bundled"

    async def test_all_fail_is_error_with_empty_collection(self, contacts):
        remote = FakeRemoteStore(contacts)
        resolver = _resolver(remote=remote)
        await resolver.load()
        remote.reachable = False
        state = await resolver.load()
        assert state.records == ()
        assert state.error == "Unable to load contacts from JSON Server or local files."
        assert not state.loading

    async def test_prefer_remote_false_skips_remote(self, contacts):
        remote = FakeRemoteStore([{"id": 1}])
        resolver = _resolver(remote=remote, static=FakeSource("static-file", contacts))
        state = await resolver.load(prefer_remote=False)
        assert state.source == "static-file"
        assert remote.calls == []

    async def test_loading_flag_during_call(self, contacts):
        remote = FakeRemoteStore(contacts)
        remote.fetch_gate = asyncio.Event()
        resolver = _resolver(remote=remote)
        task = asyncio.create_task(resolver.load())
        await asyncio.sleep(0)
        assert resolver.state.loading
        remote.fetch_gate.set()
        await task
        assert not resolver.state.loading

    async def test_undecodable_static_file_falls_through_to_bundled(self, tmp_path, write_json, movies):
        static_path = tmp_path / "static-movies.json"
        static_path.write_bytes(b'[{"id": 1, "title": "\xff\xfe"}]')
        resolver = _resolver(
            MOVIES,
            remote=FakeRemoteStore(reachable=False),
            static=StaticFileSource(static_path),
            bundled=BundledAssetSource(write_json("movies.json", movies)),
        )
        state = await resolver.load()
        assert state.source == "bundled"
        assert state.records == tuple(movies)
        assert not state.loading

    async def test_unexpected_error_still_clears_loading(self):
        resolver = _resolver(remote=FakeRemoteStore(reachable=False), static=FakeSourceCrash("static-file"))
        with pytest.raises(RuntimeError, match="simulated bug"):
            await resolver.load()
        assert not resolver.state.loading
        assert resolver.state.records == ()
        assert resolver.state.error == "Unable to load contacts from JSON Server or local files."

    async def test_tiers_in_order(self):
        assert [s.name for s in _resolver().tiers] == ["remote", "static-file", "bundled"]

    async def test_loaded_ids_are_unique(self, contacts):
        state = await _resolver(remote=FakeRemoteStore(contacts)).load()
        ids = _ids(state)
        assert len(ids) == len(set(ids))


class TestCreate:
    async def test_remote_success_reloads_and_clears_form(self, contacts):
        remote = FakeRemoteStore(contacts)
        resolver = _resolver(remote=remote)
        await resolver.load()
        resolver.update_form("name", "Ada")
        resolver.update_form("age", "36")
        state = await resolver.create()
        assert remote.calls[-2:] == ["create", "fetch_all"]
        assert state.records[-1]["name"] == "Ada"
        assert state.records[-1]["age"] == 36
        assert state.records[-1]["id"] == 5
        assert state.form == CONTACTS.empty_form()
        assert state.notice is None

    async def test_remote_failure_adds_locally(self):
        remote = FakeRemoteStore([{"id": 3}, {"id": 5}])
        resolver = _resolver(remote=remote)
        await resolver.load()
        remote.reachable = False
        state = await resolver.create({"name": "Ada", "email": "ada@example.com"})
        assert _ids(state) == [3, 5, 6]
        assert state.records[-1]["name"] == "Ada"
        assert state.notice == "JSON Server not reachable; contact added locally only."
        assert state.error is None

    async def test_local_add_into_empty_collection(self):
        resolver = _resolver(remote=FakeRemoteStore(reachable=False))
        await resolver.load()
        state = await resolver.create({})
        assert state.records == (
            {
                "id": 1,
                "name": "Contact 1",
                "email": "unknown@example.com",
                "phone": "N/A",
                "address": "N/A",
                "age": 0,
            },
        )

    async def test_local_add_clears_form(self):
        resolver = _resolver(MOVIES, remote=FakeRemoteStore(reachable=False))
        resolver.update_form("title", "Heat")
        state = await resolver.create()
        assert state.records[-1]["title"] == "Heat"
        assert state.form == MOVIES.empty_form()
        assert state.notice == "JSON Server not reachable; movie added locally only."

    async def test_supplied_values_reach_the_store(self):
        remote = FakeRemoteStore()
        resolver = _resolver(MOVIES, remote=remote)
        form = {"title": "Heat", "director": "Michael Mann", "year": "1995", "genre": "Crime", "rating": "8.3"}
        state = await resolver.create(form)
        assert state.records == (
            {"title": "Heat", "director": "Michael Mann", "year": 1995, "genre": "Crime", "rating": 8.3, "id": 1},
        )


class TestDelete:
    async def test_remote_success_reloads(self, contacts):
        remote = FakeRemoteStore(contacts)
        resolver = _resolver(remote=remote)
        await resolver.load()
        state = await resolver.delete(2)
        assert _ids(state) == [1, 3, 4]
        assert remote.calls[-2:] == ["delete", "fetch_all"]

    async def test_remote_failure_removes_locally(self, contacts):
        remote = FakeRemoteStore(contacts)
        resolver = _resolver(remote=remote)
        await resolver.load()
        remote.reachable = False
        state = await resolver.delete(2)
        assert _ids(state) == [1, 3, 4]
        assert state.notice == "JSON Server not reachable; contact removed locally only."

    async def test_missing_id_is_a_local_no_op(self, contacts):
        remote = FakeRemoteStore(contacts)
        resolver = _resolver(remote=remote)
        before = (await resolver.load()).records
        state = await resolver.delete(99)
        assert state.records == before
        assert state.error is None


class TestLookup:
    async def test_remote_hit(self, contacts):
        resolver = _resolver(remote=FakeRemoteStore(contacts))
        state = await resolver.lookup("3")
        assert state.search_result["name"] == "Priya Shah"
        assert state.search_error is None

    async def test_invalid_id_makes_no_call(self, contacts):
        remote = FakeRemoteStore(contacts)
        resolver = _resolver(remote=remote)
        state = await resolver.lookup("abc")
        assert state.search_error == "Please enter a valid numeric ID."
        assert remote.calls == []

    async def test_falls_back_to_memory(self, contacts):
        remote = FakeRemoteStore(contacts)
        resolver = _resolver(remote=remote)
        await resolver.load()
        remote.reachable = False
        state = await resolver.lookup(" 4 ")
        assert state.search_result["name"] == "Tom Becker"

    async def test_not_found_anywhere(self, contacts):
        resolver = _resolver(remote=FakeRemoteStore(contacts))
        await resolver.load()
        state = await resolver.lookup("42")
        assert state.search_result is None
        assert state.search_error == "Contact not found."

    async def test_new_search_clears_previous_result(self, contacts):
        resolver = _resolver(remote=FakeRemoteStore(contacts))
        await resolver.lookup("1")
        state = await resolver.lookup("x")
        assert state.search_result is None

    async def test_movies_have_no_lookup(self):
        with pytest.raises(ValueError):
            await _resolver(MOVIES).lookup("1")

    def test_parse_record_id(self):
        assert parse_record_id("12") == 12
        with pytest.raises(ValidationError):
            parse_record_id("")


class TestOverlappingCalls:
    async def test_last_response_wins(self):
        remote = GatedSource("remote", [{"id": 1}], [{"id": 2}])
        resolver = _resolver(remote=remote)
        first = asyncio.create_task(resolver.load())
        second = asyncio.create_task(resolver.load())
        await asyncio.sleep(0)

        remote.gates[1].set()
        await second
        assert _ids(resolver.state) == [2]

        # the older request finishes last and overwrites
        remote.gates[0].set()
        await first
        assert _ids(resolver.state) == [1]

    async def test_reload_discards_concurrent_local_add(self, contacts):
        remote = FakeRemoteStore(contacts)
        resolver = _resolver(remote=remote)
        await resolver.load()

        remote.fetch_gate = asyncio.Event()
        reload = asyncio.create_task(resolver.load())
        await asyncio.sleep(0)

        remote.reachable = False
        state = await resolver.create({"name": "Local only"})
        assert _ids(state) == [1, 2, 3, 4, 5]

        remote.fetch_gate.set()
        await reload
        assert _ids(resolver.state) == [1, 2, 3, 4]

    async def test_reload_discards_concurrent_local_delete(self, contacts):
        remote = FakeRemoteStore(contacts)
        resolver = _resolver(remote=remote)
        await resolver.load()

        remote.fetch_gate = asyncio.Event()
        reload = asyncio.create_task(resolver.load())
        await asyncio.sleep(0)

        remote.reachable = False
        assert _ids(await resolver.delete(1)) == [2, 3, 4]

        remote.fetch_gate.set()
        await reload
        assert _ids(resolver.state) == [1, 2, 3, 4]


class TestUiState:
    async def test_sort_and_region(self):
        resolver = _resolver()
        assert resolver.set_sort("desc").sort_order is SortOrder.DESC
        assert resolver.toggle_region().show_region

    async def test_aclose_closes_remote(self):
        remote = FakeRemoteStore()
        await _resolver(remote=remote).aclose()
        assert remote.closed

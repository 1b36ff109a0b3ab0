"""Movies list: load, add, delete."""
from typing import Dict, Optional, Union

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from recordkeeper.api.state import AppState, get_state
from recordkeeper.core.resolver import RecordSourceResolver
from recordkeeper.core.views import snapshot

router = APIRouter()

FormValue = Optional[Union[int, float, str]]


class MovieBody(BaseModel):
    title: FormValue = None
    director: FormValue = None
    year: FormValue = None
    genre: FormValue = None
    rating: FormValue = None


def _movies(state: AppState = Depends(get_state)) -> RecordSourceResolver:
    return state.movies


@router.get("")
async def get_movies(resolver: RecordSourceResolver = Depends(_movies)):
    """Current movies view."""
    return snapshot(resolver.state)


@router.post("/reload")
async def reload_movies(
    prefer_remote: bool = True,
    resolver: RecordSourceResolver = Depends(_movies),
):
    await resolver.load(prefer_remote=prefer_remote)
    return snapshot(resolver.state)


@router.patch("/form")
async def update_form(
    values: Dict[str, str],
    resolver: RecordSourceResolver = Depends(_movies),
):
    for field, value in values.items():
        resolver.update_form(field, value)
    return snapshot(resolver.state)


@router.post("")
async def add_movie(
    body: MovieBody | None = Body(None),
    resolver: RecordSourceResolver = Depends(_movies),
):
    """Add a movie from body, or from the pending form when no body is sent."""
    candidate = body.model_dump(exclude_none=True) if body is not None else None
    await resolver.create(candidate)
    return snapshot(resolver.state)


@router.delete("/{record_id}")
async def delete_movie(
    record_id: int,
    resolver: RecordSourceResolver = Depends(_movies),
):
    await resolver.delete(record_id)
    return snapshot(resolver.state)

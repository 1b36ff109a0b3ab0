"""Contacts list: load, add, delete, search by id, age sort, region filter."""
from typing import Dict, Optional, Union

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from recordkeeper.api.state import AppState, get_state
from recordkeeper.config import REGION_NAME
from recordkeeper.core.resolver import RecordSourceResolver
from recordkeeper.core.views import contact_snapshot
from recordkeeper.models.state import SortOrder

router = APIRouter()

FormValue = Optional[Union[int, float, str]]


class ContactBody(BaseModel):
    name: FormValue = None
    email: FormValue = None
    phone: FormValue = None
    address: FormValue = None
    age: FormValue = None


class SearchBody(BaseModel):
    id: Union[int, str]


class SortBody(BaseModel):
    order: SortOrder


def _contacts(state: AppState = Depends(get_state)) -> RecordSourceResolver:
    return state.contacts


def _view(resolver: RecordSourceResolver) -> dict:
    return contact_snapshot(resolver.state, REGION_NAME)


@router.get("")
async def get_contacts(resolver: RecordSourceResolver = Depends(_contacts)):
    """Current contacts view."""
    return _view(resolver)


@router.post("/reload")
async def reload_contacts(
    prefer_remote: bool = True,
    resolver: RecordSourceResolver = Depends(_contacts),
):
    await resolver.load(prefer_remote=prefer_remote)
    return _view(resolver)


@router.patch("/form")
async def update_form(
    values: Dict[str, str],
    resolver: RecordSourceResolver = Depends(_contacts),
):
    """Update pending form fields; unknown fields are ignored."""
    for field, value in values.items():
        resolver.update_form(field, value)
    return _view(resolver)


@router.post("")
async def add_contact(
    body: ContactBody | None = Body(None),
    resolver: RecordSourceResolver = Depends(_contacts),
):
    """Add a contact from body, or from the pending form when no body is sent."""
    candidate = body.model_dump(exclude_none=True) if body is not None else None
    await resolver.create(candidate)
    return _view(resolver)


@router.delete("/{record_id}")
async def delete_contact(
    record_id: int,
    resolver: RecordSourceResolver = Depends(_contacts),
):
    await resolver.delete(record_id)
    return _view(resolver)


@router.post("/search")
async def search_contact(
    body: SearchBody,
    resolver: RecordSourceResolver = Depends(_contacts),
):
    """Look a contact up by id; errors are reported in the view's search block."""
    await resolver.lookup(str(body.id))
    return _view(resolver)


@router.put("/sort")
async def sort_contacts(
    body: SortBody,
    resolver: RecordSourceResolver = Depends(_contacts),
):
    resolver.set_sort(body.order)
    return _view(resolver)


@router.post("/region/toggle")
async def toggle_region(resolver: RecordSourceResolver = Depends(_contacts)):
    resolver.toggle_region()
    return _view(resolver)

"""
Saved request API routes.
"""

from typing import List

from fastapi import APIRouter, Depends

from ...core.models import RequestDefinition
from ...storage.json_store import JSONRequestStore
from .dependencies import get_store

router = APIRouter()


@router.get("", response_model=List[RequestDefinition])
def list_requests(store: JSONRequestStore = Depends(get_store)):
    """List saved request definitions in insertion order."""
    return store.list_requests()


@router.post("", response_model=RequestDefinition)
def save_request(
    definition: RequestDefinition, store: JSONRequestStore = Depends(get_store)
):
    """
    Save a request definition.

    An empty ``id`` creates a new entry with a generated id; an existing id
    overwrites that entry.
    """
    return store.save_request(definition)


@router.get("/{request_id}", response_model=RequestDefinition)
def get_request(request_id: str, store: JSONRequestStore = Depends(get_store)):
    """Get a saved request definition."""
    return store.get_request(request_id)


@router.delete("/{request_id}")
def delete_request(request_id: str, store: JSONRequestStore = Depends(get_store)):
    """Delete a saved request definition."""
    store.delete_request(request_id)
    return {"deleted": request_id}

"""
Environment variable API routes.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...storage.json_store import JSONRequestStore
from .dependencies import get_store

router = APIRouter()


class EnvironmentModel(BaseModel):
    """Raw environment JSON text."""

    variables: str


@router.get("", response_model=EnvironmentModel)
def get_environment(store: JSONRequestStore = Depends(get_store)):
    return EnvironmentModel(variables=store.get_environment_text())


@router.put("", response_model=EnvironmentModel)
def save_environment(
    data: EnvironmentModel, store: JSONRequestStore = Depends(get_store)
):
    """Replace the environment text; rejected unless it is a JSON object of strings."""
    store.save_environment_text(data.variables)
    return EnvironmentModel(variables=data.variables)

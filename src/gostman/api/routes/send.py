"""
Send API route.
"""

from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...core.models import ErrorClass, RequestDefinition
from ...request.runner import RequestRunner
from .dependencies import get_runner

router = APIRouter()


class SendResponse(BaseModel):
    """Result of sending a request definition."""

    label: str
    status: str
    body: str
    error_class: ErrorClass
    headers: Dict[str, str]
    duration_ms: int


@router.post("", response_model=SendResponse)
async def send_request(
    definition: RequestDefinition, runner: RequestRunner = Depends(get_runner)
):
    """
    Send a request definition using the stored environment.

    Malformed input and transport failures are reported in the response body
    with the matching ``error_class``; the endpoint itself still answers 200.
    """
    result = await runner.run_async(definition)
    return SendResponse(
        label=result.label,
        status=result.status,
        body=result.body,
        error_class=result.error_class,
        headers=result.headers,
        duration_ms=result.duration_ms,
    )

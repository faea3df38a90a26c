"""
Proxy route.

Accepts one (method, url, headers, body) exchange from a browser client that
cannot call the target directly, and forwards it through the same builder and
executor pipeline with an empty environment.
"""

import json
from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...core.exceptions import ConfigurationError
from ...core.logging import get_logger
from ...request.builder import RequestBuilder
from ...request.executor import HTTPExecutor
from .dependencies import get_builder, get_executor

logger = get_logger(__name__)

router = APIRouter()


class ProxyRequest(BaseModel):
    """Incoming exchange to forward."""

    method: str
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""


class ProxyResponse(BaseModel):
    """Forwarded response; status is "Error" when nothing came back."""

    status: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""


@router.post("", response_model=ProxyResponse)
async def proxy_request(
    data: ProxyRequest,
    builder: RequestBuilder = Depends(get_builder),
    executor: HTTPExecutor = Depends(get_executor),
):
    """
    Forward a request and return its status, headers and body.

    **Parameters:**
    - **method**: HTTP method
    - **url**: Target URL
    - **headers**: Header map
    - **body**: Raw body text
    """
    try:
        outbound = builder.build(
            method=data.method,
            url=data.url,
            headers=json.dumps(data.headers),
            body=data.body,
        )
    except ConfigurationError as e:
        return ProxyResponse(status="Error", body=e.message)

    result = await executor.send(outbound)
    if not result.ok:
        return ProxyResponse(status="Error", body=result.body)

    return ProxyResponse(status=result.status, headers=result.headers, body=result.body)

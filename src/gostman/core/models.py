"""
Gostman Core Data Models

Defines the data structures shared by the request engine, the store and the
presentation layers.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class HTTPMethod(str, Enum):
    """Methods a request definition may declare."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"
    GRAPHQL = "GRAPHQL"


class ErrorClass(str, Enum):
    """Outcome category of an execution."""

    NONE = "none"
    CONFIGURATION = "configuration"
    NETWORK = "network"


# Header template offered for new request definitions
DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "*/*",
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
}


def default_headers_text() -> str:
    """Pretty-printed JSON text of DEFAULT_HEADERS."""
    return json.dumps(DEFAULT_HEADERS, indent=2)


class RequestDefinition(BaseModel):
    """
    A saved description of one HTTP call plus its last response.

    Headers, body and query params are kept as raw text: they may contain
    placeholders and are only parsed when the request is built.
    """

    id: str = Field(default="", description="Opaque id, empty until first save")
    name: str = Field(default="", description="Display name")
    url: str = Field(default="", description="URL template")
    method: str = Field(default=HTTPMethod.GET.value, description="Declared method")
    headers: str = Field(default="{}", description="Header JSON text")
    body: str = Field(default="", description="Raw body text")
    query_params: str = Field(
        default="", alias="queryParams", description="Query param JSON text"
    )
    response: str = Field(default="", description="Last response body")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_saved(self) -> bool:
        return self.id != ""

    def to_document(self) -> Dict[str, str]:
        """Serialize using the on-disk field names."""
        return self.model_dump(by_alias=True)


class SavedDocument(BaseModel):
    """The on-disk aggregate: environment text plus saved requests in order."""

    variables: str = Field(default="", description="Raw environment JSON text")
    requests: List[RequestDefinition] = Field(default_factory=list)

    def find_index(self, request_id: str) -> int:
        """Position of the request with the given id, or -1."""
        for index, request in enumerate(self.requests):
            if request.id == request_id:
                return index
        return -1

    def to_document(self) -> Dict[str, Any]:
        return {
            "variables": self.variables,
            "requests": [request.to_document() for request in self.requests],
        }


class OutboundRequest(BaseModel):
    """Transport-ready request produced by the builder."""

    method: str = Field(description="HTTP verb sent on the wire")
    url: str = Field(description="Final URL with merged query string")
    headers: Dict[str, str] = Field(default_factory=dict, description="HTTP headers")
    body: Optional[bytes] = Field(default=None, description="Request payload")

    model_config = ConfigDict(frozen=True)


class ExecutionResult(BaseModel):
    """Normalized outcome of one send."""

    body: str = Field(default="", description="Response payload or fault text")
    status: str = Field(default="", description="Status line, empty on failure")
    error_class: ErrorClass = Field(default=ErrorClass.NONE)
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Response headers"
    )
    duration_ms: int = Field(default=0, description="Round trip in milliseconds")

    @property
    def ok(self) -> bool:
        return self.error_class == ErrorClass.NONE

    @property
    def label(self) -> str:
        """Short text shown next to the body."""
        if self.error_class == ErrorClass.CONFIGURATION:
            return "Configuration Error"
        if self.error_class == ErrorClass.NETWORK:
            return "Network Error"
        return self.status

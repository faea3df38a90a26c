"""
Outbound Request Builder

Turns the raw text of a request definition plus the environment into an
OutboundRequest: placeholders resolved, query params merged into the URL,
verb-specific body rules applied and GraphQL wrapped into a JSON POST.
"""

import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..core.exceptions import ConfigurationError
from ..core.jsontext import parse_environment, parse_string_map
from ..core.logging import get_logger
from ..core.models import HTTPMethod, OutboundRequest, RequestDefinition
from .resolver import resolve

logger = get_logger(__name__)

BODY_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH})


def normalize_method(method: str) -> HTTPMethod:
    """
    Map a declared method token onto HTTPMethod.

    Raises:
        ConfigurationError: If the token is not a supported method
    """
    token = (method or "").strip().upper()
    try:
        return HTTPMethod(token)
    except ValueError:
        raise ConfigurationError(
            "Request Method or Url is set incorrectly", {"method": method}
        )


def merge_query_params(url: str, params: Dict[str, str]) -> str:
    """
    Merge params into the query string of url.

    Params overwrite existing keys of the same name; other keys are kept in
    their original order.

    Raises:
        ConfigurationError: If url cannot be parsed
    """
    try:
        parts = urlsplit(url)
        existing = parse_qsl(parts.query, keep_blank_values=True)
    except ValueError as e:
        raise ConfigurationError("Invalid URL format.", {"error": str(e)})

    merged: List[Tuple[str, str]] = [
        (key, value) for key, value in existing if key not in params
    ]
    merged.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(merged)))


def has_header(headers: Dict[str, str], name: str) -> bool:
    """Case-insensitive header presence check."""
    lowered = name.lower()
    return any(key.lower() == lowered for key in headers)


def graphql_payload(query: str, params_text: str) -> bytes:
    """
    Build the JSON body of a GraphQL POST.

    ``variables`` is only included when params_text parses as a JSON object.
    """
    payload: Dict[str, Any] = {"query": query}
    try:
        variables = json.loads(params_text) if params_text else None
    except ValueError:
        variables = None
    if isinstance(variables, dict):
        payload["variables"] = variables
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode(
        "utf-8"
    )


class RequestBuilder:
    """
    Builds outbound requests from request definition fields.

    The builder is stateless; inputs are never mutated.
    """

    def build(
        self,
        method: str,
        url: str,
        headers: str = "",
        body: str = "",
        query_params: str = "",
        environment: Optional[str] = "{}",
    ) -> OutboundRequest:
        """
        Build an outbound request.

        Args:
            method: Declared method (GET, POST, PUT, DELETE, HEAD, PATCH, GRAPHQL)
            url: URL template
            headers: Header JSON text
            body: Raw body text
            query_params: Query param JSON text (GraphQL variables for GRAPHQL)
            environment: Environment JSON text

        Returns:
            OutboundRequest ready for the executor

        Raises:
            ConfigurationError: If any input is malformed; nothing is sent
        """
        variables = parse_environment(environment)

        url = resolve((url or "").strip(), variables)
        headers_text = resolve((headers or "").strip(), variables)
        params_text = resolve((query_params or "").strip(), variables)
        body_text = resolve(body or "", variables)

        header_map = (
            parse_string_map(headers_text, "Headers") if headers_text else {}
        )
        declared = normalize_method(method)

        if declared == HTTPMethod.GRAPHQL:
            if not has_header(header_map, "Content-Type"):
                header_map["Content-Type"] = "application/json"
            outbound = OutboundRequest(
                method=HTTPMethod.POST.value,
                url=url,
                headers=header_map,
                body=graphql_payload(body_text, params_text),
            )
            logger.debug("Built GraphQL request")
            return outbound

        if params_text:
            params = parse_string_map(params_text, "Query Params")
            url = merge_query_params(url, params)

        payload = None
        if declared in BODY_METHODS and body_text:
            payload = body_text.encode("utf-8")

        logger.debug(f"Built {declared.value} request with {len(header_map)} headers")
        return OutboundRequest(
            method=declared.value, url=url, headers=header_map, body=payload
        )

    def build_definition(
        self, definition: RequestDefinition, environment: Optional[str] = "{}"
    ) -> OutboundRequest:
        """Build an outbound request from a saved or in-memory definition."""
        return self.build(
            method=definition.method,
            url=definition.url,
            headers=definition.headers,
            body=definition.body,
            query_params=definition.query_params,
            environment=environment,
        )

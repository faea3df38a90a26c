"""
Unit tests for the transport executor.
"""

import json

import pytest
from multidict import CIMultiDict

from gostman.core.config import GostmanConfig
from gostman.core.models import ErrorClass, OutboundRequest
from gostman.request.executor import DEFAULT_TIMEOUT, HTTPExecutor, collect_headers


class TestCollectHeaders:
    """Tests for response header flattening."""

    def test_repeated_headers_are_joined(self):
        raw = CIMultiDict([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("X-One", "1")])
        assert collect_headers(raw) == {"Set-Cookie": "a=1, b=2", "X-One": "1"}

    def test_empty_headers(self):
        assert collect_headers(CIMultiDict()) == {}


class TestExecutorConfiguration:
    """Tests for executor construction."""

    def test_default_timeout(self):
        assert HTTPExecutor().timeout == DEFAULT_TIMEOUT == 30.0

    def test_from_config(self):
        config = GostmanConfig(executor={"timeout": 2.5, "verify_ssl": False})
        executor = HTTPExecutor.from_config(config)
        assert executor.timeout == 2.5
        assert executor.verify_ssl is False


class TestExecute:
    """Tests for the blocking execute() entry point."""

    def test_get_success(self, http_server):
        executor = HTTPExecutor(timeout=5)
        result = executor.execute(
            OutboundRequest(
                method="GET",
                url=f"{http_server}/users?page=2",
                headers={"X-Trace": "abc"},
            )
        )

        assert result.ok
        assert result.error_class == ErrorClass.NONE
        assert result.status == "200 OK"
        assert result.label == "200 OK"
        assert result.headers["X-Echo"] == "1"
        assert result.duration_ms >= 0

        echo = json.loads(result.body)
        assert echo["method"] == "GET"
        assert echo["path"] == "/users"
        assert echo["query"] == {"page": "2"}
        assert echo["headers"]["X-Trace"] == "abc"

    def test_post_sends_body(self, http_server):
        result = HTTPExecutor(timeout=5).execute(
            OutboundRequest(
                method="POST",
                url=f"{http_server}/items",
                headers={"Content-Type": "application/json"},
                body=b'{"name": "widget"}',
            )
        )
        echo = json.loads(result.body)
        assert echo["method"] == "POST"
        assert echo["body"] == '{"name": "widget"}'
        assert echo["headers"]["Content-Type"] == "application/json"

    def test_error_status_is_not_a_failure(self, http_server):
        result = HTTPExecutor(timeout=5).execute(
            OutboundRequest(method="GET", url=f"{http_server}/status/404")
        )
        assert result.error_class == ErrorClass.NONE
        assert result.status == "404 Not Found"
        assert result.body == "status"

    def test_head_has_empty_body(self, http_server):
        result = HTTPExecutor(timeout=5).execute(
            OutboundRequest(method="HEAD", url=f"{http_server}/anything")
        )
        assert result.status == "200 OK"
        assert result.body == ""

    def test_connection_refused_is_network_error(self, closed_port_url):
        result = HTTPExecutor(timeout=5).execute(
            OutboundRequest(method="GET", url=closed_port_url)
        )
        assert result.error_class == ErrorClass.NETWORK
        assert result.status == ""
        assert result.label == "Network Error"
        assert result.body.startswith("Network Error: ")

    def test_timeout_is_network_error(self, http_server):
        result = HTTPExecutor(timeout=0.5).execute(
            OutboundRequest(method="GET", url=f"{http_server}/slow")
        )
        assert result.error_class == ErrorClass.NETWORK
        assert result.status == ""
        assert "timed out after 0.5s" in result.body

    def test_truncated_body_is_network_error(self, http_server):
        result = HTTPExecutor(timeout=5).execute(
            OutboundRequest(method="GET", url=f"{http_server}/truncated")
        )
        assert result.error_class == ErrorClass.NETWORK
        assert result.status == ""
        assert "Failed to read response body" in result.body

    def test_relative_url_is_configuration_error(self):
        result = HTTPExecutor(timeout=5).execute(
            OutboundRequest(method="GET", url="/users")
        )
        assert result.error_class == ErrorClass.CONFIGURATION
        assert result.label == "Configuration Error"


class TestSend:
    """Tests for the send() coroutine."""

    @pytest.mark.asyncio
    async def test_send_success(self, http_server):
        result = await HTTPExecutor(timeout=5).send(
            OutboundRequest(method="PUT", url=f"{http_server}/items/1", body=b"v2")
        )
        assert result.ok
        echo = json.loads(result.body)
        assert echo["method"] == "PUT"
        assert echo["body"] == "v2"

    @pytest.mark.asyncio
    async def test_send_connection_refused(self, closed_port_url):
        result = await HTTPExecutor(timeout=5).send(
            OutboundRequest(method="GET", url=closed_port_url)
        )
        assert result.error_class == ErrorClass.NETWORK
        assert result.status == ""

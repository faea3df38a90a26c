"""
Transport Executor

Sends an OutboundRequest over aiohttp under a fixed ceiling timeout and
normalizes whatever happens into an ExecutionResult. No retries are made.
"""

import asyncio
import logging
import time
from typing import Dict, Optional, Tuple

import aiohttp

from ..core.config import GostmanConfig, get_config
from ..core.exceptions import ConfigurationError, NetworkError
from ..core.logging import get_logger, log_structured
from ..core.models import ErrorClass, ExecutionResult, OutboundRequest

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
READ_CHUNK_SIZE = 64 * 1024


def collect_headers(raw_headers) -> Dict[str, str]:
    """Flatten a multi-valued header mapping, joining repeats with ', '."""
    headers: Dict[str, str] = {}
    for key, value in raw_headers.items():
        if key in headers:
            headers[key] = f"{headers[key]}, {value}"
        else:
            headers[key] = value
    return headers


class HTTPExecutor:
    """
    Executes outbound requests.

    ``send`` is the coroutine used from async code (the API); ``execute`` is
    the blocking entry point for synchronous callers such as the CLI.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, verify_ssl: bool = True):
        """
        Initialize the executor.

        Args:
            timeout: Ceiling for the whole exchange in seconds
            verify_ssl: Whether TLS certificates are verified
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    @classmethod
    def from_config(cls, config: Optional[GostmanConfig] = None) -> "HTTPExecutor":
        """Create an executor from the executor section of the configuration."""
        config = config or get_config()
        return cls(
            timeout=config.executor.timeout, verify_ssl=config.executor.verify_ssl
        )

    def execute(self, request: OutboundRequest) -> ExecutionResult:
        """
        Send a request and block until the outcome is known.

        Must not be called from a thread that is already running an event loop;
        use ``send`` there.
        """
        return asyncio.run(self.send(request))

    async def send(self, request: OutboundRequest) -> ExecutionResult:
        """
        Send a request and capture the response.

        Args:
            request: OutboundRequest to send

        Returns:
            ExecutionResult; transport faults are reported, never raised
        """
        start_time = time.monotonic()

        try:
            status, headers, body = await self._perform(request)
        except NetworkError as e:
            log_structured(
                logger,
                logging.WARNING,
                "Request failed",
                method=request.method,
                error=e.details.get("error", ""),
            )
            return ExecutionResult(
                body=e.message,
                status="",
                error_class=ErrorClass.NETWORK,
                duration_ms=self._elapsed_ms(start_time),
            )
        except ConfigurationError as e:
            return ExecutionResult(
                body=e.message,
                status="",
                error_class=ErrorClass.CONFIGURATION,
                duration_ms=self._elapsed_ms(start_time),
            )

        duration_ms = self._elapsed_ms(start_time)
        logger.debug(f"{request.method} completed with {status} in {duration_ms}ms")
        return ExecutionResult(
            body=body,
            status=status,
            error_class=ErrorClass.NONE,
            headers=headers,
            duration_ms=duration_ms,
        )

    async def _perform(
        self, request: OutboundRequest
    ) -> Tuple[str, Dict[str, str], str]:
        """
        Issue exactly one call.

        Returns:
            Tuple of (status line, response headers, decoded body)

        Raises:
            NetworkError: On timeout, connection fault or a fault mid-read
            ConfigurationError: If the URL is rejected by the transport
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        received = bytearray()

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(
                    method=request.method,
                    url=request.url,
                    headers=dict(request.headers),
                    data=request.body,
                    ssl=None if self.verify_ssl else False,
                ) as response:
                    status = f"{response.status} {response.reason or ''}".strip()
                    headers = collect_headers(response.headers)

                    try:
                        async for chunk in response.content.iter_chunked(
                            READ_CHUNK_SIZE
                        ):
                            received.extend(chunk)
                    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                        partial = self._decode(received)
                        message = f"Failed to read response body: {self._describe(e)}"
                        if partial:
                            message = f"{partial}\n\n{message}"
                        raise NetworkError(message, {"error": self._describe(e)})

                    return status, headers, self._decode(received)

        except aiohttp.InvalidURL as e:
            raise ConfigurationError("Invalid URL format.", {"url": str(e)})
        except asyncio.TimeoutError as e:
            raise NetworkError(
                f"Network Error: request timed out after {self.timeout:g}s",
                {"error": self._describe(e)},
            )
        except aiohttp.ClientError as e:
            raise NetworkError(
                f"Network Error: {self._describe(e)}", {"error": self._describe(e)}
            )
        except ValueError as e:
            raise ConfigurationError(
                f"Failed to create request: {e}", {"url": request.url}
            )

    @staticmethod
    def _decode(data: bytes) -> str:
        return bytes(data).decode("utf-8", errors="replace")

    @staticmethod
    def _describe(error: BaseException) -> str:
        text = str(error)
        return text or error.__class__.__name__

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)


"""
Send pipeline used by the presentation layers.

Sources the environment from the store, builds the outbound request and
executes it. Every failure comes back as an ExecutionResult value.
"""

import asyncio
from typing import Optional

from ..core.exceptions import ConfigurationError, NotFoundError
from ..core.logging import get_logger
from ..core.models import (
    ErrorClass,
    ExecutionResult,
    OutboundRequest,
    RequestDefinition,
)
from ..storage.json_store import JSONRequestStore
from .builder import RequestBuilder
from .executor import HTTPExecutor

logger = get_logger(__name__)


def configuration_failure(error: ConfigurationError) -> ExecutionResult:
    return ExecutionResult(
        body=error.message, status="", error_class=ErrorClass.CONFIGURATION
    )


class RequestRunner:
    """
    Resolves, builds and sends request definitions.

    The runner holds no request state; definitions passed in are never modified.
    """

    def __init__(
        self,
        store: Optional[JSONRequestStore] = None,
        executor: Optional[HTTPExecutor] = None,
        builder: Optional[RequestBuilder] = None,
    ):
        self.store = store or JSONRequestStore()
        self.executor = executor or HTTPExecutor.from_config()
        self.builder = builder or RequestBuilder()

    def prepare(
        self, definition: RequestDefinition, environment: Optional[str] = None
    ) -> OutboundRequest:
        """
        Build the outbound request for a definition.

        Args:
            definition: Request definition
            environment: Environment text (read from the store if None)

        Raises:
            ConfigurationError: If the definition or environment is malformed
        """
        if environment is None:
            environment = self.store.get_environment_text()
        return self.builder.build_definition(definition, environment)

    def run(
        self, definition: RequestDefinition, environment: Optional[str] = None
    ) -> ExecutionResult:
        """Send a definition and block until the result is known."""
        try:
            outbound = self.prepare(definition, environment)
        except ConfigurationError as e:
            logger.info(f"Request not sent: {e.message}")
            return configuration_failure(e)
        return self.executor.execute(outbound)

    async def run_async(
        self, definition: RequestDefinition, environment: Optional[str] = None
    ) -> ExecutionResult:
        """
        Coroutine form of ``run`` for callers inside an event loop.

        The store is read on a worker thread so a held write lock never stalls
        the event loop.
        """
        if environment is None:
            environment = await asyncio.to_thread(self.store.get_environment_text)
        try:
            outbound = self.prepare(definition, environment)
        except ConfigurationError as e:
            logger.info(f"Request not sent: {e.message}")
            return configuration_failure(e)
        return await self.executor.send(outbound)

    def run_saved(
        self, request_id: str, save_response: bool = False
    ) -> ExecutionResult:
        """
        Send a saved definition by id, optionally storing the response on it.

        The response is written onto the entry as it stands after the send, so
        edits made meanwhile are kept and a request deleted meanwhile stays
        deleted.

        Raises:
            NotFoundError: If no saved request has the given id
        """
        definition = self.store.get_request(request_id)
        result = self.run(definition)
        if save_response:
            try:
                self.store.save_response(request_id, result.body)
            except NotFoundError:
                logger.warning(
                    f"Request {request_id} was deleted during the send; response not stored"
                )
        return result

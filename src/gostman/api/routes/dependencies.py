"""
Shared route dependencies.
"""

from fastapi import Request

from ...request.builder import RequestBuilder
from ...request.executor import HTTPExecutor
from ...request.runner import RequestRunner
from ...storage.json_store import JSONRequestStore


def get_store(request: Request) -> JSONRequestStore:
    return request.app.state.store


def get_executor(request: Request) -> HTTPExecutor:
    return request.app.state.executor


def get_builder(request: Request) -> RequestBuilder:
    return request.app.state.builder


def get_runner(request: Request) -> RequestRunner:
    return RequestRunner(
        store=request.app.state.store,
        executor=request.app.state.executor,
        builder=request.app.state.builder,
    )

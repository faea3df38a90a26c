"""
Gostman Request Engine

Placeholder resolution, outbound request building and transport execution.
"""

from .builder import RequestBuilder
from .executor import HTTPExecutor
from .resolver import resolve
from .runner import RequestRunner

__all__ = ["RequestBuilder", "HTTPExecutor", "RequestRunner", "resolve"]

"""
Gostman HTTP API

Exposes the send pipeline and the request store over HTTP.
"""

from .app import create_app, run_server

__all__ = ["create_app", "run_server"]

"""
Gostman - request execution and persistence engine for an HTTP API-testing tool.
"""

__version__ = "0.1.0"

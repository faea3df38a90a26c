"""
Gostman API Routes
"""

from . import environment, proxy, requests, send

__all__ = ["environment", "proxy", "requests", "send"]

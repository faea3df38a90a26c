"""Gostman storage components."""

from .json_store import JSONRequestStore
from .locks import ReadWriteLock

__all__ = ["JSONRequestStore", "ReadWriteLock"]

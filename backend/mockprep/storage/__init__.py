"""Pluggable entity storage."""

from .base import Repository
from .memory import InMemoryRepository

__all__ = ["Repository", "InMemoryRepository"]

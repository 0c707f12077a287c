"""Realtime database facade."""

from .api import Database

__all__ = ["Database"]

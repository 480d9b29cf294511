"""Hosted database access."""

from .postgrest import PostgrestClient

__all__ = ["PostgrestClient"]

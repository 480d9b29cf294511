"""HTTP-boundary helpers shared by the API layer."""

from .errors import register_exception_handlers

__all__ = ["register_exception_handlers"]

"""Common middleware for Huddle."""

from .observability import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]

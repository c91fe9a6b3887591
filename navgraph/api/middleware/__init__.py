"""API middleware."""

from navgraph.api.middleware.context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]

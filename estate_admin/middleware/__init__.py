"""
Middleware package for the Estate Admin API.
"""

from .request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]

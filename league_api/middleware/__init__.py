"""Middleware modules"""

from league_api.middleware.logging import StructuredLoggingMiddleware, get_client_ip

__all__ = ["StructuredLoggingMiddleware", "get_client_ip"]

"""
Middleware components for request processing:
- Request context (request ID, client IP)
- CORS for the web client
"""

from viah.middleware.cors import CORSMiddleware
from viah.middleware.request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
    "CORSMiddleware",
]

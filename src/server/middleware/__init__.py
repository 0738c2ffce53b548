"""Server middleware."""
from src.server.middleware.cooldown import CooldownMiddleware
from src.server.middleware.logging import RequestLoggingMiddleware

__all__ = ["CooldownMiddleware", "RequestLoggingMiddleware"]

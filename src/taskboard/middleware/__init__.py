from taskboard.middleware.request_logging import RequestLoggingMiddleware
from taskboard.middleware.xray import XRayMiddleware, configure_xray

__all__ = ["RequestLoggingMiddleware", "XRayMiddleware", "configure_xray"]

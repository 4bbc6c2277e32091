"""Request latency logging middleware."""

import logging
import time
from typing import Callable

from fastapi import Request, Response

from gigslk.core.config import get_settings

logger = logging.getLogger(__name__)

# Thresholds for log levels (in milliseconds)
SLOW_REQUEST_THRESHOLD_MS = 1000  # Log as warning above 1s
VERY_SLOW_REQUEST_THRESHOLD_MS = 3000  # Log as error above 3s

HEALTH_PATHS = ("/health", "/health/ready")


def loggable_path(path: str) -> str:
    """Mask preview handles; they grant access to staged files."""
    prefix = get_settings().preview_url_prefix.rstrip("/") + "/"
    if path.startswith(prefix) and len(path) > len(prefix):
        return prefix + "{handle}"
    return path


async def latency_logging_middleware(request: Request, call_next: Callable) -> Response:
    """Middleware to log request latency.

    Logs one line per request, with elevated log levels for slow or
    failed requests. Health checks are only logged when slow.

    Args:
        request: The incoming request.
        call_next: The next middleware/handler in the chain.

    Returns:
        Response: The response from the handler.
    """
    start_time = time.perf_counter()

    method = request.method
    path = loggable_path(request.url.path)
    is_health_check = path in HEALTH_PATHS

    response = None
    error_occurred = False

    try:
        response = await call_next(request)
        return response
    except Exception:
        error_occurred = True
        raise
    finally:
        latency_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code if response else 500

        log_msg = "%s %s - %d - %.2fms"
        args = (method, path, status_code, latency_ms)

        if is_health_check:
            if latency_ms > 100:
                logger.debug(log_msg, *args)
        elif error_occurred or status_code >= 500:
            logger.error(log_msg, *args)
        elif latency_ms > VERY_SLOW_REQUEST_THRESHOLD_MS:
            logger.error("VERY SLOW REQUEST: " + log_msg, *args)
        elif latency_ms > SLOW_REQUEST_THRESHOLD_MS:
            logger.warning("SLOW REQUEST: " + log_msg, *args)
        elif status_code >= 400:
            logger.warning(log_msg, *args)
        else:
            logger.info(log_msg, *args)

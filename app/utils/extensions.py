# app/utils/extensions.py

import os
from flask import request, g, has_request_context
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .logger import Log


RATE_LIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")


def _get_client_ip():
    """Safely get client IP, returns 'unknown' if outside request context."""
    if has_request_context():
        return get_remote_address() or "unknown"
    return "unknown"


def _format_time_period(seconds):
    """Convert seconds to human-readable format."""
    if seconds is None:
        return "unknown"

    seconds = int(seconds)

    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"
    elif seconds < 3600:
        minutes = seconds // 60
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    elif seconds < 86400:
        hours = seconds // 3600
        return f"{hours} hour{'s' if hours != 1 else ''}"
    else:
        days = seconds // 86400
        return f"{days} day{'s' if days != 1 else ''}"


def log_rate_limit_breach(request_limit):
    """
    Called by Flask-Limiter whenever any rate limit is exceeded.
    """
    client_ip = _get_client_ip()
    principal = g.get("current_admin") or g.get("current_user") or {}
    user_id = principal.get("id") or "anonymous"

    endpoint = request.endpoint or "unknown"

    try:
        limit_amount = request_limit.limit.amount
        limit_per = _format_time_period(request_limit.limit.get_expiry())
        limit_str = f"{limit_amount} per {limit_per}"
    except AttributeError:
        limit_str = str(getattr(request_limit, "limit", "unknown"))

    limit_key = getattr(request_limit, "key", "unknown")

    Log.warning(
        f"[RATE_LIMIT_BREACH][{client_ip}] "
        f"user={user_id}, limit={limit_str}, key={limit_key}, "
        f"method={request.method}, path={request.path}, endpoint={endpoint}"
    )


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"],
    storage_uri=RATE_LIMIT_STORAGE_URI,
    on_breach=log_rate_limit_breach,
)

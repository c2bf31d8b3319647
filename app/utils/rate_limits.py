# app/utils/rate_limits.py

from flask import g
from flask_limiter.util import get_remote_address

from ..utils.extensions import limiter


# ---------- KEY FUNCTIONS ----------

def principal_key_func():
    """
    Rate-limit per authenticated admin or customer, falling back to IP.
    The auth decorators populate g.current_admin / g.current_user before
    the limiter runs.
    """
    principal = g.get("current_admin") or g.get("current_user") or {}
    principal_id = principal.get("id")
    if principal_id is not None:
        return f"principal:{principal_id}"
    return get_remote_address()


# ---------- CRUD HELPERS ----------

def crud_read_limiter(
    entity_name: str,
    limit_str: str = "60 per minute",
    scope: str | None = None,
):
    """
    Generic limiter for READ (GET) operations on report entities.

    Example:
        @crud_read_limiter("sales_report")
    """
    scope = scope or f"{entity_name}-read"
    error_message = f"Too many {entity_name} read requests. Please slow down."

    return limiter.shared_limit(
        limit_str,
        scope=scope,
        key_func=principal_key_func,
        methods=["GET"],
        error_message=error_message,
    )


def crud_write_limiter(
    entity_name: str,
    limit_str: str = "20 per minute; 200 per hour",
    scope: str | None = None,
):
    """
    Generic limiter for WRITE (POST/PUT/PATCH) operations.
    """
    scope = scope or f"{entity_name}-write"
    error_message = f"Too many {entity_name} write requests. Please try again later."

    return limiter.shared_limit(
        limit_str,
        scope=scope,
        key_func=principal_key_func,
        methods=["POST", "PUT", "PATCH"],
        error_message=error_message,
    )


def export_limiter(
    entity_name: str = "export",
    limit_str: str = "10 per minute; 100 per hour",
    scope: str | None = None,
):
    """
    File exports run the full user aggregation un-paginated, so they get a
    tighter budget than ordinary reads.
    """
    scope = scope or f"{entity_name}-export"
    error_message = f"Too many {entity_name} export requests. Please try again later."

    return limiter.shared_limit(
        limit_str,
        scope=scope,
        key_func=principal_key_func,
        methods=["GET"],
        error_message=error_message,
    )

import math
import re
from datetime import datetime, date, time, timezone

from bson import ObjectId


OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def make_log_tag(file, resource, method, ip, admin_id, role, **kwargs):
    # Base tag
    log_tag = (
        f"[{file}]"
        f"[{resource}]"
        f"[{method}]"
        f"[ip:{ip}]"
        f"[admin:{admin_id}]"
        f"[role:{role}]"
    )

    # Append extra context fields, skipping empty ones
    for key, value in kwargs.items():
        if value is None or value == "":
            continue
        log_tag += f"[{key}:{value}]"

    return log_tag


def utc_now():
    """Naive UTC timestamp, comparable with what pymongo returns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value):
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def start_of_day(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    return datetime.combine(value, time.min)


def end_of_day(value):
    """Last representable millisecond of the calendar day (23:59:59.999)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = to_naive_utc(value).date()
    return datetime.combine(value, time(23, 59, 59, 999000))


def is_valid_object_id(value):
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def to_object_id(value):
    if isinstance(value, ObjectId):
        return value
    return ObjectId(value)


def order_amount(order):
    """Order total, falling back to the legacy totalPrice field."""
    return order.get("totalAmount") or order.get("totalPrice") or 0


def short_order_id(order):
    return order.get("orderNumber") or str(order.get("_id", ""))[-8:].upper()


def total_pages(total, limit):
    if not limit:
        return 0
    return math.ceil(total / limit)


def iso_day(value=None):
    value = value or utc_now()
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat() if isinstance(value, date) else str(value)

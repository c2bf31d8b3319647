# services/reports/filters.py
import re
from dataclasses import dataclass, field
from typing import Optional

from ...utils.helpers import start_of_day, end_of_day


def text_search(term, fields):
    """Case-insensitive substring match on any of ``fields``."""
    if not term:
        return {}
    pattern = {"$regex": re.escape(term), "$options": "i"}
    return {"$or": [{name: dict(pattern)} for name in fields]}


def contains_ci(term):
    """Case-insensitive substring predicate for a single field."""
    return {"$regex": re.escape(term), "$options": "i"}


def date_range(date_from=None, date_to=None):
    """
    Inclusive day range. ``date_to`` covers the whole calendar day
    (up to 23:59:59.999).
    """
    predicate = {}
    if date_from is not None:
        predicate["$gte"] = start_of_day(date_from)
    if date_to is not None:
        predicate["$lte"] = end_of_day(date_to)
    return predicate


def numeric_range(minimum=None, maximum=None):
    predicate = {}
    if minimum is not None:
        predicate["$gte"] = minimum
    if maximum is not None:
        predicate["$lte"] = maximum
    return predicate


@dataclass
class UserReportFilters:
    """Parsed filters for the user and customer aggregations."""
    match: dict = field(default_factory=dict)
    account_status: Optional[str] = None
    min_orders: Optional[int] = None
    max_orders: Optional[int] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None


def parse_user_report_filters(args, base_match=None):
    """
    Build the pre-join User match (text search over name/email, createdAt
    range) and carry the post-aggregation constraints through unchanged.
    ``args`` is the dict loaded by UserReportQuerySchema.
    """
    match = dict(base_match or {})
    match.update(text_search(args.get("search"), ["name", "email"]))

    created = date_range(args.get("date_from"), args.get("date_to"))
    if created:
        match["createdAt"] = created

    return UserReportFilters(
        match=match,
        account_status=args.get("account_status"),
        min_orders=args.get("min_orders"),
        max_orders=args.get("max_orders"),
        min_amount=args.get("min_amount"),
        max_amount=args.get("max_amount"),
    )


def build_order_filters(args, search_fields=None):
    """
    Order-side query shared by the sales, order and payment reports.
    Status and payment method are case-insensitive substring matches.
    """
    filters = {}

    if search_fields and args.get("search"):
        filters.update(text_search(args["search"], search_fields))

    created = date_range(args.get("date_from"), args.get("date_to"))
    if created:
        filters["createdAt"] = created

    if args.get("status"):
        filters["orderStatus"] = contains_ci(args["status"])

    if args.get("payment_method"):
        filters["paymentMethod"] = contains_ci(args["payment_method"])

    amount = numeric_range(args.get("min_amount"), args.get("max_amount"))
    if amount:
        filters["totalAmount"] = amount

    return filters


def build_stock_filters(args, low_threshold=10):
    filters = {}

    if args.get("category"):
        filters["category"] = contains_ci(args["category"])

    stock = numeric_range(args.get("min_stock"), args.get("max_stock"))
    if stock:
        filters["stock"] = stock

    stock_status = args.get("stock_status")
    if stock_status == "out":
        filters["stock"] = 0
    elif stock_status == "low":
        filters["stock"] = {"$gt": 0, "$lte": low_threshold}
    elif stock_status == "in":
        filters["stock"] = {"$gt": low_threshold}

    return filters

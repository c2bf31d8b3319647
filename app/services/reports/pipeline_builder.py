# services/reports/pipeline_builder.py
"""
Aggregation pipelines for the user-centric reports.

Two variants share one stage layout and differ only in how spend is counted
and in the names of the derived fields:

* ``ADMIN_USERS``: ``totalAmountSpent`` sums ``delivered`` orders only,
  last order date lands in ``lastOrder``.
* ``CUSTOMERS``: ``totalSpent`` sums every order that is not ``cancelled``,
  last order date lands in ``lastOrderDate``.

Both definitions of spend are kept as they are; they answer different
questions for different screens.
"""
from collections import namedtuple

from .status_rules import actual_status_expression, INACTIVITY_WINDOW_DAYS
from .filters import numeric_range
from ...utils.helpers import to_naive_utc


PipelineVariant = namedtuple(
    "PipelineVariant",
    ["name", "spend_field", "last_order_field", "spend_condition"],
)


def _lower_status(var="order"):
    return {"$toLower": {"$ifNull": [f"$${var}.orderStatus", ""]}}


ADMIN_USERS = PipelineVariant(
    "admin_users",
    "totalAmountSpent",
    "lastOrder",
    {"$eq": [_lower_status(), "delivered"]},
)

CUSTOMERS = PipelineVariant(
    "customers",
    "totalSpent",
    "lastOrderDate",
    {"$not": [{"$in": [_lower_status(), ["cancelled"]]}]},
)


def _spend_expression(variant):
    return {
        "$sum": {
            "$map": {
                "input": {
                    "$filter": {
                        "input": "$orders",
                        "as": "order",
                        "cond": variant.spend_condition,
                    }
                },
                "as": "order",
                # legacy orders only carry totalPrice
                "in": {"$ifNull": ["$$order.totalAmount", {"$ifNull": ["$$order.totalPrice", 0]}]},
            }
        }
    }


def _post_match(filters, variant):
    post_match = {}

    orders = numeric_range(filters.min_orders, filters.max_orders)
    if orders:
        post_match["totalOrders"] = orders

    amount = numeric_range(filters.min_amount, filters.max_amount)
    if amount:
        post_match[variant.spend_field] = amount

    if filters.account_status:
        post_match["actualStatus"] = filters.account_status.upper()

    return post_match


def build_user_report_pipeline(filters, now, variant=ADMIN_USERS, window_days=INACTIVITY_WINDOW_DAYS):
    """
    Stage list for ``User.aggregate``.

    :param filters: a UserReportFilters instance
    :param now: reference time for the status rules
    :param variant: ADMIN_USERS or CUSTOMERS
    """
    now = to_naive_utc(now)

    pipeline = [
        {"$match": dict(filters.match)},
        {
            "$lookup": {
                "from": "orders",
                "localField": "_id",
                "foreignField": "user",
                "as": "orders",
            }
        },
        {
            "$addFields": {
                "totalOrders": {"$size": "$orders"},
                variant.spend_field: _spend_expression(variant),
                variant.last_order_field: {"$max": "$orders.createdAt"},
                "actualStatus": actual_status_expression(now, window_days),
            }
        },
    ]

    post_match = _post_match(filters, variant)
    if post_match:
        pipeline.append({"$match": post_match})

    pipeline.append({"$project": {"password": 0, "orders": 0}})
    pipeline.append({"$sort": {"createdAt": -1}})

    return pipeline


def paginate(pipeline, skip, limit):
    """Wrap a pipeline in a ``$facet`` returning one page plus the total count."""
    return list(pipeline) + [
        {
            "$facet": {
                "data": [{"$skip": skip}, {"$limit": limit}],
                "metadata": [{"$count": "totalUsers"}],
            }
        }
    ]

# services/reports/user_report_service.py
from flask import current_app, has_app_context

from ...models.order_model import Order
from ...models.product_model import Product
from ...models.review_model import Review
from ...models.user_model import User
from ...utils.helpers import utc_now, to_naive_utc, to_object_id, order_amount, total_pages
from ...utils.logger import Log
from .filters import parse_user_report_filters, date_range
from .pipeline_builder import build_user_report_pipeline, paginate, ADMIN_USERS
from .references import populate_order_references
from .status_rules import derive_actual_status


INVOICE_STATUSES = ("delivered", "shipped", "processing")
INVOICE_TAX_RATE = 0.18


def _inactivity_days():
    if has_app_context():
        return current_app.config.get("INACTIVITY_DAYS", 60)
    return 60


def _with_actual_status(users, now, window_days):
    return [{**user, **derive_actual_status(user, now, window_days)} for user in users]


def list_users(filters, page=1, limit=15, now=None):
    """
    One page of the admin users report.

    :param filters: dict loaded by UsersPageQuerySchema
    :return: {users, currentPage, totalPages, totalUsers}
    """
    log_tag = f"[user_report_service.py][list_users][page:{page}]"
    now = to_naive_utc(now) if now is not None else utc_now()
    window_days = _inactivity_days()

    try:
        pipeline = build_user_report_pipeline(
            parse_user_report_filters(filters), now, ADMIN_USERS, window_days
        )
        results = User.aggregate(paginate(pipeline, (page - 1) * limit, limit))
        facet = results[0] if results else {}

        metadata = facet.get("metadata") or []
        total_users = metadata[0].get("totalUsers", 0) if metadata else 0

        return {
            "users": _with_actual_status(facet.get("data") or [], now, window_days),
            "currentPage": page,
            "totalPages": total_pages(total_users, limit),
            "totalUsers": total_users,
        }
    except Exception as e:
        Log.error(f"{log_tag} Error: {str(e)}")
        raise


def export_rows(filters, now=None):
    """Every user matching ``filters``, unpaginated, for file exports."""
    now = to_naive_utc(now) if now is not None else utc_now()
    window_days = _inactivity_days()

    pipeline = build_user_report_pipeline(
        parse_user_report_filters(filters), now, ADMIN_USERS, window_days
    )
    return _with_actual_status(User.aggregate(pipeline), now, window_days)


def _payment_entry(order):
    amount = order_amount(order)
    return {
        "_id": order.get("_id"),
        "orderId": order.get("_id"),
        "createdAt": order.get("createdAt"),
        "method": order.get("paymentMethod") or "N/A",
        "amount": amount,
        "status": order.get("paymentStatus") or "pending",
        "transactionId": order.get("transactionId"),
        "refundAmount": amount if order.get("orderStatus") == "cancelled" else None,
    }


def _invoice_entry(order):
    amount = order_amount(order)
    return {
        "_id": order.get("_id"),
        "invoiceNumber": order.get("orderNumber") or f"INV-{str(order.get('_id'))[-8:]}",
        "orderId": order.get("_id"),
        "date": order.get("createdAt"),
        "tax": f"{amount * INVOICE_TAX_RATE:.2f}",
        "amount": amount,
    }


def full_report(user_id, date_from=None, date_to=None, status=None):
    """
    Everything known about one user: profile, orders, payments and invoices
    derived from those orders, and reviews. Returns None when the user does
    not exist. Spend counts delivered orders only.
    """
    log_tag = f"[user_report_service.py][full_report][{user_id}]"

    user = User.get_public_by_id(user_id)
    if not user:
        Log.info(f"{log_tag} user not found")
        return None

    user_oid = to_object_id(user_id)
    created = date_range(date_from, date_to)

    order_query = {"user": user_oid}
    review_query = {"user": user_oid}
    if created:
        order_query["createdAt"] = dict(created)
        review_query["createdAt"] = dict(created)
    if status and status != "all":
        order_query["orderStatus"] = status
        if status in Review.STATUSES:
            review_query["status"] = status

    orders = populate_order_references(Order.find(order_query))
    reviews = Review.find(review_query)
    products = Product.find_by_ids([r.get("product") for r in reviews], Product.REFERENCE_PROJECTION)

    delivered = [o for o in orders if o.get("orderStatus") == "delivered"]

    Log.info(f"{log_tag} {len(orders)} orders, {len(reviews)} reviews")

    return {
        "user": {
            "_id": user.get("_id"),
            "name": user.get("name"),
            "email": user.get("email"),
            "phone": user.get("phone"),
            "status": user.get("status"),
            "createdAt": user.get("createdAt"),
            "lastLoginAt": user.get("lastLoginAt"),
            "addresses": user.get("addresses") or [],
            **derive_actual_status(user, window_days=_inactivity_days()),
        },
        "orders": [
            {
                "_id": o.get("_id"),
                "orderNumber": o.get("orderNumber"),
                "items": o.get("items"),
                "totalAmount": order_amount(o),
                "orderStatus": o.get("orderStatus"),
                "paymentMethod": o.get("paymentMethod"),
                "paymentStatus": o.get("paymentStatus"),
                "shippingAddress": o.get("shippingAddress"),
                "createdAt": o.get("createdAt"),
                "updatedAt": o.get("updatedAt"),
                "deliveredAt": o.get("deliveredAt"),
            }
            for o in orders
        ],
        "payments": [_payment_entry(o) for o in orders],
        "invoices": [_invoice_entry(o) for o in orders if o.get("orderStatus") in INVOICE_STATUSES],
        "reviews": [
            {
                "_id": r.get("_id"),
                "product": products.get(r.get("product")),
                "productName": (products.get(r.get("product")) or {}).get("name") or "Unknown Product",
                "rating": r.get("rating"),
                "comment": r.get("comment"),
                "status": r.get("status"),
                "createdAt": r.get("createdAt"),
            }
            for r in reviews
        ],
        "summary": {
            "totalOrders": len(orders),
            "totalSpent": sum(order_amount(o) for o in delivered),
            "totalReviews": len(reviews),
            "deliveredOrders": len(delivered),
            "pendingOrders": sum(1 for o in orders if o.get("orderStatus") == "pending"),
            "cancelledOrders": sum(1 for o in orders if o.get("orderStatus") == "cancelled"),
        },
    }

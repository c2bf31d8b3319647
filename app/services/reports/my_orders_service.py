# services/reports/my_orders_service.py
from ...models.order_model import Order
from ...utils.helpers import to_object_id, order_amount, total_pages
from .filters import date_range
from .references import populate_order_references


def my_orders(user_id, page=1, limit=10, status=None, start_date=None, end_date=None):
    """
    A customer's own orders, one page at a time, plus a summary over all of
    their orders regardless of the page filters. Spend here is every order.
    """
    user_oid = to_object_id(user_id)

    query = {"user": user_oid}
    if status:
        query["orderStatus"] = status
    created = date_range(start_date, end_date)
    if created:
        query["createdAt"] = created

    orders = populate_order_references(Order.find_page(query, (page - 1) * limit, limit))
    total = Order.count(query)

    all_orders = Order.find({"user": user_oid}, {"totalAmount": 1, "totalPrice": 1, "orderStatus": 1})

    def count(order_status):
        return sum(1 for o in all_orders if o.get("orderStatus") == order_status)

    return {
        "orders": orders,
        "summary": {
            "totalOrders": len(all_orders),
            "totalSpent": sum(order_amount(o) for o in all_orders),
            "deliveredOrders": count("delivered"),
            "pendingOrders": count("pending"),
            "cancelledOrders": count("cancelled"),
        },
        "totalOrders": total,
        "totalPages": total_pages(total, limit),
        "currentPage": page,
    }

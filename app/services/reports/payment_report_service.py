# services/reports/payment_report_service.py
from ...constants.service_code import COD_PAYMENT_METHODS, PAYMENT_STATUS
from ...models.order_model import Order
from ...models.user_model import User
from ...schemas.report_schemas import normalize_filters
from ...utils.helpers import order_amount, short_order_id
from ...utils.logger import Log
from .filters import build_order_filters
from .snapshot import persist_snapshot


def _method_of(order):
    return (order.get("paymentMethod") or "").lower()


def is_cod(order):
    return _method_of(order) in COD_PAYMENT_METHODS


def is_online(order):
    method = _method_of(order)
    return bool(method) and method not in COD_PAYMENT_METHODS


class PaymentReportService:
    """
    Payments have no collection of their own; every order is one
    transaction. Orders without a payment method count as neither COD nor
    online.
    """

    @staticmethod
    def generate(filters, admin_id=None, persist=True):
        log_tag = f"[payment_report_service.py][PaymentReportService][generate][admin:{admin_id}]"

        try:
            orders = Order.find(build_order_filters(filters))

            users = User.find_by_ids([o.get("user") for o in orders], User.REFERENCE_PROJECTION)

            cod = [o for o in orders if is_cod(o)]
            online = [o for o in orders if is_online(o)]

            summary = {
                "totalTransactions": len(orders),
                "totalAmount": sum(order_amount(o) for o in orders),
                "codPayments": len(cod),
                "codAmount": sum(order_amount(o) for o in cod),
                "onlinePayments": len(online),
                "onlineAmount": sum(order_amount(o) for o in online),
            }
            for status in PAYMENT_STATUS.values():
                summary[status] = sum(
                    1 for o in orders if (o.get("paymentStatus") or "").lower() == status
                )

            data = [
                {
                    "_id": order.get("_id"),
                    "orderNumber": order.get("orderNumber"),
                    "orderId": short_order_id(order),
                    "user": users.get(order.get("user")),
                    "totalAmount": order_amount(order),
                    "paymentMethod": order.get("paymentMethod"),
                    "paymentStatus": order.get("paymentStatus"),
                    "paymentDetails": order.get("paymentDetails"),
                    "createdAt": order.get("createdAt"),
                }
                for order in orders
            ]

            if persist:
                persist_snapshot("payments", summary, data, normalize_filters("payments", filters), admin_id)

            Log.info(f"{log_tag} completed: {len(orders)} transactions")
            return {"summary": summary, "data": data}
        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            raise

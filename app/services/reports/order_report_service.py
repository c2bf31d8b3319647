# services/reports/order_report_service.py
from ...constants.service_code import ORDER_STATUS
from ...models.order_model import Order
from ...models.user_model import User
from ...schemas.report_schemas import normalize_filters
from ...utils.logger import Log
from .filters import build_order_filters, text_search, contains_ci
from .references import populate_order_references
from .sales_report_service import order_row
from .snapshot import persist_snapshot


class OrderReportService:
    """Order list with a per-status breakdown."""

    @staticmethod
    def _search_clause(term):
        """
        Orders only hold a user reference, so a name/email search is resolved
        to user ids first and OR'd with the order number match.
        """
        users = User.get_collection().find(text_search(term, ["name", "email"]), {"_id": 1})
        user_ids = [u["_id"] for u in users]

        clauses = [{"orderNumber": contains_ci(term)}]
        if user_ids:
            clauses.append({"user": {"$in": user_ids}})
        return {"$or": clauses}

    @staticmethod
    def status_counts(orders):
        counts = {status: 0 for status in ORDER_STATUS.values()}
        for order in orders:
            status = (order.get("orderStatus") or "pending").lower()
            if status in counts:
                counts[status] += 1
        return counts

    @staticmethod
    def generate(filters, admin_id=None, persist=True):
        """
        :param filters: dict loaded by OrderReportQuerySchema
        :return: {summary, data}
        """
        log_tag = f"[order_report_service.py][OrderReportService][generate][admin:{admin_id}]"

        try:
            query = build_order_filters(filters)
            if filters.get("search"):
                query.update(OrderReportService._search_clause(filters["search"]))

            orders = populate_order_references(Order.find(query))

            summary = {"totalOrders": len(orders)}
            summary.update(OrderReportService.status_counts(orders))

            data = []
            for order in orders:
                row = order_row(order)
                row["paymentStatus"] = order.get("paymentStatus")
                row["shippingAddress"] = order.get("shippingAddress")
                data.append(row)

            if persist:
                persist_snapshot("orders", summary, data, normalize_filters("orders", filters), admin_id)

            Log.info(f"{log_tag} completed: {len(orders)} orders")
            return {"summary": summary, "data": data}
        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            raise

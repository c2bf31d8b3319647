# services/reports/sales_report_service.py
from ...models.order_model import Order
from ...schemas.report_schemas import normalize_filters
from ...utils.helpers import order_amount, short_order_id
from ...utils.logger import Log
from .filters import build_order_filters
from .references import populate_order_references
from .snapshot import persist_snapshot


def _status_of(order):
    return (order.get("orderStatus") or "").lower()


def order_row(order):
    return {
        "_id": order.get("_id"),
        "orderNumber": order.get("orderNumber"),
        "orderId": short_order_id(order),
        "user": order.get("user"),
        "totalAmount": order_amount(order),
        "status": order.get("orderStatus"),
        "orderStatus": order.get("orderStatus"),
        "paymentMethod": order.get("paymentMethod"),
        "createdAt": order.get("createdAt"),
        "items": order.get("items") or [],
    }


class SalesReportService:
    """Revenue view over orders: only delivered orders count as revenue."""

    TOP_PRODUCTS_LIMIT = 10

    @staticmethod
    def monthly_breakdown(orders):
        """Per ``Mon YYYY`` bucket: delivered revenue and the count of all orders."""
        monthly = {}
        for order in orders:
            created_at = order.get("createdAt")
            month = created_at.strftime("%b %Y") if created_at else "Unknown"
            bucket = monthly.setdefault(month, {"revenue": 0, "orders": 0})
            if _status_of(order) == "delivered":
                bucket["revenue"] += order_amount(order)
            bucket["orders"] += 1
        return monthly

    @staticmethod
    def top_products(delivered_orders, limit=10):
        revenue_by_product = {}
        for order in delivered_orders:
            for item in order.get("items") or []:
                product = item.get("product") if isinstance(item.get("product"), dict) else None
                product_id = str(product["_id"]) if product and product.get("_id") else "unknown"
                name = (product or {}).get("name") or item.get("name") or "Unknown Product"

                entry = revenue_by_product.setdefault(
                    product_id, {"name": name, "revenue": 0, "quantity": 0}
                )
                quantity = item.get("quantity") or 0
                entry["revenue"] += (item.get("price") or 0) * quantity
                entry["quantity"] += quantity

        ranked = sorted(revenue_by_product.values(), key=lambda p: p["revenue"], reverse=True)
        return ranked[:limit]

    @staticmethod
    def generate(filters, admin_id=None, persist=True):
        """
        :param filters: dict loaded by SalesReportQuerySchema
        :return: {summary, monthlySales, topProducts, data}
        """
        log_tag = f"[sales_report_service.py][SalesReportService][generate][admin:{admin_id}]"

        try:
            query = build_order_filters(filters)
            Log.info(f"{log_tag} fetching orders with filters: {query}")

            orders = populate_order_references(Order.find(query))

            delivered = [o for o in orders if _status_of(o) == "delivered"]
            total_revenue = sum(order_amount(o) for o in delivered)

            summary = {
                "totalSales": len(orders),
                "totalRevenue": total_revenue,
                "averageOrderValue": total_revenue / len(delivered) if delivered else 0,
                "completedOrders": len(delivered),
                "pendingOrders": sum(1 for o in orders if _status_of(o) == "pending"),
                "cancelledOrders": sum(1 for o in orders if _status_of(o) == "cancelled"),
            }

            data = [order_row(o) for o in orders]

            if persist:
                persist_snapshot("sales", summary, data, normalize_filters("sales", filters), admin_id)

            Log.info(f"{log_tag} completed: {len(orders)} orders, revenue {total_revenue:.2f}")

            return {
                "summary": summary,
                "monthlySales": SalesReportService.monthly_breakdown(orders),
                "topProducts": SalesReportService.top_products(
                    delivered, SalesReportService.TOP_PRODUCTS_LIMIT
                ),
                "data": data,
            }
        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            raise

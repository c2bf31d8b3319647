# services/reports/stock_report_service.py
from flask import current_app, has_app_context

from ...models.product_model import Product
from ...schemas.report_schemas import normalize_filters
from ...utils.logger import Log
from .filters import build_stock_filters
from .snapshot import persist_snapshot


def _low_stock_threshold():
    if has_app_context():
        return current_app.config.get("LOW_STOCK_THRESHOLD", 10)
    return 10


class StockReportService:
    """
    Inventory levels and value. Stock bands: 0 is out, 1..threshold is low,
    anything above is in stock.
    """

    @staticmethod
    def category_breakdown(products):
        breakdown = {}
        for product in products:
            category = product.get("category") or "Uncategorized"
            stock = product.get("stock") or 0
            entry = breakdown.setdefault(category, {"count": 0, "totalStock": 0, "totalValue": 0})
            entry["count"] += 1
            entry["totalStock"] += stock
            entry["totalValue"] += (product.get("price") or 0) * stock
        return breakdown

    @staticmethod
    def generate(filters, admin_id=None, persist=True):
        log_tag = f"[stock_report_service.py][StockReportService][generate][admin:{admin_id}]"
        threshold = _low_stock_threshold()

        try:
            products = Product.find(build_stock_filters(filters, threshold))

            def stock_of(p):
                return p.get("stock") or 0

            summary = {
                "totalProducts": len(products),
                "inStock": sum(1 for p in products if stock_of(p) > threshold),
                "lowStock": sum(1 for p in products if 0 < stock_of(p) <= threshold),
                "outOfStock": sum(1 for p in products if stock_of(p) == 0),
                "totalQuantity": sum(stock_of(p) for p in products),
                "totalStockValue": sum((p.get("price") or 0) * stock_of(p) for p in products),
            }

            data = [
                {
                    "_id": p.get("_id"),
                    "name": p.get("name"),
                    "category": p.get("category"),
                    "price": p.get("price"),
                    "stock": stock_of(p),
                    "stockValue": (p.get("price") or 0) * stock_of(p),
                    "stockStatus": Product.stock_status_label(stock_of(p), threshold),
                    "status": Product.derive_status(stock_of(p), p.get("status") or Product.STATUS_ACTIVE),
                    "image": p.get("image"),
                    "description": p.get("description"),
                    "createdAt": p.get("createdAt"),
                    "updatedAt": p.get("updatedAt"),
                }
                for p in products
            ]

            if persist:
                persist_snapshot("stock", summary, data, normalize_filters("stock", filters), admin_id)

            Log.info(f"{log_tag} completed: {len(products)} products")
            return {
                "summary": summary,
                "categoryBreakdown": StockReportService.category_breakdown(products),
                "data": data,
            }
        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            raise

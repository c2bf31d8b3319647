# services/reports/customer_report_service.py
from datetime import timedelta

from flask import current_app, has_app_context

from ...constants.service_code import ACCOUNT_STATUS, CUSTOMER_ROLES
from ...models.user_model import User
from ...schemas.report_schemas import normalize_filters
from ...utils.helpers import utc_now, to_naive_utc
from ...utils.logger import Log
from .filters import parse_user_report_filters
from .pipeline_builder import build_user_report_pipeline, CUSTOMERS
from .snapshot import persist_snapshot


def _setting(key, default):
    if has_app_context():
        return current_app.config.get(key, default)
    return default


class CustomerReportService:
    """Customer accounts with order counts and non-cancelled spend."""

    TOP_CUSTOMERS_LIMIT = 10

    @staticmethod
    def summarize(users, now, new_customer_days=30):
        new_since = now - timedelta(days=new_customer_days)
        total = len(users)
        total_orders = sum(u.get("totalOrders") or 0 for u in users)

        def count(status):
            return sum(1 for u in users if u.get("actualStatus") == status)

        return {
            "totalCustomers": total,
            "activeCustomers": count(ACCOUNT_STATUS["ACTIVE"]),
            "inactiveCustomers": count(ACCOUNT_STATUS["INACTIVE"]),
            "blockedCustomers": count(ACCOUNT_STATUS["BLOCKED"]),
            "newCustomers": sum(
                1 for u in users
                if u.get("createdAt") and to_naive_utc(u["createdAt"]) >= new_since
            ),
            "totalRevenue": sum(u.get("totalSpent") or 0 for u in users),
            "averageOrdersPerCustomer": round(total_orders / total, 2) if total else 0,
        }

    @staticmethod
    def top_customers(users, limit=10):
        spenders = [u for u in users if (u.get("totalSpent") or 0) > 0]
        spenders.sort(key=lambda u: u["totalSpent"], reverse=True)
        return spenders[:limit]

    @staticmethod
    def generate(filters, admin_id=None, persist=True, now=None):
        """
        :param filters: dict loaded by CustomerReportQuerySchema
        :return: {summary, topCustomers, data}
        """
        log_tag = f"[customer_report_service.py][CustomerReportService][generate][admin:{admin_id}]"
        now = to_naive_utc(now) if now is not None else utc_now()

        try:
            parsed = parse_user_report_filters(filters, base_match={"role": {"$in": CUSTOMER_ROLES}})
            pipeline = build_user_report_pipeline(
                parsed,
                now,
                variant=CUSTOMERS,
                window_days=_setting("INACTIVITY_DAYS", 60),
            )
            users = User.aggregate(pipeline)

            summary = CustomerReportService.summarize(users, now, _setting("NEW_CUSTOMER_DAYS", 30))

            data = [
                {
                    "_id": u.get("_id"),
                    "name": u.get("name"),
                    "email": u.get("email"),
                    "phone": u.get("phone"),
                    "address": u.get("address"),
                    "status": u.get("actualStatus"),
                    "totalOrders": u.get("totalOrders") or 0,
                    "totalSpent": u.get("totalSpent") or 0,
                    "lastOrderDate": u.get("lastOrderDate"),
                    "lastLoginAt": u.get("lastLoginAt"),
                    "createdAt": u.get("createdAt"),
                }
                for u in users
            ]

            if persist:
                persist_snapshot("customers", summary, data, normalize_filters("customers", filters), admin_id)

            Log.info(f"{log_tag} completed: {len(users)} customers")
            return {
                "summary": summary,
                "topCustomers": CustomerReportService.top_customers(
                    users, CustomerReportService.TOP_CUSTOMERS_LIMIT
                ),
                "data": data,
            }
        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            raise

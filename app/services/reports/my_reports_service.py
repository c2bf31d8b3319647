# services/reports/my_reports_service.py
from pymongo.errors import DuplicateKeyError

from ...models.order_model import Order
from ...models.product_model import Product
from ...models.report_model import Report
from ...models.user_model import User
from ...utils.helpers import to_object_id, total_pages
from ...utils.logger import Log
from .filters import date_range


ORDER_SUMMARY_PROJECTION = {"orderNumber": 1, "orderStatus": 1, "totalAmount": 1}


def _populate_orders(reports, projection=None):
    orders = Order.find_by_ids([r.get("order") for r in reports], projection)
    for report in reports:
        report["order"] = orders.get(report.get("order"))
    return reports


def _populate_products(report):
    products = Product.find_by_ids(
        [item.get("product") for item in report.get("items") or []],
        Product.REFERENCE_PROJECTION,
    )
    for item in report.get("items") or []:
        if item.get("product") is not None:
            item["product"] = products.get(item["product"])
    return report


def my_reports(user_id, page=1, limit=10, status=None, report_type=None, start_date=None, end_date=None):
    """A customer's own order reports, newest first, with a slim order reference."""
    query = {"user": to_object_id(user_id)}
    if status:
        query["reportStatus"] = status
    if report_type:
        query["reportType"] = report_type
    generated = date_range(start_date, end_date)
    if generated:
        query["reportGeneratedAt"] = generated

    reports = _populate_orders(
        Report.find_page(query, (page - 1) * limit, limit), ORDER_SUMMARY_PROJECTION
    )
    total = Report.count(query)

    return {
        "count": len(reports),
        "totalReports": total,
        "totalPages": total_pages(total, limit),
        "currentPage": page,
        "reports": reports,
    }


def download_report(report_id, user_id):
    """
    Fetch one of the caller's reports and mark it Downloaded. Returns None
    when the report does not exist or belongs to someone else.
    """
    log_tag = f"[my_reports_service.py][download_report][{report_id}][user:{user_id}]"

    report = Report.get_for_user(report_id, user_id)
    if not report:
        return None

    report.update(Report.mark_downloaded(report["_id"]))
    Log.info(f"{log_tag} report marked as downloaded")

    _populate_orders([report])
    return _populate_products(report)


def generate_order_report(order_id, principal):
    """
    Report for one of the caller's orders, created once.

    :return: (report, created). report is None when the order does not exist
             or belongs to someone else; created is False when a report for
             the order already existed.
    """
    user_id = principal["id"]
    log_tag = f"[my_reports_service.py][generate_order_report][{order_id}][user:{user_id}]"

    order = Order.get_for_user(order_id, user_id)
    if not order:
        return None, False

    existing = Report.get_by_order(order["_id"])
    if existing:
        Log.info(f"{log_tag} report already exists: {existing['_id']}")
        return existing, False

    name, email = principal.get("name"), principal.get("email")
    if not (name and email):
        user = User.get_by_id(user_id, User.REFERENCE_PROJECTION) or {}
        name, email = name or user.get("name"), email or user.get("email")

    products = Product.find_by_ids(
        [item.get("product") for item in order.get("items") or []],
        {"name": 1},
    )
    report = Report(
        order,
        user_id,
        user_name=name,
        user_email=email,
        product_names={pid: p.get("name") for pid, p in products.items()},
    )

    try:
        report_id = report.save()
    except DuplicateKeyError:
        # a concurrent request created it first
        Log.info(f"{log_tag} report created concurrently, returning it")
        return Report.get_by_order(order["_id"]), False

    Log.info(f"{log_tag} report {report_id} generated with {len(report.items)} items")

    stored = report.to_dict()
    stored["_id"] = report_id
    return stored, True

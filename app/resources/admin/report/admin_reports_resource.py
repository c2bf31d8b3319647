# resources/admin/report/admin_reports_resource.py
from flask import g, request
from flask.views import MethodView
from flask_smorest import Blueprint
from marshmallow import ValidationError

from ....security.auth import admin_required
from ....utils.rate_limits import crud_read_limiter, crud_write_limiter
from ....schemas.report_schemas import (
    SalesReportQuerySchema, OrderReportQuerySchema, PaymentReportQuerySchema,
    StockReportQuerySchema, CustomerReportQuerySchema, GenerateReportSchema,
    ReportHistoryQuerySchema, REPORT_QUERY_SCHEMAS, INVALID_REPORT_TYPE,
    normalize_filters,
)
#services
from ....services.reports.sales_report_service import SalesReportService
from ....services.reports.order_report_service import OrderReportService
from ....services.reports.payment_report_service import PaymentReportService
from ....services.reports.stock_report_service import StockReportService
from ....services.reports.customer_report_service import CustomerReportService
from ....services.reports.report_generator import ReportGenerator
from ....models.generated_report_model import GeneratedReport

from ....utils.json_response import prepared_response
from ....utils.helpers import make_log_tag, is_valid_object_id
from ....utils.logger import Log


blp_reports = Blueprint("Admin Reports", __name__, description="Sales, order, payment, stock and customer reports")
blp_report_snapshots = Blueprint("Report Snapshots", __name__, description="Generated report snapshots and history")


def _principal():
    admin = g.get("current_admin", {}) or {}
    return admin.get("id"), admin.get("role")


def _report_response(report, message, breakdowns=()):
    extra = {key: report.get(key) for key in breakdowns}
    return prepared_response(
        status=True,
        status_code="OK",
        message=message,
        data=report.get("data"),
        summary=report.get("summary"),
        **extra,
    )


# ==================== SALES REPORT ====================

@blp_reports.route("/sales")
class SalesReportResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="sales_report")
    @blp_reports.arguments(SalesReportQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        """Sales totals, monthly breakdown and top products."""
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "admin_reports_resource.py",
            "SalesReportResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            date_from=query_args.get("date_from"),
            date_to=query_args.get("date_to"),
            status=query_args.get("status"),
        )

        try:
            Log.info(f"{log_tag} Generating sales report")
            report = SalesReportService.generate(query_args, admin_id=admin_id)
            Log.info(f"{log_tag} Sales report generated: {report['summary']['totalSales']} orders")
            return _report_response(report, "Sales report generated successfully", ("monthlySales", "topProducts"))

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch sales report",
                error=str(e),
            )


# ==================== ORDER REPORT ====================

@blp_reports.route("/orders")
class OrderReportResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="order_report")
    @blp_reports.arguments(OrderReportQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        """Orders with a per-status breakdown."""
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "admin_reports_resource.py",
            "OrderReportResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            search=query_args.get("search"),
            status=query_args.get("status"),
            payment_method=query_args.get("payment_method"),
        )

        try:
            report = OrderReportService.generate(query_args, admin_id=admin_id)
            Log.info(f"{log_tag} Order report generated: {report['summary']['totalOrders']} orders")
            return _report_response(report, "Order report generated successfully")

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch order report",
                error=str(e),
            )


# ==================== PAYMENT REPORT ====================

@blp_reports.route("/payments")
class PaymentReportResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="payment_report")
    @blp_reports.arguments(PaymentReportQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "admin_reports_resource.py",
            "PaymentReportResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            payment_method=query_args.get("payment_method"),
        )

        try:
            report = PaymentReportService.generate(query_args, admin_id=admin_id)
            Log.info(f"{log_tag} Payment report generated: {report['summary']['totalTransactions']} transactions")
            return _report_response(report, "Payment report generated successfully")

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch payment report",
                error=str(e),
            )


# ==================== STOCK REPORT ====================

@blp_reports.route("/stock")
class StockReportResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="stock_report")
    @blp_reports.arguments(StockReportQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "admin_reports_resource.py",
            "StockReportResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            category=query_args.get("category"),
            stock_status=query_args.get("stock_status"),
        )

        try:
            report = StockReportService.generate(query_args, admin_id=admin_id)
            Log.info(f"{log_tag} Stock report generated: {report['summary']['totalProducts']} products")
            return _report_response(report, "Stock report generated successfully", ("categoryBreakdown",))

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch stock report",
                error=str(e),
            )


# ==================== CUSTOMER REPORT ====================

@blp_reports.route("/customers")
class CustomerReportResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="customer_report")
    @blp_reports.arguments(CustomerReportQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "admin_reports_resource.py",
            "CustomerReportResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            account_status=query_args.get("account_status"),
            search=query_args.get("search"),
        )

        try:
            report = CustomerReportService.generate(query_args, admin_id=admin_id)
            Log.info(f"{log_tag} Customer report generated: {report['summary']['totalCustomers']} customers")
            return _report_response(report, "Customer report generated successfully", ("topCustomers",))

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch customer report",
                error=str(e),
            )


# ==================== SNAPSHOTS ====================

@blp_report_snapshots.route("/generate")
class GenerateReportResource(MethodView):

    @admin_required
    @crud_write_limiter(entity_name="generated_report")
    @blp_report_snapshots.arguments(GenerateReportSchema, location="json", error_status_code=400)
    def post(self, json_data):
        """Run a report now and store its snapshot."""
        admin_id, role = _principal()
        report_type = json_data["type"]
        log_tag = make_log_tag(
            "admin_reports_resource.py",
            "GenerateReportResource",
            "post",
            request.remote_addr,
            admin_id,
            role,
            type=report_type,
        )

        try:
            result = ReportGenerator.generate(report_type, json_data.get("filters"), admin_id=admin_id)
            if not result["reportId"]:
                Log.error(f"{log_tag} snapshot was not saved")
                return prepared_response(
                    status=False,
                    status_code="INTERNAL_SERVER_ERROR",
                    message="Failed to save generated report",
                    error="Report snapshot could not be stored",
                )

            Log.info(f"{log_tag} Report generated: {result['recordCount']} records")
            return prepared_response(
                status=True,
                status_code="CREATED",
                message=f"{report_type.capitalize()} report generated successfully",
                reportId=result["reportId"],
                summary=result["summary"],
                recordCount=result["recordCount"],
            )

        except ValidationError:
            # malformed filters go to the app-level 400 handler
            raise
        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to generate report",
                error=str(e),
            )


@blp_report_snapshots.route("/history/<string:report_type>")
class ReportHistoryResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="report_history")
    @blp_report_snapshots.arguments(ReportHistoryQuerySchema, location="query", error_status_code=400)
    def get(self, query_args, report_type):
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "admin_reports_resource.py",
            "ReportHistoryResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            type=report_type,
        )

        if report_type not in REPORT_QUERY_SCHEMAS:
            Log.info(f"{log_tag} invalid report type")
            return prepared_response(status=False, status_code="BAD_REQUEST", message=INVALID_REPORT_TYPE)

        try:
            history = GeneratedReport.get_history(report_type, query_args["limit"])
            return prepared_response(
                status=True,
                status_code="OK",
                message="Report history retrieved successfully",
                data=history,
                type=report_type,
                historyCount=len(history),
            )

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch report history",
                error=str(e),
            )


@blp_report_snapshots.route("/latest/<string:report_type>")
class LatestReportResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="report_latest")
    def get(self, report_type):
        """
        Newest snapshot generated with exactly these filters. The query string
        takes the same parameters as the live report of that type.
        """
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "admin_reports_resource.py",
            "LatestReportResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            type=report_type,
        )

        if report_type not in REPORT_QUERY_SCHEMAS:
            return prepared_response(status=False, status_code="BAD_REQUEST", message=INVALID_REPORT_TYPE)

        # ValidationError propagates to the app-level 400 handler
        query_args = REPORT_QUERY_SCHEMAS[report_type]().load(request.args.to_dict())

        try:
            report = GeneratedReport.get_latest(report_type, normalize_filters(report_type, query_args))
            if not report:
                Log.info(f"{log_tag} no snapshot for these filters")
                return prepared_response(status=False, status_code="NOT_FOUND", message="Report not found")

            return prepared_response(
                status=True,
                status_code="OK",
                message="Latest report retrieved successfully",
                data=report,
            )

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch report",
                error=str(e),
            )


@blp_report_snapshots.route("/generated/<string:report_id>")
class GeneratedReportResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="generated_report")
    def get(self, report_id):
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "admin_reports_resource.py",
            "GeneratedReportResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            report_id=report_id,
        )

        if not is_valid_object_id(report_id):
            return prepared_response(status=False, status_code="BAD_REQUEST", message="Invalid report ID")

        report = GeneratedReport.get_report(report_id)
        if not report:
            Log.info(f"{log_tag} report not found")
            return prepared_response(status=False, status_code="NOT_FOUND", message="Report not found")

        return prepared_response(
            status=True,
            status_code="OK",
            message="Report retrieved successfully",
            data=report,
        )

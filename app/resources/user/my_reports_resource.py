# resources/user/my_reports_resource.py
from flask import g, request
from flask.views import MethodView
from flask_smorest import Blueprint

from ...security.auth import login_required
from ...utils.rate_limits import crud_read_limiter, crud_write_limiter
from ...schemas.report_message_schema import MyOrdersQuerySchema, MyMessagesQuerySchema, MyReportsQuerySchema
from ...services.reports.my_orders_service import my_orders
from ...services.reports import my_reports_service
from ...services.reports.report_message_service import ReportMessageService
from ...utils.json_response import prepared_response
from ...utils.helpers import make_log_tag, is_valid_object_id
from ...utils.logger import Log


blp_my_reports = Blueprint("My Reports", __name__, description="Customer's own orders, order reports and report messages")


def _log_tag(resource, method, **kwargs):
    user = g.get("current_user", {}) or {}
    return make_log_tag(
        "my_reports_resource.py",
        resource,
        method,
        request.remote_addr,
        user.get("id"),
        user.get("role"),
        **kwargs,
    )


@blp_my_reports.route("")
class MyReportsResource(MethodView):

    @login_required
    @crud_read_limiter(entity_name="my_reports")
    @blp_my_reports.arguments(MyReportsQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        """The caller's own order reports, newest first."""
        log_tag = _log_tag("MyReportsResource", "get", page=query_args["page"])

        try:
            result = my_reports_service.my_reports(
                g.current_user["id"],
                page=query_args["page"],
                limit=query_args["limit"],
                status=query_args.get("status"),
                report_type=query_args.get("report_type"),
                start_date=query_args.get("start_date"),
                end_date=query_args.get("end_date"),
            )
            return prepared_response(
                status=True,
                status_code="OK",
                message="Reports retrieved successfully",
                **result,
            )

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch reports",
                error=str(e),
            )


@blp_my_reports.route("/orders")
class MyOrdersResource(MethodView):

    @login_required
    @crud_read_limiter(entity_name="my_orders")
    @blp_my_reports.arguments(MyOrdersQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        user_id = g.current_user["id"]
        log_tag = _log_tag("MyOrdersResource", "get", page=query_args["page"])

        try:
            result = my_orders(
                user_id,
                page=query_args["page"],
                limit=query_args["limit"],
                status=query_args.get("status"),
                start_date=query_args.get("start_date"),
                end_date=query_args.get("end_date"),
            )
            return prepared_response(
                status=True,
                status_code="OK",
                message="Orders retrieved successfully",
                **result,
            )

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch orders",
                error=str(e),
            )


@blp_my_reports.route("/messages")
class MyMessagesResource(MethodView):

    @login_required
    @crud_read_limiter(entity_name="my_messages")
    @blp_my_reports.arguments(MyMessagesQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        """Report messages addressed to the caller."""
        log_tag = _log_tag("MyMessagesResource", "get")

        filters = dict(query_args)
        filters["user_id"] = g.current_user["id"]

        try:
            result = ReportMessageService.list_page(
                filters, page=query_args["page"], limit=query_args["limit"]
            )
            return prepared_response(
                status=True,
                status_code="OK",
                message="Report messages retrieved successfully",
                **result,
            )

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch report messages",
                error=str(e),
            )


@blp_my_reports.route("/messages/<string:message_id>/read")
class MarkMessageReadResource(MethodView):

    @login_required
    @crud_write_limiter(entity_name="my_messages")
    def patch(self, message_id):
        log_tag = _log_tag("MarkMessageReadResource", "patch", message_id=message_id)

        if not is_valid_object_id(message_id):
            return prepared_response(status=False, status_code="BAD_REQUEST", message="Invalid message ID")

        try:
            updated = ReportMessageService.mark_read(message_id, g.current_user["id"])
            if not updated:
                return prepared_response(status=False, status_code="NOT_FOUND", message="Message not found")

            Log.info(f"{log_tag} message marked as read")
            return prepared_response(status=True, status_code="OK", message="Message marked as read")

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to update message",
                error=str(e),
            )


@blp_my_reports.route("/download/<string:report_id>")
class DownloadMyReportResource(MethodView):

    @login_required
    @crud_write_limiter(entity_name="my_reports")
    def get(self, report_id):
        log_tag = _log_tag("DownloadMyReportResource", "get", report_id=report_id)

        if not is_valid_object_id(report_id):
            return prepared_response(status=False, status_code="BAD_REQUEST", message="Invalid report ID")

        try:
            report = my_reports_service.download_report(report_id, g.current_user["id"])
            if not report:
                Log.info(f"{log_tag} report not found for caller")
                return prepared_response(
                    status=False,
                    status_code="NOT_FOUND",
                    message="Report not found or you do not have access",
                )

            return prepared_response(
                status=True,
                status_code="OK",
                message="Report downloaded successfully",
                report=report,
            )

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to download report",
                error=str(e),
            )


@blp_my_reports.route("/generate/<string:order_id>")
class GenerateMyReportResource(MethodView):

    @login_required
    @crud_write_limiter(entity_name="my_reports")
    def post(self, order_id):
        """
        Report for one of the caller's orders. Asking again for the same
        order returns the stored report with 200 instead of 201.
        """
        log_tag = _log_tag("GenerateMyReportResource", "post", order_id=order_id)

        if not is_valid_object_id(order_id):
            return prepared_response(status=False, status_code="BAD_REQUEST", message="Invalid order ID")

        try:
            report, created = my_reports_service.generate_order_report(order_id, g.current_user)
            if not report:
                Log.info(f"{log_tag} order not found for caller")
                return prepared_response(
                    status=False,
                    status_code="NOT_FOUND",
                    message="Order not found or you do not have access",
                )

            if not created:
                return prepared_response(
                    status=True,
                    status_code="OK",
                    message="Report already exists",
                    report=report,
                )

            return prepared_response(
                status=True,
                status_code="CREATED",
                message="Report generated successfully",
                report=report,
            )

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to generate report",
                error=str(e),
            )

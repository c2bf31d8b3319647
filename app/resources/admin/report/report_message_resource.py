# resources/admin/report/report_message_resource.py
from flask import g, request
from flask.views import MethodView
from flask_smorest import Blueprint

from ....security.auth import admin_required
from ....utils.rate_limits import crud_read_limiter, crud_write_limiter
from ....schemas.report_message_schema import ReportMessageSchema, ReportMessagesQuerySchema
from ....services.reports.report_message_service import ReportMessageService
from ....utils.json_response import prepared_response
from ....utils.helpers import make_log_tag
from ....utils.logger import Log


blp_report_messages = Blueprint("Report Messages", __name__, description="Admin report messages to customers")


def _send_message(json_data, resource_name):
    admin = g.get("current_admin", {}) or {}
    admin_id = admin.get("id")
    log_tag = make_log_tag(
        "report_message_resource.py",
        resource_name,
        "post",
        request.remote_addr,
        admin_id,
        admin.get("role"),
        user_id=json_data.get("user_id"),
        status=json_data.get("status"),
    )

    try:
        message = ReportMessageService.send(json_data, admin_id=admin_id)
        if message is None:
            return prepared_response(status=False, status_code="NOT_FOUND", message="User not found")

        Log.info(f"{log_tag} report message sent")
        return prepared_response(
            status=True,
            status_code="CREATED",
            message="Report message sent successfully",
            reportMessage=message,
        )

    except Exception as e:
        Log.error(f"{log_tag} Error: {str(e)}")
        return prepared_response(
            status=False,
            status_code="INTERNAL_SERVER_ERROR",
            message="Failed to send report message",
            error=str(e),
        )


@blp_report_messages.route("/send")
class SendReportMessageResource(MethodView):

    @admin_required
    @crud_write_limiter(entity_name="report_message")
    @blp_report_messages.arguments(ReportMessageSchema, location="json", error_status_code=400)
    def post(self, json_data):
        return _send_message(json_data, "SendReportMessageResource")


@blp_report_messages.route("/send-message")
class SendReportMessageAliasResource(MethodView):

    @admin_required
    @crud_write_limiter(entity_name="report_message")
    @blp_report_messages.arguments(ReportMessageSchema, location="json", error_status_code=400)
    def post(self, json_data):
        return _send_message(json_data, "SendReportMessageAliasResource")


@blp_report_messages.route("/messages")
class ReportMessagesResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="report_message")
    @blp_report_messages.arguments(ReportMessagesQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        """Every report message, newest first."""
        admin = g.get("current_admin", {}) or {}
        log_tag = make_log_tag(
            "report_message_resource.py",
            "ReportMessagesResource",
            "get",
            request.remote_addr,
            admin.get("id"),
            admin.get("role"),
            user_id=query_args.get("user_id"),
            status=query_args.get("status"),
        )

        try:
            result = ReportMessageService.list_page(
                query_args, page=query_args["page"], limit=query_args["limit"]
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

# resources/admin/report/user_reports_resource.py
from flask import g, request, Response
from flask.views import MethodView
from flask_smorest import Blueprint

from ....security.auth import admin_required
from ....utils.rate_limits import crud_read_limiter, export_limiter
from ....schemas.report_schemas import (
    UsersPageQuerySchema, UserReportQuerySchema, UserFullReportQuerySchema,
)
from ....services.reports import user_report_service
from ....services.reports.export_service import (
    build_users_csv, build_users_workbook, export_filename, CSV_MIMETYPE, XLSX_MIMETYPE,
)
from ....utils.json_response import prepared_response
from ....utils.helpers import make_log_tag, is_valid_object_id
from ....utils.logger import Log


blp_user_reports = Blueprint("User Reports", __name__, description="Per-user reporting and exports")


def _principal():
    admin = g.get("current_admin", {}) or {}
    return admin.get("id"), admin.get("role")


def _attachment(body, mimetype, filename):
    return Response(
        body,
        mimetype=mimetype,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@blp_user_reports.route("/users")
class UsersForReportsResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="user_report")
    @blp_user_reports.arguments(UsersPageQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        """Paginated users with order totals and effective account status."""
        admin_id, role = _principal()
        page = query_args.get("page", 1)
        limit = query_args["limit"]

        log_tag = make_log_tag(
            "user_reports_resource.py",
            "UsersForReportsResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            page=page,
            limit=limit,
            account_status=query_args.get("account_status"),
        )

        try:
            result = user_report_service.list_users(query_args, page=page, limit=limit)
            Log.info(f"{log_tag} {len(result['users'])} of {result['totalUsers']} users")
            return prepared_response(
                status=True,
                status_code="OK",
                message="Users retrieved successfully",
                **result,
            )

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch users",
                error=str(e),
            )


@blp_user_reports.route("/user/<string:user_id>")
class UserFullReportResource(MethodView):

    @admin_required
    @crud_read_limiter(entity_name="user_full_report")
    @blp_user_reports.arguments(UserFullReportQuerySchema, location="query", error_status_code=400)
    def get(self, query_args, user_id):
        """Orders, payments, invoices and reviews of one user."""
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "user_reports_resource.py",
            "UserFullReportResource",
            "get",
            request.remote_addr,
            admin_id,
            role,
            user_id=user_id,
            status=query_args.get("status"),
        )

        if not is_valid_object_id(user_id):
            Log.info(f"{log_tag} invalid user id")
            return prepared_response(status=False, status_code="BAD_REQUEST", message="Invalid user ID")

        try:
            report = user_report_service.full_report(
                user_id,
                date_from=query_args.get("date_from"),
                date_to=query_args.get("date_to"),
                status=query_args.get("status"),
            )
            if report is None:
                return prepared_response(status=False, status_code="NOT_FOUND", message="User not found")

            return prepared_response(
                status=True,
                status_code="OK",
                message="User report retrieved successfully",
                **report,
            )

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to fetch user report data",
                error=str(e),
            )


@blp_user_reports.route("/export/csv")
class ExportUsersCsvResource(MethodView):

    @admin_required
    @export_limiter(entity_name="user_report")
    @blp_user_reports.arguments(UserReportQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "user_reports_resource.py", "ExportUsersCsvResource", "get",
            request.remote_addr, admin_id, role,
        )

        try:
            users = user_report_service.export_rows(query_args)
            Log.info(f"{log_tag} exporting {len(users)} users as csv")
            return _attachment(build_users_csv(users), CSV_MIMETYPE, export_filename("csv"))

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to export users CSV",
                error=str(e),
            )


@blp_user_reports.route("/export/excel")
class ExportUsersExcelResource(MethodView):

    @admin_required
    @export_limiter(entity_name="user_report")
    @blp_user_reports.arguments(UserReportQuerySchema, location="query", error_status_code=400)
    def get(self, query_args):
        admin_id, role = _principal()
        log_tag = make_log_tag(
            "user_reports_resource.py", "ExportUsersExcelResource", "get",
            request.remote_addr, admin_id, role,
        )

        try:
            users = user_report_service.export_rows(query_args)
            Log.info(f"{log_tag} exporting {len(users)} users as xlsx")
            return _attachment(build_users_workbook(users), XLSX_MIMETYPE, export_filename("xlsx"))

        except Exception as e:
            Log.error(f"{log_tag} Error: {str(e)}")
            return prepared_response(
                status=False,
                status_code="INTERNAL_SERVER_ERROR",
                message="Failed to export users Excel",
                error=str(e),
            )

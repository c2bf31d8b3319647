#Admin Report Resources
from .admin.report.admin_reports_resource import (
    blp_reports,
    blp_report_snapshots,
)
from .admin.report.user_reports_resource import blp_user_reports
from .admin.report.report_message_resource import blp_report_messages

#Customer Resources
from .user.my_reports_resource import blp_my_reports

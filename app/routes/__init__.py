#Blueprints for Admin only
from ..resources import (
    blp_reports,
    blp_report_snapshots,
    blp_user_reports,
    blp_report_messages,
)

# Blueprints for customers
from ..resources import blp_my_reports


ADMIN_REPORTS_PREFIX = "/api/admin/reports"
USER_REPORTS_PREFIX = "/api/user/reports"


# Admin Routes
def register_admin_routes(app, api):
    blueprints = [
        blp_reports,
        blp_report_snapshots,
        blp_user_reports,
        blp_report_messages,
    ]

    for blueprint in blueprints:
        api.register_blueprint(blueprint, url_prefix=ADMIN_REPORTS_PREFIX)

    # Root route
    @app.route('/')
    def index():
        return {"message": "Welcome to the Electric Shop Reports API"}


# Customer Routes
def register_user_routes(app, api):
    api.register_blueprint(blp_my_reports, url_prefix=USER_REPORTS_PREFIX)

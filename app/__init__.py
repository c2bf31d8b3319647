from flask import Flask
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix
from marshmallow import ValidationError
from bson.errors import InvalidId
from flask_smorest import Api
from flask_limiter.errors import RateLimitExceeded


from .utils.extensions import limiter
from .extensions import db, cors
#indexes
from .utils.database_setup import setup_database_indexes

from .config import load_config
from .routes import (
    register_admin_routes,
    register_user_routes,
)
from .utils.error_handlers import (
    handle_permission_error, handle_validation_error, handle_invalid_id,
    handle_http_error, handle_rate_limit
)
from .utils.json_provider import MongoJSONProvider
from .utils.logger import Log
from .scripts.cleanup_reports import cleanup_reports_command, create_indexes_command


# instantiate admin reports app
def create_admin_app(config_overrides=None):
    app = Flask(__name__)
    app.json_provider_class = MongoJSONProvider
    app.json = MongoJSONProvider(app)

    #get actual client IP
    app.wsgi_app = ProxyFix(
        app.wsgi_app,
        x_for=1,      # Trust X-Forwarded-For
        x_proto=1,    # Trust X-Forwarded-Proto
        x_host=1,     # Trust X-Forwarded-Host
        x_port=1,     # Trust X-Forwarded-Port
        x_prefix=1    # Trust X-Forwarded-Prefix
    )

    # Load configuration (ensure it does NOT override Flask-Smorest keys)
    load_config(app, config_overrides)

    app.config["API_TITLE"] = "Electric Shop Reports API"
    app.config["API_VERSION"] = "v1"
    app.config["OPENAPI_VERSION"] = "3.0.3"
    # The base prefix MUST match how it's mounted
    app.config["OPENAPI_URL_PREFIX"] = "/api"
    app.config["OPENAPI_JSON_PATH"] = "openapi.json"
    app.config["OPENAPI_SWAGGER_UI_PATH"] = "/docs"
    app.config["OPENAPI_SWAGGER_UI_URL"] = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"

    # Limiter reads RATELIMIT_* from config, so it comes after load_config
    limiter.init_app(app)

    api = Api(app)

    # Initialize all extensions
    db.init_app(app)
    cors.init_app(app, origins=app.config.get("ALLOWED_ORIGINS") or "*")

    #Setup database indexes (first run only)
    if not app.config.get("TESTING"):
        with app.app_context():
            setup_database_indexes()

    # Register custom error handlers
    app.errorhandler(PermissionError)(handle_permission_error)
    app.errorhandler(ValidationError)(handle_validation_error)
    app.errorhandler(InvalidId)(handle_invalid_id)
    app.errorhandler(RateLimitExceeded)(handle_rate_limit)
    app.errorhandler(HTTPException)(handle_http_error)

    # Register all blueprints using `api.register_blueprint(...)`
    register_admin_routes(app, api)
    register_user_routes(app, api)

    # Maintenance commands: `flask cleanup-reports --days 90`, `flask create-indexes`
    app.cli.add_command(cleanup_reports_command)
    app.cli.add_command(create_indexes_command)

    Log.info(f"[__init__.py][create_admin_app] app created env={app.config.get('ENV_NAME')}")
    return app

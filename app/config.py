from dotenv import load_dotenv
load_dotenv()  # Load environment variables from .env file

import os


class Config:
    """Base configuration class."""
    APP_NAME = os.getenv("APP_NAME", "Electric Shop Admin API")

    SECRET_KEY = os.getenv("SECRET_KEY", "your_default_secret_key")
    JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
    DEBUG = os.getenv("FLASK_DEBUG", "False") == "True"
    TESTING = False

    # ========================================
    # DATABASE
    # ========================================
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/electric_shop")
    DB_NAME = os.getenv("DB_NAME", "electric_shop")
    MONGO_MAX_POOL_SIZE = int(os.getenv("MONGO_MAX_POOL_SIZE", 10))
    MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", 10000))

    # ========================================
    # HTTP
    # ========================================
    ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "True") == "True"

    # ========================================
    # REPORTING
    # ========================================
    REPORT_TTL_DAYS = int(os.getenv("REPORT_TTL_DAYS", 30))
    REPORT_CLEANUP_DAYS = int(os.getenv("REPORT_CLEANUP_DAYS", 90))
    INACTIVITY_DAYS = int(os.getenv("INACTIVITY_DAYS", 60))
    NEW_CUSTOMER_DAYS = int(os.getenv("NEW_CUSTOMER_DAYS", 30))
    LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", 10))
    USERS_PAGE_SIZE = int(os.getenv("USERS_PAGE_SIZE", 15))


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    MONGO_URI = os.getenv("TEST_MONGO_URI", "mongodb://localhost:27017/electric_shop_test")
    DB_NAME = os.getenv("TEST_DB_NAME", "electric_shop_test")
    RATELIMIT_ENABLED = False
    SECRET_KEY = "test-secret"
    JWT_SECRET = "test-secret"


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    MONGO_URI = os.getenv("PROD_MONGO_URI", os.getenv("MONGO_URI", "mongodb://localhost:27017/electric_shop"))


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def load_config(app, overrides=None):
    load_dotenv()
    app_env = os.getenv("APP_ENV", "development")
    app.config.from_object(CONFIG_BY_ENV.get(app_env, DevelopmentConfig))
    app.config["ENV_NAME"] = app_env

    if overrides:
        app.config.update(overrides)

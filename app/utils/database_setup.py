# utils/database_setup.py

import os
from pathlib import Path
from ..models.user_model import User
from ..models.order_model import Order
from ..models.product_model import Product
from ..models.generated_report_model import GeneratedReport
from ..models.report_message_model import ReportMessage
from ..models.report_model import Report
from ..utils.logger import Log

INDEXES_CREATED_FLAG = os.getenv("INDEXES_CREATED_FLAG", ".indexes_created")


def should_create_indexes():
    """Check if indexes have already been created."""
    return not os.path.exists(INDEXES_CREATED_FLAG)


def mark_indexes_created():
    """Mark that indexes have been created."""
    Path(INDEXES_CREATED_FLAG).touch()


def setup_database_indexes(force=False):
    """
    Create database indexes on first run, including the TTL index that
    expires report snapshots. This runs automatically when the app starts.
    """

    log_tag = "[database_setup.py][setup_database_indexes]"

    if not force and not should_create_indexes():
        Log.info(f"{log_tag} Indexes already created, skipping...")
        return False

    Log.info(f"{log_tag} Creating database indexes...")

    results = [
        model.create_indexes()
        for model in (User, Order, Product, GeneratedReport, ReportMessage, Report)
    ]

    if all(results):
        mark_indexes_created()
        Log.info(f"{log_tag} All indexes created successfully")
        return True

    Log.error(f"{log_tag} Some indexes could not be created; will retry on next start")
    return False

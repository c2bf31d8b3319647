# models/generated_report_model.py
from datetime import timedelta

from flask import current_app, has_app_context
from pymongo import DESCENDING

from ..models.base_model import BaseModel
from ..utils.helpers import utc_now, to_object_id, is_valid_object_id
from ..utils.logger import Log


DEFAULT_TTL_DAYS = 30


def _ttl_days():
    if has_app_context():
        return current_app.config.get("REPORT_TTL_DAYS", DEFAULT_TTL_DAYS)
    return DEFAULT_TTL_DAYS


class GeneratedReport(BaseModel):
    """
    Snapshot of a generated report: summary, full rows and the filters that
    produced them. Written once, never updated; a TTL index on ``expiresAt``
    removes snapshots after REPORT_TTL_DAYS.

    Every method here logs and swallows its own errors. Callers treat the
    snapshot store as best-effort.
    """

    collection_name = "generated_reports"

    HISTORY_PROJECTION = {
        "type": 1,
        "summary": 1,
        "generatedAt": 1,
        "recordCount": 1,
        "filters": 1,
    }

    def __init__(self, report_type, summary, data, filters=None, generated_by=None):
        super().__init__()
        self.type = report_type
        self.summary = summary or {}
        self.data = data or []
        self.filters = filters or {}
        # principals minted outside the storefront may carry non-ObjectId ids
        if is_valid_object_id(generated_by):
            self.generated_by = to_object_id(generated_by)
        else:
            self.generated_by = str(generated_by) if generated_by else None
        self.generated_at = self.created_at
        self.record_count = len(data) if isinstance(data, list) else 0
        self.expires_at = self.generated_at + timedelta(days=_ttl_days())

    def to_dict(self):
        return {
            "type": self.type,
            "summary": self.summary,
            "data": self.data,
            "filters": self.filters,
            "generatedAt": self.generated_at,
            "generatedBy": self.generated_by,
            "recordCount": self.record_count,
            "expiresAt": self.expires_at,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def save_report(cls, report_type, summary, data, filters=None, admin_id=None):
        """
        Insert one snapshot. Returns the new id as a string, or None when
        the write failed.
        """
        log_tag = f"[generated_report_model.py][GeneratedReport][save_report][{report_type}]"
        try:
            report = cls(report_type, summary, data, filters=filters, generated_by=admin_id)
            report_id = report.save()
            Log.info(f"{log_tag} Report saved: {report.record_count} records, id={report_id}")
            return report_id
        except Exception as e:
            Log.error(f"{log_tag} Failed to save report: {str(e)}")
            return None

    @classmethod
    def get_latest(cls, report_type, filters=None):
        """
        Newest snapshot whose stored filters are exactly ``filters``.
        Matching is structural equality on the whole filters document.
        """
        log_tag = f"[generated_report_model.py][GeneratedReport][get_latest][{report_type}]"
        try:
            # an unfiltered lookup only matches unfiltered snapshots
            query = {"type": report_type, "filters": filters or {}}
            return cls.get_collection().find_one(query, sort=[("generatedAt", DESCENDING)])
        except Exception as e:
            Log.error(f"{log_tag} Failed to fetch latest report: {str(e)}")
            return None

    @classmethod
    def get_history(cls, report_type, limit=10):
        """Most recent summaries for a type, without row data."""
        log_tag = f"[generated_report_model.py][GeneratedReport][get_history][{report_type}]"
        try:
            cursor = (
                cls.get_collection()
                .find({"type": report_type}, cls.HISTORY_PROJECTION)
                .sort("generatedAt", DESCENDING)
                .limit(int(limit))
            )
            return list(cursor)
        except Exception as e:
            Log.error(f"{log_tag} Failed to fetch report history: {str(e)}")
            return []

    @classmethod
    def cleanup_old_reports(cls, days_old=90):
        """Delete snapshots generated more than ``days_old`` days ago."""
        log_tag = "[generated_report_model.py][GeneratedReport][cleanup_old_reports]"
        try:
            cutoff = utc_now() - timedelta(days=days_old)
            result = cls.get_collection().delete_many({"generatedAt": {"$lt": cutoff}})
            Log.info(f"{log_tag} Cleaned up {result.deleted_count} reports older than {days_old} days")
            return result.deleted_count
        except Exception as e:
            Log.error(f"{log_tag} Failed to cleanup old reports: {str(e)}")
            return 0

    @classmethod
    def get_report(cls, report_id):
        log_tag = f"[generated_report_model.py][GeneratedReport][get_report][{report_id}]"
        try:
            return cls.get_by_id(report_id)
        except Exception as e:
            Log.error(f"{log_tag} Failed to fetch report: {str(e)}")
            return None

    @classmethod
    def create_indexes(cls):
        log_tag = "[generated_report_model.py][GeneratedReport][create_indexes]"
        try:
            collection = cls.get_collection()
            collection.create_index([("type", 1), ("generatedAt", -1)])
            collection.create_index([("type", 1), ("createdAt", -1)])
            collection.create_index([("expiresAt", 1)], expireAfterSeconds=0)
            Log.info(f"{log_tag} Indexes created successfully")
            return True
        except Exception as e:
            Log.error(f"{log_tag} Error creating indexes: {str(e)}")
            return False

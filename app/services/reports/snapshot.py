# services/reports/snapshot.py
from ...models.generated_report_model import GeneratedReport
from ...utils.background import run_bg
from ...utils.logger import Log


def _save(report_type, summary, data, filters, admin_id):
    report_id = GeneratedReport.save_report(report_type, summary, data, filters, admin_id)
    if report_id is None:
        Log.warning(f"[snapshot.py][persist_snapshot][{report_type}] snapshot not saved, continuing")
    return report_id


def persist_snapshot(report_type, summary, data, filters=None, admin_id=None):
    """
    Schedule a snapshot write off the request path. Failures are logged by
    the model and the background runner; the caller never sees them.
    """
    try:
        return run_bg(_save, report_type, summary, data, filters or {}, admin_id)
    except Exception as e:
        Log.error(f"[snapshot.py][persist_snapshot][{report_type}] could not schedule snapshot: {str(e)}")
        return None

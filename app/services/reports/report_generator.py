# services/reports/report_generator.py
from ...models.generated_report_model import GeneratedReport
from ...schemas.report_schemas import REPORT_QUERY_SCHEMAS, normalize_filters
from ...utils.logger import Log
from .customer_report_service import CustomerReportService
from .order_report_service import OrderReportService
from .payment_report_service import PaymentReportService
from .sales_report_service import SalesReportService
from .stock_report_service import StockReportService


class ReportGenerator:
    """On-demand report generation with a synchronous snapshot save."""

    SERVICES = {
        "sales": SalesReportService,
        "orders": OrderReportService,
        "payments": PaymentReportService,
        "stock": StockReportService,
        "customers": CustomerReportService,
    }

    @staticmethod
    def load_filters(report_type, raw_filters):
        """
        Validate the free-form ``filters`` body with the report's query
        schema. Raises marshmallow.ValidationError on malformed values.
        """
        schema = REPORT_QUERY_SCHEMAS[report_type]()
        return schema.load(raw_filters or {})

    @staticmethod
    def generate(report_type, raw_filters=None, admin_id=None):
        """
        :return: {reportId, summary, recordCount}; reportId is None when the
                 snapshot could not be saved.
        """
        log_tag = f"[report_generator.py][ReportGenerator][generate][{report_type}][admin:{admin_id}]"

        service = ReportGenerator.SERVICES[report_type]
        filters = ReportGenerator.load_filters(report_type, raw_filters)

        report = service.generate(filters, admin_id=admin_id, persist=False)
        data = report.get("data") or []

        report_id = GeneratedReport.save_report(
            report_type,
            report.get("summary"),
            data,
            normalize_filters(report_type, filters),
            admin_id,
        )

        Log.info(f"{log_tag} generated {len(data)} records, reportId={report_id}")

        return {
            "reportId": report_id,
            "summary": report.get("summary"),
            "recordCount": len(data),
        }

# services/reports/export_service.py
import csv
import io

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from ...utils.helpers import iso_day
from .formatters import format_currency, format_date


CSV_MIMETYPE = "text/csv; charset=utf-8"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, row key, column width)
USER_EXPORT_COLUMNS = (
    ("User Name", "name", 28),
    ("Email", "email", 30),
    ("Account Status", "status", 16),
    ("Total Orders", "totalOrders", 14),
    ("Total Amount Spent", "totalAmountSpent", 20),
    ("Last Order Date", "lastOrder", 16),
)

SHEET_TITLE = "User Reports"


def user_export_row(user):
    """
    Shape one aggregated user (already merged with its actual status) into
    the columns shared by the CSV and spreadsheet exports.
    """
    return {
        "name": user.get("name") or "Unknown User",
        "email": user.get("email") or "",
        "status": user.get("actualStatus") or "ACTIVE",
        "totalOrders": user.get("totalOrders") or 0,
        "totalAmountSpent": format_currency(user.get("totalAmountSpent") or 0),
        "lastOrder": format_date(user.get("lastOrder")),
    }


def build_users_csv(users):
    """Every value quoted, with a leading UTF-8 BOM."""
    output = io.StringIO()
    output.write("\ufeff")

    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([header for header, _, _ in USER_EXPORT_COLUMNS])
    for user in users:
        row = user_export_row(user)
        writer.writerow([row[key] for _, key, _ in USER_EXPORT_COLUMNS])

    return output.getvalue()


def build_users_workbook(users):
    """Single-sheet workbook with a bold header row. Returns the xlsx bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    header_font = Font(bold=True)
    for col, (header, _, width) in enumerate(USER_EXPORT_COLUMNS, start=1):
        ws.cell(row=1, column=col, value=header).font = header_font
        ws.column_dimensions[get_column_letter(col)].width = width

    for user in users:
        row = user_export_row(user)
        ws.append([row[key] for _, key, _ in USER_EXPORT_COLUMNS])

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def export_filename(extension, day=None):
    return f"user-reports-{iso_day(day)}.{extension}"

# services/reports/formatters.py
from datetime import datetime, date


def format_currency(amount):
    """Indian rupee with en-IN digit grouping, e.g. 1234567.5 -> ₹12,34,567.50"""
    try:
        amount = float(amount or 0)
    except (TypeError, ValueError):
        amount = 0.0

    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    return f"{sign}₹{whole}.{fraction}"


def format_date(value):
    """``DD Mon YYYY`` or ``N/A``."""
    if not value:
        return "N/A"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return "N/A"
    if not isinstance(value, (datetime, date)):
        return "N/A"
    return value.strftime("%d %b %Y")


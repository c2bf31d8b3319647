import re
from datetime import date, datetime

import pytest
from marshmallow import ValidationError

from app.schemas.report_schemas import (
    SalesReportQuerySchema,
    StockReportQuerySchema,
    UserReportQuerySchema,
    UsersPageQuerySchema,
    GenerateReportSchema,
    normalize_filters,
)
from app.services.reports.filters import (
    text_search,
    date_range,
    numeric_range,
    parse_user_report_filters,
    build_order_filters,
    build_stock_filters,
)


def test_text_search_is_escaped_and_case_insensitive():
    clause = text_search("a+b (x)", ["name", "email"])

    assert [list(c) for c in clause["$or"]] == [["name"], ["email"]]
    pattern = clause["$or"][0]["name"]
    assert pattern["$options"] == "i"
    assert re.search(pattern["$regex"], "Mr A+B (X) Jr", re.IGNORECASE)
    assert not re.search(pattern["$regex"], "aab x", re.IGNORECASE)


def test_absent_inputs_produce_no_constraint():
    assert text_search("", ["name"]) == {}
    assert text_search(None, ["name"]) == {}
    assert date_range(None, None) == {}
    assert numeric_range(None, None) == {}


def test_date_to_covers_whole_day():
    predicate = date_range(date(2025, 3, 1), date(2025, 3, 31))
    assert predicate["$gte"] == datetime(2025, 3, 1, 0, 0, 0)
    assert predicate["$lte"] == datetime(2025, 3, 31, 23, 59, 59, 999000)
    assert datetime(2025, 3, 31, 23, 59, 59) <= predicate["$lte"]


def test_numeric_range_keeps_zero():
    assert numeric_range(0, 10) == {"$gte": 0, "$lte": 10}


def test_blank_query_values_are_ignored():
    loaded = SalesReportQuerySchema().load({"minAmount": "", "status": "  ", "dateTo": "2025-01-31"})
    assert loaded == {"date_to": date(2025, 1, 31)}


@pytest.mark.parametrize("args", [
    {"minAmount": "abc"},
    {"dateFrom": "31/01/2025"},
    {"dateFrom": "2025-02-01", "dateTo": "2025-01-01"},
    {"minAmount": "-5"},
])
def test_malformed_values_fail_loudly(args):
    with pytest.raises(ValidationError):
        SalesReportQuerySchema().load(args)


def test_account_status_is_upper_cased_and_validated():
    assert UserReportQuerySchema().load({"accountStatus": "inactive"})["account_status"] == "INACTIVE"
    with pytest.raises(ValidationError):
        UserReportQuerySchema().load({"accountStatus": "sleeping"})


def test_users_page_defaults(app_ctx):
    loaded = UsersPageQuerySchema().load({})
    assert loaded["page"] == 1
    assert loaded["limit"] == 15


def test_users_page_size_comes_from_config(app_ctx, monkeypatch):
    monkeypatch.setitem(app_ctx.config, "USERS_PAGE_SIZE", 5)

    assert UsersPageQuerySchema().load({})["limit"] == 5
    assert UsersPageQuerySchema().load({"limit": "40"})["limit"] == 40


def test_stock_status_must_be_known():
    with pytest.raises(ValidationError):
        StockReportQuerySchema().load({"stockStatus": "some"})


def test_generate_schema_messages():
    with pytest.raises(ValidationError) as missing:
        GenerateReportSchema().load({})
    assert missing.value.messages["type"] == ["Report type is required"]

    with pytest.raises(ValidationError) as invalid:
        GenerateReportSchema().load({"type": "refunds"})
    assert invalid.value.messages["type"][0].startswith("Invalid report type")


def test_parse_user_report_filters():
    args = UserReportQuerySchema().load({
        "search": "ravi",
        "dateFrom": "2025-01-01",
        "minOrders": "2",
        "maxAmount": "5000",
        "accountStatus": "active",
    })
    parsed = parse_user_report_filters(args, base_match={"role": {"$in": ["customer"]}})

    assert parsed.match["role"] == {"$in": ["customer"]}
    assert "$or" in parsed.match
    assert parsed.match["createdAt"] == {"$gte": datetime(2025, 1, 1)}
    assert parsed.min_orders == 2
    assert parsed.max_amount == 5000.0
    assert parsed.account_status == "ACTIVE"


def test_order_filters():
    args = SalesReportQuerySchema().load({"status": "deliv", "minAmount": "100", "maxAmount": "900"})
    filters = build_order_filters(args)

    assert filters["totalAmount"] == {"$gte": 100.0, "$lte": 900.0}
    assert filters["orderStatus"]["$options"] == "i"


@pytest.mark.parametrize("stock_status, expected", [
    ("out", 0),
    ("low", {"$gt": 0, "$lte": 10}),
    ("in", {"$gt": 10}),
])
def test_stock_status_overrides_min_max(stock_status, expected):
    filters = build_stock_filters({"min_stock": 3, "max_stock": 99, "stock_status": stock_status})
    assert filters["stock"] == expected


def test_normalized_filters_are_stable():
    first = normalize_filters("sales", SalesReportQuerySchema().load({"dateFrom": "2025-01-01", "minAmount": ""}))
    second = normalize_filters("sales", SalesReportQuerySchema().load({"minAmount": None, "dateFrom": "2025-01-01"}))

    assert first == second == {"dateFrom": "2025-01-01"}

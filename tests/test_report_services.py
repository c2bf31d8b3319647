from datetime import datetime, timedelta

import pytest
from bson import ObjectId

from app.constants.service_code import CUSTOMER_ROLES
from app.schemas.report_schemas import (
    SalesReportQuerySchema,
    OrderReportQuerySchema,
    PaymentReportQuerySchema,
    StockReportQuerySchema,
    CustomerReportQuerySchema,
    UsersPageQuerySchema,
)
from app.services.reports.sales_report_service import SalesReportService
from app.services.reports.order_report_service import OrderReportService
from app.services.reports.payment_report_service import PaymentReportService
from app.services.reports.stock_report_service import StockReportService
from app.services.reports.customer_report_service import CustomerReportService
from app.services.reports import user_report_service
from app.services.reports.my_orders_service import my_orders

NOW = datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def shop(app_ctx, fake_db):
    users = fake_db["users"]
    products = fake_db["products"]
    orders = fake_db["orders"]

    ravi, asha = users.seed(
        {"name": "Ravi Kumar", "email": "ravi@example.com", "password": "hash", "role": "customer",
         "status": "ACTIVE", "createdAt": datetime(2025, 1, 5)},
        {"name": "Asha Patel", "email": "asha@example.com", "password": "hash", "role": "customer",
         "status": "ACTIVE", "createdAt": datetime(2025, 2, 5)},
    )
    fan, = products.seed({"name": "Ceiling Fan", "price": 1500, "image": "fan.png", "stock": 5})

    delivered, pending, legacy = orders.seed(
        {"orderNumber": "ORD-1001", "user": ravi["_id"], "orderStatus": "delivered", "totalAmount": 1000,
         "paymentMethod": "razorpay", "paymentStatus": "completed", "createdAt": datetime(2025, 3, 10),
         "items": [{"product": fan["_id"], "name": "Ceiling Fan", "quantity": 2, "price": 500}]},
        {"orderNumber": "ORD-1002", "user": asha["_id"], "orderStatus": "pending", "totalAmount": 500,
         "paymentMethod": "COD", "paymentStatus": "pending", "createdAt": datetime(2025, 3, 31, 23, 59, 59),
         "items": []},
        {"orderNumber": None, "user": ravi["_id"], "orderStatus": "cancelled", "totalPrice": 300,
         "createdAt": datetime(2025, 2, 1), "items": []},
    )
    return {
        "ravi": ravi, "asha": asha, "fan": fan,
        "delivered": delivered, "pending": pending, "legacy": legacy,
    }


# ---------------------------------------------------------------- sales

def test_sales_counts_only_delivered_revenue(shop):
    filters = SalesReportQuerySchema().load({"dateFrom": "2025-03-01", "dateTo": "2025-03-31"})
    report = SalesReportService.generate(filters, persist=False)

    assert report["summary"] == {
        "totalSales": 2,
        "totalRevenue": 1000,
        "averageOrderValue": 1000,
        "completedOrders": 1,
        "pendingOrders": 1,
        "cancelledOrders": 0,
    }


def test_sales_date_to_includes_last_second_of_day(shop):
    filters = SalesReportQuerySchema().load({"dateFrom": "2025-03-31", "dateTo": "2025-03-31"})
    report = SalesReportService.generate(filters, persist=False)

    assert [row["orderNumber"] for row in report["data"]] == ["ORD-1002"]


def test_sales_breakdowns_and_references(shop):
    report = SalesReportService.generate({}, persist=False)

    assert report["monthlySales"] == {
        "Mar 2025": {"revenue": 1000, "orders": 2},
        "Feb 2025": {"revenue": 0, "orders": 1},
    }
    assert report["topProducts"] == [{"name": "Ceiling Fan", "revenue": 1000, "quantity": 2}]

    first = report["data"][0]
    assert first["user"]["name"] == "Asha Patel"
    assert "password" not in first["user"]


def test_legacy_total_price_is_used_when_total_amount_missing(shop):
    report = SalesReportService.generate({}, persist=False)
    legacy = next(row for row in report["data"] if row["_id"] == shop["legacy"]["_id"])

    assert legacy["totalAmount"] == 300
    assert legacy["orderId"] == str(shop["legacy"]["_id"])[-8:].upper()


def test_sales_report_is_repeatable(shop):
    filters = SalesReportQuerySchema().load({"status": "deliv"})
    assert SalesReportService.generate(filters, persist=False) == SalesReportService.generate(filters, persist=False)


def test_sales_snapshot_is_saved_with_normalized_filters(shop, fake_db, sync_bg):
    filters = SalesReportQuerySchema().load({"dateFrom": "2025-03-01", "minAmount": ""})
    SalesReportService.generate(filters, admin_id=str(ObjectId()))

    assert len(sync_bg) == 1
    saved, = fake_db["generated_reports"].docs
    assert saved["type"] == "sales"
    assert saved["filters"] == {"dateFrom": "2025-03-01"}
    assert saved["recordCount"] == 2


def test_sales_propagates_database_errors(shop, fake_db):
    fake_db["orders"].fail_with = RuntimeError("connection reset")
    with pytest.raises(RuntimeError):
        SalesReportService.generate({}, persist=False)


# ---------------------------------------------------------------- orders

def test_order_status_counts(shop):
    report = OrderReportService.generate({}, persist=False)

    assert report["summary"] == {
        "totalOrders": 3,
        "pending": 1,
        "confirmed": 0,
        "processing": 0,
        "shipped": 0,
        "delivered": 1,
        "cancelled": 1,
    }
    assert {"paymentStatus", "shippingAddress"} <= set(report["data"][0])


def test_order_search_matches_customer_name(shop):
    filters = OrderReportQuerySchema().load({"search": "ravi"})
    report = OrderReportService.generate(filters, persist=False)

    assert report["summary"]["totalOrders"] == 2
    assert all(row["user"]["name"] == "Ravi Kumar" for row in report["data"])


def test_order_search_matches_order_number(shop):
    filters = OrderReportQuerySchema().load({"search": "ord-1002"})
    report = OrderReportService.generate(filters, persist=False)

    assert [row["orderNumber"] for row in report["data"]] == ["ORD-1002"]


# ---------------------------------------------------------------- payments

def test_payment_split_by_method(shop):
    report = PaymentReportService.generate(PaymentReportQuerySchema().load({}), persist=False)
    summary = report["summary"]

    assert summary["totalTransactions"] == 3
    assert summary["totalAmount"] == 1800
    assert (summary["codPayments"], summary["codAmount"]) == (1, 500)
    assert (summary["onlinePayments"], summary["onlineAmount"]) == (1, 1000)
    assert summary["completed"] == 1
    assert summary["pending"] == 1
    assert summary["failed"] == 0


def test_payment_method_filter(shop):
    filters = PaymentReportQuerySchema().load({"paymentMethod": "cod"})
    report = PaymentReportService.generate(filters, persist=False)

    assert [row["orderNumber"] for row in report["data"]] == ["ORD-1002"]
    assert report["data"][0]["user"]["email"] == "asha@example.com"


# ---------------------------------------------------------------- stock

@pytest.fixture
def inventory(app_ctx, fake_db):
    return fake_db["products"].seed(
        {"name": "Copper Wire", "category": "Wire & Cables", "price": 100, "stock": 0, "status": "active"},
        {"name": "LED Bulb", "category": "Lights", "price": 50, "stock": 5, "status": "out-of-stock"},
        {"name": "Pump Motor", "category": "Motors", "price": 2000, "stock": 50},
        {"name": "Switch Board", "price": 10, "stock": 10},
        {"name": "Tube Light", "category": "Lights", "price": 20, "stock": 11},
    )


def test_stock_bands_and_totals(inventory):
    report = StockReportService.generate({}, persist=False)

    assert report["summary"] == {
        "totalProducts": 5,
        "inStock": 2,
        "lowStock": 2,
        "outOfStock": 1,
        "totalQuantity": 76,
        "totalStockValue": 0 + 250 + 100000 + 100 + 220,
    }


def test_stock_row_labels_at_threshold(inventory):
    rows = {row["name"]: row for row in StockReportService.generate({}, persist=False)["data"]}

    assert rows["Switch Board"]["stockStatus"] == "Low Stock"
    assert rows["Tube Light"]["stockStatus"] == "In Stock"
    assert rows["Copper Wire"]["stockStatus"] == "Out of Stock"
    assert rows["Copper Wire"]["status"] == "out-of-stock"
    assert rows["LED Bulb"]["status"] == "active"


def test_stock_category_breakdown(inventory):
    breakdown = StockReportService.generate({}, persist=False)["categoryBreakdown"]

    assert breakdown["Lights"] == {"count": 2, "totalStock": 16, "totalValue": 470}
    assert breakdown["Uncategorized"]["count"] == 1


def test_stock_status_filter(inventory):
    filters = StockReportQuerySchema().load({"stockStatus": "low", "minStock": "40"})
    names = [row["name"] for row in StockReportService.generate(filters, persist=False)["data"]]

    assert names == ["LED Bulb", "Switch Board"]


# ---------------------------------------------------------------- customers

def test_customer_report_summary(app_ctx, fake_db):
    users = fake_db["users"]
    users.aggregate_rows = [
        {"_id": ObjectId(), "name": "A", "actualStatus": "ACTIVE", "totalOrders": 4, "totalSpent": 4000,
         "createdAt": NOW - timedelta(days=3)},
        {"_id": ObjectId(), "name": "B", "actualStatus": "INACTIVE", "totalOrders": 1, "totalSpent": 0,
         "createdAt": NOW - timedelta(days=200)},
        {"_id": ObjectId(), "name": "C", "actualStatus": "BLOCKED", "totalOrders": 0, "totalSpent": 0,
         "createdAt": NOW - timedelta(days=90)},
    ]

    filters = CustomerReportQuerySchema().load({"accountStatus": "active"})
    report = CustomerReportService.generate(filters, persist=False, now=NOW)

    assert report["summary"] == {
        "totalCustomers": 3,
        "activeCustomers": 1,
        "inactiveCustomers": 1,
        "blockedCustomers": 1,
        "newCustomers": 1,
        "totalRevenue": 4000,
        "averageOrdersPerCustomer": 1.67,
    }
    assert [c["name"] for c in report["topCustomers"]] == ["A"]
    assert report["data"][1]["status"] == "INACTIVE"

    pipeline, = users.pipelines
    assert pipeline[0]["$match"]["role"] == {"$in": CUSTOMER_ROLES}
    assert pipeline[3] == {"$match": {"actualStatus": "ACTIVE"}}


def test_customer_report_with_no_customers(app_ctx, fake_db):
    report = CustomerReportService.generate({}, persist=False, now=NOW)
    assert report["summary"]["averageOrdersPerCustomer"] == 0
    assert report["data"] == []


# ---------------------------------------------------------------- users

def test_list_users_paginates_and_derives_status(app_ctx, fake_db):
    fake_db["users"].aggregate_rows = [
        {"_id": ObjectId(), "name": f"user {i}", "status": "ACTIVE", "lastLoginAt": NOW - timedelta(days=i * 10)}
        for i in range(20)
    ]

    result = user_report_service.list_users(UsersPageQuerySchema().load({}), page=2, limit=15, now=NOW)

    assert result["currentPage"] == 2
    assert result["totalUsers"] == 20
    assert result["totalPages"] == 2
    assert [u["name"] for u in result["users"]] == [f"user {i}" for i in range(15, 20)]
    assert {u["actualStatus"] for u in result["users"]} == {"INACTIVE"}


def test_list_users_with_no_matches(app_ctx, fake_db):
    result = user_report_service.list_users({}, page=1, limit=15, now=NOW)
    assert result == {"users": [], "currentPage": 1, "totalPages": 0, "totalUsers": 0}


def test_full_report(shop, fake_db):
    fake_db["reviews"].seed(
        {"user": shop["ravi"]["_id"], "product": shop["fan"]["_id"], "rating": 5, "comment": "Quiet",
         "status": "approved", "createdAt": datetime(2025, 3, 12)},
    )

    report = user_report_service.full_report(str(shop["ravi"]["_id"]))

    assert "password" not in report["user"]
    assert report["user"]["actualStatus"] in ("ACTIVE", "INACTIVE")
    assert len(report["orders"]) == 2
    assert report["summary"] == {
        "totalOrders": 2,
        "totalSpent": 1000,
        "totalReviews": 1,
        "deliveredOrders": 1,
        "pendingOrders": 0,
        "cancelledOrders": 1,
    }

    invoice, = report["invoices"]
    assert invoice["invoiceNumber"] == "ORD-1001"
    assert invoice["tax"] == "180.00"

    refunds = {p["orderId"]: p["refundAmount"] for p in report["payments"]}
    assert refunds[shop["legacy"]["_id"]] == 300
    assert refunds[shop["delivered"]["_id"]] is None

    assert report["reviews"][0]["productName"] == "Ceiling Fan"


def test_full_report_status_filter(shop):
    report = user_report_service.full_report(str(shop["ravi"]["_id"]), status="delivered")
    assert [o["orderNumber"] for o in report["orders"]] == ["ORD-1001"]


def test_full_report_unknown_user(app_ctx, fake_db):
    assert user_report_service.full_report(str(ObjectId())) is None


# ---------------------------------------------------------------- my orders

def test_my_orders_summary_covers_all_orders(shop):
    result = my_orders(str(shop["ravi"]["_id"]), page=1, limit=1)

    assert len(result["orders"]) == 1
    assert result["totalOrders"] == 2
    assert result["totalPages"] == 2
    assert result["summary"] == {
        "totalOrders": 2,
        "totalSpent": 1300,
        "deliveredOrders": 1,
        "pendingOrders": 0,
        "cancelledOrders": 1,
    }

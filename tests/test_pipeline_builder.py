from datetime import datetime

from app.services.reports.filters import UserReportFilters
from app.services.reports.pipeline_builder import (
    build_user_report_pipeline,
    paginate,
    ADMIN_USERS,
    CUSTOMERS,
)

NOW = datetime(2025, 6, 15, 12, 0, 0)


def stage_names(pipeline):
    return [next(iter(stage)) for stage in pipeline]


def test_stage_order_without_post_filters():
    pipeline = build_user_report_pipeline(UserReportFilters(match={"role": "customer"}), NOW)

    assert stage_names(pipeline) == ["$match", "$lookup", "$addFields", "$project", "$sort"]
    assert pipeline[0] == {"$match": {"role": "customer"}}
    assert pipeline[1]["$lookup"] == {
        "from": "orders", "localField": "_id", "foreignField": "user", "as": "orders",
    }
    assert pipeline[3] == {"$project": {"password": 0, "orders": 0}}
    assert pipeline[4] == {"$sort": {"createdAt": -1}}


def test_post_aggregation_filters():
    filters = UserReportFilters(min_orders=1, max_orders=5, min_amount=100.0, account_status="inactive")
    pipeline = build_user_report_pipeline(filters, NOW)

    assert stage_names(pipeline) == ["$match", "$lookup", "$addFields", "$match", "$project", "$sort"]
    assert pipeline[3]["$match"] == {
        "totalOrders": {"$gte": 1, "$lte": 5},
        "totalAmountSpent": {"$gte": 100.0},
        "actualStatus": "INACTIVE",
    }


def test_admin_variant_counts_delivered_spend():
    fields = build_user_report_pipeline(UserReportFilters(), NOW, ADMIN_USERS)[2]["$addFields"]

    assert set(fields) == {"totalOrders", "totalAmountSpent", "lastOrder", "actualStatus"}
    condition = fields["totalAmountSpent"]["$sum"]["$map"]["input"]["$filter"]["cond"]
    assert condition["$eq"][1] == "delivered"


def test_customer_variant_counts_everything_but_cancelled():
    filters = UserReportFilters(min_amount=10.0)
    pipeline = build_user_report_pipeline(filters, NOW, CUSTOMERS)
    fields = pipeline[2]["$addFields"]

    assert set(fields) == {"totalOrders", "totalSpent", "lastOrderDate", "actualStatus"}
    condition = fields["totalSpent"]["$sum"]["$map"]["input"]["$filter"]["cond"]
    assert condition["$not"][0]["$in"][1] == ["cancelled"]
    assert pipeline[3]["$match"] == {"totalSpent": {"$gte": 10.0}}


def test_spend_falls_back_to_legacy_total_price():
    fields = build_user_report_pipeline(UserReportFilters(), NOW)[2]["$addFields"]
    amount = fields["totalAmountSpent"]["$sum"]["$map"]["in"]
    assert amount == {"$ifNull": ["$$order.totalAmount", {"$ifNull": ["$$order.totalPrice", 0]}]}


def test_building_twice_gives_identical_stages():
    filters = UserReportFilters(match={"name": "x"}, max_orders=3)
    assert build_user_report_pipeline(filters, NOW) == build_user_report_pipeline(filters, NOW)


def test_builder_does_not_mutate_filters():
    match = {"role": "customer"}
    filters = UserReportFilters(match=match)
    pipeline = build_user_report_pipeline(filters, NOW)
    pipeline[0]["$match"]["extra"] = 1
    assert match == {"role": "customer"}


def test_paginate_appends_facet():
    base = build_user_report_pipeline(UserReportFilters(), NOW)
    paged = paginate(base, 30, 15)

    assert paged[:-1] == base
    assert paged[-1] == {
        "$facet": {
            "data": [{"$skip": 30}, {"$limit": 15}],
            "metadata": [{"$count": "totalUsers"}],
        }
    }

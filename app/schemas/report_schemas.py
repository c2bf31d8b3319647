# schemas/report_schemas.py
from flask import current_app
from marshmallow import Schema, fields, validate, pre_load, validates_schema, ValidationError, EXCLUDE

from ..constants.service_code import (
    ACCOUNT_STATUS, REPORT_TYPES
)


class BaseQuerySchema(Schema):
    """
    Query strings arrive with blank values for untouched filter inputs
    (``?minAmount=&search=``). Blank means "no constraint", so those keys are
    dropped before validation; anything non-blank must parse or the request
    fails with 400.
    """

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def drop_blank_values(self, data, **kwargs):
        return {
            key: value.strip() if isinstance(value, str) else value
            for key, value in data.items()
            if value is not None and not (isinstance(value, str) and value.strip() == "")
        }


class DateRangeMixin(Schema):
    date_from = fields.Date(data_key="dateFrom", required=False, allow_none=True)
    date_to = fields.Date(data_key="dateTo", required=False, allow_none=True)

    @validates_schema
    def validate_date_order(self, data, **kwargs):
        if data.get("date_from") and data.get("date_to") and data["date_from"] > data["date_to"]:
            raise ValidationError("dateFrom must be on or before dateTo", field_name="dateFrom")


class AmountRangeMixin(Schema):
    min_amount = fields.Float(data_key="minAmount", required=False, allow_none=True, validate=validate.Range(min=0))
    max_amount = fields.Float(data_key="maxAmount", required=False, allow_none=True, validate=validate.Range(min=0))


# ===================== Users / Customers =====================

class UserReportQuerySchema(BaseQuerySchema, DateRangeMixin, AmountRangeMixin):
    """Filters shared by the users page, the exports and the customer report."""
    search = fields.Str(required=False, allow_none=True, validate=validate.Length(max=200))
    account_status = fields.Str(
        data_key="accountStatus",
        required=False,
        allow_none=True,
        validate=validate.OneOf(list(ACCOUNT_STATUS.values())),
    )
    min_orders = fields.Int(data_key="minOrders", required=False, allow_none=True, validate=validate.Range(min=0))
    max_orders = fields.Int(data_key="maxOrders", required=False, allow_none=True, validate=validate.Range(min=0))

    @pre_load
    def normalize_account_status(self, data, **kwargs):
        status = data.get("accountStatus")
        if isinstance(status, str):
            data = dict(data)
            data["accountStatus"] = status.upper()
        return data


def _users_page_size():
    return current_app.config.get("USERS_PAGE_SIZE", 15)


class UsersPageQuerySchema(UserReportQuerySchema):
    page = fields.Int(required=False, load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(required=False, load_default=_users_page_size, validate=validate.Range(min=1, max=200))


class CustomerReportQuerySchema(UserReportQuerySchema):
    """Query schema for the customer report."""
    pass


class UserFullReportQuerySchema(BaseQuerySchema, DateRangeMixin):
    status = fields.Str(required=False, allow_none=True)


# ===================== Orders / Sales / Payments =====================

class SalesReportQuerySchema(BaseQuerySchema, DateRangeMixin, AmountRangeMixin):
    """Query schema for the sales report."""
    status = fields.Str(required=False, allow_none=True, validate=validate.Length(max=50))


class OrderReportQuerySchema(BaseQuerySchema, DateRangeMixin):
    """Query schema for the order report."""
    search = fields.Str(required=False, allow_none=True, validate=validate.Length(max=200))
    status = fields.Str(required=False, allow_none=True, validate=validate.Length(max=50))
    payment_method = fields.Str(data_key="paymentMethod", required=False, allow_none=True)


class PaymentReportQuerySchema(BaseQuerySchema, DateRangeMixin, AmountRangeMixin):
    """Query schema for the payment report."""
    payment_method = fields.Str(data_key="paymentMethod", required=False, allow_none=True)


# ===================== Stock =====================

class StockReportQuerySchema(BaseQuerySchema):
    """
    ``stockStatus`` wins over minStock/maxStock when both are given:
    out => stock == 0, low => 0 < stock <= LOW_STOCK_THRESHOLD,
    in => stock above the threshold.
    """
    category = fields.Str(required=False, allow_none=True)
    min_stock = fields.Int(data_key="minStock", required=False, allow_none=True, validate=validate.Range(min=0))
    max_stock = fields.Int(data_key="maxStock", required=False, allow_none=True, validate=validate.Range(min=0))
    stock_status = fields.Str(
        data_key="stockStatus",
        required=False,
        allow_none=True,
        validate=validate.OneOf(["in", "low", "out"]),
    )


# ===================== Snapshots =====================

REPORT_QUERY_SCHEMAS = {
    "sales": SalesReportQuerySchema,
    "orders": OrderReportQuerySchema,
    "payments": PaymentReportQuerySchema,
    "stock": StockReportQuerySchema,
    "customers": CustomerReportQuerySchema,
}


INVALID_REPORT_TYPE = f"Invalid report type. Must be one of: {', '.join(REPORT_TYPES)}"


class GenerateReportSchema(Schema):

    class Meta:
        unknown = EXCLUDE

    type = fields.Str(
        required=True,
        validate=validate.OneOf(REPORT_TYPES, error=INVALID_REPORT_TYPE),
        error_messages={"required": "Report type is required"},
    )
    filters = fields.Dict(required=False, allow_none=True, load_default=dict)


class ReportHistoryQuerySchema(BaseQuerySchema):
    limit = fields.Int(required=False, load_default=10, validate=validate.Range(min=1, max=100))


def normalize_filters(report_type, query_args):
    """
    Canonical, JSON-friendly form of a report's filters (camelCase keys,
    ISO dates, absent keys omitted). Both the snapshot write and the
    latest-snapshot lookup go through here so exact matching is stable.
    """
    schema = REPORT_QUERY_SCHEMAS[report_type]()
    dumped = schema.dump(query_args)
    return {key: value for key, value in dumped.items() if value is not None}



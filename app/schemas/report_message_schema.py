# schemas/report_message_schema.py
from marshmallow import Schema, fields, validate, ValidationError, validates, EXCLUDE

from ..constants.service_code import REPORT_MESSAGE_STATUSES, ORDER_REPORT_STATUS
from ..utils.helpers import OBJECT_ID_PATTERN
from .report_schemas import BaseQuerySchema


def _not_blank(value):
    if not value or not value.strip():
        raise ValidationError("Title and message cannot be empty")


class ReportMessageSchema(Schema):
    """Body of POST /admin/reports/send."""

    class Meta:
        unknown = EXCLUDE

    user_id = fields.Str(
        data_key="userId",
        required=True,
        error_messages={"required": "User ID is required"},
    )
    order_id = fields.Str(data_key="orderId", required=False, allow_none=True)
    payment_id = fields.Str(data_key="paymentId", required=False, allow_none=True)
    invoice_id = fields.Str(data_key="invoiceId", required=False, allow_none=True)
    title = fields.Str(
        required=True,
        validate=_not_blank,
        error_messages={"required": "Title and message are required"},
    )
    message = fields.Str(
        required=True,
        validate=_not_blank,
        error_messages={"required": "Title and message are required"},
    )
    status = fields.Str(
        required=True,
        validate=validate.OneOf(
            REPORT_MESSAGE_STATUSES,
            error="Valid status is required (Info, Warning, Issue, Summary)",
        ),
        error_messages={"required": "Valid status is required (Info, Warning, Issue, Summary)"},
    )

    @validates("user_id")
    def validate_user_id(self, value, **kwargs):
        if not OBJECT_ID_PATTERN.match(value or ""):
            raise ValidationError("Invalid user ID")


class ReportMessagesQuerySchema(BaseQuerySchema):
    page = fields.Int(required=False, load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(required=False, load_default=20, validate=validate.Range(min=1, max=100))
    user_id = fields.Str(data_key="userId", required=False, allow_none=True)
    status = fields.Str(required=False, allow_none=True, validate=validate.OneOf(REPORT_MESSAGE_STATUSES))

    @validates("user_id")
    def validate_user_id(self, value, **kwargs):
        if value and not OBJECT_ID_PATTERN.match(value):
            raise ValidationError("Invalid user ID")


class MyOrdersQuerySchema(BaseQuerySchema):
    page = fields.Int(required=False, load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(required=False, load_default=10, validate=validate.Range(min=1, max=100))
    status = fields.Str(required=False, allow_none=True)
    start_date = fields.Date(data_key="startDate", required=False, allow_none=True)
    end_date = fields.Date(data_key="endDate", required=False, allow_none=True)


class MyMessagesQuerySchema(BaseQuerySchema):
    page = fields.Int(required=False, load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(required=False, load_default=20, validate=validate.Range(min=1, max=100))
    unread_only = fields.Bool(data_key="unreadOnly", required=False, load_default=False)


class MyReportsQuerySchema(BaseQuerySchema):
    page = fields.Int(required=False, load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(required=False, load_default=10, validate=validate.Range(min=1, max=100))
    status = fields.Str(
        required=False,
        allow_none=True,
        validate=validate.OneOf(list(ORDER_REPORT_STATUS.values())),
    )
    report_type = fields.Str(data_key="type", required=False, allow_none=True)
    start_date = fields.Date(data_key="startDate", required=False, allow_none=True)
    end_date = fields.Date(data_key="endDate", required=False, allow_none=True)

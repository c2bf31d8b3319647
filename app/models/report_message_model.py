# models/report_message_model.py
from ..models.base_model import BaseModel
from ..utils.helpers import to_object_id
from ..utils.logger import Log


class ReportMessage(BaseModel):
    """
    Admin-to-customer notification, optionally tied to an order, payment
    or invoice. Customers flip ``isRead``; nothing deletes messages.
    """

    collection_name = "reportmessages"

    def __init__(
        self,
        user_id,
        sent_by,
        title,
        message,
        status,
        order_id=None,
        payment_id=None,
        invoice_id=None,
    ):
        super().__init__()
        self.user_id = to_object_id(user_id)
        self.sent_by = to_object_id(sent_by) if sent_by else None
        self.title = title.strip()
        self.message = message.strip()
        self.status = status
        self.order_id = order_id
        self.payment_id = payment_id
        self.invoice_id = invoice_id
        self.is_read = False

    def to_dict(self):
        data = {
            "userId": self.user_id,
            "sentBy": self.sent_by,
            "title": self.title,
            "message": self.message,
            "status": self.status,
            "isRead": self.is_read,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        for key, value in (
            ("orderId", self.order_id),
            ("paymentId", self.payment_id),
            ("invoiceId", self.invoice_id),
        ):
            if value:
                data[key] = value
        return data

    @classmethod
    def find_page(cls, filters, skip, limit):
        cursor = (
            cls.get_collection()
            .find(filters)
            .sort("createdAt", -1)
            .skip(skip)
            .limit(limit)
        )
        return list(cursor)

    @classmethod
    def count(cls, filters):
        return cls.get_collection().count_documents(filters)

    @classmethod
    def mark_read(cls, message_id, user_id):
        """Mark one of the customer's own messages as read."""
        result = cls.get_collection().update_one(
            {"_id": to_object_id(message_id), "userId": to_object_id(user_id)},
            {"$set": {"isRead": True}},
        )
        return result.matched_count > 0

    @classmethod
    def create_indexes(cls):
        log_tag = "[report_message_model.py][ReportMessage][create_indexes]"
        try:
            collection = cls.get_collection()
            collection.create_index([("userId", 1), ("createdAt", -1)])
            collection.create_index([("status", 1)])
            Log.info(f"{log_tag} Indexes created successfully")
            return True
        except Exception as e:
            Log.error(f"{log_tag} Error creating indexes: {str(e)}")
            return False

# services/reports/report_message_service.py
from ...models.report_message_model import ReportMessage
from ...models.user_model import User
from ...utils.helpers import to_object_id, total_pages
from ...utils.logger import Log


CONTACT_PROJECTION = {"name": 1, "email": 1}


class ReportMessageService:
    """Admin-to-customer report messages."""

    @staticmethod
    def _populate(messages):
        ids = [m.get("userId") for m in messages] + [m.get("sentBy") for m in messages]
        contacts = User.find_by_ids(ids, CONTACT_PROJECTION)
        for message in messages:
            message["userId"] = contacts.get(message.get("userId"), message.get("userId"))
            if message.get("sentBy") is not None:
                message["sentBy"] = contacts.get(message["sentBy"], message["sentBy"])
        return messages

    @staticmethod
    def send(payload, admin_id=None):
        """
        Create a message for ``payload["user_id"]``. Returns the stored
        message with ``userId``/``sentBy`` populated, or None when the user
        does not exist.
        """
        log_tag = f"[report_message_service.py][ReportMessageService][send][{payload.get('user_id')}]"

        if not User.get_by_id(payload["user_id"], {"_id": 1}):
            Log.info(f"{log_tag} user not found")
            return None

        message = ReportMessage(
            user_id=payload["user_id"],
            sent_by=admin_id,
            title=payload["title"],
            message=payload["message"],
            status=payload["status"],
            order_id=payload.get("order_id"),
            payment_id=payload.get("payment_id"),
            invoice_id=payload.get("invoice_id"),
        )
        message_id = message.save()
        Log.info(f"{log_tag} message {message_id} sent by admin {admin_id}")

        stored = message.to_dict()
        stored["_id"] = message_id
        return ReportMessageService._populate([stored])[0]

    @staticmethod
    def list_page(filters, page=1, limit=20):
        query = {}
        if filters.get("user_id"):
            query["userId"] = to_object_id(filters["user_id"])
        if filters.get("status"):
            query["status"] = filters["status"]
        if filters.get("unread_only"):
            query["isRead"] = False

        messages = ReportMessageService._populate(
            ReportMessage.find_page(query, (page - 1) * limit, limit)
        )
        total = ReportMessage.count(query)

        return {
            "count": len(messages),
            "totalMessages": total,
            "totalPages": total_pages(total, limit),
            "currentPage": page,
            "messages": messages,
        }

    @staticmethod
    def mark_read(message_id, user_id):
        return ReportMessage.mark_read(message_id, user_id)

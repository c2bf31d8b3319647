# models/report_model.py
from ..constants.service_code import ORDER_REPORT_TYPE, ORDER_REPORT_STATUS
from ..models.base_model import BaseModel
from ..utils.helpers import to_object_id, order_amount, utc_now
from ..utils.logger import Log


class Report(BaseModel):
    """
    A customer's own report for one of their orders. At most one report
    exists per order (unique index on ``order``). Line items are copied with
    their totals so the report survives later catalog or order edits.
    """

    collection_name = "reports"

    def __init__(self, order, user_id, user_name=None, user_email=None, product_names=None):
        super().__init__()
        product_names = product_names or {}

        self.user = to_object_id(user_id)
        self.user_name = user_name
        self.user_email = user_email
        self.order = order["_id"]
        self.order_number = order.get("orderNumber")
        self.order_status = order.get("orderStatus")
        self.order_date = order.get("createdAt")
        self.items = [self._item(item, product_names) for item in order.get("items") or []]
        self.total_amount = order_amount(order)
        self.payment_method = order.get("paymentMethod")
        self.payment_status = order.get("paymentStatus")
        self.shipping_address = order.get("shippingAddress")
        self.report_generated_at = self.created_at

    @staticmethod
    def _item(item, product_names):
        price = item.get("price") or 0
        quantity = item.get("quantity") or 0
        product_id = item.get("product")
        return {
            "product": product_id,
            "productName": product_names.get(product_id) or item.get("name"),
            "productPrice": price,
            "quantity": quantity,
            "itemTotal": price * quantity,
        }

    def to_dict(self):
        return {
            "user": self.user,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "order": self.order,
            "orderNumber": self.order_number,
            "orderStatus": self.order_status,
            "orderDate": self.order_date,
            "items": self.items,
            "totalAmount": self.total_amount,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "shippingAddress": self.shipping_address,
            "reportType": ORDER_REPORT_TYPE,
            "reportStatus": ORDER_REPORT_STATUS["GENERATED"],
            "reportGeneratedAt": self.report_generated_at,
            "downloadedAt": None,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def find_page(cls, filters, skip, limit):
        cursor = (
            cls.get_collection()
            .find(filters)
            .sort("reportGeneratedAt", -1)
            .skip(skip)
            .limit(limit)
        )
        return list(cursor)

    @classmethod
    def count(cls, filters):
        return cls.get_collection().count_documents(filters)

    @classmethod
    def get_for_user(cls, report_id, user_id):
        return cls.get_collection().find_one(
            {"_id": to_object_id(report_id), "user": to_object_id(user_id)}
        )

    @classmethod
    def get_by_order(cls, order_id):
        return cls.get_collection().find_one({"order": to_object_id(order_id)})

    @classmethod
    def mark_downloaded(cls, report_id):
        """Flip the report to Downloaded. Returns the fields that were set."""
        now = utc_now()
        changes = {
            "reportStatus": ORDER_REPORT_STATUS["DOWNLOADED"],
            "downloadedAt": now,
            "updatedAt": now,
        }
        cls.get_collection().update_one({"_id": to_object_id(report_id)}, {"$set": changes})
        return changes

    @classmethod
    def create_indexes(cls):
        log_tag = "[report_model.py][Report][create_indexes]"
        try:
            collection = cls.get_collection()
            collection.create_index([("user", 1), ("reportGeneratedAt", -1)])
            collection.create_index([("order", 1)], unique=True)
            Log.info(f"{log_tag} Indexes created successfully")
            return True
        except Exception as e:
            Log.error(f"{log_tag} Error creating indexes: {str(e)}")
            return False

# models/order_model.py
from ..models.base_model import BaseModel
from ..utils.helpers import to_object_id
from ..utils.logger import Log


class Order(BaseModel):
    """
    Checkout record written by the storefront. Line items carry a name and
    price snapshot next to the product reference so reports stay accurate
    after catalog edits.
    """

    collection_name = "orders"

    @classmethod
    def find(cls, filters, projection=None):
        """Orders matching ``filters``, newest first."""
        cursor = cls.get_collection().find(filters, projection).sort("createdAt", -1)
        return list(cursor)

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
    def get_for_user(cls, order_id, user_id):
        return cls.get_collection().find_one(
            {"_id": to_object_id(order_id), "user": to_object_id(user_id)}
        )

    @classmethod
    def create_indexes(cls):
        log_tag = "[order_model.py][Order][create_indexes]"
        try:
            collection = cls.get_collection()
            collection.create_index([("user", 1), ("createdAt", -1)])
            collection.create_index([("createdAt", -1)])
            collection.create_index([("orderStatus", 1), ("createdAt", -1)])
            collection.create_index([("paymentMethod", 1), ("createdAt", -1)])
            collection.create_index([("orderNumber", 1)], sparse=True)
            Log.info(f"{log_tag} Indexes created successfully")
            return True
        except Exception as e:
            Log.error(f"{log_tag} Error creating indexes: {str(e)}")
            return False

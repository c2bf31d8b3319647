# models/user_model.py
from ..models.base_model import BaseModel
from ..utils.logger import Log


class User(BaseModel):
    """
    Storefront account. Registration and status changes happen in the
    storefront; this service only reads users.

    The stored ``status`` is never rewritten here: the effective status is
    recomputed on every read (see services.reports.status_rules).
    """

    collection_name = "users"

    PUBLIC_PROJECTION = {"password": 0}
    REFERENCE_PROJECTION = {"name": 1, "email": 1, "phone": 1}

    @classmethod
    def get_public_by_id(cls, user_id):
        return cls.get_by_id(user_id, cls.PUBLIC_PROJECTION)

    @classmethod
    def aggregate(cls, pipeline):
        return list(cls.get_collection().aggregate(pipeline))

    @classmethod
    def create_indexes(cls):
        log_tag = "[user_model.py][User][create_indexes]"
        try:
            collection = cls.get_collection()
            collection.create_index([("createdAt", -1)])
            collection.create_index([("role", 1), ("createdAt", -1)])
            collection.create_index([("status", 1)])
            Log.info(f"{log_tag} Indexes created successfully")
            return True
        except Exception as e:
            Log.error(f"{log_tag} Error creating indexes: {str(e)}")
            return False

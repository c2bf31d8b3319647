# app/models/base_model.py

from bson.objectid import ObjectId
from ..extensions.db import db
from ..utils.helpers import utc_now, to_object_id
from ..utils.logger import Log


class BaseModel:
    """
    A base class for models providing common MongoDB operations.

    Documents keep the storefront's camelCase field names; subclasses map
    their attributes onto those names in ``to_dict``.
    """
    collection_name = None

    def __init__(self, **kwargs):
        self.created_at = utc_now()
        self.updated_at = self.created_at

        for key, value in kwargs.items():
            setattr(self, key, value)

    def to_dict(self):
        """
        Convert the model object to a dictionary representation.
        """
        data = {key: value for key, value in self.__dict__.items() if not key.startswith("_")}
        data["createdAt"] = data.pop("created_at", None)
        data["updatedAt"] = data.pop("updated_at", None)
        return data

    def save(self):
        collection = self.get_collection()
        result = collection.insert_one(self.to_dict())
        return str(result.inserted_id)

    @classmethod
    def get_collection(cls):
        return db.get_collection(cls.collection_name)

    @classmethod
    def get_by_id(cls, record_id, projection=None):
        """
        Retrieve a record by its ID. Raises bson.errors.InvalidId on a
        malformed id, which the app maps to 400.
        """
        return cls.get_collection().find_one({"_id": to_object_id(record_id)}, projection)

    @classmethod
    def find_by_ids(cls, record_ids, projection=None):
        """
        Batch lookup used to populate references. Returns {ObjectId: doc}.
        """
        ids = {rid for rid in record_ids if isinstance(rid, ObjectId)}
        if not ids:
            return {}

        cursor = cls.get_collection().find({"_id": {"$in": list(ids)}}, projection)
        return {doc["_id"]: doc for doc in cursor}

    @classmethod
    def update(cls, record_id, **updates):
        updates["updatedAt"] = utc_now()
        result = cls.get_collection().update_one({"_id": to_object_id(record_id)}, {"$set": updates})
        return result.modified_count > 0

    @classmethod
    def create_indexes(cls):
        Log.info(f"[base_model.py][{cls.__name__}][create_indexes] nothing to create")
        return True

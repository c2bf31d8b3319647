# models/review_model.py
from ..models.base_model import BaseModel


class Review(BaseModel):
    """Product review left by a customer; read-only here."""

    collection_name = "reviews"

    STATUSES = ("approved", "rejected", "pending")

    @classmethod
    def find(cls, filters):
        return list(cls.get_collection().find(filters).sort("createdAt", -1))

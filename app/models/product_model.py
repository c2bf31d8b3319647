# models/product_model.py
from ..constants.service_code import STOCK_STATUS_LABELS
from ..models.base_model import BaseModel
from ..utils.logger import Log


class Product(BaseModel):
    """
    A catalog entry of the electric shop (wires, fans, motors, lights, ...).

    ``status`` follows stock: it flips to ``out-of-stock`` at zero stock and
    back to ``active`` once stock returns. ``specifications`` is an open map
    whose keys vary per category.
    """

    collection_name = "products"

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_OUT_OF_STOCK = "out-of-stock"

    REFERENCE_PROJECTION = {"name": 1, "image": 1, "price": 1}

    def __init__(
        self,
        name,
        description,
        price,
        category,
        brand,
        image,
        stock=0,
        images=None,
        specifications=None,
        ratings=None,
        status=STATUS_ACTIVE,
        featured=False,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.name = name.strip() if isinstance(name, str) else name
        self.description = description
        self.price = float(price)
        self.category = category
        self.brand = brand
        self.image = image
        self.images = images or []
        self.stock = int(stock)
        self.specifications = specifications or {}
        self.ratings = ratings or {"average": 0, "count": 0}
        self.status = status
        self.featured = featured

    @staticmethod
    def derive_status(stock, current_status):
        if stock == 0:
            return Product.STATUS_OUT_OF_STOCK
        if current_status == Product.STATUS_OUT_OF_STOCK and stock > 0:
            return Product.STATUS_ACTIVE
        return current_status

    @staticmethod
    def stock_status_label(stock, low_threshold=10):
        stock = stock or 0
        if stock == 0:
            return STOCK_STATUS_LABELS["out"]
        if stock <= low_threshold:
            return STOCK_STATUS_LABELS["low"]
        return STOCK_STATUS_LABELS["in"]

    def save(self):
        self.status = Product.derive_status(self.stock, self.status)
        return super().save()

    @classmethod
    def find(cls, filters):
        """Products matching ``filters``, sorted by name."""
        return list(cls.get_collection().find(filters).sort("name", 1))

    @classmethod
    def create_indexes(cls):
        log_tag = "[product_model.py][Product][create_indexes]"
        try:
            collection = cls.get_collection()
            collection.create_index([("category", 1), ("name", 1)])
            collection.create_index([("stock", 1)])
            collection.create_index([("status", 1)])
            Log.info(f"{log_tag} Indexes created successfully")
            return True
        except Exception as e:
            Log.error(f"{log_tag} Error creating indexes: {str(e)}")
            return False

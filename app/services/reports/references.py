# services/reports/references.py
from ...models.user_model import User
from ...models.product_model import Product


def populate_order_references(orders):
    """
    Replace ``user`` and ``items[].product`` ids with their referenced
    documents (user: name/email/phone, product: name/image/price) using one
    batched lookup per collection. Dangling references become None, as a
    populate would leave them.
    """
    user_ids = [order.get("user") for order in orders]
    product_ids = [
        item.get("product")
        for order in orders
        for item in (order.get("items") or [])
    ]

    users = User.find_by_ids(user_ids, User.REFERENCE_PROJECTION)
    products = Product.find_by_ids(product_ids, Product.REFERENCE_PROJECTION)

    for order in orders:
        if "user" in order:
            order["user"] = users.get(order["user"]) if order["user"] is not None else None

        items = []
        for item in order.get("items") or []:
            item = dict(item)
            if item.get("product") is not None:
                item["product"] = products.get(item["product"])
            items.append(item)
        order["items"] = items

    return orders

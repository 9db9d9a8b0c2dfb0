"""
Checkout: stock validation and order insertion.

The stock check is a plain read. Nothing is reserved or decremented, so two
checkouts racing for the last unit can both pass before either order lands.
The only cross-request guarantee is the unique index on
``orders.idempotencyKey``: at most one order per key.
"""
from datetime import datetime, timezone
from typing import Iterable

from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError
from pymongo.results import InsertOneResult

from database import ORDERS, PRODUCTS, parse_object_id
from errors import DuplicateOrderError, OutOfStockError
from logger import get_logger
from schemas import CartItem, OrderInfo

logger = get_logger("checkout")


def validate_stock(products: Collection, cart_items: Iterable[CartItem]) -> None:
    """
    Check every cart item against current stock, in cart order.

    Raises OutOfStockError for the first item whose product is missing or has
    fewer units than requested; later items are not looked at.
    """
    for item in cart_items:
        oid = parse_object_id(item.productId)
        product = products.find_one({"_id": oid}) if oid is not None else None
        if product is None or product.get("stock", 0) < item.count:
            logger.info(
                "Stock not available for %s (%s): requested %d, have %s",
                item.productId, item.name, item.count,
                None if product is None else product.get("stock", 0),
            )
            raise OutOfStockError(item.productId, item.name)


def place_order(db: Database, order: OrderInfo) -> InsertOneResult:
    validate_stock(db[PRODUCTS], order.cartItems)

    doc = order.model_dump(mode="json")
    doc.setdefault("createdAt", datetime.now(timezone.utc))
    try:
        result = db[ORDERS].insert_one(doc)
    except DuplicateKeyError:
        logger.info("Duplicate order for idempotencyKey=%s", order.idempotencyKey)
        raise DuplicateOrderError()

    logger.info("Order %s created for %s", result.inserted_id, order.email)
    return result

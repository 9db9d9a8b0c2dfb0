"""
MongoDB connection bootstrap and document helpers.

One MongoClient (which owns its own connection pool) is created per process
in the application lifespan; routes receive the database via ``get_db``.
"""
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from config import Settings
from logger import get_logger

logger = get_logger("database")

PRODUCTS = "products"
REVIEWS = "reviews"
ORDERS = "orders"
CUSTOMERS = "customers"


def create_client(settings: Settings) -> MongoClient:
    return MongoClient(settings.mongo_uri, tz_aware=True)


def ensure_indexes(db: Database) -> None:
    """Create the indexes the API relies on. Safe to call repeatedly."""
    # avoid duplicate orders
    db[ORDERS].create_index([("idempotencyKey", ASCENDING)], unique=True)
    logger.info("Ensured unique index on %s.idempotencyKey", ORDERS)


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the process-wide database handle."""
    return request.app.state.db


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Return the ObjectId for ``value``, or None when it is not a valid id."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize(v) for v in value]
    return value


def doc_to_dict(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    return serialize(doc)


def insert_ack(result) -> dict:
    return {"acknowledged": result.acknowledged, "insertedId": serialize(result.inserted_id)}


def update_ack(result) -> dict:
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedCount": 1 if result.upserted_id is not None else 0,
        "upsertedId": serialize(result.upserted_id),
    }

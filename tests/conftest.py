"""Pytest configuration: every test gets a fresh in-memory Mongo database."""

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import PRODUCTS, ensure_indexes, get_db
from main import app


@pytest.fixture
def db():
    mongo = mongomock.MongoClient()
    database = mongo["stylique"]
    ensure_indexes(database)
    yield database
    mongo.drop_database("stylique")


@pytest.fixture
def products(db):
    """Seed a small catalog; returns {name: hex id}."""
    docs = [
        {"name": "Blue Shirt", "category": "men", "price": 30.0, "rating": 4.5, "stock": 5},
        {"name": "Pants", "category": "men", "price": 60.0, "rating": 3.9, "stock": 1},
        {"name": "Silk Scarf", "category": "women", "price": 5.0, "rating": 4.0, "stock": 0},
        {"name": "Linen shirt (slim)", "category": "women", "price": 50.0, "rating": 4.8, "stock": 12},
    ]
    result = db[PRODUCTS].insert_many(docs)
    return {doc["name"]: str(oid) for doc, oid in zip(docs, result.inserted_ids)}


@pytest.fixture
def client(db):
    # Lifespan is not entered, so no real MongoClient is created.
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pymongo.database import Database

from checkout import place_order
from config import settings
from database import (
    CUSTOMERS,
    ORDERS,
    PRODUCTS,
    REVIEWS,
    create_client,
    doc_to_dict,
    ensure_indexes,
    get_db,
    insert_ack,
    parse_object_id,
    update_ack,
)
from errors import ApiError, register_error_handlers
from filters import build_product_filter, parse_filter_params
from logger import configure_logging, get_logger
from schemas import Customer, FilterStats, OrderInfo, Review

configure_logging()
logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = create_client(settings)
    app.state.db = client[settings.database_name]
    # checkout must not run without the idempotencyKey unique index
    try:
        ensure_indexes(app.state.db)
    except Exception:
        logger.exception("Could not create indexes on %s", settings.database_name)
        client.close()
        raise
    logger.info("Connected to database %s", settings.database_name)
    yield
    client.close()


# FastAPI app
app = FastAPI(title="Stylique Storefront API", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)


# Products
@app.get("/products/category/{category}")
def products_by_category(category: str, db: Database = Depends(get_db)):
    try:
        return [doc_to_dict(p) for p in db[PRODUCTS].find({"category": category})]
    except Exception as e:
        logger.exception("Error fetching products for category %r", category)
        raise ApiError("Failed to fetch products", str(e))


@app.get("/products")
def list_products(
    category: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    rating: Optional[str] = None,
    search: Optional[str] = None,
    db: Database = Depends(get_db),
):
    params = parse_filter_params(category, min_price, max_price, rating, search)
    query = build_product_filter(params)
    try:
        return [doc_to_dict(p) for p in db[PRODUCTS].find(query)]
    except Exception as e:
        logger.exception("Error filtering products")
        raise ApiError("Unable to fetch products", str(e))


@app.get("/products/filter-stats", response_model=FilterStats)
def filter_stats(db: Database = Depends(get_db)):
    pipeline = [
        {
            "$group": {
                "_id": None,
                "minPrice": {"$min": "$price"},
                "maxPrice": {"$max": "$price"},
                "minRating": {"$min": "$rating"},
                "maxRating": {"$max": "$rating"},
            }
        }
    ]
    try:
        agg = list(db[PRODUCTS].aggregate(pipeline))
    except Exception as e:
        logger.exception("Error computing filter stats")
        raise ApiError("Failed to compute filter statistics", str(e))
    stats: Dict[str, Any] = agg[0] if agg else {}
    return {
        "price": {"min": stats.get("minPrice"), "max": stats.get("maxPrice")},
        "rating": {"min": stats.get("minRating"), "max": stats.get("maxRating")},
    }


@app.get("/categories", response_model=List[str])
def get_categories(db: Database = Depends(get_db)):
    try:
        return db[PRODUCTS].distinct("category")
    except Exception as e:
        logger.exception("Error fetching categories")
        raise ApiError("Failed to fetch categories", str(e))


@app.get("/products/{product_id}")
def get_product(product_id: str, db: Database = Depends(get_db)):
    oid = parse_object_id(product_id)
    if oid is None:
        return None
    try:
        return doc_to_dict(db[PRODUCTS].find_one({"_id": oid}))
    except Exception as e:
        logger.exception("Error fetching product %s", product_id)
        raise ApiError("Failed to fetch the product", str(e))


# Reviews
@app.get("/reviews/{product_id}")
def get_reviews(product_id: str, db: Database = Depends(get_db)):
    try:
        return [doc_to_dict(r) for r in db[REVIEWS].find({"productId": product_id})]
    except Exception as e:
        logger.exception("Error fetching reviews for %s", product_id)
        raise ApiError("Failed to fetch reviews", str(e))


@app.post("/reviews")
def post_review(review: Review, db: Database = Depends(get_db)):
    doc = review.model_dump(mode="json")
    doc.setdefault("createdAt", datetime.now(timezone.utc))
    try:
        return insert_ack(db[REVIEWS].insert_one(doc))
    except Exception as e:
        logger.exception("Error posting review for %s", review.productId)
        raise ApiError("Failed to post review", str(e))


# Orders
@app.post("/checkout")
def checkout(order: OrderInfo, db: Database = Depends(get_db)):
    try:
        return insert_ack(place_order(db, order))
    except ApiError:
        raise
    except Exception as e:
        logger.exception("Error posting order")
        raise ApiError("Failed to post order", str(e))


@app.get("/checkout/{email}")
def orders_for_customer(email: str, db: Database = Depends(get_db)):
    try:
        return [doc_to_dict(o) for o in db[ORDERS].find({"email": email})]
    except Exception as e:
        logger.exception("Error fetching orders")
        raise ApiError("Failed to fetch orders", str(e))


# Customers
@app.put("/customers")
def upsert_customer(customer: Customer, db: Database = Depends(get_db)):
    data = customer.model_dump(mode="json")
    try:
        result = db[CUSTOMERS].update_one(
            {"email": data["email"]},
            {"$setOnInsert": data},
            upsert=True,
        )
    except Exception as e:
        logger.exception("Error saving customer")
        raise ApiError("Failed to save customer", str(e))
    return update_ack(result)


@app.get("/customers/{email}")
def get_customer(email: str, db: Database = Depends(get_db)):
    try:
        return doc_to_dict(db[CUSTOMERS].find_one({"email": email}))
    except Exception as e:
        logger.exception("Error fetching customer data")
        raise ApiError("Failed to fetch customer data", str(e))


# Health
@app.get("/", response_class=PlainTextResponse)
def root():
    return "Hello World!"


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

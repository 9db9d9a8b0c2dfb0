"""
Product search filters.

Translates the ``GET /products`` query string into a MongoDB predicate.
``parse_filter_params`` does the text handling; ``build_product_filter`` is
pure and only sees already-typed values.
"""
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from errors import InvalidFilterError
from logger import get_logger

logger = get_logger("filters")


@dataclass(frozen=True)
class ProductFilterParams:
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    rating: Optional[float] = None
    search: Optional[str] = None


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def parse_number(name: str, value: Optional[str]) -> Optional[float]:
    """Parse a numeric query value. Blank means absent; garbage is rejected."""
    if _blank(value):
        return None
    try:
        number = float(value.strip())
    except ValueError:
        raise InvalidFilterError("Invalid filter value", f"{name} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise InvalidFilterError("Invalid filter value", f"{name} must be a finite number, got {value!r}")
    return number


def parse_filter_params(
    category: Optional[str] = None,
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
    rating: Optional[str] = None,
    search: Optional[str] = None,
) -> ProductFilterParams:
    logger.debug(
        "raw filter params: category=%r minPrice=%r maxPrice=%r rating=%r search=%r",
        category, min_price, max_price, rating, search,
    )
    params = ProductFilterParams(
        category=category or None,
        min_price=parse_number("minPrice", min_price),
        max_price=parse_number("maxPrice", max_price),
        rating=parse_number("rating", rating),
        search=None if _blank(search) else search.strip(),
    )
    logger.debug("parsed filter params: %r", params)
    return params


def build_product_filter(params: ProductFilterParams) -> Dict[str, Any]:
    query: Dict[str, Any] = {}

    if params.category:
        query["category"] = params.category

    if params.min_price is not None or params.max_price is not None:
        price: Dict[str, float] = {}
        if params.min_price is not None:
            price["$gte"] = params.min_price
        if params.max_price is not None:
            price["$lte"] = params.max_price
        query["price"] = price

    if params.rating is not None:
        query["rating"] = {"$gte": params.rating}

    if params.search:
        # substring match, not a user-supplied pattern
        query["name"] = {"$regex": re.escape(params.search), "$options": "i"}

    logger.debug("product filter: %r", query)
    return query

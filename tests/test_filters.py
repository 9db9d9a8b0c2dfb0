"""Tests for product filter parsing and construction."""

import pytest

from database import PRODUCTS
from errors import InvalidFilterError
from filters import ProductFilterParams, build_product_filter, parse_filter_params, parse_number


def _names(db, params):
    return sorted(p["name"] for p in db[PRODUCTS].find(build_product_filter(params)))


class TestBuildProductFilter:
    def test_no_params_matches_everything(self, db, products):
        assert build_product_filter(ProductFilterParams()) == {}
        assert len(_names(db, ProductFilterParams())) == len(products)

    def test_category_is_exact_match(self):
        assert build_product_filter(ProductFilterParams(category="men")) == {"category": "men"}

    def test_price_range_is_inclusive(self, db):
        db[PRODUCTS].insert_many([
            {"name": "cheap", "price": 5},
            {"name": "mid", "price": 30},
            {"name": "dear", "price": 60},
            {"name": "edge", "price": 50},
        ])
        params = ProductFilterParams(min_price=10, max_price=50)
        assert build_product_filter(params) == {"price": {"$gte": 10, "$lte": 50}}
        assert _names(db, params) == ["edge", "mid"]

    def test_single_price_bound_is_open_ended(self):
        assert build_product_filter(ProductFilterParams(min_price=10)) == {"price": {"$gte": 10}}
        assert build_product_filter(ProductFilterParams(max_price=0)) == {"price": {"$lte": 0}}

    def test_rating_is_a_minimum(self, db):
        db[PRODUCTS].insert_many([
            {"name": "good", "rating": 4.5},
            {"name": "exact", "rating": 4},
            {"name": "meh", "rating": 3.9},
        ])
        assert _names(db, ProductFilterParams(rating=4)) == ["exact", "good"]

    def test_search_is_case_insensitive_substring(self, db, products):
        assert _names(db, ProductFilterParams(search="shirt")) == ["Blue Shirt", "Linen shirt (slim)"]

    def test_search_escapes_pattern_characters(self, db, products):
        assert _names(db, ProductFilterParams(search="(slim)")) == ["Linen shirt (slim)"]
        assert _names(db, ProductFilterParams(search=".*")) == []

    def test_combined(self, db, products):
        params = ProductFilterParams(category="men", min_price=10, rating=4, search="SHIRT")
        assert _names(db, params) == ["Blue Shirt"]


class TestParseFilterParams:
    def test_all_absent(self):
        assert parse_filter_params() == ProductFilterParams()

    def test_parses_numbers_and_trims_search(self):
        params = parse_filter_params("men", "10", "50.5", "4", "  shirt ")
        assert params == ProductFilterParams("men", 10.0, 50.5, 4.0, "shirt")

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_values_are_absent(self, value):
        params = parse_filter_params(category="", min_price=value, rating=value, search=value)
        assert params == ProductFilterParams()

    @pytest.mark.parametrize("value", ["abc", "10abc", "nan", "inf"])
    def test_garbage_numbers_are_rejected(self, value):
        with pytest.raises(InvalidFilterError) as exc:
            parse_number("minPrice", value)
        assert exc.value.status_code == 400
        assert "minPrice" in exc.value.details

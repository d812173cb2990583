"""Tests for cart line identity normalisation."""

import pytest
from protean.exceptions import ValidationError
from storefront.cart.cart import line_identity, normalize_reference, normalize_variant


class _Shop:
    def __init__(self, id):
        self.id = id


class TestNormalizeReference:
    def test_plain_string(self):
        assert normalize_reference("S1", "shop_id") == "S1"

    def test_strips_whitespace(self):
        assert normalize_reference("  S1 ", "shop_id") == "S1"

    def test_integer_becomes_string(self):
        assert normalize_reference(42, "product_id") == "42"

    def test_nested_mongo_style_reference(self):
        assert normalize_reference({"_id": "S1", "name": "Makola Crafts"}, "shop_id") == "S1"

    def test_nested_plain_id_reference(self):
        assert normalize_reference({"id": "S1"}, "shop_id") == "S1"

    def test_object_with_id(self):
        assert normalize_reference(_Shop("S7"), "shop_id") == "S7"

    @pytest.mark.parametrize("value", [None, "", "   ", {}, {"name": "no id"}])
    def test_missing_reference_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            normalize_reference(value, "shop_id")
        assert exc_info.value.messages == {"shop_id": ["is required"]}


class TestNormalizeVariant:
    @pytest.mark.parametrize("value", [None, "", "  ", {}])
    def test_absent_variant_is_none(self, value):
        assert normalize_variant(value) is None

    def test_variant_is_kept(self):
        assert normalize_variant("red") == "red"

    def test_nested_variant(self):
        assert normalize_variant({"_id": "red"}) == "red"


class TestLineIdentity:
    def test_identity_tuple(self):
        assert line_identity("P1", "S1", "red") == ("P1", "S1", "red")

    def test_base_product_identity(self):
        assert line_identity("P1", "S1") == ("P1", "S1", None)

    def test_equivalent_references_match(self):
        assert line_identity("P1", {"_id": "S1"}, "") == line_identity("P1", "S1", None)

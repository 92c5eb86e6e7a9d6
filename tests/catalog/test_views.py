"""Tests for photo decoding and view records."""

import pytest

from brocante.catalog.views import CatalogPage, decode_photo, encode_photo


class TestDecodePhoto:
    """Tests for decode_photo."""

    def test_json_array(self) -> None:
        """Arrays keep their order."""
        assert decode_photo('["front.jpg", "back.jpg", "side.jpg"]') == [
            "front.jpg",
            "back.jpg",
            "side.jpg",
        ]

    @pytest.mark.parametrize("raw", [None, ""])
    def test_missing_photo(self, raw: str | None) -> None:
        """No stored value decodes to no photos."""
        assert decode_photo(raw) == []

    def test_bare_string(self) -> None:
        """A single JSON string becomes a one-element list."""
        assert decode_photo('"only.jpg"') == ["only.jpg"]

    @pytest.mark.parametrize("raw", ["not json", '["unterminated', "{broken"])
    def test_malformed_json(self, raw: str) -> None:
        """Malformed JSON decodes to an empty list without raising."""
        assert decode_photo(raw, product_id=3) == []

    @pytest.mark.parametrize("raw", ['{"a": 1}', "42", "null", "true"])
    def test_unexpected_shape(self, raw: str) -> None:
        """Valid JSON that is not a list or string decodes to an empty list."""
        assert decode_photo(raw) == []

    def test_null_items_dropped(self) -> None:
        """Null entries are skipped, other scalars stringified."""
        assert decode_photo('["a.jpg", null, 7]') == ["a.jpg", "7"]

    def test_encode_round_trip(self) -> None:
        """Encoded references decode back in order."""
        assert decode_photo(encode_photo(("b.jpg", "a.jpg"))) == ["b.jpg", "a.jpg"]


class TestCatalogPage:
    """Tests for CatalogPage navigation flags."""

    def test_out_of_range(self) -> None:
        """A page past the last one is out of range."""
        assert CatalogPage(current_page=4, pages_count=3).is_out_of_range
        assert not CatalogPage(current_page=3, pages_count=3).is_out_of_range

    def test_empty_catalog_is_out_of_range(self) -> None:
        """Page 1 of an empty catalog is past the (zero) last page."""
        assert CatalogPage(current_page=1, pages_count=0).is_out_of_range

    def test_navigation(self) -> None:
        """Next/previous flags follow the page position."""
        middle = CatalogPage(current_page=2, pages_count=3)
        assert middle.has_next and middle.has_prev

        first = CatalogPage(current_page=1, pages_count=3)
        assert first.has_next and not first.has_prev

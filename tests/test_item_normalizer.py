"""Tests for the item normalizer."""

from datetime import date

import pytest

from capture_hub.ingestion.normalizer import ItemNormalizer

OLEMISS_URL = "https://www.olemisssports.com/calendar"
GENERIC_URL = "https://www.example.com/events"

CARD = (
    '<div class="s-game-card-standard__header">'
    '<div data-test-id="s-game-card-standard__header-game-date-details"><span>May 18</span></div>'
    '<span data-test-id="s-game-card-standard__header-game-team-score">L 1-10 (F/5)</span>'
    "</div>"
)


@pytest.fixture
def normalizer() -> ItemNormalizer:
    """Normalizer with a fixed clock."""
    return ItemNormalizer(clock=lambda: 1700000000000)


class TestItemNormalizer:
    """Tests for ItemNormalizer.normalize_item."""

    def test_identity_fields(self, normalizer: ItemNormalizer) -> None:
        """Test uid, Title and originUrl on a generic item."""
        item = normalizer.normalize_item({"Location": "Oxford"}, "Upcoming  Events", 3, GENERIC_URL, "example.com")

        assert item["uid"] == "upcoming-events-1700000000000-3"
        assert item["Title"] == "Upcoming  Events"
        assert item["originUrl"] == GENERIC_URL
        assert item["Location"] == "Oxford"
        assert item["ImageUrl"] == []

    def test_disallowed_fields_dropped(self, normalizer: ItemNormalizer) -> None:
        """Test that only allowed fields survive."""
        raw = {
            "Location": "Oxford",
            "position": 1,
            "_STATUS": "OK",
            "Sports": "SB",
            "Score": "W 1-0",
            "Tickets": "https://tickets",
        }
        item = normalizer.normalize_item(raw, "Events", 0, GENERIC_URL, "example.com")

        assert set(item) <= set(ItemNormalizer.BASE_FIELDS) | {"originUrl"}
        assert "Sports" not in item
        assert "Score" not in item
        assert "Tickets" not in item

    def test_site_fields_for_recognized_site(self, normalizer: ItemNormalizer) -> None:
        """Test the extended allowed set for the recognized site."""
        raw = {"EventDate": "May 18", "Location": "Tucson", "Sports": "SB", "Opponent": "Arizona"}
        item = normalizer.normalize_item(raw, "OleSports", 1, OLEMISS_URL, "olemisssports.com")

        assert item["EventDate"] == "May 18"
        assert item["Sports"] == "SB"
        assert "Opponent" not in item
        assert set(item) <= set(ItemNormalizer.BASE_FIELDS + ItemNormalizer.SITE_FIELDS) | {"originUrl"}

    def test_enrichment_overlay(self, normalizer: ItemNormalizer) -> None:
        """Test that game-card fields are overlaid for the recognized site."""
        raw = {"DetailSrc": CARD, "Sports": "SB", "Location": "Tucson"}
        item = normalizer.normalize_item(raw, "OleSports", 0, OLEMISS_URL, "olemisssports.com")

        assert item["Date"] == f"{date.today().year}-05-18"
        assert item["Score"] == "L 1-10 (F/5)"
        assert item["EventDate"] == "May 18"
        assert item["DetailSrc"] == CARD

    def test_no_enrichment_for_other_sites(self, normalizer: ItemNormalizer) -> None:
        """Test that card markup is ignored elsewhere."""
        item = normalizer.normalize_item({"DetailSrc": CARD}, "Events", 0, GENERIC_URL, "example.com")
        assert "Score" not in item
        assert "Date" not in item

    def test_raw_title_and_uid_kept(self, normalizer: ItemNormalizer) -> None:
        """Test that a raw Title or uid overrides the generated value."""
        raw = {"Title": "Custom", "uid": "events-1-0"}
        item = normalizer.normalize_item(raw, "Events", 0, GENERIC_URL, "example.com")
        assert item["Title"] == "Custom"
        assert item["uid"] == "events-1-0"

    def test_null_raw_title_kept_as_none(self, normalizer: ItemNormalizer) -> None:
        """Test that a null Title is carried through for filtering."""
        item = normalizer.normalize_item({"Title": None}, "Events", 0, GENERIC_URL, "example.com")
        assert item["Title"] is None

    def test_date_normalized(self, normalizer: ItemNormalizer) -> None:
        """Test loose and canonical dates."""
        loose = normalizer.normalize_item({"Date": "MAY SAT 24"}, "E", 0, GENERIC_URL, "example.com")
        canonical = normalizer.normalize_item({"Date": "2024-02-29"}, "E", 1, GENERIC_URL, "example.com")
        odd = normalizer.normalize_item({"Date": "TBA"}, "E", 2, GENERIC_URL, "example.com")

        assert loose["Date"] == f"{date.today().year}-05-24"
        assert canonical["Date"] == "2024-02-29"
        assert odd["Date"] == "TBA"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("https://img/1.png", ["https://img/1.png"]),
            (["https://img/1.png", "", None, 3], ["https://img/1.png"]),
            ("", []),
            (None, []),
            ({"url": "x"}, []),
        ],
    )
    def test_image_url_always_list(self, normalizer: ItemNormalizer, value, expected) -> None:
        """Test ImageUrl coercion."""
        item = normalizer.normalize_item({"ImageUrl": value}, "E", 0, GENERIC_URL, "example.com")
        assert item["ImageUrl"] == expected

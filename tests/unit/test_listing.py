"""
Unit Tests - List View
"""
import pytest

from studio.domain.exceptions import StudioValidationError
from studio.domain.listing import ListView

ROWS = [
    {"name": "Carla", "city": "Austin", "total": 30},
    {"name": "alice", "city": "Boston", "total": None},
    {"name": "Bob", "city": "austin", "total": 10},
    {"name": "Dave", "city": "Denver", "total": 20},
]


class TestListView:
    """Tests for search, sort and pagination"""

    view = ListView(search_fields=("name", "city"), page_size=2)

    def test_no_parameters_returns_everything_in_order(self):
        page = self.view.apply(ROWS)

        assert page.items == ROWS
        assert page.total == 4
        assert page.total_pages == 1

    def test_search_is_case_insensitive_substring(self):
        page = self.view.apply(ROWS, search="AUST")

        assert [row["name"] for row in page.items] == ["Carla", "Bob"]
        assert page.total == 2

    def test_blank_search_matches_all(self):
        assert self.view.apply(ROWS, search="   ").total == 4

    def test_sort_ignores_case(self):
        page = self.view.apply(ROWS, sort_key="name")

        assert [row["name"] for row in page.items] == ["alice", "Bob", "Carla", "Dave"]

    def test_missing_values_sort_last_both_ways(self):
        ascending = self.view.apply(ROWS, sort_key="total")
        descending = self.view.apply(ROWS, sort_key="total", descending=True)

        assert [row["total"] for row in ascending.items] == [10, 20, 30, None]
        assert [row["total"] for row in descending.items] == [30, 20, 10, None]

    def test_pagination_reports_unpaged_total(self):
        page = self.view.apply(ROWS, sort_key="name", page=2)

        assert [row["name"] for row in page.items] == ["Carla", "Dave"]
        assert page.total == 4
        assert page.total_pages == 2

    def test_page_past_the_end_is_empty(self):
        page = self.view.apply(ROWS, page=5, page_size=3)

        assert page.items == []
        assert page.total == 4

    def test_unknown_sort_key_is_rejected(self):
        with pytest.raises(StudioValidationError):
            self.view.apply(ROWS, sort_key="password")

    def test_default_sort_from_view(self):
        view = ListView(search_fields=("name",), sort_key="total", descending=True)

        assert view.apply(ROWS).items[0]["name"] == "Carla"

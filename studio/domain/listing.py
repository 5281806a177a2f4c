"""
List View

One parameterized search/sort/paginate utility for every list screen. The
storage layer always returns the full result set; this runs afterwards, in
the serving layer, on plain row dictionaries.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from studio.domain.exceptions import StudioValidationError

Row = Dict[str, Any]


@dataclass(frozen=True)
class ListPage:
    """One page of a filtered, sorted list"""
    items: List[Row]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size if self.page_size else 0


@dataclass(frozen=True)
class ListView:
    """
    Display configuration for one list endpoint.

    Attributes:
        search_fields: Row keys matched case-insensitively by substring
        sort_key: Default sort key; None keeps the storage order
        descending: Default sort direction
        page_size: Rows per page when a page is requested
    """
    search_fields: Tuple[str, ...]
    sort_key: Optional[str] = None
    descending: bool = False
    page_size: int = 10

    def matches(self, row: Row, term: str) -> bool:
        needle = term.strip().lower()
        if not needle:
            return True
        return any(
            needle in str(row[name]).lower()
            for name in self.search_fields
            if row.get(name) is not None
        )

    def sort(self, rows: Sequence[Row], key: Optional[str] = None, descending: Optional[bool] = None) -> List[Row]:
        key = key or self.sort_key
        if key is None:
            return list(rows)
        if rows and key not in rows[0]:
            raise StudioValidationError(f"Cannot sort by {key}")
        reverse = self.descending if descending is None else descending

        present = [row for row in rows if row.get(key) is not None]
        missing = [row for row in rows if row.get(key) is None]
        present.sort(key=lambda row: _sortable(row[key]), reverse=reverse)
        # Rows without a value go last in either direction
        return present + missing

    def apply(
        self,
        rows: Sequence[Row],
        search: Optional[str] = None,
        sort_key: Optional[str] = None,
        descending: Optional[bool] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> ListPage:
        """
        Filter, sort and slice ``rows``.

        Without ``page`` every matching row is returned on a single page.
        """
        if search:
            rows = [row for row in rows if self.matches(row, search)]
        rows = self.sort(rows, sort_key, descending)
        total = len(rows)

        if page is None:
            return ListPage(items=rows, total=total, page=1, page_size=max(total, 1))

        size = page_size or self.page_size
        start = (page - 1) * size
        return ListPage(items=rows[start:start + size], total=total, page=page, page_size=size)


def _sortable(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    return value

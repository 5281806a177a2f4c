"""
Shared Route Dependencies
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from fastapi import Query, Response
from pydantic.alias_generators import to_snake

from studio.domain.listing import ListView


def get_now() -> datetime:
    """Current local time; every derived status is computed against it."""
    return datetime.now()


class ListQuery:
    """
    Optional display parameters accepted by every list endpoint.

    Without any of them the full result set comes back in storage order.
    """

    def __init__(
        self,
        search: Optional[str] = Query(None, description="Case-insensitive substring filter"),
        sort_by: Optional[str] = Query(None, alias="sortBy", description="Field to sort on"),
        descending: Optional[bool] = Query(None, description="Reverse the sort"),
        page: Optional[int] = Query(None, ge=1, description="1-based page number"),
        page_size: Optional[int] = Query(None, ge=1, le=200, alias="pageSize"),
    ):
        self.search = search
        self.sort_by = to_snake(sort_by) if sort_by else None
        self.descending = descending
        self.page = page
        self.page_size = page_size

    def apply(self, view: ListView, rows: Sequence[Dict[str, Any]], response: Response) -> List[Dict[str, Any]]:
        """Run ``view`` over ``rows`` and report the unpaged count in X-Total-Count."""
        result = view.apply(
            rows,
            search=self.search,
            sort_key=self.sort_by,
            descending=self.descending,
            page=self.page,
            page_size=self.page_size,
        )
        response.headers["X-Total-Count"] = str(result.total)
        return result.items

"""Query engine for the items listing.

Pipeline (per request, no caching - it's cheap next to a file reload):
1. Filter by search term (case-insensitive substring of name or category)
2. Slice the requested page
3. Derive pagination metadata from the filtered count

All functions are pure over a snapshot from the record store.
"""

import math
import re
from dataclasses import dataclass

from catalog_api.errors import NotFoundError
from catalog_api.models import Record, Snapshot
from catalog_api.schemas import Pagination

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass(frozen=True)
class QueryResult:
    results: list[Record]
    pagination: Pagination


def _leading_int(value: object) -> int | None:
    """Integer prefix of a query value (" 2.5" -> 2, "10abc" -> 10, "abc" -> None)."""
    if value is None or isinstance(value, bool):
        return None
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # more digits than int() will parse
        return None


def parse_positive_int(value: object, default: int) -> int:
    """Parse the integer prefix of a query value, falling back to ``default``.

    Missing, non-numeric, zero and negative values all fall back; there is no
    upper bound.
    """
    parsed = _leading_int(value)
    return parsed if parsed is not None and parsed >= 1 else default


def filter_records(snapshot: Snapshot, search_term: str | None) -> list[Record]:
    """Keep records whose name or category contains the term (case-insensitive).

    An empty or missing term keeps everything.
    """
    if not search_term:
        return list(snapshot)
    term = search_term.lower()
    return [r for r in snapshot if term in r.name.lower() or term in r.category.lower()]


def query(
    snapshot: Snapshot,
    search_term: str | None = None,
    page: object = None,
    limit: object = None,
    *,
    default_limit: int = DEFAULT_LIMIT,
) -> QueryResult:
    """Filter and paginate a snapshot.

    Args:
        snapshot: Records in insertion order.
        search_term: Optional substring filter.
        page: 1-based page number (raw query value accepted).
        limit: Page size (raw query value accepted).
        default_limit: Page size used when ``limit`` is missing or invalid.

    Returns:
        QueryResult with the page slice and pagination metadata.
    """
    page_num = parse_positive_int(page, DEFAULT_PAGE)
    limit_num = parse_positive_int(limit, default_limit)

    filtered = filter_records(snapshot, search_term)
    total = len(filtered)

    start = (page_num - 1) * limit_num
    end = start + limit_num

    return QueryResult(
        results=filtered[start:end],
        pagination=Pagination(
            current_page=page_num,
            total_items=total,
            total_pages=math.ceil(total / limit_num),
            items_per_page=limit_num,
            has_next_page=end < total,
            has_prev_page=page_num > 1,
        ),
    )


def find_by_id(snapshot: Snapshot, item_id: object) -> Record:
    """Look up a single record.

    Raises:
        NotFoundError: If no record has that id (an id without a leading integer
            never matches).
    """
    wanted = _leading_int(item_id)
    if wanted is not None:
        for record in snapshot:
            if record.id == wanted:
                return record
    raise NotFoundError("Item not found", detail={"id": str(item_id)})

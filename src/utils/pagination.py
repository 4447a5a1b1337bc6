"""Page slicing for list endpoints."""

import math
from typing import List, Sequence, Tuple, TypeVar

from schemas.common import Pagination

T = TypeVar("T")


def paginate(items: Sequence[T], page: int, limit: int) -> Tuple[List[T], Pagination]:
    """Slice a listing into one page.

    Args:
        items: The full, ordered listing.
        page: 1-based page number; values below 1 are treated as 1.
        limit: Page size; values below 1 are treated as 1.

    Returns:
        The page slice and its pagination descriptor.
    """
    page = max(page, 1)
    limit = max(limit, 1)
    total = len(items)
    start = (page - 1) * limit
    pagination = Pagination(
        page=page, limit=limit, total=total, pages=math.ceil(total / limit)
    )
    return list(items[start:start + limit]), pagination

"""
Offset pagination for list endpoints.

Query-string values arrive as strings, so parsing is lenient: anything that
isn't a number falls back to the defaults.
"""
import math
from typing import Dict, Tuple

from core.utils.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE


def _to_int(value, default: int) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return math.floor(number)


def paginate(page=DEFAULT_PAGE, limit=DEFAULT_PAGE_SIZE) -> Tuple[int, int, int]:
    """
    Normalize page and limit.

    Returns:
        (page, limit, skip) where 1 <= page <= MAX_PAGE, 1 <= limit <= 100 and
        skip = (page - 1) * limit
    """
    page = min(MAX_PAGE, max(1, _to_int(page, DEFAULT_PAGE)))
    limit = min(MAX_PAGE_SIZE, max(1, _to_int(limit, DEFAULT_PAGE_SIZE)))
    return page, limit, (page - 1) * limit


def page_metadata(page: int, limit: int, total: int) -> Dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        'current_page': page,
        'total_pages': total_pages,
        'total_count': total,
        'limit': limit,
        'has_next_page': page < total_pages,
        'has_previous_page': page > 1,
    }

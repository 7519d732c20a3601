"""Stage 6: Paginator: slice one page out of the diversified list."""

from typing import List, Sequence, Tuple, TypeVar

from giftrank.errors import InvalidArgument

T = TypeVar("T")


def paginate(items: Sequence[T], page: int, page_size: int) -> Tuple[List[T], bool]:
    """
    Return (items[page*page_size : page*page_size + page_size], has_more).

    has_more is True when items extend past the end of the requested page.
    Raises InvalidArgument for a negative page or page_size.
    """
    if page < 0:
        raise InvalidArgument(f"page must be >= 0, got {page}")
    if page_size < 0:
        raise InvalidArgument(f"page_size must be >= 0, got {page_size}")
    start = page * page_size
    end = start + page_size
    return list(items[start:end]), len(items) > end

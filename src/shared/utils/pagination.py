"""Page/limit normalization shared by every paginated listing."""

from dataclasses import dataclass

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


@dataclass(frozen=True)
class Page:
    """Normalized pagination window"""

    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def normalize_page(page: int | None, limit: int | None) -> Page:
    """
    Clamp caller-supplied pagination.

    page < 1 becomes 1; a missing or non-positive limit falls back to the
    default; limit is capped at MAX_PAGE_LIMIT.
    """
    page = page if page and page >= 1 else 1
    if not limit or limit < 1:
        limit = DEFAULT_PAGE_LIMIT
    return Page(page=page, limit=min(limit, MAX_PAGE_LIMIT))

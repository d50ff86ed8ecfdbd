from src.shared.utils.datetime import ensure_utc, utc_now
from src.shared.utils.generators import generate_cuid
from src.shared.utils.pagination import Page, normalize_page

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "Page",
    "normalize_page",
]

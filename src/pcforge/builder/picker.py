"""
Part Picker Module

Search, sort and paginate catalog parts, and classify every candidate
against the current build for the picker list.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil
from typing import Callable, Dict, Iterable, List, Sequence, Union, TYPE_CHECKING

from ..schemas import CandidateStatus
from .compatibility import item_compat_status

if TYPE_CHECKING:
    from ..schemas import Build, Part


SORT_KEYS: Dict[str, Callable[["Part"], object]] = {
    "price-asc": lambda p: p.price,
    "price-desc": lambda p: -p.price,
    "name-asc": lambda p: p.name.lower(),
    "brand-asc": lambda p: p.brand.lower(),
}
"""
Supported sort orders. Unknown keys leave the catalog order as is.
"""

DEFAULT_SORT = "price-asc"
ELLIPSIS = "…"


@dataclass
class Page:
    items: List["Part"]
    page: int
    per_page: int
    total_items: int
    total_pages: int

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "perPage": self.per_page,
            "totalItems": self.total_items,
            "totalPages": self.total_pages,
            "pageNumbers": page_numbers(self.page, self.total_pages),
        }


def _norm(value: str) -> str:
    return value.strip().lower()


def search_parts(
    parts: Iterable["Part"],
    query: str = "",
    brand: str = "",
    sort: str = DEFAULT_SORT,
) -> List["Part"]:
    """
    Filter and sort catalog parts.

    Parameters:
        parts: parts of a single category, in catalog order
        query: case-insensitive substring matched against name or brand
        brand: exact brand filter, empty for all brands
        sort: one of ``SORT_KEYS``

    Returns:
        matching parts, stably sorted
    """
    query_norm = _norm(query)
    matched = [
        p
        for p in parts
        if (not query_norm or query_norm in p.name.lower() or query_norm in p.brand.lower())
        and (not brand or p.brand == brand)
    ]
    key = SORT_KEYS.get(sort)
    if key is not None:
        matched.sort(key=key)
    return matched


def paginate(items: Sequence["Part"], page: int = 1, per_page: int = 25) -> Page:
    per_page = max(1, per_page)
    total_pages = max(1, ceil(len(items) / per_page))
    page = min(max(1, page), total_pages)
    start = (page - 1) * per_page
    return Page(
        items=list(items[start:start + per_page]),
        page=page,
        per_page=per_page,
        total_items=len(items),
        total_pages=total_pages,
    )


def page_numbers(page: int, total_pages: int) -> List[Union[int, str]]:
    """Page links with gaps, at most seven entries."""
    if total_pages <= 7:
        return list(range(1, total_pages + 1))
    if page <= 4:
        return [1, 2, 3, 4, 5, ELLIPSIS, total_pages]
    if page >= total_pages - 3:
        return [1, ELLIPSIS] + list(range(total_pages - 4, total_pages + 1))
    return [1, ELLIPSIS, page - 1, page, page + 1, ELLIPSIS, total_pages]


def pick_candidates(
    build: "Build",
    category: str,
    parts: Iterable["Part"],
    free_mode: bool = False,
) -> List[CandidateStatus]:
    # one independent what-if evaluation per candidate
    return [
        CandidateStatus(part=part, compat=item_compat_status(build, category, part, free_mode))
        for part in parts
    ]

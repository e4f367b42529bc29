# src/jobboard/pipeline/paginate.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar, Union

T = TypeVar("T")

ELLIPSIS = "…"
# Viewports at or below this width get no neighbouring page buttons
NARROW_VIEWPORT = 550
DEFAULT_NEIGHBORS = 2


@dataclass
class Page(Generic[T]):
    items: List[T]
    page: int
    total_pages: int


def total_pages_for(count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return max(1, math.ceil(count / page_size))


def paginate(items: Sequence[T], page: int = 1, page_size: int = 10) -> Page[T]:
    """
    Slice out one page. There is always at least one page, and `page` is
    clamped into range.
    """
    total = total_pages_for(len(items), page_size)
    page = min(max(1, page), total)
    start = (page - 1) * page_size
    return Page(items=list(items[start:start + page_size]), page=page, total_pages=total)


def neighbors_for_width(width: int) -> int:
    return 0 if width <= NARROW_VIEWPORT else DEFAULT_NEIGHBORS


def page_range(current: int, total: int, neighbors: int = DEFAULT_NEIGHBORS) -> List[Union[int, str]]:
    """
    Compact page index, e.g. [1, "…", 4, 5, 6, 7, 8, "…", 20].

    First and last pages are always present. A gap of a single page is shown
    as that page; anything wider collapses into one ELLIPSIS.
    """
    shown = [
        i for i in range(1, total + 1)
        if i == 1 or i == total or current - neighbors <= i <= current + neighbors
    ]
    out: List[Union[int, str]] = []
    last = None
    for i in shown:
        if last is not None:
            if i - last == 2:
                out.append(last + 1)
            elif i - last > 2:
                out.append(ELLIPSIS)
        out.append(i)
        last = i
    return out


def clamp_page(raw: Union[str, int, None], current: int, total: int) -> int:
    """
    Page typed into the ellipsis prompt. Garbage keeps the current page,
    numbers are clamped into [1, total].
    """
    try:
        target = int(str(raw).strip())
    except (TypeError, ValueError):
        return current
    return min(max(1, target), max(1, total))

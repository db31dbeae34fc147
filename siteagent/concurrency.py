"""Ordered task execution for discovery and dispatch."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from siteagent.config import ConcurrencyMode

T = TypeVar("T")
R = TypeVar("R")


def run_ordered(
    func: Callable[[T], R],
    items: Sequence[T],
    mode: ConcurrencyMode = ConcurrencyMode.SEQUENTIAL,
    max_workers: int = 4,
) -> list[R]:
    """Apply func to every item and return outcomes in input order.

    In parallel mode tasks run on a thread pool; outcomes are still joined in
    the original order so callers emit the same trace either way.
    """
    if mode == ConcurrencyMode.SEQUENTIAL or len(items) <= 1:
        return [func(item) for item in items]

    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as pool:
        return list(pool.map(func, items))

"""
pool.py – Thread-pool map and pairwise tree reduction.

Both helpers collect results with as_completed and stop at the first
failure they observe: futures that have not started are cancelled, those
already running finish and their results are dropped.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _gather(futures: Sequence[Future]) -> list:
    """Results in submission order; re-raise the first failure observed."""
    index = {fut: i for i, fut in enumerate(futures)}
    results: list = [None] * len(futures)
    try:
        for fut in as_completed(index):
            results[index[fut]] = fut.result()
    except BaseException:
        for fut in futures:
            fut.cancel()
        raise
    return results


def parallel_map(
    func: Callable[[T], R],
    items: Sequence[T],
    workers: int,
) -> list[R]:
    """
    Apply func to every item on a thread pool.

    Returns
    -------
    list of results, index-aligned with items (not completion order).
    """
    items = list(items)
    if not items:
        return []
    n_threads = max(1, min(workers, len(items)))
    with ThreadPoolExecutor(max_workers=n_threads) as exe:
        return _gather([exe.submit(func, item) for item in items])


def tree_reduce(
    combine: Callable[[T, T], T],
    values: Sequence[T],
    identity: T,
    workers: int,
) -> T:
    """
    Reduce values with a pairwise binary tree, one pool round per level.

    combine must be associative and commutative, and identity absorbing
    (combine(identity, x) == x); the tree shape then does not matter.
    """
    level = list(values)
    if not level:
        return identity

    n_threads = max(1, min(workers, len(level) // 2))
    with ThreadPoolExecutor(max_workers=n_threads) as exe:
        depth = 0
        while len(level) > 1:
            carry = [level[-1]] if len(level) % 2 else []
            futures = [
                exe.submit(combine, level[i], level[i + 1])
                for i in range(0, len(level) - 1, 2)
            ]
            level = _gather(futures) + carry
            depth += 1
            logger.debug("Tree reduction level %d: %d values left", depth, len(level))
    return level[0]

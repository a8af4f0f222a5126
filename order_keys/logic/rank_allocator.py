"""Rank allocation for user-reorderable collections.

Assigns fractional order keys ("ranks") so that moving one record never
rewrites the stored position of any other record. A collection's ranks
sort ascending in display order; new ranks are derived from neighbours:

- ``first()`` seeds an empty collection.
- ``after()`` / ``before()`` step away from a single neighbour.
- ``between()`` takes the midpoint of two neighbours (fractional indexing).
- ``get_target_order()`` picks a rank for an arbitrary drop position.
- ``normalize()`` reassigns evenly spaced ranks after gap exhaustion.

All functions are pure: they read their arguments and return new values.
Persisting the result, and serialising concurrent writers, is the
caller's job.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence

logger = logging.getLogger(__name__)

# Persisted ranks depend on these values; they must not change between releases.
MIN_ORDER: float = 0.0
MAX_ORDER: float = 1_000_000.0
INITIAL_STEP: float = 1000.0
MINIMUM_ORDER_GAP: float = 1.0


class GapExhaustion(Exception):
    """No safe step or subdivision is left between two ranks.

    Raised by ``after()`` near ``MAX_ORDER`` and by ``between()`` when the
    gap is below ``MINIMUM_ORDER_GAP``. Recover by renormalising the
    collection with ``normalize()``.
    """

    code = "RANK_GAP_EXHAUSTED"
    message = "Reordering needed - gaps between items too small"

    def __init__(
        self,
        *,
        before: Optional[float] = None,
        after: Optional[float] = None,
        current: Optional[float] = None,
    ) -> None:
        super().__init__(self.message)
        self.before = before
        self.after = after
        self.current = current

    def __reduce__(self):
        # Context is keyword-only, so rebuild from the instance dict instead of ``args``.
        return (self.__class__, (), self.__dict__.copy())


class UnsafeGap(NamedTuple):
    """Adjacent pair at ``index``/``index + 1`` that cannot be subdivided."""

    index: int
    before: float
    after: float

    @property
    def gap(self) -> float:
        return self.after - self.before


def first() -> float:
    """Return the rank for the first record of an empty collection.

    Starts at ``INITIAL_STEP`` rather than ``MIN_ORDER`` to leave room for a
    later move to the very top.
    """
    return INITIAL_STEP


def after(current: float) -> float:
    """Return the rank one step after ``current``.

    Raises ``GapExhaustion`` once ``current`` is within one step of
    ``MAX_ORDER``.
    """
    if current >= MAX_ORDER - INITIAL_STEP:
        logger.info("rank_allocator.after.exhausted current=%s", current)
        raise GapExhaustion(current=current)
    return current + INITIAL_STEP


def before(current: float) -> float:
    """Return a rank sorting before ``current``; never raises.

    Near the origin the rank halves towards ``MIN_ORDER`` instead of
    stepping below it.
    """
    if current <= INITIAL_STEP:
        return current / 2
    return current - INITIAL_STEP


def is_gap_safe(before: float, after: float) -> bool:
    return before < after and (after - before) >= MINIMUM_ORDER_GAP


def between(before: float, after: float) -> float:
    """Return the midpoint of ``before`` and ``after``.

    Each call halves the remaining gap; once it drops below
    ``MINIMUM_ORDER_GAP`` (or the bounds are not ascending) the call raises
    ``GapExhaustion``.
    """
    if not is_gap_safe(before, after):
        logger.info("rank_allocator.between.exhausted before=%s after=%s", before, after)
        raise GapExhaustion(before=before, after=after)
    return before + (after - before) / 2


def get_target_order(existing_ranks: Iterable[float], target_position: int) -> float:
    """Return the rank for a record dropped at ``target_position``.

    ``existing_ranks`` are the ranks of the other records; they are sorted
    (as a copy) before use, so an unsorted snapshot is accepted.

    - empty collection: ``first()``
    - ``target_position <= 0``: one step before the smallest rank
    - ``target_position >= len``: two steps past the largest rank
    - otherwise the midpoint of the two neighbours. When that gap is
      exhausted the move still succeeds: inside the list the rank lands half
      the minimum gap below the ``after`` neighbour, in the last gap it lands
      one step past the ``before`` neighbour. Neither fallback is guaranteed
      to stay between the neighbours: the last-gap one passes the ``after``
      neighbour, and the interior one ties with the ``before`` neighbour at
      a gap of exactly half ``MINIMUM_ORDER_GAP`` and sorts before it when
      the gap is smaller. Callers that cannot tolerate that should
      renormalise instead.
    """
    ranks: List[float] = sorted(existing_ranks)
    if not ranks:
        return first()

    if target_position <= 0:
        return ranks[0] - INITIAL_STEP

    if target_position >= len(ranks):
        return ranks[-1] + INITIAL_STEP * 2

    before_rank = ranks[target_position - 1]
    after_rank = ranks[target_position]
    try:
        return between(before_rank, after_rank)
    except GapExhaustion:
        if target_position < len(ranks) - 1:
            result = after_rank - (MINIMUM_ORDER_GAP / 2)
        else:
            result = before_rank + INITIAL_STEP
        logger.warning(
            "rank_allocator.target.fallback position=%s before=%s after=%s result=%s",
            target_position,
            before_rank,
            after_rank,
            result,
        )
        return result


def normalize(ranks_in_display_order: Sequence[float]) -> List[float]:
    """Return evenly spaced ranks, one per position of the input.

    Only the length and positional order of the argument matter; the values
    inside it are ignored. The argument must already be in the desired
    display order, and the caller must persist the whole result as one batch.
    """
    return [INITIAL_STEP * (i + 1) for i in range(len(ranks_in_display_order))]


def find_unsafe_gaps(ranks_in_display_order: Sequence[float]) -> List[UnsafeGap]:
    """Return the adjacent pairs that ``between()`` would refuse to split.

    Pairs are taken in the given (display) order, so out-of-order neighbours
    are reported as well as sub-unit gaps.
    """
    unsafe: List[UnsafeGap] = []
    for index in range(len(ranks_in_display_order) - 1):
        lo = ranks_in_display_order[index]
        hi = ranks_in_display_order[index + 1]
        if not is_gap_safe(lo, hi):
            unsafe.append(UnsafeGap(index=index, before=lo, after=hi))
    return unsafe


def needs_normalization(ranks_in_display_order: Sequence[float]) -> bool:
    """True when the collection should be renormalised before further moves.

    That is the case when any adjacent gap is unsafe, when a rank fell below
    ``MIN_ORDER``, or when the last rank leaves no room for ``after()``.
    """
    if not ranks_in_display_order:
        return False
    if find_unsafe_gaps(ranks_in_display_order):
        return True
    if min(ranks_in_display_order) < MIN_ORDER:
        return True
    return max(ranks_in_display_order) >= MAX_ORDER - INITIAL_STEP


__all__ = [
    "MIN_ORDER",
    "MAX_ORDER",
    "INITIAL_STEP",
    "MINIMUM_ORDER_GAP",
    "GapExhaustion",
    "UnsafeGap",
    "first",
    "after",
    "before",
    "between",
    "is_gap_safe",
    "get_target_order",
    "normalize",
    "find_unsafe_gaps",
    "needs_normalization",
]

"""Reorder planning over collection snapshots.

Turns a reorder gesture into the exact rank writes a caller must persist.
Inputs are snapshots of ``RankedItem`` listed in display order; nothing is
stored here. A move, insert or append yields one update for one record. A
normalisation yields an update for every record and must be persisted as
one batch.
"""

from __future__ import annotations

from typing import List, Optional, Sequence
import logging

from order_keys.logic import rank_allocator
from order_keys.logic.rank_allocator import GapExhaustion
from order_keys.models.ranks import RankedItem, RankPlan, RankUpdate

logger = logging.getLogger(__name__)

POLICY_NUDGE = "nudge"
POLICY_NORMALIZE = "normalize"


class UnknownItem(LookupError):
    """The moved item id is not part of the snapshot."""

    code = "REORDER_ITEM_NOT_FOUND"

    def __init__(self, item_id: str) -> None:
        super().__init__(f"item not found: {item_id}")
        self.item_id = item_id


class DuplicateItem(ValueError):
    """The snapshot lists the same id more than once."""

    code = "REORDER_DUPLICATE_ID"

    def __init__(self, item_id: str) -> None:
        super().__init__(f"duplicate item id: {item_id}")
        self.item_id = item_id


def _require_unique(items: Sequence[RankedItem], new_id: Optional[str] = None) -> None:
    seen: set[str] = set()
    if new_id is not None:
        seen.add(new_id)
    for item in items:
        if item.id in seen:
            raise DuplicateItem(item.id)
        seen.add(item.id)


def _normalized_plan(ids: Sequence[str]) -> RankPlan:
    ranks = rank_allocator.normalize([0.0] * len(ids))
    return RankPlan(
        updates=[RankUpdate(id=i, rank=r) for i, r in zip(ids, ranks)],
        normalized=True,
    )


def _clamp(index: int, size: int) -> int:
    if index <= 0:
        return 0
    return min(index, size)


def _place(items: Sequence[RankedItem], item_id: str, index: int, policy: str) -> RankPlan:
    """Plan a rank for ``item_id`` dropped at ``index`` among ``items``.

    ``items`` must not contain ``item_id``.
    """
    ranks = [item.rank for item in items]
    pos = _clamp(index, len(ranks))
    in_middle = 0 < pos < len(ranks)
    gap_safe = True
    if in_middle:
        lo, hi = sorted(ranks)[pos - 1 : pos + 1]
        gap_safe = rank_allocator.is_gap_safe(lo, hi)

    if not gap_safe and policy == POLICY_NORMALIZE:
        ids = [item.id for item in items]
        ids.insert(pos, item_id)
        logger.info("reorder.place.normalize item_id=%s index=%s size=%s", item_id, pos, len(ids))
        return _normalized_plan(ids)

    rank = rank_allocator.get_target_order(ranks, pos)
    return RankPlan(updates=[RankUpdate(id=item_id, rank=rank)], fallback=not gap_safe)


def plan_append(items: Sequence[RankedItem], new_id: str) -> RankPlan:
    """Plan the rank of a new record appended after the last one.

    When the last rank has no room left below ``MAX_ORDER`` the collection
    is renormalised and the new record follows the normalised tail. A
    collection too large to fit even after renormalising raises
    ``GapExhaustion``.
    """
    _require_unique(items, new_id)
    if not items:
        return RankPlan(updates=[RankUpdate(id=new_id, rank=rank_allocator.first())])
    last = max(item.rank for item in items)
    try:
        return RankPlan(updates=[RankUpdate(id=new_id, rank=rank_allocator.after(last))])
    except GapExhaustion:
        logger.info("reorder.append.renormalize new_id=%s size=%s last=%s", new_id, len(items), last)
    plan = _normalized_plan([item.id for item in items])
    tail = plan.updates[-1].rank
    plan.updates.append(RankUpdate(id=new_id, rank=rank_allocator.after(tail)))
    return plan


def plan_insert(
    items: Sequence[RankedItem],
    new_id: str,
    position: int,
    policy: str = POLICY_NUDGE,
) -> RankPlan:
    """Plan the rank of a new record inserted at ``position``."""
    _require_unique(items, new_id)
    return _place(items, new_id, position, policy)


def plan_move(
    items: Sequence[RankedItem],
    item_id: str,
    target_index: int,
    policy: str = POLICY_NUDGE,
) -> RankPlan:
    """Plan the new rank of an existing record moved to ``target_index``.

    The moved record is taken out of the snapshot first; ``target_index`` is
    its index in the resulting list, clamped to the list bounds.
    """
    _require_unique(items)
    remaining: List[RankedItem] = [item for item in items if item.id != item_id]
    if len(remaining) == len(items):
        raise UnknownItem(item_id)
    plan = _place(remaining, item_id, target_index, policy)
    logger.info(
        "reorder.move item_id=%s target_index=%s updates=%s normalized=%s fallback=%s",
        item_id,
        target_index,
        len(plan.updates),
        plan.normalized,
        plan.fallback,
    )
    return plan


def plan_normalize(items: Sequence[RankedItem]) -> RankPlan:
    """Plan evenly spaced ranks for ``items`` in the order they are listed.

    Positions come from the list order, never from the stored ranks.
    """
    _require_unique(items)
    return _normalized_plan([item.id for item in items])


__all__ = [
    "POLICY_NUDGE",
    "POLICY_NORMALIZE",
    "UnknownItem",
    "DuplicateItem",
    "plan_append",
    "plan_insert",
    "plan_move",
    "plan_normalize",
]

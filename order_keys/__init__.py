"""Order keys service.

Allocates fractional order keys ("ranks") for user-reorderable collections
so a move rewrites one record instead of the whole list. The allocation
algorithm lives in `order_keys/logic/rank_allocator.py`, reorder planning in
`order_keys/logic/reorder.py`, and the stateless HTTP surface in
`order_keys/routes/`.
"""

from __future__ import annotations

from order_keys.main import create_app

__all__ = ["create_app"]

"""History Filter - query shape and cursor strategy for paginated history.

Invariants:
    - Every filter field is optional; present fields are AND'd together
    - A page never holds more than PAGE_SIZE transfers
    - from_ts present → BY_TIMESTAMP (timestamp ASC, id ASC); otherwise BY_ID (id ASC)

Design Decisions:
    - Explicit CursorStrategy enum instead of an inline conditional so the
      ordering guarantee of each cursor is stated in one place
"""

from dataclasses import dataclass

from fname_registry.core.domain_types import CursorStrategy

PAGE_SIZE = 100

# Ordering keys per strategy, most significant first. All ascending.
CURSOR_ORDERING: dict[CursorStrategy, tuple[str, ...]] = {
    CursorStrategy.BY_ID: ("id",),
    CursorStrategy.BY_TIMESTAMP: ("timestamp", "id"),
}


@dataclass(frozen=True)
class TransferHistoryFilter:
    """Optional, conjunctive filters over the transfer log."""
    from_id: int | None = None
    from_ts: int | None = None
    name: str | None = None
    fid: int | None = None

    @property
    def cursor_strategy(self) -> CursorStrategy:
        # Clients polling by time use the timestamp as their high watermark
        if self.from_ts is not None:
            return CursorStrategy.BY_TIMESTAMP
        return CursorStrategy.BY_ID

    @property
    def ordering(self) -> tuple[str, ...]:
        return CURSOR_ORDERING[self.cursor_strategy]

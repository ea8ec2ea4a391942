"""Boundary Protocols - contracts between core and shell.

Invariants:
    - Core NEVER imports from shell - dependency arrows point inward only
    - Readers never re-validate stored records; validation happens at write time
    - insert is the only write, and records are never updated or deleted

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the rules in
      enforce_transfer.py that consume their results stay synchronous
"""

from typing import Protocol

from fname_registry.core.domain_types import NewTransfer, TransferRecord
from fname_registry.core.history_filter import TransferHistoryFilter


class TransferRepository(Protocol):
    """Contract for the append-only transfer log - implemented by shell."""
    async def latest(self, username: str) -> TransferRecord | None: ...
    async def current_username(self, fid: int) -> str | None: ...
    async def by_id(self, transfer_id: int) -> TransferRecord | None: ...
    async def history(
        self, filter_opts: TransferHistoryFilter,
    ) -> list[TransferRecord]: ...
    async def insert(self, transfer: NewTransfer) -> int: ...

"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - Fid 0 is the mint/burn sentinel; it never holds a username
    - TransferRecord is immutable once read (the ledger is append-only)
    - All valid states encoded as Enums - no raw string matching

Design Decisions:
    - NewType over dataclass wrappers for identifiers: zero runtime cost
    - Frozen dataclasses for records: the shell converts ORM rows into these so
      core never touches SQLAlchemy objects
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Fid = NewType("Fid", int)

NO_FID = Fid(0)


# ─── Enums ───────────────────────────────────────────────────────

class ErrorCode(str, Enum):
    """Stable, machine-checkable transfer rejection codes."""
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    INVALID_USERNAME = "INVALID_USERNAME"
    TOO_MANY_NAMES = "TOO_MANY_NAMES"
    USERNAME_TAKEN = "USERNAME_TAKEN"
    USERNAME_NOT_FOUND = "USERNAME_NOT_FOUND"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"


class TransferKind(str, Enum):
    """Shape of a transfer, derived from its endpoints."""
    MINT = "mint"
    BURN = "burn"
    TRANSFER = "transfer"


class TransferOutcome(str, Enum):
    """Result of evaluating a proposed transfer against history."""
    ACCEPT = "accept"
    DUPLICATE = "duplicate"
    REJECT = "reject"


class CursorStrategy(str, Enum):
    """How a history page is ordered, and therefore which cursor advances it."""
    BY_ID = "by_id"
    BY_TIMESTAMP = "by_timestamp"


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class TransferRequest:
    """A proposed transfer, as received from the caller (hex at the boundary)."""
    username: str
    timestamp: int
    owner: str
    from_fid: int
    to_fid: int
    user_signature: str
    user_fid: int

    @property
    def kind(self) -> TransferKind:
        if self.from_fid == NO_FID:
            return TransferKind.MINT
        if self.to_fid == NO_FID:
            return TransferKind.BURN
        return TransferKind.TRANSFER


@dataclass(frozen=True)
class TransferRecord:
    """A stored transfer. Bytes fields are raw, as held by the storage engine."""
    id: int
    timestamp: int
    username: str
    owner: bytes
    from_fid: int
    to_fid: int
    user_signature: bytes
    server_signature: bytes


@dataclass(frozen=True)
class NewTransfer:
    """An accepted transfer ready to be written, already encoded for storage."""
    timestamp: int
    username: str
    owner: bytes
    from_fid: int
    to_fid: int
    user_signature: bytes
    server_signature: bytes


@dataclass(frozen=True)
class TransferDecision:
    """Outcome of evaluate_transfer: accept, duplicate of existing_id, or reject."""
    outcome: TransferOutcome
    error_code: ErrorCode | None = None
    existing_id: int | None = None

"""Transfer Enforcement - the lifecycle state machine for username transfers.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Check functions return an ErrorCode on violation, None on success
    - evaluate_transfer chains the checks in a fixed order - first error wins
    - A resubmitted, already-applied transfer is a DUPLICATE, never an error

Design Decisions:
    - Pure functions over method dispatch: testable without mocks or a database
    - Return values (not exceptions): the service decides how a rejection
      surfaces, keeping the rule set independent of the HTTP layer
    - Authorization, signature and username format run in the service before
      this module, since they need the signing key and the fname policy
"""

from fname_registry.core.domain_types import (
    NO_FID, ErrorCode, TransferDecision, TransferKind, TransferOutcome,
    TransferRecord, TransferRequest,
)
from fname_registry.core.hex_codec import bytes_equal, hex_to_bytes

TIMESTAMP_TOLERANCE = 60  # seconds a request may run ahead of the server clock


def is_duplicate(
    request: TransferRequest,
    existing: TransferRecord | None,
    existing_name: str | None,
) -> bool:
    """The destination already holds this exact name under the same owner.

    Only username, destination and owner are compared; a resubmission with a
    different timestamp or signature is still treated as the stored transfer.
    """
    return (
        existing is not None
        and existing_name is not None
        and existing_name == request.username
        and bytes_equal(existing.owner, hex_to_bytes(request.owner))
    )


def check_destination_free(existing_name: str | None) -> ErrorCode | None:
    """An fid may hold only one username."""
    if existing_name is not None:
        return ErrorCode.TOO_MANY_NAMES
    return None


def check_not_future(timestamp: int, now: int) -> ErrorCode | None:
    if timestamp > now + TIMESTAMP_TOLERANCE:
        return ErrorCode.INVALID_TIMESTAMP
    return None


def check_not_stale(
    timestamp: int, existing: TransferRecord | None,
) -> ErrorCode | None:
    """History for a username must advance in wall-clock terms."""
    if existing is not None and existing.timestamp > timestamp:
        return ErrorCode.INVALID_TIMESTAMP
    return None


def check_lifecycle(
    kind: TransferKind, existing: TransferRecord | None,
) -> ErrorCode | None:
    """Mint needs a free name, burn needs a held name, transfer needs history."""
    if kind == TransferKind.MINT:
        if existing is not None and existing.to_fid != NO_FID:
            return ErrorCode.USERNAME_TAKEN
    elif kind == TransferKind.BURN:
        if existing is None or existing.to_fid == NO_FID:
            return ErrorCode.USERNAME_NOT_FOUND
    elif existing is None:
        return ErrorCode.USERNAME_NOT_FOUND
    return None


def evaluate_transfer(
    request: TransferRequest,
    existing: TransferRecord | None,
    existing_name: str | None,
    now: int,
) -> TransferDecision:
    """Decide a transfer against the latest record for its username and the
    name currently held by its destination fid."""
    if is_duplicate(request, existing, existing_name):
        return TransferDecision(
            outcome=TransferOutcome.DUPLICATE, existing_id=existing.id,
        )

    error = (
        check_destination_free(existing_name)
        or check_not_future(request.timestamp, now)
        or check_not_stale(request.timestamp, existing)
        or check_lifecycle(request.kind, existing)
    )
    if error is not None:
        return TransferDecision(outcome=TransferOutcome.REJECT, error_code=error)
    return TransferDecision(outcome=TransferOutcome.ACCEPT)

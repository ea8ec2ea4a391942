"""Transfer Service - validate, co-sign and persist username transfers.

Invariants:
    - Checks run in a fixed order and stop at the first failure:
      authorization → signature → username format → state-machine rules
    - Nothing is written unless every check passes
    - An already-applied transfer returns its stored id and writes nothing,
      so callers may retry after an ambiguous outcome (e.g. timeout)
    - Storage failures propagate unchanged; they are not rejection codes

Design Decisions:
    - Pure decision in core/enforce_transfer.py, IO here (functional core,
      imperative shell)
    - Clock and username policy injected: tests pin time, deployments can
      swap the fname policy
    - No in-process locking: concurrent writers are ordered by the engine
"""

import logging
import time
from typing import Callable, NoReturn

from fname_registry.core.domain_types import (
    ErrorCode, NewTransfer, TransferOutcome, TransferRequest,
)
from fname_registry.core.enforce_transfer import evaluate_transfer
from fname_registry.core.errors import ErrorContext, TransferValidationError
from fname_registry.core.hex_codec import hex_to_bytes
from fname_registry.core.repository_protocols import TransferRepository
from fname_registry.core.validate_fname import validate_fname
from fname_registry.infrastructure.signature_authority import SignatureAuthority

logger = logging.getLogger(__name__)


def current_timestamp() -> int:
    return int(time.time())


class TransferService:
    """Transfer validator and writer for one request scope."""

    def __init__(
        self,
        repository: TransferRepository,
        authority: SignatureAuthority,
        username_validator: Callable[[str], bool] = validate_fname,
        clock: Callable[[], int] = current_timestamp,
    ):
        self.repository = repository
        self.authority = authority
        self.username_validator = username_validator
        self.clock = clock

    def _reject(self, request: TransferRequest, code: ErrorCode) -> NoReturn:
        logger.warning(
            f"Transfer rejected: {code.value}",
            extra={
                "error_code": code.value,
                "username": request.username,
                "user_fid": request.user_fid,
            },
        )
        raise TransferValidationError(
            code, ErrorContext(username=request.username, fid=request.user_fid),
        )

    async def validate_transfer(self, request: TransferRequest) -> int | None:
        """Return the stored id for a duplicate, None if the transfer may be
        written; raise TransferValidationError otherwise."""
        verifier_address = self.authority.authorized_verifier(request.user_fid)
        if not verifier_address:
            # Only admin transfers are allowed until open registration ships
            self._reject(request, ErrorCode.UNAUTHORIZED)

        if not self.authority.verify(
            request.username, request.timestamp, request.owner,
            request.user_signature, verifier_address,
        ):
            self._reject(request, ErrorCode.INVALID_SIGNATURE)

        if not self.username_validator(request.username):
            self._reject(request, ErrorCode.INVALID_USERNAME)

        existing = await self.repository.latest(request.username)
        existing_name = await self.repository.current_username(request.to_fid)

        decision = evaluate_transfer(
            request, existing, existing_name, self.clock(),
        )
        if decision.outcome == TransferOutcome.REJECT:
            self._reject(request, decision.error_code)
        if decision.outcome == TransferOutcome.DUPLICATE:
            return decision.existing_id
        return None

    async def create_transfer(self, request: TransferRequest) -> int:
        """Validate and persist a transfer; return its id (new or existing)."""
        existing_id = await self.validate_transfer(request)
        if existing_id is not None:
            logger.info(
                f"Duplicate transfer for '{request.username}', returning {existing_id}",
                extra={"transfer_id": existing_id, "username": request.username},
            )
            return existing_id

        server_signature = self.authority.co_sign(
            request.username, request.timestamp, request.owner,
        )
        transfer_id = await self.repository.insert(NewTransfer(
            timestamp=request.timestamp,
            username=request.username,
            owner=hex_to_bytes(request.owner),
            from_fid=request.from_fid,
            to_fid=request.to_fid,
            user_signature=hex_to_bytes(request.user_signature),
            server_signature=server_signature,
        ))
        logger.info(
            f"Transfer {transfer_id} recorded: '{request.username}' "
            f"{request.from_fid} -> {request.to_fid}",
            extra={
                "transfer_id": transfer_id,
                "username": request.username,
                "fid": request.to_fid,
            },
        )
        return transfer_id

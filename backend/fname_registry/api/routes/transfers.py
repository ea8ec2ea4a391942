"""Transfers - submit username transfers and read the transfer history.

Invariants:
    - POST /transfers returns 201 with the stored transfer, also for an
      idempotent resubmission (same id as the first submission)
    - GET /transfers pages are at most 100 records, filters AND'd
    - GET /transfers/current needs name or fid; 404 when nothing is held
    - Read routes never write

Design Decisions:
    - Service built per request from the request's DB session
    - /current declared before /{transfer_id} so the literal path wins
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fname_registry.core.errors import QueryParameterError, ResourceNotFoundError
from fname_registry.core.history_filter import TransferHistoryFilter
from fname_registry.infrastructure.database import get_db
from fname_registry.infrastructure.signature_authority import (
    SignatureAuthority, get_signature_authority,
)
from fname_registry.infrastructure.transfer_repository import SqlTransferRepository
from fname_registry.schemas.transfer import (
    TransferCreate, TransferEnvelope, TransferList, TransferResponse,
)
from fname_registry.services.transfer_service import TransferService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/transfers", tags=["transfers"])


def get_transfer_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlTransferRepository:
    return SqlTransferRepository(db)


def get_transfer_service(
    repository: SqlTransferRepository = Depends(get_transfer_repository),
    authority: SignatureAuthority = Depends(get_signature_authority),
) -> TransferService:
    return TransferService(repository, authority)


async def get_transfer_or_404(
    transfer_id: int, repository: SqlTransferRepository,
) -> TransferResponse:
    record = await repository.by_id(transfer_id)
    if record is None:
        raise ResourceNotFoundError("Transfer", str(transfer_id))
    return TransferResponse.from_record(record)


@router.post(
    "", response_model=TransferEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_transfer(
    body: TransferCreate,
    service: TransferService = Depends(get_transfer_service),
):
    """Submit a mint, burn or transfer signed by an authorized fid."""
    transfer_id = await service.create_transfer(body.to_request())
    transfer = await get_transfer_or_404(transfer_id, service.repository)
    return TransferEnvelope(transfer=transfer)


@router.get("", response_model=TransferList)
async def list_transfers(
    from_id: int | None = Query(None, ge=0),
    from_ts: int | None = Query(None, ge=0),
    name: str | None = Query(None),
    fid: int | None = Query(None, ge=0),
    repository: SqlTransferRepository = Depends(get_transfer_repository),
):
    """Page through the transfer log by id or timestamp cursor."""
    records = await repository.history(TransferHistoryFilter(
        from_id=from_id, from_ts=from_ts, name=name or None, fid=fid,
    ))
    return TransferList(
        transfers=[TransferResponse.from_record(r) for r in records],
    )


@router.get("/current", response_model=TransferEnvelope)
async def current_transfer(
    name: str | None = Query(None),
    fid: int | None = Query(None, ge=0),
    repository: SqlTransferRepository = Depends(get_transfer_repository),
):
    """Latest transfer for a username, or for the name an fid holds now."""
    name = name or None
    if name is None and fid is None:
        raise QueryParameterError("Either name or fid is required")
    if name is None:
        name = await repository.current_username(fid)
        if name is None:
            raise ResourceNotFoundError("Username for fid", str(fid))
    record = await repository.latest(name)
    if record is None:
        raise ResourceNotFoundError("Transfer for username", name)
    return TransferEnvelope(transfer=TransferResponse.from_record(record))


@router.get("/{transfer_id}", response_model=TransferEnvelope)
async def get_transfer(
    transfer_id: int,
    repository: SqlTransferRepository = Depends(get_transfer_repository),
):
    return TransferEnvelope(
        transfer=await get_transfer_or_404(transfer_id, repository),
    )

"""Transfer Repository - SQLAlchemy implementation of the transfer log reader and writer.

Invariants:
    - Reads return core TransferRecords, never ORM rows
    - "Latest" always means ORDER BY timestamp DESC, id DESC (a record written
      later at the same second wins)
    - current_username(0) is always None, without touching the database
    - history() pages are at most PAGE_SIZE and ordered per CursorStrategy
    - insert() is the only write; it commits in the caller's session
    - A failed insert rolls back and raises DatabaseError naming the username
      and destination fid

Design Decisions:
    - Operates on the request's AsyncSession: validation reads and the insert
      share one session, concurrency is left to the engine's isolation level
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fname_registry.core.domain_types import NO_FID, NewTransfer, TransferRecord
from fname_registry.core.errors import ErrorContext
from fname_registry.core.history_filter import PAGE_SIZE, TransferHistoryFilter
from fname_registry.infrastructure.database import guard_writes
from fname_registry.models.transfer import Transfer

logger = logging.getLogger(__name__)

_ORDER_COLUMNS = {
    "id": Transfer.id,
    "timestamp": Transfer.timestamp,
}


def _involves(fid: int):
    return or_(Transfer.from_fid == fid, Transfer.to_fid == fid)


class SqlTransferRepository:
    """Transfer log backed by the transfers table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def latest(self, username: str) -> TransferRecord | None:
        result = await self.db.execute(
            select(Transfer)
            .where(Transfer.username == username)
            .order_by(Transfer.timestamp.desc(), Transfer.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return row.to_record() if row else None

    async def current_username(self, fid: int) -> str | None:
        """Name held by fid: the username of its most recent transfer, if it
        was the receiver of that transfer."""
        # fid 0 is the mint/burn address, it can never hold a username
        if fid == NO_FID:
            return None
        result = await self.db.execute(
            select(Transfer.username, Transfer.to_fid)
            .where(_involves(fid))
            .order_by(Transfer.timestamp.desc(), Transfer.id.desc())
            .limit(1)
        )
        row = result.one_or_none()
        if row is None:
            return None
        username, to_fid = row
        return username if to_fid == fid else None

    async def by_id(self, transfer_id: int) -> TransferRecord | None:
        result = await self.db.execute(
            select(Transfer).where(Transfer.id == transfer_id),
        )
        row = result.scalar_one_or_none()
        return row.to_record() if row else None

    async def history(
        self, filter_opts: TransferHistoryFilter,
    ) -> list[TransferRecord]:
        query = select(Transfer)
        if filter_opts.from_id is not None:
            query = query.where(Transfer.id > filter_opts.from_id)
        if filter_opts.from_ts is not None:
            query = query.where(Transfer.timestamp > filter_opts.from_ts)
        if filter_opts.name is not None:
            query = query.where(Transfer.username == filter_opts.name)
        if filter_opts.fid is not None:
            query = query.where(_involves(filter_opts.fid))

        query = query.order_by(
            *(_ORDER_COLUMNS[key].asc() for key in filter_opts.ordering),
        ).limit(PAGE_SIZE)

        result = await self.db.execute(query)
        return [row.to_record() for row in result.scalars().all()]

    async def insert(self, transfer: NewTransfer) -> int:
        row = Transfer(
            timestamp=transfer.timestamp,
            username=transfer.username,
            owner=transfer.owner,
            from_fid=transfer.from_fid,
            to_fid=transfer.to_fid,
            user_signature=transfer.user_signature,
            server_signature=transfer.server_signature,
        )
        context = ErrorContext(username=transfer.username, fid=transfer.to_fid)
        async with guard_writes(self.db, context):
            self.db.add(row)
            await self.db.flush()
            await self.db.commit()
        logger.debug(
            f"Transfer {row.id} inserted",
            extra={"transfer_id": row.id, "username": row.username},
        )
        return row.id

"""Transfer ORM - one row per ownership change of a username.

Invariants:
    - Rows are inserted once and never updated or deleted (append-only ledger)
    - id is engine-assigned and strictly increasing (pagination cursor)
    - from = 0 marks a mint, to = 0 marks a burn
    - owner is a 20-byte address; signatures are raw bytes

Design Decisions:
    - Columns named "from"/"to" in SQL, mapped to from_fid/to_fid in Python
      ("from" is a keyword in both languages)
    - Integer primary key: autoincrements on both PostgreSQL and SQLite
    - Indexes on username, timestamp, from, to: every read filters or orders
      by one of them
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, LargeBinary, Text
from sqlalchemy.orm import Mapped, mapped_column

from fname_registry.core.domain_types import TransferRecord
from fname_registry.db.base import Base

ADDRESS_LENGTH = 20


class Transfer(Base):
    """Transfer entity - immutable history record."""
    __tablename__ = "transfers"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    username: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    owner: Mapped[bytes] = mapped_column(
        LargeBinary(ADDRESS_LENGTH), nullable=False,
    )
    from_fid: Mapped[int] = mapped_column(
        "from", BigInteger, nullable=False, index=True,
    )
    to_fid: Mapped[int] = mapped_column(
        "to", BigInteger, nullable=False, index=True,
    )
    user_signature: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    server_signature: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_record(self) -> TransferRecord:
        return TransferRecord(
            id=self.id,
            timestamp=self.timestamp,
            username=self.username,
            owner=self.owner,
            from_fid=self.from_fid,
            to_fid=self.to_fid,
            user_signature=self.user_signature,
            server_signature=self.server_signature,
        )

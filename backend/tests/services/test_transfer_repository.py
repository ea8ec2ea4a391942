"""Transfer Repository - reads and writes against the transfers table.

Tests cover:
    - latest() picks the highest timestamp, id breaking ties
    - current_username() follows the fid's most recent record, fid 0 never holds
    - by_id() and insert() round the engine-assigned id
    - a failed insert rolls back and reports the username and fid
    - history() filters (AND'd), cursor orderings and page size
    - id-cursor pagination is gap-free and order-preserving
"""

import pytest
from sqlalchemy import select

from fname_registry.core.domain_types import NewTransfer
from fname_registry.core.errors import DatabaseError
from fname_registry.core.history_filter import PAGE_SIZE, TransferHistoryFilter
from fname_registry.models.transfer import Transfer

OWNER_BYTES = b"\xab" * 20


async def _insert(repository, username, timestamp, from_fid, to_fid, owner=OWNER_BYTES):
    return await repository.insert(NewTransfer(
        timestamp=timestamp, username=username, owner=owner,
        from_fid=from_fid, to_fid=to_fid,
        user_signature=b"\x01" * 65, server_signature=b"\x02" * 65,
    ))


# ─── insert / by_id ──────────────────────────────────────────────

async def test_insert_assigns_increasing_ids(repository):
    first = await _insert(repository, "alice", 100, 0, 1)
    second = await _insert(repository, "bob", 100, 0, 2)
    assert second > first


async def test_by_id_returns_stored_record(repository):
    transfer_id = await _insert(repository, "alice", 100, 0, 1)
    record = await repository.by_id(transfer_id)
    assert record.id == transfer_id
    assert record.username == "alice"
    assert record.owner == OWNER_BYTES
    assert (record.from_fid, record.to_fid) == (0, 1)
    assert record.server_signature == b"\x02" * 65


async def test_by_id_missing_is_none(repository):
    assert await repository.by_id(12345) is None


async def test_failed_insert_raises_database_error_with_context(repository, count_transfers):
    with pytest.raises(DatabaseError) as exc_info:
        await _insert(repository, "alice", 100, 0, 7, owner=None)

    assert exc_info.value.operation == "commit"
    assert exc_info.value.context.username == "alice"
    assert exc_info.value.context.fid == 7
    assert await count_transfers() == 0


def test_from_and_to_columns_are_named_for_storage():
    assert Transfer.from_fid.property.columns[0].name == "from"
    assert Transfer.to_fid.property.columns[0].name == "to"


# ─── latest ──────────────────────────────────────────────────────

async def test_latest_none_for_unknown_name(repository):
    assert await repository.latest("nobody") is None


async def test_latest_orders_by_timestamp_not_id(repository):
    await _insert(repository, "alice", 300, 0, 1)
    await _insert(repository, "alice", 200, 1, 0)
    latest = await repository.latest("alice")
    assert latest.timestamp == 300


async def test_latest_breaks_timestamp_ties_by_id(repository):
    await _insert(repository, "alice", 200, 1, 0)
    mint_id = await _insert(repository, "alice", 200, 0, 3)
    latest = await repository.latest("alice")
    assert latest.id == mint_id


async def test_latest_ignores_other_names(repository):
    await _insert(repository, "alice", 100, 0, 1)
    await _insert(repository, "bob", 500, 0, 2)
    assert (await repository.latest("alice")).timestamp == 100


# ─── current_username ────────────────────────────────────────────

async def test_current_username_of_receiver(repository):
    await _insert(repository, "alice", 100, 0, 1)
    assert await repository.current_username(1) == "alice"


async def test_current_username_none_after_sending(repository):
    await _insert(repository, "alice", 100, 0, 1)
    await _insert(repository, "alice", 200, 1, 2)
    assert await repository.current_username(1) is None
    assert await repository.current_username(2) == "alice"


async def test_current_username_none_after_burn(repository):
    await _insert(repository, "alice", 100, 0, 1)
    await _insert(repository, "alice", 200, 1, 0)
    assert await repository.current_username(1) is None


async def test_current_username_follows_most_recent_record(repository):
    await _insert(repository, "alice", 100, 0, 1)
    await _insert(repository, "alice", 200, 1, 0)
    await _insert(repository, "bob", 300, 0, 1)
    assert await repository.current_username(1) == "bob"


async def test_current_username_of_fid_zero_is_always_none(repository):
    await _insert(repository, "alice", 100, 0, 1)
    await _insert(repository, "bob", 100, 0, 2)
    await _insert(repository, "bob", 200, 2, 0)
    assert await repository.current_username(0) is None


async def test_current_username_unknown_fid(repository):
    assert await repository.current_username(77) is None


# ─── history ─────────────────────────────────────────────────────

async def test_history_unfiltered_orders_by_id(repository):
    ids = [
        await _insert(repository, "alice", 300, 0, 1),
        await _insert(repository, "bob", 100, 0, 2),
        await _insert(repository, "carol", 200, 0, 3),
    ]
    records = await repository.history(TransferHistoryFilter())
    assert [r.id for r in records] == ids


async def test_history_from_ts_orders_by_timestamp_then_id(repository):
    a = await _insert(repository, "alice", 300, 0, 1)
    b = await _insert(repository, "bob", 100, 0, 2)
    c = await _insert(repository, "carol", 200, 0, 3)
    d = await _insert(repository, "dave", 200, 0, 4)
    records = await repository.history(TransferHistoryFilter(from_ts=50))
    assert [r.id for r in records] == [b, c, d, a]


async def test_history_from_ts_is_strictly_greater(repository):
    await _insert(repository, "alice", 100, 0, 1)
    later = await _insert(repository, "bob", 101, 0, 2)
    records = await repository.history(TransferHistoryFilter(from_ts=100))
    assert [r.id for r in records] == [later]


async def test_history_from_id_is_strictly_greater(repository):
    first = await _insert(repository, "alice", 100, 0, 1)
    second = await _insert(repository, "bob", 100, 0, 2)
    records = await repository.history(TransferHistoryFilter(from_id=first))
    assert [r.id for r in records] == [second]


async def test_history_name_filter(repository):
    await _insert(repository, "alice", 100, 0, 1)
    await _insert(repository, "bob", 100, 0, 2)
    await _insert(repository, "alice", 200, 1, 3)
    records = await repository.history(TransferHistoryFilter(name="alice"))
    assert [r.username for r in records] == ["alice", "alice"]


async def test_history_fid_matches_either_endpoint(repository):
    minted = await _insert(repository, "alice", 100, 0, 1)
    await _insert(repository, "bob", 100, 0, 2)
    sent = await _insert(repository, "alice", 200, 1, 3)
    records = await repository.history(TransferHistoryFilter(fid=1))
    assert [r.id for r in records] == [minted, sent]


async def test_history_filters_are_conjunctive(repository):
    await _insert(repository, "alice", 100, 0, 1)
    await _insert(repository, "bob", 150, 0, 1)
    target = await _insert(repository, "alice", 200, 1, 3)
    await _insert(repository, "alice", 300, 3, 4)
    records = await repository.history(
        TransferHistoryFilter(from_ts=100, name="alice", fid=1),
    )
    assert [r.id for r in records] == [target]


async def test_history_page_is_capped(repository):
    for i in range(PAGE_SIZE + 5):
        await _insert(repository, f"name{i}", 100 + i, 0, i + 1)
    records = await repository.history(TransferHistoryFilter())
    assert len(records) == PAGE_SIZE


async def test_id_cursor_pages_are_gap_free(repository, test_db):
    for i in range(2 * PAGE_SIZE + 37):
        await _insert(repository, f"name{i}", 1_000 - (i % 7), 0, i + 1)

    result = await test_db.execute(select(Transfer.id).order_by(Transfer.id))
    all_ids = list(result.scalars().all())

    paged_ids = []
    cursor = None
    while True:
        page = await repository.history(TransferHistoryFilter(from_id=cursor))
        if not page:
            break
        paged_ids.extend(r.id for r in page)
        cursor = page[-1].id

    assert paged_ids == all_ids
    assert len(set(paged_ids)) == len(paged_ids)


async def test_timestamp_cursor_advances_monotonically(repository):
    for i in range(PAGE_SIZE + 20):
        await _insert(repository, f"name{i}", 10_000 - i, 0, i + 1)

    first = await repository.history(TransferHistoryFilter(from_ts=0))
    second = await repository.history(
        TransferHistoryFilter(from_ts=first[-1].timestamp),
    )
    timestamps = [r.timestamp for r in first + second]
    assert timestamps == sorted(timestamps)
    assert len(first) + len(second) == PAGE_SIZE + 20

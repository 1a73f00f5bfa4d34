from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.modules  # noqa: F401
from app.core.database import Base
from app.core.enums import RoleEnum
from app.modules.booking.repository import BookingRepository
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.scheduling.repository import SchedulingRepository
from app.modules.scheduling.slot_generator import generate_time_slots
from app.shared.utils import utc_now

DAY = date(2026, 11, 2)
NEXT_DAY = date(2026, 11, 3)


@pytest_asyncio.fixture()
async def session() -> AsyncIterator[AsyncSession]:
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    async with async_sessionmaker(engine, expire_on_commit=False)() as db_session:
        yield db_session
    await engine.dispose()


async def make_users(session: AsyncSession, *names: str) -> dict[str, User]:
    repository = IdentityRepository(session)
    role = await repository.create_role(RoleEnum.USER)
    return {
        name: await repository.create_user(
            email=f"{name}@pairslots.dev",
            password_hash="not-a-real-hash",
            name=name.title(),
            company=None,
            mobile=None,
            role_id=role.id,
        )
        for name in names
    }


@pytest.mark.asyncio
async def test_find_claim_matches_either_user_on_same_interval(session: AsyncSession) -> None:
    users = await make_users(session, "alice", "bob", "carol", "dave")
    repository = BookingRepository(session)
    booking = await repository.create_booking(
        day=DAY,
        slot_index=0,
        start_time="09:00",
        end_time="09:30",
        requested_by_id=users["alice"].id,
        user_ids=[users["alice"].id, users["bob"].id],
    )

    claim = await repository.find_claim(DAY, "09:00", "09:30", [users["carol"].id, users["bob"].id])

    assert claim is not None and claim.id == booking.id
    assert await repository.find_claim(DAY, "09:00", "09:30", [users["carol"].id, users["dave"].id]) is None
    assert await repository.find_claim(DAY, "09:30", "10:00", [users["alice"].id]) is None
    assert await repository.find_claim(NEXT_DAY, "09:00", "09:30", [users["alice"].id]) is None
    assert await repository.list_claimed_intervals(DAY, [users["bob"].id, users["carol"].id]) == {("09:00", "09:30")}


@pytest.mark.asyncio
async def test_mark_approved_flips_pending_booking_only_once(session: AsyncSession) -> None:
    users = await make_users(session, "alice", "bob")
    repository = BookingRepository(session)
    booking = await repository.create_booking(
        day=DAY,
        slot_index=1,
        start_time="09:30",
        end_time="10:00",
        requested_by_id=users["alice"].id,
        user_ids=[users["alice"].id, users["bob"].id],
    )
    approved_at = utc_now()

    assert await repository.mark_approved(booking, approved_at) is True
    assert booking.is_approved is True
    assert booking.approved_at == approved_at
    assert await repository.mark_approved(booking, utc_now()) is False


@pytest.mark.asyncio
async def test_list_for_user_orders_by_date_desc_then_start_time(session: AsyncSession) -> None:
    users = await make_users(session, "alice", "bob", "carol")
    repository = BookingRepository(session)
    alice, bob, carol = users["alice"], users["bob"], users["carol"]

    async def book(day: date, start_time: str, end_time: str, requester: User, other: User):
        return await repository.create_booking(
            day=day,
            slot_index=0,
            start_time=start_time,
            end_time=end_time,
            requested_by_id=requester.id,
            user_ids=[requester.id, other.id],
        )

    late_morning = await book(DAY, "10:00", "10:30", alice, bob)
    early_morning = await book(DAY, "09:00", "09:30", carol, alice)
    next_day = await book(NEXT_DAY, "11:00", "11:30", alice, carol)
    unrelated = await book(DAY, "09:30", "10:00", bob, carol)

    pending = await repository.list_for_user(alice.id, is_approved=False)
    assert [booking.id for booking in pending] == [next_day.id, early_morning.id, late_morning.id]

    sent = await repository.list_for_user(alice.id, is_approved=False, requested_by_id=alice.id)
    assert [booking.id for booking in sent] == [next_day.id, late_morning.id]

    received = await repository.list_for_user(alice.id, is_approved=False, not_requested_by_id=alice.id)
    assert [booking.id for booking in received] == [early_morning.id]

    await repository.mark_approved(unrelated, utc_now())
    assert [booking.id for booking in await repository.list_for_user(carol.id, is_approved=True)] == [unrelated.id]
    assert await repository.list_for_user(alice.id, is_approved=True) == []


@pytest.mark.asyncio
async def test_deleted_booking_frees_both_participant_claims(session: AsyncSession) -> None:
    users = await make_users(session, "alice", "bob")
    repository = BookingRepository(session)
    booking = await repository.create_booking(
        day=DAY,
        slot_index=0,
        start_time="09:00",
        end_time="09:30",
        requested_by_id=users["alice"].id,
        user_ids=[users["alice"].id, users["bob"].id],
    )
    loaded = await repository.get_booking_by_id(booking.id)
    assert loaded is not None

    await repository.delete_booking(loaded)

    assert await repository.get_booking_by_id(booking.id) is None
    assert await repository.list_claimed_intervals(DAY, [users["alice"].id, users["bob"].id]) == set()


@pytest.mark.asyncio
async def test_second_claim_on_same_interval_violates_unique_constraint(session: AsyncSession) -> None:
    users = await make_users(session, "alice", "bob", "carol")
    repository = BookingRepository(session)
    await repository.create_booking(
        day=DAY,
        slot_index=0,
        start_time="09:00",
        end_time="09:30",
        requested_by_id=users["alice"].id,
        user_ids=[users["alice"].id, users["bob"].id],
    )

    with pytest.raises(IntegrityError):
        await repository.create_booking(
            day=DAY,
            slot_index=0,
            start_time="09:00",
            end_time="09:30",
            requested_by_id=users["carol"].id,
            user_ids=[users["carol"].id, users["bob"].id],
        )


@pytest.mark.asyncio
async def test_replace_day_overwrites_previous_slots(session: AsyncSession) -> None:
    users = await make_users(session, "admin")
    repository = SchedulingRepository(session)

    await repository.replace_day(
        day=DAY,
        opens_at="09:00",
        closes_at="10:00",
        duration_minutes=30,
        created_by_admin_id=users["admin"].id,
        slots=generate_time_slots("09:00", "10:00", 30),
    )
    await repository.replace_day(
        day=DAY,
        opens_at="08:30",
        closes_at="10:00",
        duration_minutes=30,
        created_by_admin_id=users["admin"].id,
        slots=generate_time_slots("08:30", "10:00", 30),
    )
    session.expunge_all()

    stored = await repository.get_day_by_date(DAY)

    assert stored is not None
    assert stored.opens_at == "08:30"
    assert [(slot.position, slot.start_time, slot.end_time) for slot in stored.slots] == [
        (0, "08:30", "09:00"),
        (1, "09:00", "09:30"),
        (2, "09:30", "10:00"),
    ]

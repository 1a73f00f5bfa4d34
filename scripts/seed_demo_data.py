"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.enums import RoleEnum
from app.core.security import hash_password, verify_password
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.service import IdentityService
from app.modules.scheduling.repository import SchedulingRepository
from app.modules.scheduling.schemas import DaySlotsCreate
from app.modules.scheduling.service import SchedulingService

DEMO_PASSWORD = "DemoPass123!"

DEMO_USERS = (
    ("demo-admin@pairslots.dev", "Demo Admin", RoleEnum.ADMIN),
    ("demo-alice@pairslots.dev", "Alice Demo", RoleEnum.USER),
    ("demo-bob@pairslots.dev", "Bob Demo", RoleEnum.USER),
)

DEMO_DAY_OFFSETS = (1, 2, 3)
DEMO_OPENS_AT = "09:00"
DEMO_CLOSES_AT = "17:00"
DEMO_SLOT_DURATION_MINUTES = 30


@dataclass(slots=True)
class SeedStats:
    users_created: int = 0
    users_updated: int = 0
    days_created: int = 0


async def _ensure_user(
    session: AsyncSession,
    *,
    email: str,
    name: str,
    role_name: RoleEnum,
) -> tuple[User, bool]:
    repository = IdentityRepository(session)
    role = await repository.get_role_by_name(role_name)
    if role is None:
        raise RuntimeError(f"Role {role_name} was not found after ensure_default_roles")

    user = await session.scalar(
        select(User).options(selectinload(User.role)).where(User.email == email),
    )
    if user is None:
        user = await repository.create_user(
            email=email,
            password_hash=hash_password(DEMO_PASSWORD),
            name=name,
            company="PairSlots Demo",
            mobile=None,
            role_id=role.id,
        )
        return user, True

    if not verify_password(DEMO_PASSWORD, user.password_hash):
        user.password_hash = hash_password(DEMO_PASSWORD)
    if user.role_id != role.id:
        user.role_id = role.id
    user.name = name
    user.is_active = True
    await session.flush()
    await session.refresh(user, attribute_names=["role"])
    return user, False


def _demo_dates(today: date) -> list[date]:
    return [today + timedelta(days=offset) for offset in DEMO_DAY_OFFSETS]


async def _ensure_demo_days(session: AsyncSession, *, admin_user: User) -> int:
    repository = SchedulingRepository(session)
    service = SchedulingService(repository, allowed_durations=get_settings().slot_allowed_durations)
    created = 0
    for day in _demo_dates(datetime.now(UTC).date()):
        # Regenerating would drop booking state, so existing days are kept.
        if await repository.get_day_by_date(day) is not None:
            continue
        await service.create_day_slots(
            DaySlotsCreate(
                date=day,
                start_time=DEMO_OPENS_AT,
                end_time=DEMO_CLOSES_AT,
                duration=DEMO_SLOT_DURATION_MINUTES,
            ),
            admin_user,
        )
        created += 1
    return created


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            await IdentityService(IdentityRepository(session)).ensure_default_roles()

            users: dict[RoleEnum, User] = {}
            for email, name, role_name in DEMO_USERS:
                user, created = await _ensure_user(session, email=email, name=name, role_name=role_name)
                users.setdefault(role_name, user)
                if created:
                    stats.users_created += 1
                else:
                    stats.users_updated += 1

            stats.days_created = await _ensure_demo_days(session, admin_user=users[RoleEnum.ADMIN])
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed idempotent demo data for PairSlots (admin, two users, day slots).",
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Users created: {stats.users_created}")
    print(f"- Users updated: {stats.users_updated}")
    print(f"- Slot days created: {stats.days_created}")
    print("")
    print("Demo credentials (non-production only):")
    for email, _, role_name in DEMO_USERS:
        print(f"- {role_name}: {email} / {DEMO_PASSWORD}")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

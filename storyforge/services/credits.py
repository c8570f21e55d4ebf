"""Credits ledger: atomic balance updates, welcome bonus and daily login streaks."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

from beanie import PydanticObjectId, UpdateResponse
from beanie.odm.operators.find.comparison import In
from beanie.odm.operators.update.general import Inc, Set
from pymongo.errors import DuplicateKeyError

from storyforge.core.config import get_settings
from storyforge.core.dates import day_key, is_valid_timezone, local_today, previous_day_key
from storyforge.core.exceptions import BadRequestError, InsufficientCreditsError
from storyforge.core.logging import get_logger
from storyforge.models.credit_account import CreditAccount
from storyforge.models.credit_transaction import CreditTransaction
from storyforge.models.user import User

log = get_logger(__name__)

KINDS = ("earn", "spend")


@dataclass(frozen=True)
class DailyLoginReward:
    credits: int
    streak: int
    balance: int


async def get_or_create_account(user_id: PydanticObjectId) -> CreditAccount:
    """Return the user's account, opening it with the welcome bonus on first use."""
    account = await CreditAccount.find_one(CreditAccount.user_id == user_id)
    if account:
        return account
    settings = get_settings()
    bonus = settings.welcome_bonus_credits
    account = CreditAccount(
        user_id=user_id,
        balance=bonus,
        total_earned=bonus,
        total_spent=0,
        timezone=settings.default_timezone,
    )
    try:
        await account.insert()
    except DuplicateKeyError:
        # Opened concurrently by another request; the winner wrote the bonus row.
        return await CreditAccount.find_one(CreditAccount.user_id == user_id)
    await CreditTransaction(
        user_id=user_id,
        amount=bonus,
        kind="earn",
        source="welcome_bonus",
        description="Welcome bonus for new users",
        balance_after=bonus,
    ).insert()
    log.info("credit_account_opened", user_id=str(user_id), balance=bonus)
    return account


async def get_balance(user_id: PydanticObjectId) -> int:
    account = await get_or_create_account(user_id)
    return account.balance


async def get_timezone(user_id: PydanticObjectId) -> str:
    account = await CreditAccount.find_one(CreditAccount.user_id == user_id)
    return account.timezone if account else get_settings().default_timezone


async def set_timezone(user_id: PydanticObjectId, timezone: str) -> CreditAccount:
    """Calendar days for daily rewards and quests are counted in this IANA zone."""
    if not is_valid_timezone(timezone):
        raise BadRequestError(f"Unknown timezone: {timezone}")
    await get_or_create_account(user_id)
    return await CreditAccount.find_one(CreditAccount.user_id == user_id).update(
        Set({CreditAccount.timezone: timezone, CreditAccount.updated_at: datetime.utcnow()}),
        response_type=UpdateResponse.NEW_DOCUMENT,
    )


async def adjust_credits(
    user_id: PydanticObjectId,
    delta: int,
    kind: Literal["earn", "spend"],
    source: str,
    description: str | None = None,
) -> CreditAccount:
    """
    Apply a signed delta and append a ledger row.

    The balance update is one conditional find_one_and_update: a debit only
    matches while balance >= -delta, so concurrent spends cannot drive the
    balance negative or lose updates. No match means insufficient funds and
    nothing is written.
    """
    if kind not in KINDS:
        raise BadRequestError(f"Invalid kind: {kind}")
    if delta == 0:
        raise BadRequestError("Amount must be non-zero")
    if (kind == "earn") != (delta > 0):
        raise BadRequestError(f"Kind {kind} does not match the sign of {delta}")
    await get_or_create_account(user_id)

    earned = delta if delta > 0 else 0
    spent = -delta if delta < 0 else 0
    conditions = [CreditAccount.user_id == user_id]
    if delta < 0:
        conditions.append(CreditAccount.balance >= -delta)

    account = await CreditAccount.find_one(*conditions).update(
        Inc({
            CreditAccount.balance: delta,
            CreditAccount.total_earned: earned,
            CreditAccount.total_spent: spent,
        }),
        Set({CreditAccount.updated_at: datetime.utcnow()}),
        response_type=UpdateResponse.NEW_DOCUMENT,
    )
    if account is None:
        balance = await get_balance(user_id)
        log.info("credits_insufficient", user_id=str(user_id), requested=-delta, balance=balance)
        raise InsufficientCreditsError(details={"balance": balance, "required": -delta})

    await CreditTransaction(
        user_id=user_id,
        amount=delta,
        kind=kind,
        source=source,
        description=description,
        balance_after=account.balance,
    ).insert()
    log.info(
        "credits_adjusted",
        user_id=str(user_id),
        delta=delta,
        source=source,
        balance_after=account.balance,
    )
    return account


def daily_login_reward(streak: int) -> int:
    """Non-decreasing in streak: base + bonus per extra day, capped."""
    s = get_settings()
    bonus_days = min(max(streak - 1, 0), s.daily_login_max_bonus_days)
    return s.daily_login_base_reward + bonus_days * s.daily_login_streak_bonus


async def claim_daily_login_reward(
    user_id: PydanticObjectId,
    today: date | None = None,
) -> DailyLoginReward | None:
    """
    Credit the once-per-day login reward. Returns None when today's reward
    was already claimed (including by a concurrent request).
    """
    account = await get_or_create_account(user_id)
    today = today or local_today(account.timezone)
    today_key = day_key(today)
    last_day = account.last_daily_reward_day
    if last_day == today_key:
        return None

    streak = account.login_streak + 1 if last_day == previous_day_key(today) else 1
    reward = daily_login_reward(streak)
    now = datetime.utcnow()

    # Compare-and-set on the last claim day so two same-day requests credit once.
    updated = await CreditAccount.find_one(
        CreditAccount.user_id == user_id,
        CreditAccount.last_daily_reward_day == last_day,
    ).update(
        Set({
            CreditAccount.last_daily_reward_day: today_key,
            CreditAccount.last_daily_reward_at: now,
            CreditAccount.login_streak: streak,
            CreditAccount.updated_at: now,
        }),
        Inc({CreditAccount.balance: reward, CreditAccount.total_earned: reward}),
        response_type=UpdateResponse.NEW_DOCUMENT,
    )
    if updated is None:
        return None

    await CreditTransaction(
        user_id=user_id,
        amount=reward,
        kind="earn",
        source="daily_login",
        description=f"Daily login reward ({streak} day streak)",
        balance_after=updated.balance,
    ).insert()
    log.info("daily_login_claimed", user_id=str(user_id), credits=reward, streak=streak)
    return DailyLoginReward(credits=reward, streak=streak, balance=updated.balance)


async def get_transactions(user_id: PydanticObjectId, limit: int = 50) -> list[CreditTransaction]:
    """Newest first."""
    return (
        await CreditTransaction.find(CreditTransaction.user_id == user_id)
        .sort("-created_at", "-_id")
        .limit(limit)
        .to_list()
    )


async def get_leaderboard(limit: int = 100) -> list[tuple[CreditAccount, User | None]]:
    accounts = await CreditAccount.find().sort(-CreditAccount.total_earned).limit(limit).to_list()
    users = await User.find(In(User.id, [a.user_id for a in accounts])).to_list()
    by_id = {u.id: u for u in users}
    return [(a, by_id.get(a.user_id)) for a in accounts]

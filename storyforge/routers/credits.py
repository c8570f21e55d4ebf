from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from storyforge.core.audit import log_event
from storyforge.core.exceptions import AlreadyClaimedError
from storyforge.core.pagination import clamp_limit
from storyforge.deps import get_current_user
from storyforge.models.credit_account import CreditAccount
from storyforge.models.credit_transaction import CreditTransaction
from storyforge.models.user import User
from storyforge.services import credits as credits_service

router = APIRouter()
leaderboard_router = APIRouter()


class SpendRequest(BaseModel):
    amount: int = Field(gt=0)
    source: str = "ai_generation"
    description: str | None = None


def account_out(account: CreditAccount) -> dict:
    return {
        "user_id": str(account.user_id),
        "balance": account.balance,
        "total_earned": account.total_earned,
        "total_spent": account.total_spent,
        "login_streak": account.login_streak,
        "last_daily_reward": account.last_daily_reward_day,
        "timezone": account.timezone,
    }


def transaction_out(t: CreditTransaction) -> dict:
    return {
        "id": str(t.id),
        "amount": t.amount,
        "kind": t.kind,
        "source": t.source,
        "description": t.description,
        "balance_after": t.balance_after,
        "created_at": t.created_at.isoformat(),
    }


@router.get("")
async def credits_account(user: User = Depends(get_current_user)):
    """Return the credit account, opening it with the welcome bonus on first call."""
    account = await credits_service.get_or_create_account(user.id)
    return account_out(account)


@router.get("/balance")
async def credits_balance(user: User = Depends(get_current_user)):
    return {"balance": await credits_service.get_balance(user.id)}


@router.get("/transactions")
async def credits_transactions(
    user: User = Depends(get_current_user),
    limit: int = Query(50),
):
    """Ledger entries for current user (newest first)."""
    entries = await credits_service.get_transactions(user.id, clamp_limit(limit))
    return [transaction_out(t) for t in entries]


@router.post("/spend")
async def credits_spend(body: SpendRequest, user: User = Depends(get_current_user)):
    account = await credits_service.adjust_credits(
        user.id, -body.amount, "spend", body.source, body.description
    )
    await log_event("credits_spent", user.id, account, amount=body.amount, source=body.source)
    return account_out(account)


@router.post("/daily-login")
async def credits_daily_login(user: User = Depends(get_current_user)):
    result = await credits_service.claim_daily_login_reward(user.id)
    if result is None:
        raise AlreadyClaimedError("Daily reward already claimed", details={"claimed": True})
    return {
        "success": True,
        "credits": result.credits,
        "streak": result.streak,
        "balance": result.balance,
        "message": f"Claimed {result.credits} credits! ({result.streak} day streak)",
    }


@leaderboard_router.get("")
async def leaderboard(limit: int = Query(100)):
    rows = await credits_service.get_leaderboard(clamp_limit(limit, default=100))
    return [
        {
            "user_id": str(account.user_id),
            "display_name": u.display_name if u else "Anonymous",
            "profile_image_url": u.profile_image_url if u else None,
            "total_earned": account.total_earned,
            "balance": account.balance,
            "login_streak": account.login_streak,
        }
        for account, u in rows
    ]

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from storyforge.core.audit import recent_events
from storyforge.core.pagination import clamp_limit
from storyforge.deps import get_current_user
from storyforge.models.user import User
from storyforge.routers.auth import user_out
from storyforge.services import badges as badges_service
from storyforge.services import credits as credits_service
from storyforge.services import users as user_service

router = APIRouter()


class ProfileUpdate(BaseModel):
    bio: str | None = Field(default=None, max_length=2000)
    profile_image_url: str | None = None
    timezone: str | None = Field(default=None, min_length=1, max_length=64)


class GenerationSessionRequest(BaseModel):
    activity_type: str = Field(min_length=1, max_length=50)
    seconds: int = Field(ge=0, le=24 * 3600)


def badge_spec_out(spec: badges_service.BadgeSpec) -> dict:
    return {"badge_id": spec.badge_id, "name": spec.name, "icon": spec.icon, "color": spec.color}


@router.patch("")
async def profile_update(body: ProfileUpdate, user: User = Depends(get_current_user)):
    if body.timezone is not None:
        account = await credits_service.set_timezone(user.id, body.timezone)
    else:
        account = await credits_service.get_or_create_account(user.id)
    user = await user_service.update_profile(user, bio=body.bio, profile_image_url=body.profile_image_url)
    return {**user_out(user), "timezone": account.timezone}


@router.get("/badges")
async def profile_badges(user: User = Depends(get_current_user)):
    rows = await badges_service.get_user_badges(user.id)
    return [
        {
            "badge_id": badge.badge_id,
            "name": badge.name,
            "description": badge.description,
            "icon": badge.icon,
            "color": badge.color,
            "earned_at": owned.earned_at.isoformat(),
        }
        for owned, badge in rows
    ]


@router.get("/generation-time")
async def profile_generation_time(user: User = Depends(get_current_user)):
    total = await badges_service.total_generation_seconds(user.id)
    upcoming = next(
        (b for b in badges_service.GENERATION_TIME_BADGES if b.threshold_seconds > total),
        None,
    )
    return {
        "total_seconds": total,
        "next_badge": {**badge_spec_out(upcoming), "threshold_seconds": upcoming.threshold_seconds}
        if upcoming
        else None,
    }


@router.post("/generation-sessions")
async def profile_log_generation(body: GenerationSessionRequest, user: User = Depends(get_current_user)):
    """Log AI generation time; returns badges newly earned by it."""
    awarded = await badges_service.record_generation(user.id, body.activity_type, body.seconds)
    return {"awarded": [badge_spec_out(b) for b in awarded]}


@router.get("/activity")
async def profile_activity(user: User = Depends(get_current_user), limit: int = Query(20)):
    """Recent audit trail entries for the current user."""
    entries = await recent_events(user.id, clamp_limit(limit, default=20, max_limit=100))
    return [
        {
            "event": e.event,
            "collection": e.collection,
            "document_id": str(e.document_id) if e.document_id else None,
            "metadata": e.metadata,
            "created_at": e.created_at.isoformat(),
        }
        for e in entries
    ]

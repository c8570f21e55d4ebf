"""Generation-time milestone badges."""

from dataclasses import dataclass

from beanie import PydanticObjectId
from beanie.odm.operators.find.comparison import In
from pymongo.errors import DuplicateKeyError

from storyforge.core.exceptions import BadRequestError
from storyforge.core.logging import get_logger
from storyforge.models.badge import Badge
from storyforge.models.generation_session import GenerationSession
from storyforge.models.user_badge import UserBadge

log = get_logger(__name__)


@dataclass(frozen=True)
class BadgeSpec:
    badge_id: int
    name: str
    description: str
    icon: str
    color: str
    threshold_seconds: int


# Ascending by threshold.
GENERATION_TIME_BADGES = (
    BadgeSpec(1, "First Steps", "Complete 30 minutes of AI generations", "🌱", "#10b981", 1800),
    BadgeSpec(2, "Hour of Stories", "Complete 1 hour of AI generations", "📖", "#8b5cf6", 3600),
    BadgeSpec(3, "Master Storyteller", "Complete 3 hours of AI generations", "🎭", "#f59e0b", 10800),
    BadgeSpec(4, "Creative Virtuoso", "Complete 5 hours of AI generations", "✨", "#ec4899", 18000),
)


async def log_generation_session(user_id: PydanticObjectId, activity_type: str, seconds: int) -> int:
    """Append a session and return the user's cumulative seconds."""
    if seconds < 0:
        raise BadRequestError("Duration must not be negative")
    await GenerationSession(user_id=user_id, activity_type=activity_type, duration_seconds=seconds).insert()
    return await total_generation_seconds(user_id)


async def total_generation_seconds(user_id: PydanticObjectId) -> int:
    total = await GenerationSession.find(GenerationSession.user_id == user_id).sum(
        GenerationSession.duration_seconds
    )
    return int(total or 0)


async def award_badge(user_id: PydanticObjectId, badge_id: int) -> bool:
    """Insert-if-absent. True only when this call created the award."""
    existing = await UserBadge.find_one(UserBadge.user_id == user_id, UserBadge.badge_id == badge_id)
    if existing:
        return False
    try:
        await UserBadge(user_id=user_id, badge_id=badge_id).insert()
    except DuplicateKeyError:
        return False
    log.info("badge_awarded", user_id=str(user_id), badge_id=badge_id)
    return True


async def check_generation_badges(user_id: PydanticObjectId, total_seconds: int) -> list[BadgeSpec]:
    awarded = []
    for spec in GENERATION_TIME_BADGES:
        if total_seconds < spec.threshold_seconds:
            break
        if await award_badge(user_id, spec.badge_id):
            awarded.append(spec)
    return awarded


async def record_generation(user_id: PydanticObjectId, activity_type: str, seconds: int) -> list[BadgeSpec]:
    """Log generation time and award any newly crossed milestones."""
    total = await log_generation_session(user_id, activity_type, seconds)
    return await check_generation_badges(user_id, total)


async def get_user_badges(user_id: PydanticObjectId) -> list[tuple[UserBadge, Badge]]:
    owned = await UserBadge.find(UserBadge.user_id == user_id).sort(+UserBadge.earned_at).to_list()
    badges = await Badge.find(In(Badge.badge_id, [ub.badge_id for ub in owned])).to_list()
    by_id = {b.badge_id: b for b in badges}
    return [(ub, by_id[ub.badge_id]) for ub in owned if ub.badge_id in by_id]

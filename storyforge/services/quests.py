"""Daily quests: lazy assignment, typed progress events, one-time reward claim."""

from datetime import datetime

from beanie import PydanticObjectId, UpdateResponse
from beanie.odm.operators.find.comparison import In
from beanie.odm.operators.update.general import Set
from pymongo.errors import DuplicateKeyError

from storyforge.core.dates import day_key, local_today
from storyforge.core.exceptions import (
    AlreadyClaimedError,
    BadRequestError,
    NotFoundError,
    QuestNotCompletedError,
)
from storyforge.core.logging import get_logger
from storyforge.models.credit_account import CreditAccount
from storyforge.models.quest_template import QuestTemplate
from storyforge.models.user_daily_quest import UserDailyQuest
from storyforge.services import credits as credits_service

log = get_logger(__name__)

# Seeded catalog: (key, name, description, quest_type, requirement, reward_credits, icon)
DEFAULT_QUESTS = (
    ("daily_characters", "Character Creator", "Create 3 characters today", "create_character", 3, 30, "user"),
    ("daily_environments", "World Builder", "Design 2 environments today", "create_environment", 2, 25, "map"),
    ("daily_props", "Prop Master", "Craft 3 props today", "create_prop", 3, 20, "box"),
    ("daily_publish", "Share Your Work", "Publish a creation to the gallery", "publish_gallery", 1, 15, "share"),
    ("daily_likes", "Community Spirit", "Like 5 gallery items", "like_gallery", 5, 10, "heart"),
)


async def current_day(user_id: PydanticObjectId) -> str:
    """Today's key in the user's account timezone."""
    return day_key(local_today(await credits_service.get_timezone(user_id)))


async def get_active_templates() -> list[QuestTemplate]:
    return await QuestTemplate.find(QuestTemplate.is_active == True).to_list()  # noqa: E712


async def assign_daily_quests(user_id: PydanticObjectId, day: str) -> None:
    """Ensure one row per active template for the day. Safe to repeat."""
    templates = await get_active_templates()
    existing = await UserDailyQuest.find(
        UserDailyQuest.user_id == user_id,
        UserDailyQuest.quest_date == day,
    ).to_list()
    assigned = {q.quest_template_id for q in existing}
    for template in templates:
        if template.id in assigned:
            continue
        try:
            await UserDailyQuest(
                user_id=user_id,
                quest_template_id=template.id,
                quest_date=day,
            ).insert()
        except DuplicateKeyError:
            continue


async def get_daily_quests(
    user_id: PydanticObjectId, day: str
) -> list[tuple[UserDailyQuest, QuestTemplate]]:
    quests = await UserDailyQuest.find(
        UserDailyQuest.user_id == user_id,
        UserDailyQuest.quest_date == day,
    ).to_list()
    templates = await QuestTemplate.find(In(QuestTemplate.id, [q.quest_template_id for q in quests])).to_list()
    by_id = {t.id: t for t in templates}
    out = [(q, by_id[q.quest_template_id]) for q in quests if q.quest_template_id in by_id]
    out.sort(key=lambda pair: pair[1].key)
    return out


async def update_quest_progress(
    user_id: PydanticObjectId,
    quest_type: str,
    increment: int = 1,
    day: str | None = None,
) -> list[UserDailyQuest]:
    """
    Advance every open quest of quest_type for the day. Progress is clamped at
    the requirement and is_completed flips when it is first reached. Never claims.
    """
    if increment < 1:
        raise BadRequestError("Increment must be positive")
    day = day or await current_day(user_id)
    templates = await QuestTemplate.find(
        QuestTemplate.quest_type == quest_type,
        QuestTemplate.is_active == True,  # noqa: E712
    ).to_list()
    updated = []
    for template in templates:
        quest = await _advance(user_id, template, day, increment)
        if quest is None:
            continue
        if quest.is_completed:
            log.info("quest_completed", user_id=str(user_id), quest=template.key, day=day)
        updated.append(quest)
    return updated


async def _open_quest(user_id: PydanticObjectId, template_id: PydanticObjectId, day: str) -> UserDailyQuest | None:
    return await UserDailyQuest.find_one(
        UserDailyQuest.user_id == user_id,
        UserDailyQuest.quest_template_id == template_id,
        UserDailyQuest.quest_date == day,
        UserDailyQuest.is_completed == False,  # noqa: E712
    )


async def _advance(
    user_id: PydanticObjectId, template: QuestTemplate, day: str, increment: int
) -> UserDailyQuest | None:
    """Compare-and-set on the observed progress; only progress and is_completed are written."""
    while True:
        quest = await _open_quest(user_id, template.id, day)
        if quest is None:
            return None
        progress = min(quest.progress + increment, template.requirement)
        advanced = await UserDailyQuest.find_one(
            UserDailyQuest.id == quest.id,
            UserDailyQuest.progress == quest.progress,
            UserDailyQuest.is_completed == False,  # noqa: E712
        ).update(
            Set({
                UserDailyQuest.progress: progress,
                UserDailyQuest.is_completed: progress >= template.requirement,
            }),
            response_type=UpdateResponse.NEW_DOCUMENT,
        )
        if advanced is not None:
            return advanced


async def claim_quest_reward(
    user_id: PydanticObjectId, quest_id: PydanticObjectId
) -> tuple[UserDailyQuest, CreditAccount]:
    """completed -> claimed, crediting reward_credits exactly once."""
    quest = await UserDailyQuest.find_one(
        UserDailyQuest.id == quest_id,
        UserDailyQuest.user_id == user_id,
    )
    if not quest:
        raise NotFoundError("Quest not found")
    if not quest.is_completed:
        raise QuestNotCompletedError()
    if quest.is_claimed:
        raise AlreadyClaimedError()
    template = await QuestTemplate.get(quest.quest_template_id)
    if not template:
        raise NotFoundError("Quest not found")

    claimed = await UserDailyQuest.find_one(
        UserDailyQuest.id == quest_id,
        UserDailyQuest.is_completed == True,  # noqa: E712
        UserDailyQuest.is_claimed == False,  # noqa: E712
    ).update(
        Set({UserDailyQuest.is_claimed: True, UserDailyQuest.claimed_at: datetime.utcnow()}),
        response_type=UpdateResponse.NEW_DOCUMENT,
    )
    if claimed is None:
        raise AlreadyClaimedError()

    # The claim is written before the credit; a failed credit is logged for compensation.
    try:
        account = await credits_service.adjust_credits(
            user_id,
            template.reward_credits,
            "earn",
            "quest_reward",
            f"Completed quest: {template.name}",
        )
    except Exception:
        log.exception(
            "quest_claim_credit_failed",
            user_id=str(user_id),
            quest_id=str(quest_id),
            reward=template.reward_credits,
        )
        raise
    log.info("quest_claimed", user_id=str(user_id), quest=template.key, reward=template.reward_credits)
    return claimed, account

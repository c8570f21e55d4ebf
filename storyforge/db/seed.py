from storyforge.core.logging import get_logger
from storyforge.models.badge import Badge
from storyforge.models.quest_template import QuestTemplate
from storyforge.services.badges import GENERATION_TIME_BADGES
from storyforge.services.quests import DEFAULT_QUESTS

log = get_logger(__name__)


async def ensure_seed_data() -> None:
    await _ensure_generation_badges()
    await _ensure_default_quests()


async def _ensure_generation_badges() -> None:
    for spec in GENERATION_TIME_BADGES:
        if await Badge.find_one(Badge.badge_id == spec.badge_id):
            continue
        await Badge(
            badge_id=spec.badge_id,
            name=spec.name,
            description=spec.description,
            icon=spec.icon,
            color=spec.color,
            badge_type="generation_time",
            threshold_seconds=spec.threshold_seconds,
        ).insert()
        log.info("seeded_badge", badge=spec.name)


async def _ensure_default_quests() -> None:
    for key, name, description, quest_type, requirement, reward, icon in DEFAULT_QUESTS:
        if await QuestTemplate.find_one(QuestTemplate.key == key):
            continue
        await QuestTemplate(
            key=key,
            name=name,
            description=description,
            quest_type=quest_type,
            requirement=requirement,
            reward_credits=reward,
            icon=icon,
        ).insert()
        log.info("seeded_quest", quest=key)

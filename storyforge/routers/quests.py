from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from storyforge.deps import get_current_user, parse_object_id
from storyforge.models.quest_template import QuestTemplate
from storyforge.models.user import User
from storyforge.models.user_daily_quest import UserDailyQuest
from storyforge.routers.credits import account_out
from storyforge.services import quests as quests_service

router = APIRouter()


class ProgressRequest(BaseModel):
    quest_type: str = Field(min_length=1)
    increment: int = Field(default=1, ge=1)


def quest_out(quest: UserDailyQuest, template: QuestTemplate) -> dict:
    return {
        "id": str(quest.id),
        "quest_date": quest.quest_date,
        "progress": quest.progress,
        "is_completed": quest.is_completed,
        "is_claimed": quest.is_claimed,
        "claimed_at": quest.claimed_at.isoformat() if quest.claimed_at else None,
        "quest": {
            "id": str(template.id),
            "key": template.key,
            "name": template.name,
            "description": template.description,
            "quest_type": template.quest_type,
            "requirement": template.requirement,
            "reward_credits": template.reward_credits,
            "icon": template.icon,
        },
    }


@router.get("/daily")
async def quests_daily(user: User = Depends(get_current_user)):
    """Today's quests; assigns them on first fetch of the day."""
    day = await quests_service.current_day(user.id)
    await quests_service.assign_daily_quests(user.id, day)
    rows = await quests_service.get_daily_quests(user.id, day)
    return [quest_out(q, t) for q, t in rows]


@router.post("/progress")
async def quests_progress(body: ProgressRequest, user: User = Depends(get_current_user)):
    updated = await quests_service.update_quest_progress(user.id, body.quest_type, body.increment)
    return {"success": True, "updated": len(updated)}


@router.post("/{quest_id}/claim")
async def quests_claim(quest_id: str, user: User = Depends(get_current_user)):
    quest, account = await quests_service.claim_quest_reward(user.id, parse_object_id(quest_id, "Quest"))
    return {"success": True, "quest_id": str(quest.id), "account": account_out(account)}

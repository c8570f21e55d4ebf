from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from storyforge.deps import get_current_user
from storyforge.models.user import User
from storyforge.services import story
from storyforge.services.ai import GeminiClient, get_ai_client

router = APIRouter()


class CharacterImageRequest(BaseModel):
    name: str = Field(min_length=1)
    archetype: str = Field(min_length=1)
    personality: str = ""
    background: str = ""


class StoryContext(BaseModel):
    context: str = ""


@router.post("/character-profile")
async def ai_character_profile(
    user: User = Depends(get_current_user),
    client: GeminiClient = Depends(get_ai_client),
):
    return await client.generate_character_profile()


@router.post("/character-image")
async def ai_character_image(
    body: CharacterImageRequest,
    user: User = Depends(get_current_user),
    client: GeminiClient = Depends(get_ai_client),
):
    image_url = await client.generate_character_image(
        body.name, body.archetype, personality=body.personality, background=body.background
    )
    return {"image_url": image_url}


@router.post("/story/continuation")
async def ai_story_continuation(body: StoryContext, user: User = Depends(get_current_user)):
    return {"text": story.continuation(body.context)}


@router.post("/story/choices")
async def ai_story_choices(body: StoryContext, user: User = Depends(get_current_user)):
    return {"choices": story.choices(body.context)}


@router.post("/story/tone")
async def ai_story_tone(body: StoryContext, user: User = Depends(get_current_user)):
    return {"tone": story.tone(body.context)}

"""Routers for characters, environments and props; one factory, three mounts."""

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from storyforge.deps import get_current_user, parse_object_id
from storyforge.models.character import Character
from storyforge.models.environment import Environment
from storyforge.models.prop import Prop
from storyforge.models.user import User
from storyforge.routers.profile import badge_spec_out
from storyforge.services import creations as creations_service


class CharacterCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    archetype: str = Field(min_length=1, max_length=100)
    background: str = Field(min_length=1)
    personality: str = Field(min_length=1)
    motivation: str = Field(min_length=1)
    flaw: str = Field(min_length=1)
    trait: str = Field(min_length=1)
    image_url: str | None = None


class CharacterUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    archetype: str | None = Field(default=None, min_length=1, max_length=100)
    background: str | None = None
    personality: str | None = None
    motivation: str | None = None
    flaw: str | None = None
    trait: str | None = None
    image_url: str | None = None


class EnvironmentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    atmosphere: str = Field(min_length=1)
    key_details: str = Field(min_length=1)
    image_url: str | None = None


class EnvironmentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    atmosphere: str | None = None
    key_details: str | None = None
    image_url: str | None = None


class PropCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    appearance: str = Field(min_length=1)
    significance: str = Field(min_length=1)
    image_url: str | None = None


class PropUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    appearance: str | None = None
    significance: str | None = None
    image_url: str | None = None


# Optional on the model; an explicit null in a PATCH clears them.
CLEARABLE_FIELDS = frozenset({"image_url"})


def creation_out(item) -> dict:
    data = item.model_dump(exclude={"id", "user_id", "created_at", "revision_id"})
    return {
        "id": str(item.id),
        "user_id": str(item.user_id),
        **data,
        "created_at": item.created_at.isoformat(),
    }


def build_router(model: type, create_schema: type[BaseModel], update_schema: type[BaseModel], activity: str) -> APIRouter:
    router = APIRouter()
    label = model.__name__

    @router.get("")
    async def list_items(user: User = Depends(get_current_user)):
        items = await creations_service.list_items(model, user.id)
        return [creation_out(i) for i in items]

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_item(body: create_schema, user: User = Depends(get_current_user)):
        item, awarded = await creations_service.create_item(model, user.id, activity, body.model_dump())
        return {**creation_out(item), "badges_awarded": [badge_spec_out(b) for b in awarded]}

    @router.patch("/{item_id}")
    async def update_item(item_id: str, body: update_schema, user: User = Depends(get_current_user)):
        changes = {
            field: value
            for field, value in body.model_dump(exclude_unset=True).items()
            if value is not None or field in CLEARABLE_FIELDS
        }
        item = await creations_service.update_item(model, parse_object_id(item_id, label), user.id, changes)
        return creation_out(item)

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_item(item_id: str, user: User = Depends(get_current_user)):
        await creations_service.delete_item(model, parse_object_id(item_id, label), user.id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


characters_router = build_router(Character, CharacterCreate, CharacterUpdate, "character")
environments_router = build_router(Environment, EnvironmentCreate, EnvironmentUpdate, "environment")
props_router = build_router(Prop, PropCreate, PropUpdate, "prop")

history_router = APIRouter()


@history_router.get("")
async def history(user: User = Depends(get_current_user)):
    """All of the user's creations, grouped by kind."""
    grouped = await creations_service.get_history(user.id)
    return {kind: [creation_out(i) for i in items] for kind, items in grouped.items()}

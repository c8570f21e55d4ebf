"""Characters, environments and props: user-owned CRUD plus generation-time tracking."""

from typing import Any, TypeVar

from beanie import PydanticObjectId

from storyforge.core.config import get_settings
from storyforge.core.exceptions import NotFoundError
from storyforge.models.character import Character
from storyforge.models.environment import Environment
from storyforge.models.prop import Prop
from storyforge.services import badges as badges_service
from storyforge.services.badges import BadgeSpec

Creation = TypeVar("Creation", Character, Environment, Prop)

CREATION_MODELS: dict[str, type] = {
    "character": Character,
    "environment": Environment,
    "prop": Prop,
}


async def list_items(model: type[Creation], user_id: PydanticObjectId) -> list[Creation]:
    return await model.find(model.user_id == user_id).sort(-model.created_at).to_list()


async def get_item(
    model: type[Creation], item_id: PydanticObjectId, user_id: PydanticObjectId
) -> Creation | None:
    return await model.find_one(model.id == item_id, model.user_id == user_id)


async def create_item(
    model: type[Creation],
    user_id: PydanticObjectId,
    activity_type: str,
    fields: dict[str, Any],
) -> tuple[Creation, list[BadgeSpec]]:
    """Save a creation, log its generation time and return any new badges."""
    item = model(user_id=user_id, **fields)
    await item.insert()
    awarded = await badges_service.record_generation(
        user_id, activity_type, get_settings().generation_seconds_per_create
    )
    return item, awarded


async def update_item(
    model: type[Creation],
    item_id: PydanticObjectId,
    user_id: PydanticObjectId,
    changes: dict[str, Any],
) -> Creation:
    item = await get_item(model, item_id, user_id)
    if not item:
        raise NotFoundError(f"{model.__name__} not found")
    if changes:
        await item.set(changes)
    return item


async def delete_item(model: type[Creation], item_id: PydanticObjectId, user_id: PydanticObjectId) -> None:
    item = await get_item(model, item_id, user_id)
    if not item:
        raise NotFoundError(f"{model.__name__} not found")
    await item.delete()


async def get_history(user_id: PydanticObjectId) -> dict[str, list]:
    return {
        "characters": await list_items(Character, user_id),
        "environments": await list_items(Environment, user_id),
        "props": await list_items(Prop, user_id),
    }

"""Community gallery: publication, likes and view counters."""

from beanie import PydanticObjectId, UpdateResponse
from beanie.odm.operators.find.comparison import In
from beanie.odm.operators.update.general import Inc
from pymongo.errors import DuplicateKeyError

from storyforge.core.audit import log_event
from storyforge.core.exceptions import BadRequestError, NotFoundError
from storyforge.core.logging import get_logger
from storyforge.models.gallery_item import GalleryItem
from storyforge.models.gallery_like import GalleryLike
from storyforge.models.user import User
from storyforge.services.creations import CREATION_MODELS

log = get_logger(__name__)


async def list_public() -> list[tuple[GalleryItem, User | None]]:
    items = await GalleryItem.find(GalleryItem.is_public == True).sort(-GalleryItem.created_at).to_list()  # noqa: E712
    users = await User.find(In(User.id, list({i.user_id for i in items}))).to_list()
    by_id = {u.id: u for u in users}
    return [(i, by_id.get(i.user_id)) for i in items]


async def list_for_user(user_id: PydanticObjectId) -> list[GalleryItem]:
    return await GalleryItem.find(GalleryItem.user_id == user_id).sort(-GalleryItem.created_at).to_list()


async def publish(
    user_id: PydanticObjectId,
    item_type: str,
    item_id: PydanticObjectId,
    title: str,
    description: str | None = None,
    image_url: str | None = None,
    is_public: bool = True,
) -> GalleryItem:
    """Publish one of the caller's own creations."""
    model = CREATION_MODELS.get(item_type)
    if model is None:
        raise BadRequestError(f"Invalid item type: {item_type}")
    source = await model.find_one(model.id == item_id, model.user_id == user_id)
    if not source:
        raise NotFoundError(f"{model.__name__} not found")
    item = GalleryItem(
        user_id=user_id,
        item_type=item_type,
        item_id=item_id,
        title=title,
        description=description,
        image_url=image_url or getattr(source, "image_url", None),
        is_public=is_public,
    )
    await item.insert()
    await log_event("gallery_published", user_id, item, item_type=item_type)
    return item


async def delete(item_id: PydanticObjectId, user_id: PydanticObjectId) -> None:
    item = await GalleryItem.find_one(GalleryItem.id == item_id, GalleryItem.user_id == user_id)
    if not item:
        raise NotFoundError("Gallery item not found")
    await GalleryLike.find(GalleryLike.gallery_item_id == item_id).delete()
    await item.delete()


async def like(user_id: PydanticObjectId, item_id: PydanticObjectId) -> bool:
    """Idempotent per user; returns True when a new like was recorded."""
    if not await GalleryItem.get(item_id):
        raise NotFoundError("Gallery item not found")
    try:
        await GalleryLike(user_id=user_id, gallery_item_id=item_id).insert()
    except DuplicateKeyError:
        return False
    await GalleryItem.find_one(GalleryItem.id == item_id).update(Inc({GalleryItem.likes: 1}))
    return True


async def unlike(user_id: PydanticObjectId, item_id: PydanticObjectId) -> bool:
    existing = await GalleryLike.find_one(
        GalleryLike.user_id == user_id,
        GalleryLike.gallery_item_id == item_id,
    )
    if not existing:
        return False
    await existing.delete()
    await GalleryItem.find_one(GalleryItem.id == item_id, GalleryItem.likes > 0).update(
        Inc({GalleryItem.likes: -1})
    )
    return True


async def liked_item_ids(user_id: PydanticObjectId) -> list[PydanticObjectId]:
    likes = await GalleryLike.find(GalleryLike.user_id == user_id).to_list()
    return [like_row.gallery_item_id for like_row in likes]


async def increment_views(item_id: PydanticObjectId) -> int:
    item = await GalleryItem.find_one(GalleryItem.id == item_id).update(
        Inc({GalleryItem.views: 1}),
        response_type=UpdateResponse.NEW_DOCUMENT,
    )
    if item is None:
        raise NotFoundError("Gallery item not found")
    return item.views

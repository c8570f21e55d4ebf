from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from storyforge.deps import get_current_user, parse_object_id
from storyforge.models.gallery_item import GalleryItem, GalleryItemType
from storyforge.models.user import User
from storyforge.services import gallery as gallery_service

router = APIRouter()


class PublishRequest(BaseModel):
    item_type: GalleryItemType
    item_id: str
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = None
    is_public: bool = True


def gallery_item_out(item: GalleryItem, author: User | None = None) -> dict:
    out = {
        "id": str(item.id),
        "user_id": str(item.user_id),
        "item_type": item.item_type,
        "item_id": str(item.item_id),
        "title": item.title,
        "description": item.description,
        "image_url": item.image_url,
        "likes": item.likes,
        "views": item.views,
        "is_public": item.is_public,
        "is_featured": item.is_featured,
        "created_at": item.created_at.isoformat(),
    }
    if author is not None:
        out["author"] = {
            "display_name": author.display_name,
            "profile_image_url": author.profile_image_url,
        }
    return out


@router.get("")
async def gallery_feed():
    """Public feed, newest first."""
    rows = await gallery_service.list_public()
    return [gallery_item_out(item, author) for item, author in rows]


@router.get("/my")
async def gallery_mine(user: User = Depends(get_current_user)):
    items = await gallery_service.list_for_user(user.id)
    return [gallery_item_out(i) for i in items]


@router.get("/likes")
async def gallery_my_likes(user: User = Depends(get_current_user)):
    return [str(i) for i in await gallery_service.liked_item_ids(user.id)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def gallery_publish(body: PublishRequest, user: User = Depends(get_current_user)):
    item = await gallery_service.publish(
        user.id,
        body.item_type,
        parse_object_id(body.item_id, body.item_type.capitalize()),
        body.title,
        description=body.description,
        image_url=body.image_url,
        is_public=body.is_public,
    )
    return gallery_item_out(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def gallery_delete(item_id: str, user: User = Depends(get_current_user)):
    await gallery_service.delete(parse_object_id(item_id, "Gallery item"), user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{item_id}/like")
async def gallery_like(item_id: str, user: User = Depends(get_current_user)):
    created = await gallery_service.like(user.id, parse_object_id(item_id, "Gallery item"))
    return {"success": True, "created": created}


@router.delete("/{item_id}/like")
async def gallery_unlike(item_id: str, user: User = Depends(get_current_user)):
    await gallery_service.unlike(user.id, parse_object_id(item_id, "Gallery item"))
    return {"success": True}


@router.post("/{item_id}/view")
async def gallery_view(item_id: str):
    views = await gallery_service.increment_views(parse_object_id(item_id, "Gallery item"))
    return {"success": True, "views": views}

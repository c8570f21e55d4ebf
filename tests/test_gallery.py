from beanie import PydanticObjectId

from storyforge.models.character import Character
from storyforge.models.gallery_item import GalleryItem
from storyforge.models.gallery_like import GalleryLike
from storyforge.models.user import User


async def _character(user_id) -> Character:
    c = Character(
        user_id=user_id,
        name="Oren",
        archetype="Sage",
        background="Keeper of the tide clocks.",
        personality="Patient.",
        motivation="Stop the drowning of the city.",
        flaw="Too cautious.",
        trait="Reads currents like text.",
        image_url="https://img.example/oren.png",
    )
    await c.insert()
    return c


async def _publish(auth_client, character: Character) -> dict:
    r = await auth_client.post(
        "/v1/gallery",
        json={"item_type": "character", "item_id": str(character.id), "title": "Oren the Sage"},
    )
    assert r.status_code == 201
    return r.json()


async def test_publish_and_list(auth_client, user):
    item = await _publish(auth_client, await _character(user.id))
    assert item["image_url"] == "https://img.example/oren.png"
    assert item["likes"] == 0

    feed = (await auth_client.get("/v1/gallery")).json()
    assert [i["id"] for i in feed] == [item["id"]]
    assert feed[0]["author"]["display_name"] == "Ada Lovelace"
    assert [i["id"] for i in (await auth_client.get("/v1/gallery/my")).json()] == [item["id"]]


async def test_cannot_publish_someone_elses_creation(auth_client):
    other = User(google_sub="google-sub-2", email="grace@example.com")
    await other.insert()
    foreign = await _character(other.id)
    r = await auth_client.post(
        "/v1/gallery",
        json={"item_type": "character", "item_id": str(foreign.id), "title": "Stolen"},
    )
    assert r.status_code == 404


async def test_invalid_item_type(auth_client, user):
    c = await _character(user.id)
    r = await auth_client.post("/v1/gallery", json={"item_type": "spell", "item_id": str(c.id), "title": "x"})
    assert r.status_code == 400


async def test_like_is_idempotent_and_unlike_floors_at_zero(auth_client, user):
    item = await _publish(auth_client, await _character(user.id))
    url = f"/v1/gallery/{item['id']}/like"

    assert (await auth_client.post(url)).json() == {"success": True, "created": True}
    assert (await auth_client.post(url)).json() == {"success": True, "created": False}
    stored = await GalleryItem.get(PydanticObjectId(item["id"]))
    assert stored.likes == 1
    assert (await auth_client.get("/v1/gallery/likes")).json() == [item["id"]]

    await auth_client.delete(url)
    await auth_client.delete(url)
    stored = await GalleryItem.get(PydanticObjectId(item["id"]))
    assert stored.likes == 0


async def test_views_and_delete(auth_client, user):
    item = await _publish(auth_client, await _character(user.id))
    r = await auth_client.post(f"/v1/gallery/{item['id']}/view")
    assert r.json() == {"success": True, "views": 1}

    await auth_client.post(f"/v1/gallery/{item['id']}/like")
    r = await auth_client.delete(f"/v1/gallery/{item['id']}")
    assert r.status_code == 204
    assert await GalleryLike.find().count() == 0
    assert (await auth_client.post(f"/v1/gallery/{item['id']}/view")).status_code == 404
    assert (await auth_client.post(f"/v1/gallery/{item['id']}/like")).status_code == 404

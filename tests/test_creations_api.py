from storyforge.services import badges as badges_service

CHARACTER = {
    "name": "Mira Vale",
    "archetype": "Trickster",
    "background": "Raised among smugglers on the river docks.",
    "personality": "Quick-witted and restless.",
    "motivation": "Clear her family's debt.",
    "flaw": "Cannot resist a wager.",
    "trait": "Perfect recall of faces.",
}


async def test_character_crud(auth_client):
    r = await auth_client.post("/v1/characters", json=CHARACTER)
    assert r.status_code == 201
    created = r.json()
    assert created["name"] == "Mira Vale"
    assert created["badges_awarded"] == []

    r = await auth_client.patch(f"/v1/characters/{created['id']}", json={"flaw": "Trusts no one."})
    assert r.status_code == 200
    assert r.json()["flaw"] == "Trusts no one."
    assert r.json()["name"] == "Mira Vale"

    r = await auth_client.get("/v1/characters")
    assert [c["id"] for c in r.json()] == [created["id"]]

    r = await auth_client.delete(f"/v1/characters/{created['id']}")
    assert r.status_code == 204
    assert (await auth_client.get("/v1/characters")).json() == []


async def test_create_requires_fields(auth_client):
    r = await auth_client.post("/v1/characters", json={"name": "Nameless"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid request"


async def test_other_users_items_are_not_found(auth_client, user):
    from storyforge.models.character import Character
    from storyforge.models.user import User

    other = User(google_sub="google-sub-2", email="grace@example.com")
    await other.insert()
    foreign = Character(user_id=other.id, **CHARACTER)
    await foreign.insert()

    assert (await auth_client.patch(f"/v1/characters/{foreign.id}", json={"name": "X"})).status_code == 404
    assert (await auth_client.delete(f"/v1/characters/{foreign.id}")).status_code == 404
    assert (await auth_client.get("/v1/characters")).json() == []


async def test_environment_and_prop_history(auth_client):
    await auth_client.post(
        "/v1/environments",
        json={
            "name": "Sunken Archive",
            "type": "Ruins",
            "description": "A library swallowed by the sea.",
            "atmosphere": "Damp and echoing.",
            "key_details": "Glass domes, drowned shelves.",
        },
    )
    await auth_client.post(
        "/v1/props",
        json={
            "name": "Brass Compass",
            "category": "Tool",
            "description": "Points to what you fear.",
            "appearance": "Tarnished brass, cracked glass.",
            "significance": "Guides the hero home.",
        },
    )
    r = await auth_client.get("/v1/history")
    body = r.json()
    assert [e["name"] for e in body["environments"]] == ["Sunken Archive"]
    assert [p["name"] for p in body["props"]] == ["Brass Compass"]
    assert body["characters"] == []


async def test_creation_logs_generation_time_and_awards_badge(auth_client, user):
    await badges_service.log_generation_session(user.id, "character", 1795)
    r = await auth_client.post("/v1/characters", json=CHARACTER)
    assert [b["badge_id"] for b in r.json()["badges_awarded"]] == [1]

    r = await auth_client.get("/v1/profile/badges")
    assert [b["name"] for b in r.json()] == ["First Steps"]


async def test_patch_null_clears_image_but_not_required_fields(auth_client):
    created = (
        await auth_client.post("/v1/characters", json={**CHARACTER, "image_url": "data:image/png;base64,QUJD"})
    ).json()
    assert created["image_url"] == "data:image/png;base64,QUJD"

    r = await auth_client.patch(f"/v1/characters/{created['id']}", json={"image_url": None})
    assert r.status_code == 200
    assert r.json()["image_url"] is None

    r = await auth_client.patch(f"/v1/characters/{created['id']}", json={"name": None})
    assert r.status_code == 200
    assert r.json()["name"] == "Mira Vale"

    stored = (await auth_client.get("/v1/characters")).json()[0]
    assert stored["image_url"] is None
    assert stored["name"] == "Mira Vale"

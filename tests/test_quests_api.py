from beanie import PydanticObjectId


async def _daily(auth_client) -> dict[str, dict]:
    r = await auth_client.get("/v1/quests/daily")
    assert r.status_code == 200
    return {q["quest"]["key"]: q for q in r.json()}


async def test_daily_quests_are_assigned_on_first_fetch(auth_client):
    quests = await _daily(auth_client)
    assert set(quests) == {"daily_characters", "daily_environments", "daily_props", "daily_publish", "daily_likes"}
    assert (await _daily(auth_client)).keys() == quests.keys()


async def test_progress_then_claim(auth_client):
    await _daily(auth_client)
    r = await auth_client.post("/v1/quests/progress", json={"quest_type": "like_gallery", "increment": 4})
    assert r.json() == {"success": True, "updated": 1}
    quest = (await _daily(auth_client))["daily_likes"]
    assert quest["progress"] == 4
    assert not quest["is_completed"]

    r = await auth_client.post(f"/v1/quests/{quest['id']}/claim")
    assert r.status_code == 400
    assert r.json()["message"] == "Quest not completed"

    await auth_client.post("/v1/quests/progress", json={"quest_type": "like_gallery"})
    quest = (await _daily(auth_client))["daily_likes"]
    assert quest["progress"] == 5
    assert quest["is_completed"]

    r = await auth_client.post(f"/v1/quests/{quest['id']}/claim")
    assert r.status_code == 200
    assert r.json()["account"]["balance"] == 100 + quest["quest"]["reward_credits"]

    r = await auth_client.post(f"/v1/quests/{quest['id']}/claim")
    assert r.status_code == 400
    assert (await auth_client.get("/v1/credits/balance")).json()["balance"] == 100 + quest["quest"]["reward_credits"]


async def test_progress_rejects_zero_increment(auth_client):
    r = await auth_client.post("/v1/quests/progress", json={"quest_type": "create_prop", "increment": 0})
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"


async def test_claim_unknown_quest(auth_client):
    r = await auth_client.post(f"/v1/quests/{PydanticObjectId()}/claim")
    assert r.status_code == 404
    r = await auth_client.post("/v1/quests/not-an-id/claim")
    assert r.status_code == 404

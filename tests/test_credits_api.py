from storyforge.models.credit_account import CreditAccount
from storyforge.services import credits as credits_service


async def test_account_is_opened_lazily(auth_client):
    r = await auth_client.get("/v1/credits")
    assert r.status_code == 200
    body = r.json()
    assert body["balance"] == 100
    assert body["total_earned"] == 100
    assert body["total_spent"] == 0


async def test_spend_reduces_balance(auth_client, user):
    r = await auth_client.post("/v1/credits/spend", json={"amount": 25, "description": "Portrait"})
    assert r.status_code == 200
    assert r.json()["balance"] == 75

    r = await auth_client.get("/v1/credits/transactions")
    latest = r.json()[0]
    assert latest["amount"] == -25
    assert latest["source"] == "ai_generation"
    assert latest["balance_after"] == 75


async def test_spend_more_than_balance_is_rejected(auth_client, user):
    await credits_service.adjust_credits(user.id, -95, "spend", "test")

    r = await auth_client.post("/v1/credits/spend", json={"amount": 10})
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Insufficient credits"
    assert body["code"] == "INSUFFICIENT_CREDITS"

    account = await CreditAccount.find_one(CreditAccount.user_id == user.id)
    assert account.balance == 5


async def test_spend_requires_positive_amount(auth_client):
    r = await auth_client.post("/v1/credits/spend", json={"amount": 0})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid request"


async def test_daily_login_once_per_day(auth_client):
    r = await auth_client.post("/v1/credits/daily-login")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["streak"] == 1
    assert body["credits"] == 10
    assert body["balance"] == 110

    r = await auth_client.post("/v1/credits/daily-login")
    assert r.status_code == 400
    assert r.json()["message"] == "Daily reward already claimed"
    assert r.json()["details"] == {"claimed": True}
    assert (await auth_client.get("/v1/credits/balance")).json() == {"balance": 110}


async def test_leaderboard_is_public(client, user):
    await credits_service.get_or_create_account(user.id)
    r = await client.get("/v1/leaderboard")
    assert r.status_code == 200
    assert r.json()[0]["display_name"] == "Ada Lovelace"


async def test_credits_require_session(client):
    r = await client.get("/v1/credits")
    assert r.status_code == 401
    assert r.json()["code"] == "UNAUTHORIZED"

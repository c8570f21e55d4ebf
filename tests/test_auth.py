from storyforge.deps import SESSION_COOKIE_NAME
from storyforge.models.credit_account import CreditAccount
from storyforge.models.user import User
from storyforge.services import users as user_service

CLAIMS = {
    "sub": "google-sub-new",
    "email": "lin@example.com",
    "given_name": "Lin",
    "family_name": "Park",
    "picture": "https://img.example/lin.png",
}


async def test_me_requires_session(client):
    r = await client.get("/v1/auth/me")
    assert r.status_code == 401
    assert r.json()["message"] == "Not authenticated"


async def test_tampered_cookie_is_rejected(client):
    client.cookies.set(SESSION_COOKIE_NAME, "not-a-signed-value")
    r = await client.get("/v1/auth/me")
    assert r.status_code == 401


async def test_me_returns_user(auth_client, user):
    r = await auth_client.get("/v1/auth/me")
    assert r.status_code == 200
    assert r.json()["id"] == str(user.id)
    assert r.json()["email"] == "ada@example.com"


async def test_logout_invalidates_session(auth_client):
    r = await auth_client.post("/v1/auth/logout")
    assert r.status_code == 200
    assert (await auth_client.get("/v1/auth/me")).status_code == 401


async def test_google_sign_in_creates_user_and_account(client, monkeypatch):
    monkeypatch.setattr(user_service, "verify_google_id_token", lambda token: CLAIMS)
    r = await client.post("/v1/auth/google", json={"id_token": "token"})
    assert r.status_code == 200
    assert r.json()["user"]["first_name"] == "Lin"
    assert SESSION_COOKIE_NAME in r.cookies

    user = await User.find_one(User.google_sub == "google-sub-new")
    account = await CreditAccount.find_one(CreditAccount.user_id == user.id)
    assert account.balance == 100


async def test_repeat_sign_in_keeps_custom_picture(client, monkeypatch):
    monkeypatch.setattr(user_service, "verify_google_id_token", lambda token: CLAIMS)
    await client.post("/v1/auth/google", json={"id_token": "token"})
    user = await User.find_one(User.google_sub == "google-sub-new")
    user.profile_image_url = "https://img.example/custom.png"
    await user.save()

    await client.post("/v1/auth/google", json={"id_token": "token"})
    user = await User.find_one(User.google_sub == "google-sub-new")
    assert user.profile_image_url == "https://img.example/custom.png"
    assert await User.find().count() == 1
    assert await CreditAccount.find().count() == 1

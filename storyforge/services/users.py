from datetime import datetime

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from storyforge.core.audit import log_event
from storyforge.core.config import get_settings
from storyforge.core.exceptions import BadRequestError, UnauthorizedError
from storyforge.core.logging import get_logger
from storyforge.models.user import User
from storyforge.services import credits as credits_service

log = get_logger(__name__)


def verify_google_id_token(token: str) -> dict:
    """Verify Google ID token; return decoded claims (sub, email, given_name, picture, etc.)."""
    settings = get_settings()
    try:
        return id_token.verify_oauth2_token(
            token,
            google_requests.Request(),
            settings.google_client_id,
        )
    except (ValueError, google_exceptions.GoogleAuthError) as e:
        raise UnauthorizedError(f"Invalid Google token: {e}") from e


async def upsert_user_from_claims(claims: dict) -> User:
    google_sub = claims.get("sub")
    if not google_sub:
        raise BadRequestError("Missing sub in token")
    email = claims.get("email") or ""
    first_name = claims.get("given_name")
    last_name = claims.get("family_name")
    picture = claims.get("picture")

    user = await User.find_one(User.google_sub == google_sub)
    if user:
        now = datetime.utcnow()
        await user.set({
            User.email: email,
            User.first_name: first_name,
            User.last_name: last_name,
            # Keep a custom profile image if the user set one.
            User.profile_image_url: user.profile_image_url or picture,
            User.last_login_at: now,
            User.updated_at: now,
        })
        log.info("user_login", user_id=str(user.id))
        await log_event("user_login", user.id, user, email=user.email)
    else:
        user = User(
            google_sub=google_sub,
            email=email,
            first_name=first_name,
            last_name=last_name,
            profile_image_url=picture,
            last_login_at=datetime.utcnow(),
        )
        await user.insert()
        log.info("user_created", user_id=str(user.id))
        await log_event("user_created", user.id, user, email=user.email)
        await credits_service.get_or_create_account(user.id)
    return user


async def update_profile(user: User, bio: str | None = None, profile_image_url: str | None = None) -> User:
    changes = {User.updated_at: datetime.utcnow()}
    if bio is not None:
        changes[User.bio] = bio
    if profile_image_url is not None:
        changes[User.profile_image_url] = profile_image_url
    await user.set(changes)
    return user


async def invalidate_sessions(user: User) -> None:
    """Bump session_version so every outstanding cookie stops validating."""
    await user.inc({User.session_version: 1})
    await user.set({User.updated_at: datetime.utcnow()})


def session_payload_for_user(user: User) -> dict:
    return {"user_id": str(user.id), "session_version": user.session_version}

import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from storyforge.core.config import get_settings
from storyforge.models.audit_log import AuditLog
from storyforge.models.badge import Badge
from storyforge.models.character import Character
from storyforge.models.credit_account import CreditAccount
from storyforge.models.credit_transaction import CreditTransaction
from storyforge.models.environment import Environment
from storyforge.models.gallery_item import GalleryItem
from storyforge.models.gallery_like import GalleryLike
from storyforge.models.generation_session import GenerationSession
from storyforge.models.narrative_contribution import NarrativeContribution
from storyforge.models.narrative_project import NarrativeProject
from storyforge.models.prop import Prop
from storyforge.models.quest_template import QuestTemplate
from storyforge.models.user import User
from storyforge.models.user_badge import UserBadge
from storyforge.models.user_daily_quest import UserDailyQuest

DOCUMENT_MODELS = [
    User,
    CreditAccount,
    CreditTransaction,
    QuestTemplate,
    UserDailyQuest,
    Badge,
    UserBadge,
    GenerationSession,
    Character,
    Environment,
    Prop,
    GalleryItem,
    GalleryLike,
    NarrativeProject,
    NarrativeContribution,
    AuditLog,
]


def _use_tls(uri: str) -> bool:
    """True if URI uses TLS (Atlas or explicit tls=true). Avoids TLS for plain mongodb:// in CI."""
    return "mongodb+srv://" in uri or "tls=true" in uri.lower()


def get_database() -> AsyncIOMotorDatabase:
    settings = get_settings()
    kwargs = {}
    if _use_tls(settings.mongodb_uri):
        kwargs["tlsCAFile"] = certifi.where()
        kwargs["tlsDisableOCSPEndpointCheck"] = True
    client = AsyncIOMotorClient(settings.mongodb_uri, **kwargs)
    return client[settings.mongodb_db_name]


async def init_db(database=None) -> None:
    """Bind all document models. Tests pass an in-memory database."""
    if database is None:
        database = get_database()
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)

from storyforge.models.user import User
from storyforge.models.credit_account import CreditAccount
from storyforge.models.credit_transaction import CreditTransaction
from storyforge.models.quest_template import QuestTemplate
from storyforge.models.user_daily_quest import UserDailyQuest
from storyforge.models.badge import Badge
from storyforge.models.user_badge import UserBadge
from storyforge.models.generation_session import GenerationSession
from storyforge.models.character import Character
from storyforge.models.environment import Environment
from storyforge.models.prop import Prop
from storyforge.models.gallery_item import GalleryItem
from storyforge.models.gallery_like import GalleryLike
from storyforge.models.narrative_project import NarrativeProject
from storyforge.models.narrative_contribution import NarrativeContribution
from storyforge.models.audit_log import AuditLog

__all__ = [
    "User",
    "CreditAccount",
    "CreditTransaction",
    "QuestTemplate",
    "UserDailyQuest",
    "Badge",
    "UserBadge",
    "GenerationSession",
    "Character",
    "Environment",
    "Prop",
    "GalleryItem",
    "GalleryLike",
    "NarrativeProject",
    "NarrativeContribution",
    "AuditLog",
]

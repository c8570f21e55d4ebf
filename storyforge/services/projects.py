"""Narrative projects crowd-funded with credits."""

from datetime import datetime

from beanie import PydanticObjectId, UpdateResponse
from beanie.odm.operators.find.comparison import In
from beanie.odm.operators.update.general import Inc, Set

from storyforge.core.audit import log_event
from storyforge.core.exceptions import BadRequestError, NotFoundError
from storyforge.core.logging import get_logger
from storyforge.models.narrative_contribution import NarrativeContribution
from storyforge.models.narrative_project import NarrativeProject
from storyforge.models.user import User
from storyforge.services import credits as credits_service

log = get_logger(__name__)


async def list_all() -> list[tuple[NarrativeProject, User | None]]:
    projects = await NarrativeProject.find().sort(-NarrativeProject.created_at).to_list()
    users = await User.find(In(User.id, list({p.user_id for p in projects}))).to_list()
    by_id = {u.id: u for u in users}
    return [(p, by_id.get(p.user_id)) for p in projects]


async def list_for_user(user_id: PydanticObjectId) -> list[NarrativeProject]:
    return await NarrativeProject.find(NarrativeProject.user_id == user_id).sort(-NarrativeProject.created_at).to_list()


async def create_project(
    user_id: PydanticObjectId,
    title: str,
    description: str,
    narrative_type: str,
    funding_goal: int,
    image_url: str | None = None,
) -> NarrativeProject:
    if funding_goal < 1:
        raise BadRequestError("Funding goal must be positive")
    project = NarrativeProject(
        user_id=user_id,
        title=title,
        description=description,
        narrative_type=narrative_type,
        funding_goal=funding_goal,
        image_url=image_url,
    )
    await project.insert()
    return project


async def contribute(user_id: PydanticObjectId, project_id: PydanticObjectId, amount: int) -> NarrativeProject:
    """Spend credits on a project; the project flips to funded once the goal is met."""
    if amount < 1:
        raise BadRequestError("Invalid contribution amount")
    project = await NarrativeProject.get(project_id)
    if not project:
        raise NotFoundError("Project not found")

    await credits_service.adjust_credits(
        user_id, -amount, "spend", "project_contribution", f"Contributed to {project.title}"
    )
    await NarrativeContribution(user_id=user_id, project_id=project_id, amount=amount).insert()

    project = await NarrativeProject.find_one(NarrativeProject.id == project_id).update(
        Inc({NarrativeProject.current_funding: amount, NarrativeProject.backer_count: 1}),
        Set({NarrativeProject.updated_at: datetime.utcnow()}),
        response_type=UpdateResponse.NEW_DOCUMENT,
    )
    if project.status != "funded" and project.current_funding >= project.funding_goal:
        project = await _mark_funded(project)
    await log_event("project_contribution", user_id, project, amount=amount)
    return project


async def _mark_funded(project: NarrativeProject) -> NarrativeProject:
    """Flip an active project to funded; only status and updated_at are written."""
    funded = await NarrativeProject.find_one(
        NarrativeProject.id == project.id,
        NarrativeProject.status == "active",
    ).update(
        Set({NarrativeProject.status: "funded", NarrativeProject.updated_at: datetime.utcnow()}),
        response_type=UpdateResponse.NEW_DOCUMENT,
    )
    if funded is None:
        return await NarrativeProject.get(project.id)
    log.info("project_funded", project_id=str(project.id), funding=funded.current_funding)
    return funded


async def contributions_for_user(
    user_id: PydanticObjectId,
) -> list[tuple[NarrativeContribution, NarrativeProject | None]]:
    rows = (
        await NarrativeContribution.find(NarrativeContribution.user_id == user_id)
        .sort("-created_at", "-_id")
        .to_list()
    )
    projects = await NarrativeProject.find(In(NarrativeProject.id, list({r.project_id for r in rows}))).to_list()
    by_id = {p.id: p for p in projects}
    return [(r, by_id.get(r.project_id)) for r in rows]

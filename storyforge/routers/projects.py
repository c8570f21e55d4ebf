from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from storyforge.deps import get_current_user, parse_object_id
from storyforge.models.narrative_project import NarrativeProject
from storyforge.models.user import User
from storyforge.services import projects as projects_service

router = APIRouter()


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    narrative_type: str = Field(min_length=1, max_length=50)
    funding_goal: int = Field(gt=0)
    image_url: str | None = None


class ContributeRequest(BaseModel):
    amount: int = Field(gt=0)


def project_out(p: NarrativeProject, owner: User | None = None) -> dict:
    out = {
        "id": str(p.id),
        "user_id": str(p.user_id),
        "title": p.title,
        "description": p.description,
        "narrative_type": p.narrative_type,
        "funding_goal": p.funding_goal,
        "current_funding": p.current_funding,
        "backer_count": p.backer_count,
        "image_url": p.image_url,
        "status": p.status,
        "created_at": p.created_at.isoformat(),
    }
    if owner is not None:
        out["owner"] = {"display_name": owner.display_name}
    return out


@router.get("")
async def projects_list():
    return [project_out(p, owner) for p, owner in await projects_service.list_all()]


@router.get("/my")
async def projects_mine(user: User = Depends(get_current_user)):
    return [project_out(p) for p in await projects_service.list_for_user(user.id)]


@router.get("/contributions")
async def projects_contributions(user: User = Depends(get_current_user)):
    rows = await projects_service.contributions_for_user(user.id)
    return [
        {
            "id": str(c.id),
            "project_id": str(c.project_id),
            "amount": c.amount,
            "created_at": c.created_at.isoformat(),
            "project": project_out(p) if p else None,
        }
        for c, p in rows
    ]


@router.post("", status_code=status.HTTP_201_CREATED)
async def projects_create(body: ProjectCreate, user: User = Depends(get_current_user)):
    project = await projects_service.create_project(
        user.id,
        body.title,
        body.description,
        body.narrative_type,
        body.funding_goal,
        image_url=body.image_url,
    )
    return project_out(project)


@router.post("/{project_id}/contribute")
async def projects_contribute(project_id: str, body: ContributeRequest, user: User = Depends(get_current_user)):
    project = await projects_service.contribute(user.id, parse_object_id(project_id, "Project"), body.amount)
    return project_out(project)

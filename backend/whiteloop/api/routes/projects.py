"""Project Routes — researchers create projects and the studies inside them.

Invariants:
    - Only researchers (or admins) reach these handlers
    - Inline screener criteria are validated twice: by pydantic at the boundary
      and by parse_criteria before storage
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.api.dependencies import require
from whiteloop.core.role_gate import Caller, Operation
from whiteloop.infrastructure.database import get_db
from whiteloop.schemas.catalog import (
    ProjectCreate, ProjectResponse, StudyCreate, StudyResponse,
)
from whiteloop.services.study_catalog import StudyCatalog

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.post(
    "", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: ProjectCreate,
    caller: Caller = Depends(require(Operation.CREATE_PROJECT)),
    db: AsyncSession = Depends(get_db),
):
    project = await StudyCatalog(db).create_project(
        caller, body.model_dump(mode="json"),
    )
    return ProjectResponse.model_validate(project)


@router.post(
    "/{project_id}/studies",
    response_model=StudyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_study(
    project_id: UUID,
    body: StudyCreate,
    caller: Caller = Depends(require(Operation.CREATE_STUDY)),
    db: AsyncSession = Depends(get_db),
):
    """Create a study, optionally with its screener."""
    values = body.model_dump(mode="json", exclude={"screener"})
    screener = body.screener.model_dump(mode="json") if body.screener else None
    study, _ = await StudyCatalog(db).create_study(
        caller, project_id, values, screener,
    )
    return StudyResponse.model_validate(study)

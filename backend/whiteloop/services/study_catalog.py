"""Study Catalog — projects, studies and their screeners.

Invariants:
    - Only the owning researcher (or an admin) may add studies to a project
    - Screener criteria are stored only after parse_criteria() accepts them
    - A study is created together with its screener in one transaction
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.core.criteria import criteria_to_dict, parse_criteria
from whiteloop.core.domain_types import ProjectId, Role, StudyId
from whiteloop.core.errors import (
    ErrorContext, ForbiddenError, ResourceNotFoundError,
)
from whiteloop.core.role_gate import Caller
from whiteloop.models.project import Project
from whiteloop.models.screener import Screener
from whiteloop.models.study import Study
from whiteloop.services.user_directory import ensure_user

logger = logging.getLogger(__name__)


class StudyCatalog:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_project(self, researcher: Caller, values: dict) -> Project:
        await ensure_user(self.db, researcher)
        project = Project(researcher_id=researcher.user_id, **values)
        self.db.add(project)
        await self.db.commit()
        logger.info(f"Project {project.id} created")
        return project

    async def create_study(
        self,
        researcher: Caller,
        project_id: ProjectId,
        values: dict,
        screener: dict | None = None,
    ) -> tuple[Study, Screener | None]:
        """Create a study, with an inline screener when one is supplied."""
        project = await self.db.get(Project, project_id)
        if project is None:
            raise ResourceNotFoundError("Project", str(project_id))
        if researcher.role != Role.ADMIN and project.researcher_id != researcher.user_id:
            raise ForbiddenError(researcher.role.value, "add studies to this project")

        screener_row = None
        if screener is not None:
            raw_criteria = screener.get("criteria")
            screener_row = Screener(
                project_id=project_id,
                criteria=(
                    criteria_to_dict(parse_criteria(raw_criteria))
                    if raw_criteria is not None else None
                ),
                questions=screener.get("questions"),
                auto_approve=screener.get("auto_approve", False),
            )
            self.db.add(screener_row)
            await self.db.flush()

        study = Study(
            project_id=project_id,
            screener_id=screener_row.id if screener_row else None,
            **values,
        )
        self.db.add(study)
        await self.db.commit()
        logger.info(f"Study {study.id} created", extra={"study_id": study.id})
        return study, screener_row

    async def get_study(self, study_id: StudyId) -> Study | None:
        return await self.db.get(Study, study_id)

    async def get_study_or_404(self, study_id: StudyId) -> Study:
        study = await self.get_study(study_id)
        if study is None:
            raise ResourceNotFoundError(
                "Study", str(study_id), ErrorContext(study_id=str(study_id)),
            )
        return study

    async def get_screener(self, study: Study) -> Screener | None:
        if study.screener_id is None:
            return None
        return await self.db.get(Screener, study.screener_id)

# api/routers/projects.py
from typing import List

from fastapi import APIRouter, Depends, Query, status

from retirewise.api.deps import get_unified_db
from retirewise.core.exceptions import NotFoundError
from retirewise.schemas import ProjectCreate, ProjectRead, ProjectUpdate
from retirewise.services import UnifiedDB

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=List[ProjectRead], summary="List projects")
async def list_projects(
    active: bool = Query(False, description="Only planning/active projects"),
    db: UnifiedDB = Depends(get_unified_db),
):
    if active:
        return await db.get_active_projects()
    return await db.get_all_projects()


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
)
async def create_project(project_in: ProjectCreate, db: UnifiedDB = Depends(get_unified_db)):
    return await db.create_project(project_in)


@router.get("/{project_id}", response_model=ProjectRead, summary="Get project")
async def get_project(project_id: str, db: UnifiedDB = Depends(get_unified_db)):
    project = await db.get_project(project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found")
    return project


@router.patch("/{project_id}", response_model=ProjectRead, summary="Update project")
async def update_project(
    project_id: str, project_in: ProjectUpdate, db: UnifiedDB = Depends(get_unified_db)
):
    """Only the fields present in the body are changed."""
    return await db.update_project(project_id, project_in)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete project")
async def delete_project(project_id: str, db: UnifiedDB = Depends(get_unified_db)):
    await db.delete_project(project_id)

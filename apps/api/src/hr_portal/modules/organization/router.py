"""
Organization Router

Departments and projects, visible only to the publisher that created them.

Endpoints:
- GET/POST /departments, PUT/DELETE /departments/{department_id}
- GET/POST /projects, PUT/DELETE /projects/{project_id}
- GET /projects/department/{department_id}
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser, require_publisher
from hr_portal.core.database import get_db
from hr_portal.modules.audit.schemas import MessageResponse
from hr_portal.modules.organization import service
from hr_portal.modules.organization.schemas import (
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)

departments_router = APIRouter()
projects_router = APIRouter()

_AUTH_RESPONSES = {
    401: {"description": "Unauthorized - invalid or missing token"},
    403: {"description": "Forbidden - not a publisher, or not the creator"},
}

_DUPLICATE_EXAMPLE = {
    "application/json": {
        "example": {
            "detail": {
                "error": "DUPLICATE_DEPARTMENT",
                "message": "Department with this name already exists.",
            }
        }
    }
}


# ============================================
# Departments
# ============================================


@departments_router.get(
    "",
    response_model=list[DepartmentResponse],
    summary="List My Departments",
    responses=_AUTH_RESPONSES,
)
async def list_departments(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
) -> list[DepartmentResponse]:
    return await service.list_departments(db, user)


@departments_router.post(
    "",
    response_model=DepartmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Department",
    responses={
        400: {"description": "Name already used by one of your departments", "content": _DUPLICATE_EXAMPLE},
        **_AUTH_RESPONSES,
    },
)
async def create_department(
    data: DepartmentCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
) -> DepartmentResponse:
    return await service.create_department(db, data, user)


@departments_router.put(
    "/{department_id}",
    response_model=DepartmentResponse,
    summary="Update Department",
    responses={
        400: {"description": "Name already used by one of your departments"},
        404: {"description": "Department not found"},
        **_AUTH_RESPONSES,
    },
)
async def update_department(
    department_id: UUID,
    data: DepartmentUpdate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
) -> DepartmentResponse:
    return await service.update_department(db, str(department_id), data, user)


@departments_router.delete(
    "/{department_id}",
    response_model=MessageResponse,
    summary="Delete Department",
    description="A department that still has projects cannot be deleted.",
    responses={
        400: {"description": "Department still has projects"},
        404: {"description": "Department not found"},
        **_AUTH_RESPONSES,
    },
)
async def delete_department(
    department_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
) -> MessageResponse:
    await service.delete_department(db, str(department_id), user)
    return MessageResponse(message="Department deleted")


# ============================================
# Projects
# ============================================


@projects_router.get(
    "",
    response_model=list[ProjectResponse],
    summary="List My Projects",
    responses=_AUTH_RESPONSES,
)
async def list_projects(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
) -> list[ProjectResponse]:
    return await service.list_projects(db, user)


@projects_router.get(
    "/department/{department_id}",
    response_model=list[ProjectResponse],
    summary="List Projects of a Department",
    responses={404: {"description": "Department not found"}, **_AUTH_RESPONSES},
)
async def list_department_projects(
    department_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
) -> list[ProjectResponse]:
    return await service.list_department_projects(db, str(department_id), user)


@projects_router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    responses={
        400: {"description": "Name already used in this department"},
        404: {"description": "Department not found"},
        **_AUTH_RESPONSES,
    },
)
async def create_project(
    data: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
) -> ProjectResponse:
    return await service.create_project(db, data, user)


@projects_router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Update Project",
    responses={
        400: {"description": "Name already used in this department"},
        404: {"description": "Project or department not found"},
        **_AUTH_RESPONSES,
    },
)
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
) -> ProjectResponse:
    return await service.update_project(db, str(project_id), data, user)


@projects_router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    summary="Delete Project",
    description="A project that still has offers cannot be deleted.",
    responses={
        400: {"description": "Project still has offers"},
        404: {"description": "Project not found"},
        **_AUTH_RESPONSES,
    },
)
async def delete_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
) -> MessageResponse:
    await service.delete_project(db, str(project_id), user)
    return MessageResponse(message="Project deleted")

"""
Organization Service

Department and project management for publishers (comite_ajout).

Rules:
- A publisher only sees and changes departments and projects it created
- Names are unique per creator (departments) and per creator and
  department (projects); a clash raises ConflictError
- A department with projects, or a project with offers, cannot be deleted
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser
from hr_portal.core.errors import ConflictError, DependencyError, NotFoundError
from hr_portal.core.permissions import ensure_owner
from hr_portal.modules.audit.service import log_user_action
from hr_portal.modules.organization import repository
from hr_portal.modules.organization.models import Department, Project
from hr_portal.modules.organization.schemas import (
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)


class DepartmentNotFoundError(NotFoundError):
    def __init__(self, department_id: str):
        super().__init__(f"Department {department_id} not found.", error_code="DEPARTMENT_NOT_FOUND")


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: str):
        super().__init__(f"Project {project_id} not found.", error_code="PROJECT_NOT_FOUND")


class DuplicateDepartmentError(ConflictError):
    def __init__(self):
        super().__init__(
            "Department with this name already exists.",
            error_code="DUPLICATE_DEPARTMENT",
        )


class DuplicateProjectError(ConflictError):
    def __init__(self):
        super().__init__(
            "Project with this name already exists in this department.",
            error_code="DUPLICATE_PROJECT",
        )


def department_to_response(department: Department, owner: CurrentUser) -> DepartmentResponse:
    response = DepartmentResponse.model_validate(department)
    response.created_by_name = owner.name
    return response


def project_to_response(project: Project) -> ProjectResponse:
    response = ProjectResponse.model_validate(project)
    response.department_name = project.department.name if project.department else None
    return response


async def get_owned_department(db: AsyncSession, department_id: str, user: CurrentUser) -> Department:
    """
    Load a department and check that ``user`` created it.

    Raises:
        DepartmentNotFoundError: If it does not exist
        ForbiddenError: If another publisher created it
    """
    department = await repository.get_department(db, department_id)
    if department is None:
        raise DepartmentNotFoundError(department_id)
    ensure_owner(user, department.created_by, "Department")
    return department


async def get_owned_project(db: AsyncSession, project_id: str, user: CurrentUser) -> Project:
    """
    Load a project and check that ``user`` created it.

    Raises:
        ProjectNotFoundError: If it does not exist
        ForbiddenError: If another publisher created it
    """
    project = await repository.get_project(db, project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    ensure_owner(user, project.created_by, "Project")
    return project


# ============================================
# Departments
# ============================================


async def list_departments(db: AsyncSession, user: CurrentUser) -> list[DepartmentResponse]:
    departments = await repository.list_departments(db, user.id)
    return [department_to_response(d, user) for d in departments]


async def create_department(
    db: AsyncSession,
    data: DepartmentCreate,
    user: CurrentUser,
) -> DepartmentResponse:
    try:
        department = await repository.create_department(
            db,
            name=data.name,
            description=data.description,
            created_by=user.id,
        )
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateDepartmentError() from e

    logger.info(f"Department {department.id} created by {user.id}")
    await log_user_action(db, user, f'created department "{department.name}"')
    return department_to_response(department, user)


async def update_department(
    db: AsyncSession,
    department_id: str,
    data: DepartmentUpdate,
    user: CurrentUser,
) -> DepartmentResponse:
    department = await get_owned_department(db, department_id, user)

    fields = {"name": data.name}
    if data.description is not None:
        fields["description"] = data.description

    try:
        department = await repository.update_department(db, department, **fields)
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateDepartmentError() from e

    await log_user_action(db, user, f'updated department "{department.name}"')
    return department_to_response(department, user)


async def delete_department(db: AsyncSession, department_id: str, user: CurrentUser) -> None:
    """
    Raises:
        DependencyError: If the department still has projects
    """
    department = await get_owned_department(db, department_id, user)

    if await repository.count_projects(db, department.id) > 0:
        raise DependencyError(
            "Cannot delete department with existing projects.",
            error_code="DEPARTMENT_HAS_PROJECTS",
        )

    await repository.delete_department(db, department)
    await log_user_action(db, user, f"deleted department id {department_id}")


# ============================================
# Projects
# ============================================


async def list_projects(db: AsyncSession, user: CurrentUser) -> list[ProjectResponse]:
    projects = await repository.list_projects(db, user.id)
    return [project_to_response(p) for p in projects]


async def list_department_projects(
    db: AsyncSession,
    department_id: str,
    user: CurrentUser,
) -> list[ProjectResponse]:
    await get_owned_department(db, department_id, user)
    projects = await repository.list_projects(db, user.id, department_id=department_id)
    return [project_to_response(p) for p in projects]


async def create_project(db: AsyncSession, data: ProjectCreate, user: CurrentUser) -> ProjectResponse:
    department_id = str(data.department_id)
    await get_owned_department(db, department_id, user)

    try:
        project = await repository.create_project(
            db,
            name=data.name,
            description=data.description,
            department_id=department_id,
            created_by=user.id,
        )
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateProjectError() from e

    logger.info(f"Project {project.id} created by {user.id}")
    await log_user_action(db, user, f'created project "{project.name}"')
    return project_to_response(project)


async def update_project(
    db: AsyncSession,
    project_id: str,
    data: ProjectUpdate,
    user: CurrentUser,
) -> ProjectResponse:
    project = await get_owned_project(db, project_id, user)
    department_id = str(data.department_id)
    await get_owned_department(db, department_id, user)

    fields = {"name": data.name, "department_id": department_id}
    if data.description is not None:
        fields["description"] = data.description

    try:
        project = await repository.update_project(db, project, **fields)
    except IntegrityError as e:
        await db.rollback()
        raise DuplicateProjectError() from e

    await log_user_action(db, user, f'updated project "{project.name}"')
    return project_to_response(project)


async def delete_project(db: AsyncSession, project_id: str, user: CurrentUser) -> None:
    """
    Raises:
        DependencyError: If the project still has offers
    """
    project = await get_owned_project(db, project_id, user)

    if await repository.count_offers(db, project.id) > 0:
        raise DependencyError(
            "Cannot delete project with existing offers.",
            error_code="PROJECT_HAS_OFFERS",
        )

    await repository.delete_project(db, project)
    await log_user_action(db, user, f"deleted project id {project_id}")

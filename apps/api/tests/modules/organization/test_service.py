"""
Unit tests for the organization service layer.

These tests cover:
- Per-creator scoping of departments and projects
- Duplicate names
- Deletion guards for departments with projects and projects with offers
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from hr_portal.core.errors import DependencyError, ForbiddenError
from hr_portal.modules.organization.models import Department, Project
from hr_portal.modules.organization.schemas import (
    DepartmentCreate,
    DepartmentUpdate,
    ProjectCreate,
    ProjectUpdate,
)
from hr_portal.modules.organization.service import (
    DepartmentNotFoundError,
    DuplicateDepartmentError,
    DuplicateProjectError,
    ProjectNotFoundError,
    create_department,
    create_project,
    delete_department,
    delete_project,
    list_departments,
    update_department,
    update_project,
)

SERVICE = "hr_portal.modules.organization.service"


def make_department(created_by: str, name: str = "IT") -> MagicMock:
    department = MagicMock(spec=Department)
    department.id = str(uuid4())
    department.name = name
    department.description = ""
    department.created_by = created_by
    department.created_at = datetime(2025, 1, 2, tzinfo=UTC)
    return department


def make_project(created_by: str, department: MagicMock, name: str = "Digital Services") -> MagicMock:
    project = MagicMock(spec=Project)
    project.id = str(uuid4())
    project.name = name
    project.description = ""
    project.department_id = department.id
    project.department = department
    project.created_by = created_by
    project.created_at = datetime(2025, 1, 2, tzinfo=UTC)
    return project


class TestDepartments:
    """Tests for department operations."""

    @pytest.mark.asyncio
    async def test_create_department(self, mock_db, publisher):
        department = make_department(publisher.id)

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.log_user_action", new_callable=AsyncMock) as mock_audit,
        ):
            mock_repo.create_department = AsyncMock(return_value=department)

            result = await create_department(mock_db, DepartmentCreate(name="IT"), publisher)

            assert result.name == "IT"
            assert result.created_by_name == publisher.name
            mock_repo.create_department.assert_awaited_once_with(
                mock_db, name="IT", description="", created_by=publisher.id
            )
            mock_audit.assert_awaited_once_with(mock_db, publisher, 'created department "IT"')

    @pytest.mark.asyncio
    async def test_duplicate_name(self, mock_db, publisher):
        """A name clash for the same creator becomes a 400 conflict."""
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.create_department = AsyncMock(side_effect=IntegrityError("insert", {}, Exception("dup")))

            with pytest.raises(DuplicateDepartmentError) as exc_info:
                await create_department(mock_db, DepartmentCreate(name="IT"), publisher)

            assert exc_info.value.status_code == 400
            mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_creator(self, mock_db, publisher):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.list_departments = AsyncMock(return_value=[make_department(publisher.id)])

            result = await list_departments(mock_db, publisher)

            mock_repo.list_departments.assert_awaited_once_with(mock_db, publisher.id)
            assert len(result) == 1

    @pytest.mark.asyncio
    async def test_update_other_publishers_department(self, mock_db, publisher, other_publisher):
        department = make_department(other_publisher.id)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_department = AsyncMock(return_value=department)
            mock_repo.update_department = AsyncMock()

            with pytest.raises(ForbiddenError):
                await update_department(mock_db, department.id, DepartmentUpdate(name="Mine"), publisher)

            mock_repo.update_department.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_missing_department(self, mock_db, publisher):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_department = AsyncMock(return_value=None)

            with pytest.raises(DepartmentNotFoundError):
                await update_department(mock_db, "missing", DepartmentUpdate(name="X"), publisher)

    @pytest.mark.asyncio
    async def test_delete_with_projects_is_blocked(self, mock_db, publisher):
        department = make_department(publisher.id)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_department = AsyncMock(return_value=department)
            mock_repo.count_projects = AsyncMock(return_value=2)
            mock_repo.delete_department = AsyncMock()

            with pytest.raises(DependencyError) as exc_info:
                await delete_department(mock_db, department.id, publisher)

            assert exc_info.value.error_code == "DEPARTMENT_HAS_PROJECTS"
            mock_repo.delete_department.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_empty_department(self, mock_db, publisher):
        department = make_department(publisher.id)

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.log_user_action", new_callable=AsyncMock),
        ):
            mock_repo.get_department = AsyncMock(return_value=department)
            mock_repo.count_projects = AsyncMock(return_value=0)
            mock_repo.delete_department = AsyncMock()

            await delete_department(mock_db, department.id, publisher)

            mock_repo.delete_department.assert_awaited_once_with(mock_db, department)


class TestProjects:
    """Tests for project operations."""

    @pytest.mark.asyncio
    async def test_create_project_in_own_department(self, mock_db, publisher):
        department = make_department(publisher.id)
        project = make_project(publisher.id, department)

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.log_user_action", new_callable=AsyncMock),
        ):
            mock_repo.get_department = AsyncMock(return_value=department)
            mock_repo.create_project = AsyncMock(return_value=project)

            result = await create_project(
                mock_db, ProjectCreate(name="Digital Services", department_id=department.id), publisher
            )

            assert result.department_name == "IT"
            assert result.department_id == department.id

    @pytest.mark.asyncio
    async def test_create_project_in_other_publishers_department(self, mock_db, publisher, other_publisher):
        department = make_department(other_publisher.id)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_department = AsyncMock(return_value=department)
            mock_repo.create_project = AsyncMock()

            with pytest.raises(ForbiddenError):
                await create_project(mock_db, ProjectCreate(name="P", department_id=department.id), publisher)

            mock_repo.create_project.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_project(self, mock_db, publisher):
        department = make_department(publisher.id)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_department = AsyncMock(return_value=department)
            mock_repo.create_project = AsyncMock(side_effect=IntegrityError("insert", {}, Exception("dup")))

            with pytest.raises(DuplicateProjectError):
                await create_project(mock_db, ProjectCreate(name="P", department_id=department.id), publisher)

    @pytest.mark.asyncio
    async def test_update_missing_project(self, mock_db, publisher):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_project = AsyncMock(return_value=None)

            with pytest.raises(ProjectNotFoundError):
                await update_project(
                    mock_db, "missing", ProjectUpdate(name="P", department_id=str(uuid4())), publisher
                )

    @pytest.mark.asyncio
    async def test_delete_project_with_offers_is_blocked(self, mock_db, publisher):
        project = make_project(publisher.id, make_department(publisher.id))

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_project = AsyncMock(return_value=project)
            mock_repo.count_offers = AsyncMock(return_value=1)
            mock_repo.delete_project = AsyncMock()

            with pytest.raises(DependencyError) as exc_info:
                await delete_project(mock_db, project.id, publisher)

            assert exc_info.value.error_code == "PROJECT_HAS_OFFERS"
            mock_repo.delete_project.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_other_publishers_project(self, mock_db, publisher, other_publisher):
        project = make_project(other_publisher.id, make_department(other_publisher.id))

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_project = AsyncMock(return_value=project)
            mock_repo.delete_project = AsyncMock()

            with pytest.raises(ForbiddenError):
                await delete_project(mock_db, project.id, publisher)

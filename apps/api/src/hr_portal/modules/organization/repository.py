"""
Organization Repository

Database operations for departments and projects. Listing queries are
always filtered by creator.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.modules.offers.models import Offer

from .models import Department, Project

# ============================================
# Departments
# ============================================


async def get_department(db: AsyncSession, department_id: str) -> Department | None:
    return await db.get(Department, department_id)


async def list_departments(db: AsyncSession, created_by: str) -> list[Department]:
    result = await db.execute(
        select(Department)
        .where(Department.created_by == created_by)
        .order_by(Department.name.asc())
    )
    return list(result.scalars().all())


async def create_department(
    db: AsyncSession,
    *,
    name: str,
    description: str,
    created_by: str,
) -> Department:
    department = Department(name=name, description=description, created_by=created_by)
    db.add(department)
    await db.commit()
    await db.refresh(department)
    return department


async def update_department(db: AsyncSession, department: Department, **fields) -> Department:
    for key, value in fields.items():
        setattr(department, key, value)
    await db.commit()
    await db.refresh(department)
    return department


async def count_projects(db: AsyncSession, department_id: str) -> int:
    result = await db.execute(
        select(func.count(Project.id)).where(Project.department_id == department_id)
    )
    return result.scalar_one()


async def delete_department(db: AsyncSession, department: Department) -> None:
    await db.delete(department)
    await db.commit()


# ============================================
# Projects
# ============================================


async def get_project(db: AsyncSession, project_id: str) -> Project | None:
    return await db.get(Project, project_id)


async def list_projects(
    db: AsyncSession,
    created_by: str,
    department_id: str | None = None,
) -> list[Project]:
    query = (
        select(Project)
        .join(Department, Project.department_id == Department.id)
        .where(Project.created_by == created_by)
    )
    if department_id is not None:
        query = query.where(Project.department_id == department_id)
    query = query.order_by(Department.name.asc(), Project.name.asc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def create_project(
    db: AsyncSession,
    *,
    name: str,
    description: str,
    department_id: str,
    created_by: str,
) -> Project:
    project = Project(
        name=name,
        description=description,
        department_id=department_id,
        created_by=created_by,
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project


async def update_project(db: AsyncSession, project: Project, **fields) -> Project:
    for key, value in fields.items():
        setattr(project, key, value)
    await db.commit()
    await db.refresh(project)
    return project


async def count_offers(db: AsyncSession, project_id: str) -> int:
    result = await db.execute(select(func.count(Offer.id)).where(Offer.project_id == project_id))
    return result.scalar_one()


async def delete_project(db: AsyncSession, project: Project) -> None:
    await db.delete(project)
    await db.commit()

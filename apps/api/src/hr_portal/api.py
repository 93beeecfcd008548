from fastapi import APIRouter

from hr_portal.modules.applications.router import router as applications_router
from hr_portal.modules.audit.router import router as audit_router
from hr_portal.modules.auth import router as auth_router
from hr_portal.modules.offers.router import router as offers_router
from hr_portal.modules.organization.router import departments_router, projects_router
from hr_portal.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router, tags=["Authentication"])

api_router.include_router(users_router, prefix="/users", tags=["Users"])

api_router.include_router(departments_router, prefix="/departments", tags=["Departments"])

api_router.include_router(projects_router, prefix="/projects", tags=["Projects"])

api_router.include_router(offers_router, tags=["Offers"])

api_router.include_router(applications_router, tags=["Applications"])

api_router.include_router(audit_router, tags=["Admin"])

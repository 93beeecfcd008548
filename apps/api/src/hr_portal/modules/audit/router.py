"""
Audit Router

Admin-only endpoints:
- GET /logs - audit trail, newest first
- POST /test-email - check the email configuration
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser, require_admin
from hr_portal.core.clock import Clock, get_clock
from hr_portal.core.database import get_db
from hr_portal.core.errors import InternalError
from hr_portal.modules.audit import service
from hr_portal.modules.audit.schemas import AuditLogResponse, MessageResponse, TestEmailRequest

logger = logging.getLogger(__name__)

router = APIRouter()

_AUTH_RESPONSES = {
    401: {"description": "Unauthorized - invalid or missing token"},
    403: {"description": "Forbidden - admin only"},
}


@router.get(
    "/logs",
    response_model=list[AuditLogResponse],
    summary="List Audit Logs",
    responses=_AUTH_RESPONSES,
)
async def list_logs(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_admin),
) -> list[AuditLogResponse]:
    return [AuditLogResponse.model_validate(entry) for entry in await service.list_logs(db)]


@router.post(
    "/test-email",
    response_model=MessageResponse,
    summary="Send Test Email",
    responses={500: {"description": "Email provider rejected the message"}, **_AUTH_RESPONSES},
)
async def send_test_email(
    data: TestEmailRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_admin),
    clock: Clock = Depends(get_clock),
) -> MessageResponse:
    sent = await service.send_test_email(db, data.to, data.subject, data.message, user, clock.now())
    if not sent:
        raise InternalError("Failed to send test email.")
    return MessageResponse(message="Test email sent successfully")

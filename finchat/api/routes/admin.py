from fastapi import APIRouter, Depends, Query

from finchat.api.deps import AnalyticsServiceDep
from finchat.core.admin import verify_admin_header, verify_admin_password
from finchat.schemas.admin import AdminVerifyRequest, AdminVerifyResponse
from finchat.schemas.analytics import AnalyticsResponse

router = APIRouter(tags=["Admin"])


@router.post("/admin/verify", response_model=AdminVerifyResponse)
async def verify_admin(payload: AdminVerifyRequest) -> AdminVerifyResponse:
    """Check the admin dashboard password.

    A wrong password is a normal outcome (``verified: false``), not an error.
    """
    return AdminVerifyResponse(verified=verify_admin_password(payload.password))


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    dependencies=[Depends(verify_admin_header)],
)
async def get_analytics(
    analytics_service: AnalyticsServiceDep,
    period: str = Query("today", description="today, week, month or all"),
) -> AnalyticsResponse:
    """Usage summary and raw records for a reporting period."""
    return await analytics_service.report(period)

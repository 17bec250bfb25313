"""
Admin API Routes - Maintenance Endpoints

Authentication is via Admin API Key, not user tokens.
"""

from fastapi import APIRouter, Depends, status

from kitchen_iam.api.error import ServerError
from kitchen_iam.api.utils.admin_auth import verify_admin_api_key
from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.app.use_cases.maintenance import CleanupReport, CleanupUseCase
from kitchen_iam.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/cleanup",
    status_code=status.HTTP_200_OK,
    response_model=CleanupReport,
    dependencies=[Depends(verify_admin_api_key)],
)
async def run_cleanup(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Run Cleanup Jobs

    Deletes expired sessions, login attempts past retention and expired
    rate limit counters. A job that fails reports null.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
    """
    result = await CleanupUseCase(uow).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value

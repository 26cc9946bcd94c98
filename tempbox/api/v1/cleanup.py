"""
Cleanup API Endpoints

Trigger for the expiry sweep. Meant for a cron caller holding the shared
secret; POST is accepted as well for manual triggers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from tempbox.core.exceptions import CleanupFailedException
from tempbox.core.logging import get_logger
from tempbox.dependencies import get_sweeper, verify_cron_credential
from tempbox.schemas.cleanup import CleanupFailure, CleanupResponse
from tempbox.services.expiry_sweeper import ExpirySweeper

logger = get_logger(__name__)
router = APIRouter()


@router.api_route(
    "",
    methods=["GET", "POST"],
    response_model=CleanupResponse,
    response_model_exclude_none=True,
    summary="Sweep expired resources",
    description="""
    Delete every expired resource from the file host in paced batches and
    drop the deleted ids from the registry.

    Batches that fail are reported in `results.errors`; their resources stay
    registered and are retried by the next sweep.

    Requires `Authorization: Bearer <CRON_SECRET>`.
    """,
    responses={
        200: {"description": "Sweep finished (possibly with failed batches)"},
        401: {"description": "Missing or invalid credential"},
        409: {"description": "A sweep is already running"},
        500: {"model": CleanupFailure, "description": "Sweep could not run"},
    },
    dependencies=[Depends(verify_cron_credential)],
)
async def run_cleanup(
    now: Optional[int] = Query(default=None, ge=0, description="Override the clock (ms since epoch)"),
    sweeper: ExpirySweeper = Depends(get_sweeper),
):
    """
    Run one sweep.

    Args:
        now: Reference instant override
        sweeper: Expiry sweeper

    Returns:
        CleanupResponse: Summary, or a CleanupFailure body with status 500
    """
    try:
        return await sweeper.sweep(now=now)
    except CleanupFailedException as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=CleanupFailure(error=e.message, details=e.detail).model_dump(exclude_none=True),
        )

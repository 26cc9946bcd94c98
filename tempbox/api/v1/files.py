"""
File Registry API Endpoints

REST API over the expiry registry:
- List expiry options
- Register a hosted resource
- Inspect tracked and soon-to-expire resources
- Remove resources

Everything except the expiry options requires the shared secret.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from tempbox.config import get_settings
from tempbox.core.exceptions import ResourceNotFoundException
from tempbox.core.logging import get_logger
from tempbox.core.metrics import registry_resources, resources_registered_total
from tempbox.dependencies import get_registry, verify_cron_credential
from tempbox.schemas.files import (
    ExpiryOption,
    ResourceCreate,
    ResourceDetail,
    ResourceList,
    ResourceRecord,
)
from tempbox.services.expiry_registry import (
    EXPIRY_OPTIONS,
    ExpiryRegistry,
    expiry_timestamp,
    format_file_size,
    format_time_remaining,
    now_ms,
)

settings = get_settings()
logger = get_logger(__name__)
router = APIRouter()


def to_detail(record: ResourceRecord, now: int) -> ResourceDetail:
    return ResourceDetail(
        **record.model_dump(),
        size_display=format_file_size(record.size),
        time_remaining=format_time_remaining(record.expires_at, now),
    )


@router.get(
    "/expiry-options",
    response_model=List[ExpiryOption],
    summary="List selectable lifetimes",
)
async def list_expiry_options():
    return EXPIRY_OPTIONS


@router.post(
    "",
    response_model=ResourceDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Register a hosted resource",
    description="""
    Start tracking a resource that expires `expires_in_ms` from now.

    Registering an id that is already tracked replaces the previous record.
    """,
    dependencies=[Depends(verify_cron_credential)],
)
async def register_resource(
    resource: ResourceCreate,
    registry: ExpiryRegistry = Depends(get_registry),
):
    """
    Register a resource for expiry.

    Args:
        resource: Resource metadata and lifetime
        registry: Expiry registry

    Returns:
        ResourceDetail: Stored record
    """
    now = now_ms()
    record = ResourceRecord(
        **resource.model_dump(exclude={"expires_in_ms"}),
        created_at=now,
        expires_at=expiry_timestamp(resource.expires_in_ms, now),
        download_count=0,
    )

    registry.add(record)
    resources_registered_total.inc()
    registry_resources.set(registry.size())

    logger.info("resource_registered", resource_id=record.id, expires_at=record.expires_at)

    return to_detail(record, now)


@router.get(
    "",
    response_model=ResourceList,
    summary="List tracked resources",
    dependencies=[Depends(verify_cron_credential)],
)
async def list_resources(
    registry: ExpiryRegistry = Depends(get_registry),
):
    now = now_ms()
    resources = [to_detail(record, now) for record in registry.get_all()]
    return ResourceList(resources=resources, count=len(resources))


@router.get(
    "/expiring",
    response_model=ResourceList,
    summary="List resources expiring soon",
    description="""
    Resources that have not expired yet but will within `within_minutes`.
    Already expired resources are not included.
    """,
    dependencies=[Depends(verify_cron_credential)],
)
async def list_expiring_resources(
    within_minutes: Optional[int] = Query(default=None, ge=1, le=7 * 24 * 60, description="Window in minutes"),
    registry: ExpiryRegistry = Depends(get_registry),
):
    now = now_ms()
    window = within_minutes or settings.EXPIRING_SOON_WINDOW_MINUTES
    resources = [to_detail(record, now) for record in registry.get_expiring_soon(window, now)]
    return ResourceList(resources=resources, count=len(resources))


@router.get(
    "/{resource_id}",
    response_model=ResourceDetail,
    summary="Get a tracked resource",
    responses={404: {"description": "Resource not tracked"}},
    dependencies=[Depends(verify_cron_credential)],
)
async def get_resource(
    resource_id: str,
    registry: ExpiryRegistry = Depends(get_registry),
):
    record = registry.get(resource_id)
    if record is None:
        raise ResourceNotFoundException(resource_id)

    return to_detail(record, now_ms())


@router.delete(
    "/{resource_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Stop tracking a resource",
    description="Removes the record only; the hosted file is left untouched.",
    responses={404: {"description": "Resource not tracked"}},
    dependencies=[Depends(verify_cron_credential)],
)
async def remove_resource(
    resource_id: str,
    registry: ExpiryRegistry = Depends(get_registry),
):
    if not registry.remove(resource_id):
        raise ResourceNotFoundException(resource_id)

    registry_resources.set(registry.size())
    return None


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear the registry",
    dependencies=[Depends(verify_cron_credential)],
)
async def clear_resources(
    registry: ExpiryRegistry = Depends(get_registry),
):
    registry.clear()
    registry_resources.set(0)
    return None

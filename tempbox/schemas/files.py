"""
File resource Pydantic schemas.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class ResourceRecord(BaseModel):
    """Metadata for a hosted resource tracked until it expires."""

    id: str = Field(..., min_length=1, description="File host content ID")
    created_at: int = Field(..., description="Creation instant (ms since epoch)")
    expires_at: int = Field(..., description="Expiration instant (ms since epoch)")
    name: str = Field(default="", description="File name")
    size: int = Field(default=0, ge=0, description="Size in bytes")
    mimetype: str = Field(default="application/octet-stream", description="MIME type")
    download_url: Optional[str] = Field(None, description="Public download page")
    folder_id: Optional[str] = Field(None, description="File host folder ID")
    direct_link: Optional[str] = Field(None, description="Direct download link")
    direct_link_id: Optional[str] = Field(None, description="Direct link ID")
    download_count: Optional[int] = Field(None, ge=0, description="Download counter")

    @model_validator(mode="after")
    def check_expiry_after_creation(self):
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be later than created_at")
        return self


class ResourceCreate(BaseModel):
    """Request schema for registering a resource."""

    id: str = Field(..., min_length=1, description="File host content ID")
    expires_in_ms: int = Field(..., gt=0, description="Lifetime in milliseconds, added to now")
    name: str = Field(default="", description="File name")
    size: int = Field(default=0, ge=0, description="Size in bytes")
    mimetype: str = Field(default="application/octet-stream", description="MIME type")
    download_url: Optional[str] = Field(None, description="Public download page")
    folder_id: Optional[str] = Field(None, description="File host folder ID")
    direct_link: Optional[str] = Field(None, description="Direct download link")
    direct_link_id: Optional[str] = Field(None, description="Direct link ID")


class ResourceDetail(ResourceRecord):
    """Resource with display helpers."""

    size_display: str = Field(..., description="Human readable size")
    time_remaining: str = Field(..., description="Human readable time until expiry")


class ResourceList(BaseModel):
    """List of tracked resources."""

    resources: List[ResourceDetail] = Field(..., description="Tracked resources")
    count: int = Field(..., description="Number of resources returned")


class ExpiryOption(BaseModel):
    """Selectable lifetime for a new resource."""

    label: str
    value: int = Field(..., description="Duration in milliseconds")
    display: str

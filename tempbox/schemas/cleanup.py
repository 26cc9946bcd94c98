"""
Cleanup sweep Pydantic schemas.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class CleanupResults(BaseModel):
    """Per-sweep deletion counters."""

    attempted: int = Field(0, description="Expired resource ids found")
    successful: int = Field(0, description="Ids deleted from the file host")
    failed: int = Field(0, description="Ids in batches that failed")
    errors: List[str] = Field(default_factory=list, description="One entry per failed batch")


class CleanupResponse(BaseModel):
    """Outcome of a sweep that ran to completion."""

    success: bool = Field(..., description="Sweep completed")
    message: str = Field(..., description="Human readable summary")
    cleaned: Optional[int] = Field(None, description="Resources removed by this sweep")
    results: Optional[CleanupResults] = Field(None, description="Batch counters")


class CleanupFailure(BaseModel):
    """Hard failure of a sweep."""

    error: str = Field(..., description="Failure summary")
    details: Optional[str] = Field(None, description="Underlying error")

"""Request bodies for the HTTP API."""

from typing import Optional

from pydantic import Field

from shared.models import CamelModel


class DiscoverJobsRequest(CamelModel):
    email: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    location: Optional[str] = None
    max_results: int = Field(default=20, ge=1, le=100)

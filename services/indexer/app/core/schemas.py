"""Pydantic schemas for Indexer Service."""

from enum import Enum as PyEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiStatus(str, PyEnum):
    """Outcome of an indexer operation, the only value callers observe."""

    SUCCESS = "success"
    INVALID_SEARCH_ENGINE = "invalid_search_engine"
    NOT_AUTHENTICATED = "not_authenticated"
    BAD_REQUEST = "bad_request"
    UNKNOWN_ERROR = "unknown_error"


class IndexInfo(BaseModel):
    """Index entry as listed by the management API."""

    model_config = ConfigDict(extra="allow")

    name: str
    preset: Optional[str] = None
    options: dict[str, Any] = Field(default_factory=dict)


class SearchEngine(BaseModel):
    """Remote search engine configuration."""

    model_config = ConfigDict(extra="allow")

    hashid: str
    name: Optional[str] = None
    language: Optional[str] = None
    site_url: Optional[str] = None
    indices: list[IndexInfo] = Field(default_factory=list)


class IndexBody(BaseModel):
    """Request body for index creation."""

    name: str = Field(..., min_length=1)
    preset: str = "generic"


class RunReport(BaseModel):
    """Summary of one full indexing run."""

    run_id: str
    status: ApiStatus = ApiStatus.SUCCESS
    batches_sent: dict[str, int] = Field(default_factory=dict)
    items_sent: dict[str, int] = Field(default_factory=dict)
    replaced: list[str] = Field(default_factory=list)
    failed_type: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == ApiStatus.SUCCESS

"""
Search and session request/response schemas
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from marketlens.models.enums import Platform, SessionStatus


class SearchRequest(BaseModel):
    """Product search across one or more marketplaces"""

    query: str = Field(..., min_length=1, max_length=200, description="Product search query")
    platforms: List[Platform] = Field(..., min_length=1, max_length=3, description="Marketplaces to search")
    session_id: Optional[str] = Field(
        None, min_length=1, max_length=100, description="Existing session to reuse (generated if omitted)"
    )

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Search query is required")
        return value

    @field_validator("platforms")
    @classmethod
    def unique_platforms(cls, value: List[Platform]) -> List[Platform]:
        # Preserve the order the caller listed them in
        return list(dict.fromkeys(value))


class SearchResponse(BaseModel):
    """Result of starting (or re-requesting) a search"""

    session_id: str
    status: SessionStatus
    message: Optional[str] = None


class SessionStatusResponse(BaseModel):
    """Coarse progress of a session's analysis"""

    session_id: str
    status: SessionStatus
    progress: int = Field(..., ge=0, le=100)
    message: Optional[str] = None


class CleanupResponse(BaseModel):
    success: bool

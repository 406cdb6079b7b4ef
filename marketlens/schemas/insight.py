"""
Keyword and recommendation schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from marketlens.models.enums import Priority, Sentiment


class KeywordBase(BaseModel):
    keyword: str = Field(..., min_length=1, max_length=100)
    frequency: int = Field(default=1, ge=0)
    sentiment: Optional[Sentiment] = None


class KeywordCreate(KeywordBase):
    session_id: str = Field(..., min_length=1)


class KeywordRead(KeywordBase):
    id: int
    session_id: str

    model_config = ConfigDict(from_attributes=True)


class RecommendationBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    priority: Priority
    category: str = Field(..., min_length=1, max_length=100)


class RecommendationCreate(RecommendationBase):
    session_id: str = Field(..., min_length=1)


class RecommendationRead(RecommendationBase):
    id: int
    session_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

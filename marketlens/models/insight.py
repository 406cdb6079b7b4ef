"""
Keyword and recommendation models
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from .columns import datetime_column, utc_now
from .enums import Priority, Sentiment, enum_column


class Keyword(SQLModel, table=True):
    """Keyword mined from a session's reviews"""

    __tablename__ = "keywords"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True)
    keyword: str
    frequency: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
    sentiment: Optional[Sentiment] = Field(default=None, sa_column=enum_column(Sentiment, "sentiment", nullable=True))


class Recommendation(SQLModel, table=True):
    """Actionable recommendation generated for a session"""

    __tablename__ = "recommendations"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True)
    title: str
    description: str
    priority: Priority = Field(sa_column=enum_column(Priority, "priority"))
    category: str
    created_at: datetime = Field(default_factory=utc_now, sa_column=datetime_column())

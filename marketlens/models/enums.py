"""
Enumerations shared by models and schemas
"""

from enum import Enum
from typing import Type

from sqlalchemy import Column
from sqlalchemy import Enum as SAEnum


class Platform(str, Enum):
    """Supported marketplace sources"""

    SHOPEE = "shopee"
    TIKTOK_SHOP = "tiktok_shop"
    TOKOPEDIA = "tokopedia"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SessionStatus(str, Enum):
    """Coarse progress of a search session as reported to clients"""

    STARTED = "started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


def enum_column(enum_cls: Type[Enum], name: str, nullable: bool = False) -> Column:
    """Column storing enum values (not member names) under a named DB enum type"""
    return Column(
        SAEnum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members]),
        nullable=nullable,
    )

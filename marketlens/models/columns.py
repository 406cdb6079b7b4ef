"""
Column helpers shared by the table models
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def datetime_column(nullable: bool = False) -> Column:
    """Timezone-aware timestamp column (values are written in UTC)"""
    return Column(DateTime(timezone=True), nullable=nullable)

"""
Keyword and recommendation repositories
"""
from sqlalchemy.ext.asyncio import AsyncSession

from marketlens.models import Keyword, Recommendation
from marketlens.repositories.base import SessionScopedRepository
from marketlens.schemas.insight import KeywordCreate, RecommendationCreate


class KeywordRepository(SessionScopedRepository[Keyword, KeywordCreate]):
    """Repository for mined keywords (stored most frequent first)"""

    def __init__(self, session: AsyncSession):
        super().__init__(Keyword, session)


class RecommendationRepository(SessionScopedRepository[Recommendation, RecommendationCreate]):
    def __init__(self, session: AsyncSession):
        super().__init__(Recommendation, session)

"""
Session cleanup
"""

from typing import Optional

from marketlens.core.cache import AnalysisCache
from marketlens.core.exceptions import DatabaseError
from marketlens.core.logging import log
from marketlens.repositories import (
    KeywordRepository,
    ProductRepository,
    RecommendationRepository,
    ReviewRepository,
)
from marketlens.schemas.session import CleanupResponse
from marketlens.services.session_tracker import SessionTracker


class CleanupService:
    """Deletes everything stored for a session"""

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
        keyword_repo: KeywordRepository,
        recommendation_repo: RecommendationRepository,
        tracker: SessionTracker,
        cache: Optional[AnalysisCache] = None,
    ):
        self.product_repo = product_repo
        self.review_repo = review_repo
        self.keyword_repo = keyword_repo
        self.recommendation_repo = recommendation_repo
        self.tracker = tracker
        self.cache = cache

    async def cleanup_session(self, session_id: str) -> CleanupResponse:
        """Remove a session's rows in one transaction. Unknown sessions succeed."""
        self.tracker.cancel(session_id)

        db = self.product_repo.session
        try:
            # Reviews reference products, so they go first
            reviews = await self.review_repo.delete_by_session(session_id)
            products = await self.product_repo.delete_by_session(session_id)
            keywords = await self.keyword_repo.delete_by_session(session_id)
            recommendations = await self.recommendation_repo.delete_by_session(session_id)
            await db.commit()
        except DatabaseError:
            await db.rollback()
            raise

        self.tracker.forget(session_id)
        if self.cache is not None:
            await self.cache.invalidate(session_id)

        log.bind(session_id=session_id).info(
            "Session cleaned up: {} products, {} reviews, {} keywords, {} recommendations",
            products,
            reviews,
            keywords,
            recommendations,
        )
        return CleanupResponse(success=True)

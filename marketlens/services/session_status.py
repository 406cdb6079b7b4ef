"""
Derives a session's coarse progress from the rows stored for it
"""

from dataclasses import dataclass
from typing import Optional

from marketlens.core.logging import log
from marketlens.models.enums import SessionStatus
from marketlens.repositories import (
    KeywordRepository,
    ProductRepository,
    RecommendationRepository,
    ReviewRepository,
)
from marketlens.schemas.session import SessionStatusResponse
from marketlens.services.session_tracker import RunState, SessionTracker, TrackedRun


@dataclass(frozen=True)
class SessionCounts:
    """Row counts per table for one session"""

    products: int = 0
    reviews: int = 0
    keywords: int = 0
    recommendations: int = 0


def derive_session_status(
    session_id: str, counts: SessionCounts, run: Optional[TrackedRun] = None
) -> SessionStatusResponse:
    """
    Map row counts to a status. Each pipeline stage only inserts after the
    previous one has, so the first empty table tells how far the run got.
    """
    if counts.products == 0:
        status, progress, message = SessionStatus.FAILED, 0, "Session not found"
        if run is not None and run.state == RunState.RUNNING:
            status, message = SessionStatus.STARTED, "Scraping products..."
    elif counts.reviews == 0:
        status, progress, message = SessionStatus.STARTED, 25, "Products scraped, analyzing reviews..."
    elif counts.keywords == 0:
        status, progress, message = SessionStatus.IN_PROGRESS, 50, "Reviews analyzed, extracting keywords..."
    elif counts.recommendations == 0:
        status, progress, message = (
            SessionStatus.IN_PROGRESS,
            75,
            "Keywords extracted, generating recommendations...",
        )
    else:
        status, progress, message = SessionStatus.COMPLETED, 100, "Analysis completed successfully"

    if run is not None and run.state == RunState.FAILED:
        status, message = SessionStatus.FAILED, f"Analysis failed: {run.error}"

    return SessionStatusResponse(session_id=session_id, status=status, progress=progress, message=message)


class SessionStatusService:
    """Service layer for session status lookups"""

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
        keyword_repo: KeywordRepository,
        recommendation_repo: RecommendationRepository,
        tracker: SessionTracker,
    ):
        self.product_repo = product_repo
        self.review_repo = review_repo
        self.keyword_repo = keyword_repo
        self.recommendation_repo = recommendation_repo
        self.tracker = tracker

    async def count_rows(self, session_id: str) -> SessionCounts:
        return SessionCounts(
            products=await self.product_repo.count_by_session(session_id),
            reviews=await self.review_repo.count_by_session(session_id),
            keywords=await self.keyword_repo.count_by_session(session_id),
            recommendations=await self.recommendation_repo.count_by_session(session_id),
        )

    async def get_status(self, session_id: str) -> SessionStatusResponse:
        counts = await self.count_rows(session_id)
        status = derive_session_status(session_id, counts, self.tracker.get(session_id))
        log.debug("Session {} status {} ({}%)", session_id, status.status.value, status.progress)
        return status

"""
Search initiation: creates or reuses a session and registers its pipeline run
"""

from uuid import uuid4

from marketlens.core.logging import log
from marketlens.models.enums import SessionStatus
from marketlens.repositories import ProductRepository
from marketlens.schemas.session import SearchRequest, SearchResponse
from marketlens.services.session_tracker import SessionTracker


class SearchService:
    """Service layer for starting product searches"""

    def __init__(self, product_repo: ProductRepository, tracker: SessionTracker):
        self.product_repo = product_repo
        self.tracker = tracker

    async def search_products(self, search_in: SearchRequest) -> SearchResponse:
        """
        Start a search. Returns STARTED only when a new pipeline run was
        registered; the caller is responsible for scheduling it.
        """
        session_id = search_in.session_id or str(uuid4())

        # Claimed before the first await so concurrent searches cannot both start
        run = self.tracker.try_start(session_id, search_in.query, search_in.platforms)
        if run is None:
            return SearchResponse(
                session_id=session_id,
                status=SessionStatus.IN_PROGRESS,
                message="Analysis already in progress for this session",
            )

        if await self.product_repo.exists_for_session(session_id):
            self.tracker.release(run)
            return SearchResponse(
                session_id=session_id,
                status=SessionStatus.COMPLETED,
                message="Analysis already completed for this session",
            )

        platforms = ", ".join(platform.value for platform in search_in.platforms)
        log.bind(session_id=session_id).info("Search started on {}", platforms)

        return SearchResponse(
            session_id=session_id,
            status=SessionStatus.STARTED,
            message=f'Started scraping for query: "{search_in.query}" on platforms: {platforms}',
        )

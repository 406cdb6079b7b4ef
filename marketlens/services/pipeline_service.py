"""
Mock analysis pipeline: scrape -> reviews -> keywords -> recommendations
"""

import asyncio
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketlens.core.config import settings
from marketlens.core.database import db_retry
from marketlens.core.exceptions import PipelineError
from marketlens.core.logging import log
from marketlens.models import Product, Review
from marketlens.repositories import (
    BaseRepository,
    KeywordRepository,
    ProductRepository,
    RecommendationRepository,
    ReviewRepository,
)
from marketlens.services.analysis_service import summarize
from marketlens.services.insights import extract_keywords, generate_recommendations
from marketlens.services.mock_marketplace import MockMarketplaceScraper
from marketlens.services.session_tracker import PipelineStage, SessionTracker, TrackedRun


class AnalysisPipeline:
    """
    Runs one session's analysis as a fixed sequence of delayed inserts.

    Each stage writes its rows in a single commit, so the status deriver
    never sees a half-written stage. A cleanup cancels the run: the stage
    in flight is rolled back (or deleted if its commit already landed) and
    no further stage starts.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        tracker: SessionTracker,
        scraper: Optional[MockMarketplaceScraper] = None,
        stage_delay: Optional[float] = None,
        max_keywords: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.tracker = tracker
        self.scraper = scraper or MockMarketplaceScraper()
        self.stage_delay = stage_delay if stage_delay is not None else settings.pipeline_stage_delay
        self.max_keywords = max_keywords if max_keywords is not None else settings.max_keywords

    async def run(self, session_id: str) -> None:
        """Background task entry point; failures are recorded on the tracker"""
        run = self.tracker.get(session_id)
        if run is None:
            log.warning("No tracked run for session {}, skipping pipeline", session_id)
            return

        logger = log.bind(session_id=session_id)
        logger.info("Analysis pipeline started for {} platform(s)", len(run.platforms))

        try:
            async with self.session_factory() as db:
                finished = await self._run_stages(db, run)
        except Exception as e:
            if run.cancelled:
                logger.opt(exception=e).warning("Analysis pipeline stopped during {} after cleanup", run.stage)
                return
            logger.opt(exception=e).error("Analysis pipeline failed during {}", run.stage)
            self.tracker.fail(run, e.detail if isinstance(e, HTTPException) else str(e))
            return

        if finished:
            self.tracker.complete(run)
            logger.info("Analysis pipeline completed")
        else:
            logger.info("Analysis pipeline stopped, session was cleaned up")

    async def _run_stages(self, db: AsyncSession, run: TrackedRun) -> bool:
        if not await self._advance(run, PipelineStage.SCRAPE):
            return False
        found = self.scraper.search(run.query, run.platforms, run.session_id)
        if not found:
            raise PipelineError(PipelineStage.SCRAPE.value, "no products found")
        products: Optional[List[Product]] = await self._persist(ProductRepository(db), run, found)
        if products is None:
            return False

        if not await self._advance(run, PipelineStage.REVIEWS):
            return False
        reviews: Optional[List[Review]] = await self._persist(
            ReviewRepository(db),
            run,
            [review for product in products for review in self.scraper.reviews_for(product.id)],
        )
        if reviews is None:
            return False

        if not await self._advance(run, PipelineStage.KEYWORDS):
            return False
        keywords = extract_keywords(reviews, run.session_id, limit=self.max_keywords)
        if await self._persist(KeywordRepository(db), run, keywords) is None:
            return False

        if not await self._advance(run, PipelineStage.RECOMMENDATIONS):
            return False
        recommendations = generate_recommendations(
            run.session_id, summarize(products, reviews), run.platforms, keywords
        )
        if await self._persist(RecommendationRepository(db), run, recommendations) is None:
            return False

        return True

    async def _advance(self, run: TrackedRun, stage: PipelineStage) -> bool:
        if self.stage_delay > 0:
            await asyncio.sleep(self.stage_delay)
        if run.cancelled:
            return False
        self.tracker.set_stage(run, stage)
        log.debug("Session {} entering stage {}", run.session_id, stage.value)
        return True

    @db_retry
    async def _persist(self, repo: BaseRepository, run: TrackedRun, objects_in: list) -> Optional[list]:
        """
        Insert one stage's rows and commit them unless the run was cancelled.

        Returns None when the rows were discarded because of a cleanup.
        """
        db = repo.session
        created = await repo.bulk_create(objects_in=objects_in, commit=False)
        if run.cancelled:
            await db.rollback()
            return None

        try:
            await db.commit()
            if run.cancelled:
                # Cleanup ran while the commit was in flight
                await repo.delete_by_ids([obj.id for obj in created])
                await db.commit()
                return None
        except SQLAlchemyError:
            await db.rollback()
            raise

        return created

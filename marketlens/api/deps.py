"""
API Dependencies for dependency injection
"""
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketlens.core.cache import AnalysisCache, get_analysis_cache
from marketlens.core.database import AsyncSessionLocal, get_async_session
from marketlens.repositories import (
    KeywordRepository,
    ProductRepository,
    RecommendationRepository,
    ReviewRepository,
)
from marketlens.services import (
    AnalysisPipeline,
    AnalysisService,
    CleanupService,
    SearchService,
    SessionStatusService,
    SessionTracker,
)
from marketlens.services.session_tracker import get_session_tracker


# Database session
AsyncSessionDep = Annotated[AsyncSession, Depends(get_async_session)]


def get_session_factory() -> async_sessionmaker:
    """Session factory for work that outlives the request (background tasks)"""
    return AsyncSessionLocal


SessionFactoryDep = Annotated[async_sessionmaker, Depends(get_session_factory)]
TrackerDep = Annotated[SessionTracker, Depends(get_session_tracker)]
CacheDep = Annotated[AnalysisCache, Depends(get_analysis_cache)]


# Repositories
async def get_product_repository(session: AsyncSessionDep) -> ProductRepository:
    """Get product repository instance"""
    return ProductRepository(session)


async def get_review_repository(session: AsyncSessionDep) -> ReviewRepository:
    """Get review repository instance"""
    return ReviewRepository(session)


async def get_keyword_repository(session: AsyncSessionDep) -> KeywordRepository:
    return KeywordRepository(session)


async def get_recommendation_repository(session: AsyncSessionDep) -> RecommendationRepository:
    return RecommendationRepository(session)


ProductRepoDep = Annotated[ProductRepository, Depends(get_product_repository)]
ReviewRepoDep = Annotated[ReviewRepository, Depends(get_review_repository)]
KeywordRepoDep = Annotated[KeywordRepository, Depends(get_keyword_repository)]
RecommendationRepoDep = Annotated[RecommendationRepository, Depends(get_recommendation_repository)]


# Services
async def get_search_service(product_repo: ProductRepoDep, tracker: TrackerDep) -> SearchService:
    """Get search service instance"""
    return SearchService(product_repo, tracker)


async def get_status_service(
    product_repo: ProductRepoDep,
    review_repo: ReviewRepoDep,
    keyword_repo: KeywordRepoDep,
    recommendation_repo: RecommendationRepoDep,
    tracker: TrackerDep,
) -> SessionStatusService:
    """Get session status service instance"""
    return SessionStatusService(product_repo, review_repo, keyword_repo, recommendation_repo, tracker)


async def get_analysis_service(
    product_repo: ProductRepoDep,
    review_repo: ReviewRepoDep,
    keyword_repo: KeywordRepoDep,
    recommendation_repo: RecommendationRepoDep,
    cache: CacheDep,
) -> AnalysisService:
    """Get analysis service instance"""
    return AnalysisService(product_repo, review_repo, keyword_repo, recommendation_repo, cache)


async def get_cleanup_service(
    product_repo: ProductRepoDep,
    review_repo: ReviewRepoDep,
    keyword_repo: KeywordRepoDep,
    recommendation_repo: RecommendationRepoDep,
    tracker: TrackerDep,
    cache: CacheDep,
) -> CleanupService:
    """Get cleanup service instance"""
    return CleanupService(product_repo, review_repo, keyword_repo, recommendation_repo, tracker, cache)


async def get_pipeline(session_factory: SessionFactoryDep, tracker: TrackerDep) -> AnalysisPipeline:
    """Get analysis pipeline bound to a long-lived session factory"""
    return AnalysisPipeline(session_factory, tracker)


SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
StatusServiceDep = Annotated[SessionStatusService, Depends(get_status_service)]
AnalysisServiceDep = Annotated[AnalysisService, Depends(get_analysis_service)]
CleanupServiceDep = Annotated[CleanupService, Depends(get_cleanup_service)]
PipelineDep = Annotated[AnalysisPipeline, Depends(get_pipeline)]


# Request ID and correlation
async def get_request_id(request: Request) -> str:
    """Request ID assigned by RequestIDMiddleware (generated if missing)"""
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id

    import uuid

    return str(uuid.uuid4())


RequestIdDep = Annotated[str, Depends(get_request_id)]

"""
Search endpoint: starts a mock marketplace analysis for a query
"""

from fastapi import APIRouter, BackgroundTasks, Request

from marketlens.api.deps import PipelineDep, RequestIdDep, SearchServiceDep
from marketlens.core.config import settings
from marketlens.core.exceptions import ErrorResponse
from marketlens.core.logging import log
from marketlens.core.rate_limit import limiter
from marketlens.models.enums import SessionStatus
from marketlens.schemas.session import SearchRequest, SearchResponse


router = APIRouter()


@router.post(
    "",
    response_model=SearchResponse,
    summary="Search products",
    description="Start scraping and analysis of a product query on the selected marketplaces",
    responses={429: {"description": "Rate limit exceeded"}, 500: {"model": ErrorResponse}},
)
@limiter.limit(lambda: settings.search_rate_limit)
async def search_products(
    request: Request,
    search_in: SearchRequest,
    background_tasks: BackgroundTasks,
    search_service: SearchServiceDep,
    pipeline: PipelineDep,
    request_id: RequestIdDep,
) -> SearchResponse:
    """
    Start a product search.

    - **query**: product search query
    - **platforms**: one to three of `shopee`, `tiktok_shop`, `tokopedia`
    - **session_id**: optional; reusing a finished session returns `completed`

    Poll `/sessions/{session_id}/status` until the status is `completed`.
    """
    log.bind(request_id=request_id).info("Search requested on {} platform(s)", len(search_in.platforms))

    response = await search_service.search_products(search_in)

    if response.status == SessionStatus.STARTED:
        background_tasks.add_task(pipeline.run, response.session_id)

    return response

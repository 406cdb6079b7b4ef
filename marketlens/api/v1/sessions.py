"""
Session endpoints: status polling, analysis results and cleanup
"""

from typing import Annotated

from fastapi import APIRouter, Path

from marketlens.api.deps import AnalysisServiceDep, CleanupServiceDep, RequestIdDep, StatusServiceDep
from marketlens.core.exceptions import ErrorResponse
from marketlens.core.logging import log
from marketlens.schemas.analysis import AnalysisResult
from marketlens.schemas.session import CleanupResponse, SessionStatusResponse


router = APIRouter()

SessionIdPath = Annotated[str, Path(min_length=1, max_length=100, description="Search session identifier")]


@router.get(
    "/{session_id}/status",
    response_model=SessionStatusResponse,
    summary="Get session status",
    description="Coarse analysis progress derived from the rows stored for the session",
)
async def get_session_status(
    status_service: StatusServiceDep,
    session_id: SessionIdPath,
) -> SessionStatusResponse:
    """
    Progress of a session's analysis.

    | status | progress |
    |--------|----------|
    | `started` | 0 or 25 |
    | `in_progress` | 50 or 75 |
    | `completed` | 100 |
    | `failed` | unknown session or pipeline error |
    """
    return await status_service.get_status(session_id)


@router.get(
    "/{session_id}/analysis",
    response_model=AnalysisResult,
    summary="Get analysis",
    description="Products, reviews, keywords, recommendations and summary statistics for a session",
)
async def get_analysis(
    analysis_service: AnalysisServiceDep,
    session_id: SessionIdPath,
) -> AnalysisResult:
    """Aggregated analysis result (empty for unknown sessions)"""
    return await analysis_service.get_analysis(session_id)


@router.delete(
    "/{session_id}",
    response_model=CleanupResponse,
    summary="Clean up session",
    description="Delete all products, reviews, keywords and recommendations of a session",
    responses={500: {"model": ErrorResponse}},
)
async def cleanup_session(
    cleanup_service: CleanupServiceDep,
    request_id: RequestIdDep,
    session_id: SessionIdPath,
) -> CleanupResponse:
    """
    Delete a session.

    A pipeline still running for the session is stopped before its next stage.
    """
    log.bind(request_id=request_id).info("Cleanup requested for session {}", session_id)
    return await cleanup_service.cleanup_session(session_id)

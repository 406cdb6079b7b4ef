"""
Service layer for business logic
"""

from .analysis_service import AnalysisService
from .cleanup_service import CleanupService
from .pipeline_service import AnalysisPipeline
from .search_service import SearchService
from .session_status import SessionStatusService
from .session_tracker import SessionTracker

__all__ = [
    "AnalysisService",
    "AnalysisPipeline",
    "CleanupService",
    "SearchService",
    "SessionStatusService",
    "SessionTracker",
]

"""
API Schemas (Pydantic models for request/response)
"""

from .analysis import AnalysisResult, AnalysisSummary, SentimentDistribution
from .common import HealthCheckResponse
from .insight import KeywordCreate, KeywordRead, RecommendationCreate, RecommendationRead
from .product import ProductCreate, ProductRead, ReviewCreate, ReviewRead
from .session import CleanupResponse, SearchRequest, SearchResponse, SessionStatusResponse

__all__ = [
    # Product
    "ProductCreate",
    "ProductRead",
    "ReviewCreate",
    "ReviewRead",
    # Insight
    "KeywordCreate",
    "KeywordRead",
    "RecommendationCreate",
    "RecommendationRead",
    # Session
    "SearchRequest",
    "SearchResponse",
    "SessionStatusResponse",
    "CleanupResponse",
    # Analysis
    "AnalysisResult",
    "AnalysisSummary",
    "SentimentDistribution",
    # Common
    "HealthCheckResponse",
]

"""
Aggregated analysis schemas
"""

from typing import List

from pydantic import BaseModel, Field

from .insight import KeywordRead, RecommendationRead
from .product import ProductRead, ReviewRead


class SentimentDistribution(BaseModel):
    """Review counts per sentiment"""

    positive: int = Field(default=0, ge=0)
    neutral: int = Field(default=0, ge=0)
    negative: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.positive + self.neutral + self.negative


class AnalysisSummary(BaseModel):
    total_products: int = Field(default=0, ge=0)
    total_reviews: int = Field(default=0, ge=0)
    average_rating: float = Field(default=0, ge=0, le=5)
    sentiment_distribution: SentimentDistribution = Field(default_factory=SentimentDistribution)


class AnalysisResult(BaseModel):
    """Everything known about a session, plus summary statistics"""

    session_id: str
    products: List[ProductRead] = []
    reviews: List[ReviewRead] = []
    keywords: List[KeywordRead] = []
    recommendations: List[RecommendationRead] = []
    summary: AnalysisSummary = Field(default_factory=AnalysisSummary)

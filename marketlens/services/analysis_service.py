"""
Analysis aggregation: joins a session's rows and computes summary statistics
"""

from typing import Iterable, Optional, Sequence

from marketlens.core.cache import AnalysisCache
from marketlens.core.logging import log
from marketlens.models.enums import Sentiment
from marketlens.repositories import (
    KeywordRepository,
    ProductRepository,
    RecommendationRepository,
    ReviewRepository,
)
from marketlens.schemas.analysis import AnalysisResult, AnalysisSummary, SentimentDistribution
from marketlens.schemas.insight import KeywordRead, RecommendationRead
from marketlens.schemas.product import ProductRead, ReviewRead


def weighted_average_rating(products: Iterable) -> float:
    """
    Mean product rating weighted by each product's review total.

    Falls back to the plain mean when no rated product reports reviews,
    and to 0 when no product is rated at all.
    """
    rated = [
        (float(product.average_rating), max(product.total_reviews or 0, 0))
        for product in products
        if product.average_rating is not None
    ]
    if not rated:
        return 0.0

    total_weight = sum(weight for _, weight in rated)
    if total_weight > 0:
        average = sum(rating * weight for rating, weight in rated) / total_weight
    else:
        average = sum(rating for rating, _ in rated) / len(rated)

    return round(average, 2)


def sentiment_distribution(reviews: Iterable) -> SentimentDistribution:
    """Count review sentiments; unlabelled reviews count as neutral"""
    counts = {sentiment: 0 for sentiment in Sentiment}
    for review in reviews:
        sentiment = Sentiment(review.sentiment) if review.sentiment is not None else Sentiment.NEUTRAL
        counts[sentiment] += 1

    return SentimentDistribution(
        positive=counts[Sentiment.POSITIVE],
        neutral=counts[Sentiment.NEUTRAL],
        negative=counts[Sentiment.NEGATIVE],
    )


def summarize(products: Sequence, reviews: Sequence) -> AnalysisSummary:
    return AnalysisSummary(
        total_products=len(products),
        total_reviews=len(reviews),
        average_rating=weighted_average_rating(products),
        sentiment_distribution=sentiment_distribution(reviews),
    )


class AnalysisService:
    """Service layer for session analysis results"""

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
        keyword_repo: KeywordRepository,
        recommendation_repo: RecommendationRepository,
        cache: Optional[AnalysisCache] = None,
    ):
        self.product_repo = product_repo
        self.review_repo = review_repo
        self.keyword_repo = keyword_repo
        self.recommendation_repo = recommendation_repo
        self.cache = cache

    async def get_analysis(self, session_id: str) -> AnalysisResult:
        """
        Everything stored for a session. Unknown sessions give an empty
        result rather than an error; clients ask the status endpoint first.
        """
        if self.cache is not None:
            cached = await self.cache.get(session_id)
            if cached is not None:
                log.debug("Analysis cache hit for session {}", session_id)
                return AnalysisResult.model_validate(cached)

        products = await self.product_repo.list_by_session(session_id)
        reviews = await self.review_repo.list_by_session(session_id) if products else []
        keywords = await self.keyword_repo.list_by_session(session_id)
        recommendations = await self.recommendation_repo.list_by_session(session_id)

        result = AnalysisResult(
            session_id=session_id,
            products=[ProductRead.model_validate(product) for product in products],
            reviews=[ReviewRead.model_validate(review) for review in reviews],
            keywords=[KeywordRead.model_validate(keyword) for keyword in keywords],
            recommendations=[RecommendationRead.model_validate(rec) for rec in recommendations],
            summary=summarize(products, reviews),
        )

        # Recommendations are written last, so only complete results are cached
        if self.cache is not None and recommendations:
            await self.cache.set(session_id, result.model_dump(mode="json"))

        return result

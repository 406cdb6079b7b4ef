"""
Keyword mining and recommendation rules.

Keywords are plain word frequencies over review text; recommendations are
fixed rules over the session's aggregate numbers.
"""

import re
from collections import Counter, defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from marketlens.models.enums import Platform, Priority, Sentiment
from marketlens.schemas.analysis import AnalysisSummary
from marketlens.schemas.insight import KeywordCreate, RecommendationCreate


STOP_WORDS = frozenset(
    """
    a about after all also am an and any are arrived as at be been but by can could did do does
    for from had has have i if in into is it its just me more my no not of on one only or our
    out so than that the their them then there these they this though to too very was we were
    what when which will with would you your
    """.split()
)

MIN_WORD_LENGTH = 3

NEGATIVE_SHARE_THRESHOLD = 0.3
NEUTRAL_SHARE_THRESHOLD = 0.4
POSITIVE_SHARE_THRESHOLD = 0.5
LOW_RATING_THRESHOLD = 3.5
HIGH_RATING_THRESHOLD = 4.0

PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}

_WORD_RE = re.compile(r"[a-z]+")


def tokenize(text: str) -> List[str]:
    return [
        word
        for word in _WORD_RE.findall(text.lower())
        if len(word) >= MIN_WORD_LENGTH and word not in STOP_WORDS
    ]


def dominant_sentiment(counts: Optional[Counter]) -> Optional[Sentiment]:
    """Most common sentiment; ties go to neutral, then to the first in enum order"""
    if not counts:
        return None
    return max(Sentiment, key=lambda sentiment: (counts[sentiment], sentiment == Sentiment.NEUTRAL))


def extract_keywords(reviews: Iterable, session_id: str, limit: int = 10) -> List[KeywordCreate]:
    """Top `limit` words across review texts, most frequent first"""
    frequency: Counter = Counter()
    sentiments: Dict[str, Counter] = defaultdict(Counter)

    for review in reviews:
        words = tokenize(review.text)
        frequency.update(words)
        if review.sentiment is None:
            continue
        for word in set(words):
            sentiments[word][Sentiment(review.sentiment)] += 1

    ranked = sorted(frequency.items(), key=lambda item: (-item[1], item[0]))[:limit]

    return [
        KeywordCreate(
            session_id=session_id,
            keyword=word,
            frequency=count,
            sentiment=dominant_sentiment(sentiments.get(word)),
        )
        for word, count in ranked
    ]


def generate_recommendations(
    session_id: str,
    summary: AnalysisSummary,
    platforms: Sequence[Platform],
    keywords: Sequence[KeywordCreate] = (),
) -> List[RecommendationCreate]:
    """Apply the recommendation rules; always returns at least one item"""
    distribution = summary.sentiment_distribution
    total = distribution.total
    negative_share = distribution.negative / total if total else 0.0
    neutral_share = distribution.neutral / total if total else 0.0
    positive_share = distribution.positive / total if total else 0.0

    recommendations: List[RecommendationCreate] = []

    def add(title: str, description: str, priority: Priority, category: str) -> None:
        recommendations.append(
            RecommendationCreate(
                session_id=session_id,
                title=title,
                description=description,
                priority=priority,
                category=category,
            )
        )

    if negative_share > NEGATIVE_SHARE_THRESHOLD:
        complaints = [k.keyword for k in keywords if k.sentiment == Sentiment.NEGATIVE][:3]
        topics = f" Recurring topics: {', '.join(complaints)}." if complaints else ""
        add(
            "Address negative customer feedback",
            f"{negative_share:.0%} of reviews are negative.{topics} Reply to unhappy buyers and fix the most common complaints.",
            Priority.HIGH,
            "Customer Satisfaction",
        )

    if summary.total_products and summary.average_rating < LOW_RATING_THRESHOLD:
        add(
            "Improve product quality",
            f"Average rating is {summary.average_rating:.2f}, below {LOW_RATING_THRESHOLD}. Review quality control and product descriptions.",
            Priority.HIGH,
            "Product Quality",
        )

    if neutral_share > NEUTRAL_SHARE_THRESHOLD:
        add(
            "Turn neutral buyers into promoters",
            f"{neutral_share:.0%} of reviews are neutral. Follow up after delivery and ask satisfied buyers for detailed reviews.",
            Priority.MEDIUM,
            "Engagement",
        )

    if len(set(platforms)) < len(Platform):
        missing = [p.value for p in Platform if p not in set(platforms)]
        add(
            "Expand to more marketplaces",
            f"Only {len(set(platforms))} of {len(Platform)} marketplaces were analysed. Consider listing on {', '.join(missing)}.",
            Priority.MEDIUM,
            "Distribution",
        )

    if positive_share >= POSITIVE_SHARE_THRESHOLD or summary.average_rating >= HIGH_RATING_THRESHOLD:
        add(
            "Highlight positive reviews",
            f"Average rating is {summary.average_rating:.2f} with {positive_share:.0%} positive reviews. Feature them in listings and ads.",
            Priority.LOW,
            "Marketing",
        )

    if not recommendations:
        add(
            "Keep monitoring customer feedback",
            "No pressing issues found. Re-run the analysis periodically to catch changes in sentiment.",
            Priority.LOW,
            "Monitoring",
        )

    # sorted() is stable, so rule order is kept within a priority
    return sorted(recommendations, key=lambda rec: PRIORITY_ORDER[rec.priority])

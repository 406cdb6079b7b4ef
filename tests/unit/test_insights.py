"""
Test keyword mining and recommendation rules
"""

from collections import Counter
from types import SimpleNamespace

from marketlens.models.enums import Platform, Priority, Sentiment
from marketlens.schemas.analysis import AnalysisSummary, SentimentDistribution
from marketlens.schemas.insight import KeywordCreate
from marketlens.services.insights import dominant_sentiment, extract_keywords, generate_recommendations, tokenize

ALL_PLATFORMS = list(Platform)


def review(text, sentiment=None):
    return SimpleNamespace(text=text, sentiment=sentiment)


def summary(total_products=3, average_rating=4.0, positive=0, neutral=0, negative=0):
    return AnalysisSummary(
        total_products=total_products,
        total_reviews=positive + neutral + negative,
        average_rating=average_rating,
        sentiment_distribution=SentimentDistribution(positive=positive, neutral=neutral, negative=negative),
    )


class TestKeywords:
    def test_tokenize_drops_stop_words_and_short_words(self):
        assert tokenize("The packaging was GREAT, great! ok") == ["packaging", "great", "great"]

    def test_keywords_ranked_by_frequency_then_alphabetically(self):
        reviews = [
            review("quality delivery quality"),
            review("delivery packaging quality"),
            review("seller packaging"),
        ]

        keywords = extract_keywords(reviews, "s1")

        assert [(k.keyword, k.frequency) for k in keywords] == [
            ("quality", 3),
            ("delivery", 2),
            ("packaging", 2),
            ("seller", 1),
        ]
        assert all(k.session_id == "s1" for k in keywords)

    def test_keyword_limit(self):
        reviews = [review("alpha bravo charlie delta echo foxtrot")]

        keywords = extract_keywords(reviews, "s1", limit=3)

        assert [k.keyword for k in keywords] == ["alpha", "bravo", "charlie"]

    def test_keyword_sentiment_is_majority_of_reviews_mentioning_it(self):
        reviews = [
            review("slow delivery", Sentiment.NEGATIVE),
            review("slow delivery again", Sentiment.NEGATIVE),
            review("delivery fine", Sentiment.POSITIVE),
        ]

        keywords = {k.keyword: k for k in extract_keywords(reviews, "s1")}

        assert keywords["slow"].sentiment == Sentiment.NEGATIVE
        assert keywords["delivery"].sentiment == Sentiment.NEGATIVE
        assert keywords["fine"].sentiment == Sentiment.POSITIVE

    def test_keyword_without_labelled_reviews_has_no_sentiment(self):
        keywords = extract_keywords([review("sturdy")], "s1")

        assert keywords[0].sentiment is None

    def test_no_reviews_no_keywords(self):
        assert extract_keywords([], "s1") == []

    def test_dominant_sentiment_ties(self):
        assert dominant_sentiment(None) is None
        assert dominant_sentiment(Counter()) is None
        assert dominant_sentiment(Counter({Sentiment.POSITIVE: 1, Sentiment.NEUTRAL: 1})) == Sentiment.NEUTRAL
        assert dominant_sentiment(Counter({Sentiment.POSITIVE: 2, Sentiment.NEGATIVE: 2})) == Sentiment.POSITIVE


class TestRecommendations:
    def test_healthy_session_gets_marketing_only(self):
        recs = generate_recommendations(
            "s1", summary(average_rating=4.5, positive=8, neutral=1, negative=1), ALL_PLATFORMS
        )

        assert len(recs) == 1
        assert recs[0].priority == Priority.LOW
        assert recs[0].category == "Marketing"
        assert recs[0].session_id == "s1"

    def test_unhappy_session_on_one_platform(self):
        keywords = [
            KeywordCreate(session_id="s1", keyword="broken", frequency=4, sentiment=Sentiment.NEGATIVE),
            KeywordCreate(session_id="s1", keyword="cheap", frequency=2, sentiment=Sentiment.POSITIVE),
        ]

        recs = generate_recommendations(
            "s1", summary(average_rating=3.0, positive=1, negative=4), [Platform.SHOPEE], keywords
        )

        assert [(r.priority, r.category) for r in recs] == [
            (Priority.HIGH, "Customer Satisfaction"),
            (Priority.HIGH, "Product Quality"),
            (Priority.MEDIUM, "Distribution"),
        ]
        assert "broken" in recs[0].description
        assert "cheap" not in recs[0].description
        assert "tiktok_shop" in recs[2].description

    def test_results_sorted_by_priority(self):
        recs = generate_recommendations(
            "s1", summary(average_rating=4.2, positive=5, neutral=5), [Platform.TOKOPEDIA]
        )

        assert [r.category for r in recs] == ["Engagement", "Distribution", "Marketing"]

    def test_fallback_when_no_rule_fires(self):
        recs = generate_recommendations(
            "s1", summary(average_rating=3.8, positive=4, neutral=3, negative=3), ALL_PLATFORMS
        )

        assert len(recs) == 1
        assert recs[0].title == "Keep monitoring customer feedback"
        assert recs[0].category == "Monitoring"

    def test_low_rating_rule_needs_products(self):
        recs = generate_recommendations("s1", summary(total_products=0, average_rating=0), ALL_PLATFORMS)

        assert all(r.category != "Product Quality" for r in recs)

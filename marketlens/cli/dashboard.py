"""
Rich renderables for the analysis dashboard
"""

from enum import Enum
from typing import List

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from marketlens.models.enums import Platform, Priority, Sentiment, SessionStatus
from marketlens.schemas.analysis import AnalysisResult


class Tab(str, Enum):
    OVERVIEW = "overview"
    PRODUCTS = "products"
    REVIEWS = "reviews"
    KEYWORDS = "keywords"
    RECOMMENDATIONS = "recommendations"
    ALL = "all"


PLATFORM_LABELS = {
    Platform.SHOPEE: "Shopee",
    Platform.TIKTOK_SHOP: "TikTok Shop",
    Platform.TOKOPEDIA: "Tokopedia",
}

SENTIMENT_STYLES = {
    Sentiment.POSITIVE: "green",
    Sentiment.NEUTRAL: "yellow",
    Sentiment.NEGATIVE: "red",
}

PRIORITY_STYLES = {
    Priority.HIGH: "bold red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "green",
}

STATUS_STYLES = {
    SessionStatus.STARTED: "cyan",
    SessionStatus.IN_PROGRESS: "blue",
    SessionStatus.COMPLETED: "green",
    SessionStatus.FAILED: "red",
}

BAR_WIDTH = 30
REVIEW_TEXT_WIDTH = 60


def bar(value: int, maximum: int, width: int = BAR_WIDTH) -> str:
    """Horizontal bar scaled against `maximum`"""
    if maximum <= 0 or value <= 0:
        return ""
    filled = max(1, round(min(value / maximum, 1.0) * width))
    return "█" * filled


def sentiment_label(sentiment) -> str:
    if sentiment is None:
        return "[dim]-[/dim]"
    sentiment = Sentiment(sentiment)
    return f"[{SENTIMENT_STYLES[sentiment]}]{sentiment.value}[/]"


def render_overview(result: AnalysisResult) -> Panel:
    summary = result.summary
    distribution = summary.sentiment_distribution

    metrics = Table.grid(padding=(0, 2))
    metrics.add_column(style="bold")
    metrics.add_column()
    metrics.add_row("Products", str(summary.total_products))
    metrics.add_row("Reviews", str(summary.total_reviews))
    metrics.add_row("Average rating", f"{summary.average_rating:.2f} ★")
    metrics.add_row("Keywords", str(len(result.keywords)))
    metrics.add_row("Recommendations", str(len(result.recommendations)))

    sentiments = Table.grid(padding=(0, 2))
    sentiments.add_column(style="bold")
    sentiments.add_column(justify="right")
    sentiments.add_column()
    for sentiment in Sentiment:
        count = getattr(distribution, sentiment.value)
        sentiments.add_row(
            sentiment.value.title(),
            str(count),
            f"[{SENTIMENT_STYLES[sentiment]}]{bar(count, distribution.total)}[/]",
        )

    return Panel(
        Group(metrics, "", sentiments),
        title=f"Session {escape(result.session_id)}",
        border_style="cyan",
    )


def render_products(result: AnalysisResult) -> Table:
    table = Table(title="Products", expand=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Platform")
    table.add_column("Rating", justify="right")
    table.add_column("Reviews", justify="right")
    table.add_column("URL", overflow="fold", style="blue")

    for product in result.products:
        rating = f"{product.average_rating:.2f}" if product.average_rating is not None else "-"
        table.add_row(
            str(product.id),
            escape(product.name),
            PLATFORM_LABELS[Platform(product.platform)],
            rating,
            str(product.total_reviews),
            escape(product.url),
        )

    return table


def render_reviews(result: AnalysisResult) -> Table:
    table = Table(title="Reviews", expand=True)
    table.add_column("Product", justify="right", style="dim")
    table.add_column("Rating")
    table.add_column("Sentiment")
    table.add_column("Review", max_width=REVIEW_TEXT_WIDTH)
    table.add_column("Date", style="dim")

    for review in result.reviews:
        table.add_row(
            str(review.product_id),
            "★" * review.rating,
            sentiment_label(review.sentiment),
            escape(review.text),
            review.timestamp.strftime("%Y-%m-%d") if review.timestamp else "-",
        )

    return table


def render_keywords(result: AnalysisResult) -> Table:
    table = Table(title="Keywords", expand=True)
    table.add_column("Keyword", style="bold")
    table.add_column("Frequency", justify="right")
    table.add_column("Sentiment")
    table.add_column("")

    highest = max((keyword.frequency for keyword in result.keywords), default=0)
    for keyword in result.keywords:
        style = SENTIMENT_STYLES.get(Sentiment(keyword.sentiment), "white") if keyword.sentiment else "white"
        table.add_row(
            escape(keyword.keyword),
            str(keyword.frequency),
            sentiment_label(keyword.sentiment),
            f"[{style}]{bar(keyword.frequency, highest)}[/]",
        )

    return table


def render_recommendations(result: AnalysisResult) -> Table:
    table = Table(title="Recommendations", expand=True, show_lines=True)
    table.add_column("Priority")
    table.add_column("Category", style="cyan")
    table.add_column("Recommendation")

    for recommendation in result.recommendations:
        priority = Priority(recommendation.priority)
        table.add_row(
            f"[{PRIORITY_STYLES[priority]}]{priority.value.upper()}[/]",
            escape(recommendation.category),
            f"[bold]{escape(recommendation.title)}[/bold]\n{escape(recommendation.description)}",
        )

    return table


RENDERERS = {
    Tab.OVERVIEW: render_overview,
    Tab.PRODUCTS: render_products,
    Tab.REVIEWS: render_reviews,
    Tab.KEYWORDS: render_keywords,
    Tab.RECOMMENDATIONS: render_recommendations,
}


def render_dashboard(console: Console, result: AnalysisResult, tab: Tab = Tab.ALL) -> None:
    tabs: List[Tab] = [t for t in RENDERERS] if tab == Tab.ALL else [tab]
    for current in tabs:
        console.print(RENDERERS[current](result))

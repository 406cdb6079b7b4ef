"""
SQLModel database models
"""

from .enums import Platform, Priority, Sentiment, SessionStatus
from .insight import Keyword, Recommendation
from .product import Product, Review

__all__ = [
    "Platform",
    "Sentiment",
    "Priority",
    "SessionStatus",
    "Product",
    "Review",
    "Keyword",
    "Recommendation",
]

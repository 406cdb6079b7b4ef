"""
Repository implementations
"""

from .base import BaseRepository, SessionScopedRepository
from .insight import KeywordRepository, RecommendationRepository
from .product import ProductRepository, ReviewRepository

__all__ = [
    "BaseRepository",
    "SessionScopedRepository",
    "ProductRepository",
    "ReviewRepository",
    "KeywordRepository",
    "RecommendationRepository",
]

"""
Product and review models
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Column, Numeric
from sqlmodel import Field, Relationship, SQLModel

from .columns import datetime_column, utc_now
from .enums import Platform, Sentiment, enum_column


class Product(SQLModel, table=True):
    """Product scraped from a marketplace for a search session"""

    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    platform: Platform = Field(sa_column=enum_column(Platform, "platform"))
    url: str
    average_rating: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(3, 2), nullable=True))
    total_reviews: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    scraped_at: datetime = Field(default_factory=utc_now, sa_column=datetime_column())
    session_id: str = Field(index=True)

    # Relationships
    reviews: List["Review"] = Relationship(back_populates="product")


class Review(SQLModel, table=True):
    """Customer review of a scraped product"""

    __tablename__ = "reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    text: str
    rating: int
    timestamp: Optional[datetime] = Field(default=None, sa_column=datetime_column(nullable=True))
    sentiment: Optional[Sentiment] = Field(default=None, sa_column=enum_column(Sentiment, "sentiment", nullable=True))
    created_at: datetime = Field(default_factory=utc_now, sa_column=datetime_column())

    # Relationships
    product: Optional[Product] = Relationship(back_populates="reviews")

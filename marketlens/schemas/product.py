"""
Product and review schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_serializer

from marketlens.models.enums import Platform, Sentiment


class ProductBase(BaseModel):
    """Base product schema"""

    name: str = Field(..., min_length=1, max_length=500)
    platform: Platform
    average_rating: Optional[float] = Field(None, ge=0, le=5)
    total_reviews: int = Field(default=0, ge=0)


class ProductCreate(ProductBase):
    """Schema for creating a product"""

    url: HttpUrl
    session_id: str = Field(..., min_length=1)

    @field_serializer("url")
    def serialize_url(self, url: HttpUrl) -> str:
        return str(url)


class ProductRead(ProductBase):
    """Product as returned to clients"""

    id: int
    url: str
    scraped_at: datetime
    session_id: str

    model_config = ConfigDict(from_attributes=True)


class ReviewBase(BaseModel):
    """Base review schema"""

    text: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    timestamp: Optional[datetime] = None
    sentiment: Optional[Sentiment] = None


class ReviewCreate(ReviewBase):
    """Schema for creating a review"""

    product_id: int


class ReviewRead(ReviewBase):
    """Review as returned to clients"""

    id: int
    product_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

"""
Mock marketplace scraper.

Stands in for real crawlers: products and reviews are generated from the
search query, and review sentiment is a uniform random pick that does not
look at the review text.
"""

import random
import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from marketlens.core.config import settings
from marketlens.models.enums import Platform, Sentiment
from marketlens.schemas.product import ProductCreate, ReviewCreate


PLATFORM_DOMAINS: Dict[Platform, str] = {
    Platform.SHOPEE: "shopee.co.id",
    Platform.TIKTOK_SHOP: "shop.tiktok.com",
    Platform.TOKOPEDIA: "www.tokopedia.com",
}

PRODUCT_VARIANTS = [
    "Original",
    "Premium Edition",
    "Best Seller",
    "Value Pack",
    "Official Store",
    "Limited Edition",
]

REVIEW_TEMPLATES: Dict[int, List[str]] = {
    5: [
        "Excellent quality, fast delivery and the seller was very responsive.",
        "Great product, exactly as described. Packaging was neat and secure.",
        "Love it! Quality is amazing for this price, will buy again.",
    ],
    4: [
        "Good quality overall, delivery took a bit longer than expected.",
        "Product works well, packaging could be better but the seller was helpful.",
        "Nice product for the price, quality matches the description.",
    ],
    3: [
        "Average quality, it does the job but nothing special.",
        "Delivery was slow and packaging was basic, product is okay.",
        "Decent for the price, though the size was different from the description.",
    ],
    2: [
        "Quality is poor and the packaging was damaged on arrival.",
        "Not as described, the seller was slow to respond.",
        "Delivery took too long and the product feels cheap.",
    ],
    1: [
        "Terrible quality, broke after one day. Seller ignored my complaint.",
        "Wrong item delivered and packaging was damaged. Very disappointed.",
        "Complete waste of money, nothing like the description.",
    ],
}

REVIEW_MAX_AGE_DAYS = 90


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "product"


class MockMarketplaceScraper:
    """Generates products and reviews for a query"""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        products_per_platform: Optional[int] = None,
        reviews_per_product: Optional[int] = None,
    ):
        self.rng = rng or random.Random(settings.pipeline_seed)
        self.products_per_platform = (
            products_per_platform if products_per_platform is not None else settings.mock_products_per_platform
        )
        self.reviews_per_product = (
            reviews_per_product if reviews_per_product is not None else settings.mock_reviews_per_product
        )

    def search(self, query: str, platforms: List[Platform], session_id: str) -> List[ProductCreate]:
        """Products "found" for the query on each platform"""
        slug = slugify(query)
        products = []

        for platform in platforms:
            offset = self.rng.randrange(len(PRODUCT_VARIANTS))
            for index in range(self.products_per_platform):
                variant = PRODUCT_VARIANTS[(offset + index) % len(PRODUCT_VARIANTS)]
                products.append(
                    ProductCreate(
                        name=f"{query.title()} {variant}",
                        platform=platform,
                        url=f"https://{PLATFORM_DOMAINS[platform]}/product/{slug}-{index + 1}",
                        average_rating=round(self.rng.uniform(3.0, 5.0), 2),
                        total_reviews=self.rng.randint(10, 500),
                        session_id=session_id,
                    )
                )

        return products

    def reviews_for(self, product_id: int, now: Optional[datetime] = None) -> List[ReviewCreate]:
        """Reviews "scraped" from one product page"""
        now = now or datetime.now(timezone.utc)
        reviews = []

        for _ in range(self.reviews_per_product):
            rating = self.rng.randint(1, 5)
            age = timedelta(days=self.rng.randint(0, REVIEW_MAX_AGE_DAYS - 1), hours=self.rng.randint(0, 23))
            reviews.append(
                ReviewCreate(
                    product_id=product_id,
                    text=self.rng.choice(REVIEW_TEMPLATES[rating]),
                    rating=rating,
                    timestamp=now - age,
                    sentiment=self.rng.choice(list(Sentiment)),
                )
            )

        return reviews

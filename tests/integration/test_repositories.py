"""
Test session-scoped repositories against SQLite
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import text

from marketlens.core.exceptions import ConflictError
from marketlens.models.enums import Platform, Priority, Sentiment
from marketlens.repositories import (
    KeywordRepository,
    ProductRepository,
    RecommendationRepository,
    ReviewRepository,
)
from marketlens.schemas.insight import KeywordCreate, RecommendationCreate
from marketlens.schemas.product import ProductCreate, ReviewCreate


def product_in(session_id, name="Earbuds Original", platform=Platform.SHOPEE):
    return ProductCreate(
        name=name,
        platform=platform,
        url="https://shopee.co.id/product/earbuds-1",
        average_rating=4.25,
        total_reviews=42,
        session_id=session_id,
    )


async def seed_products(db_session, session_id, count=2):
    return await ProductRepository(db_session).bulk_create(
        objects_in=[product_in(session_id, name=f"Earbuds {i}") for i in range(count)]
    )


@pytest.mark.asyncio
async def test_product_roundtrip(db_session):
    repo = ProductRepository(db_session)

    product = await repo.create(obj_in=product_in("s1"))
    fetched = await repo.get(id=product.id)

    assert fetched.name == "Earbuds Original"
    assert fetched.platform == Platform.SHOPEE
    assert float(fetched.average_rating) == 4.25
    assert fetched.url == "https://shopee.co.id/product/earbuds-1"
    assert fetched.scraped_at is not None


@pytest.mark.asyncio
async def test_queries_are_scoped_to_session(db_session):
    await seed_products(db_session, "s1", count=3)
    await seed_products(db_session, "s2", count=1)
    repo = ProductRepository(db_session)

    assert await repo.count_by_session("s1") == 3
    assert [p.name for p in await repo.list_by_session("s1")] == ["Earbuds 0", "Earbuds 1", "Earbuds 2"]
    assert await repo.exists_for_session("s2")
    assert not await repo.exists_for_session("s3")


@pytest.mark.asyncio
async def test_reviews_belong_to_session_through_product(db_session):
    s1_products = await seed_products(db_session, "s1")
    s2_products = await seed_products(db_session, "s2", count=1)
    repo = ReviewRepository(db_session)

    await repo.bulk_create(
        objects_in=[
            ReviewCreate(product_id=product.id, text="Great", rating=5, sentiment=Sentiment.POSITIVE)
            for product in s1_products + s2_products
        ]
    )

    assert await repo.count_by_session("s1") == 2
    assert await repo.count_by_session("s2") == 1
    assert {r.product_id for r in await repo.list_by_session("s1")} == {p.id for p in s1_products}


@pytest.mark.asyncio
async def test_review_with_unknown_product_conflicts(db_session):
    with pytest.raises(ConflictError):
        await ReviewRepository(db_session).bulk_create(
            objects_in=[ReviewCreate(product_id=999, text="Orphan", rating=3)]
        )


@pytest.mark.asyncio
async def test_delete_by_session_leaves_other_sessions(db_session):
    s1_products = await seed_products(db_session, "s1")
    await seed_products(db_session, "s2")
    await ReviewRepository(db_session).bulk_create(
        objects_in=[ReviewCreate(product_id=p.id, text="Fine", rating=4) for p in s1_products]
    )
    await KeywordRepository(db_session).bulk_create(
        objects_in=[KeywordCreate(session_id=sid, keyword="fine", frequency=2) for sid in ("s1", "s2")]
    )
    await RecommendationRepository(db_session).bulk_create(
        objects_in=[
            RecommendationCreate(
                session_id="s1",
                title="Keep going",
                description="All good",
                priority=Priority.LOW,
                category="Monitoring",
            )
        ]
    )

    assert await ReviewRepository(db_session).delete_by_session("s1") == 2
    assert await ProductRepository(db_session).delete_by_session("s1") == 2
    assert await KeywordRepository(db_session).delete_by_session("s1") == 1
    assert await RecommendationRepository(db_session).delete_by_session("s1") == 1
    await db_session.commit()

    assert await ProductRepository(db_session).count_by_session("s1") == 0
    assert await ProductRepository(db_session).count_by_session("s2") == 2
    assert await KeywordRepository(db_session).count_by_session("s2") == 1


@pytest.mark.asyncio
async def test_enum_values_are_stored(db_session):
    rec = await RecommendationRepository(db_session).create(
        obj_in=RecommendationCreate(
            session_id="s1", title="Expand", description="More platforms", priority=Priority.MEDIUM, category="Reach"
        )
    )

    raw = await db_session.execute(text("SELECT priority FROM recommendations WHERE id = :id"), {"id": rec.id})

    assert raw.scalar_one() == "medium"
    assert rec.priority == Priority.MEDIUM


@pytest.mark.asyncio
async def test_timezone_aware_timestamps_are_stored(db_session):
    product = (await seed_products(db_session, "s1", count=1))[0]
    posted = datetime(2026, 2, 14, 9, 30, tzinfo=timezone.utc)

    review = (
        await ReviewRepository(db_session).bulk_create(
            objects_in=[
                ReviewCreate(product_id=product.id, text="Bass is fine", rating=4, timestamp=posted)
            ]
        )
    )[0]

    assert product.scraped_at is not None
    assert review.created_at is not None
    assert review.timestamp.replace(tzinfo=timezone.utc) == posted


@pytest.mark.asyncio
async def test_uncommitted_bulk_create_can_be_rolled_back(db_session):
    repo = ProductRepository(db_session)

    products = await repo.bulk_create(objects_in=[product_in("s1")], commit=False)
    assert products[0].id is not None

    await db_session.rollback()

    assert await repo.count_by_session("s1") == 0


@pytest.mark.asyncio
async def test_delete_by_ids_removes_only_given_rows(db_session):
    products = await seed_products(db_session, "s1", count=3)
    repo = ProductRepository(db_session)

    deleted = await repo.delete_by_ids([products[0].id, products[2].id])
    await db_session.commit()

    assert deleted == 2
    assert [p.name for p in await repo.list_by_session("s1")] == ["Earbuds 1"]
    assert await repo.delete_by_ids([]) == 0

"""
Product and review repositories
"""
from typing import Any, List

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketlens.core.exceptions import DatabaseError
from marketlens.core.logging import log
from marketlens.models import Product, Review
from marketlens.repositories.base import SessionScopedRepository
from marketlens.schemas.product import ProductCreate, ReviewCreate


class ProductRepository(SessionScopedRepository[Product, ProductCreate]):
    """Repository for scraped products"""

    def __init__(self, session: AsyncSession):
        super().__init__(Product, session)

    async def exists_for_session(self, session_id: str) -> bool:
        statement = select(Product.id).where(Product.session_id == session_id).limit(1)
        result = await self.session.execute(statement)
        return result.first() is not None


class ReviewRepository(SessionScopedRepository[Review, ReviewCreate]):
    """
    Repository for reviews.

    Reviews have no session column of their own; they belong to a session
    through their product.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Review, session)

    def _session_product_ids(self, session_id: str) -> Any:
        return select(Product.id).where(Product.session_id == session_id)

    async def list_by_session(self, session_id: str) -> List[Review]:
        statement = (
            select(Review)
            .join(Product, Review.product_id == Product.id)
            .where(Product.session_id == session_id)
            .order_by(Review.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_by_session(self, session_id: str) -> int:
        statement = (
            select(func.count(Review.id))
            .join(Product, Review.product_id == Product.id)
            .where(Product.session_id == session_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def delete_by_session(self, session_id: str) -> int:
        statement = (
            delete(Review)
            .where(Review.product_id.in_(self._session_product_ids(session_id)))
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            log.error("Database error deleting reviews for session {}: {}", session_id, e)
            raise DatabaseError("Error deleting Review")
        return result.rowcount or 0

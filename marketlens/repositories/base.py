"""
Base repository pattern implementation with async support
"""
from typing import Any, ClassVar, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, func, select
from sqlalchemy.exc import DisconnectionError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from marketlens.core.exceptions import ConflictError, DatabaseError
from marketlens.core.logging import log


ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType]):
    """
    Generic repository for data access with async support.
    Implements the create/read operations shared by all tables.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    def _to_model(self, obj_in: CreateSchemaType, **kwargs) -> ModelType:
        obj_in_data = obj_in.model_dump(exclude_unset=True)
        obj_in_data.update(kwargs)  # Add any additional fields
        return self.model(**obj_in_data)

    async def create(self, *, obj_in: CreateSchemaType, **kwargs) -> ModelType:
        """Create a new record"""
        try:
            db_obj = self._to_model(obj_in, **kwargs)

            self.session.add(db_obj)
            await self.session.commit()
            await self.session.refresh(db_obj)

            log.debug("Created {} id={}", self.model.__name__, db_obj.id)
            return db_obj

        except IntegrityError as e:
            await self.session.rollback()
            log.error("Integrity error creating {}: {}", self.model.__name__, e)
            raise ConflictError(f"Conflict creating {self.model.__name__}")
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.error("Database error creating {}: {}", self.model.__name__, e)
            raise DatabaseError(f"Error creating {self.model.__name__}")

    async def bulk_create(self, *, objects_in: List[CreateSchemaType], commit: bool = True) -> List[ModelType]:
        """
        Bulk create multiple records in one transaction.

        With commit=False the rows are only flushed, so ids are assigned and
        the caller decides whether to commit or roll back.
        """
        try:
            db_objects = [self._to_model(obj_in) for obj_in in objects_in]

            self.session.add_all(db_objects)
            if not commit:
                await self.session.flush()
                log.debug("Flushed {} {} records", len(db_objects), self.model.__name__)
                return db_objects

            await self.session.commit()

            # Refresh all objects
            for db_obj in db_objects:
                await self.session.refresh(db_obj)

            log.debug("Bulk created {} {} records", len(db_objects), self.model.__name__)
            return db_objects

        except (OperationalError, DisconnectionError):
            # Transient; left for the caller to retry
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            log.error("Integrity error bulk creating {}: {}", self.model.__name__, e)
            raise ConflictError(f"Conflict bulk creating {self.model.__name__}")
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.error("Database error bulk creating {}: {}", self.model.__name__, e)
            raise DatabaseError(f"Error bulk creating {self.model.__name__}")

    async def get(self, *, id: int) -> Optional[ModelType]:
        """Get a record by ID"""
        return await self.session.get(self.model, id)

    async def delete_by_ids(self, ids: List[int]) -> int:
        """Delete records by primary key without committing"""
        if not ids:
            return 0
        try:
            result = await self.session.execute(
                delete(self.model).where(self.model.id.in_(ids)).execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            log.error("Database error deleting {} rows by id: {}", self.model.__name__, e)
            raise DatabaseError(f"Error deleting {self.model.__name__}")
        return result.rowcount or 0


class SessionScopedRepository(BaseRepository[ModelType, CreateSchemaType]):
    """
    Repository for tables that carry a session_id column.

    Deletes do not commit; the caller owns the transaction so that a
    whole session can be removed atomically.
    """

    order_column: ClassVar[str] = "id"

    def _session_filter(self, session_id: str) -> Any:
        return self.model.session_id == session_id

    async def list_by_session(self, session_id: str) -> List[ModelType]:
        statement = (
            select(self.model)
            .where(self._session_filter(session_id))
            .order_by(getattr(self.model, self.order_column))
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_by_session(self, session_id: str) -> int:
        statement = select(func.count()).select_from(self.model).where(self._session_filter(session_id))
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def delete_by_session(self, session_id: str) -> int:
        try:
            result = await self.session.execute(
                delete(self.model)
                .where(self._session_filter(session_id))
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            log.error("Database error deleting {} rows for session {}: {}", self.model.__name__, session_id, e)
            raise DatabaseError(f"Error deleting {self.model.__name__}")
        return result.rowcount or 0

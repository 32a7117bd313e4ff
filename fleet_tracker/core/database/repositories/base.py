"""
Base repository interfaces and utilities.

This module provides the repository interface and the user-scoped
implementations shared by every table. Each repository is bound to one user
at construction; every query it issues is restricted to that user's rows,
either through a ``user_id`` column or through the owning vehicle.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from fleet_tracker.core.errors import OwnershipError, VehicleNotFoundError

from ..base import utc_now
from ..entities.vehicles import Vehicle

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class BaseRepository(ABC, Generic[EntityType]):
    """Base async repository interface with common CRUD operations using SQLModel."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    @abstractmethod
    async def create(self, entity: EntityType) -> EntityType:
        """Create a new entity record.

        Args:
            entity: SQLModel instance to persist

        Returns:
            Persisted entity with generated fields populated
        """

    @abstractmethod
    async def get_by_id(self, entity_id: uuid.UUID) -> Optional[EntityType]:
        """Get entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance or None if not found
        """

    @abstractmethod
    async def update(self, entity: EntityType) -> EntityType:
        """Update an existing entity record.

        Args:
            entity: SQLModel instance with updated fields

        Returns:
            Updated entity instance
        """

    @abstractmethod
    async def delete(self, entity_id: uuid.UUID) -> bool:
        """Delete entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            True if deleted, False if not found
        """

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List entities with optional pagination and filtering.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            filters: Dictionary of field filters

        Returns:
            List of entity instances
        """


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters for keys that name a column of ``model``; None values are skipped."""
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt


async def ensure_vehicle_access(session: AsyncSession, user_id: uuid.UUID, vehicle_id: uuid.UUID) -> Vehicle:
    """Load a vehicle and check it belongs to ``user_id``.

    Raises:
        VehicleNotFoundError: no vehicle has this id
        OwnershipError: the vehicle belongs to another user
    """
    vehicle = await session.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise VehicleNotFoundError(f"Vehicle {vehicle_id} not found")
    if vehicle.user_id != user_id:
        raise OwnershipError("Vehicle does not belong to this user")
    return vehicle


class UserScopedRepository(BaseRepository[EntityType]):
    """CRUD over a table whose rows carry a ``user_id`` column.

    Subclasses set ``default_order`` to the columns ``list`` sorts by.
    """

    default_order: Sequence[Any] = ()

    def __init__(self, session: AsyncSession, model: Type[EntityType], user_id: uuid.UUID) -> None:
        super().__init__(session, model)
        self.user_id = user_id

    def _scoped(self, stmt):
        return stmt.where(self.model.user_id == self.user_id)

    async def _before_write(self, entity: EntityType) -> None:
        """Hook for ownership checks on referenced rows."""

    async def create(self, entity: EntityType) -> EntityType:
        if hasattr(entity, "user_id"):
            entity.user_id = self.user_id
        with self.session.no_autoflush:
            await self._before_write(entity)
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: uuid.UUID) -> Optional[EntityType]:
        stmt = self._scoped(select(self.model).where(self.model.id == entity_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, entity: EntityType) -> EntityType:
        # A rejected change must not reach the database through autoflush
        with self.session.no_autoflush:
            await self._before_write(entity)
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: uuid.UUID) -> bool:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        stmt = self._scoped(select(self.model))
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        if self.default_order:
            stmt = stmt.order_by(*self.default_order)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class VehicleOwnedRepository(UserScopedRepository[EntityType]):
    """CRUD over a table owned through ``vehicle_id``.

    Reads join to ``vehicles`` to filter by owner; writes first check that
    the referenced vehicle belongs to the user.
    """

    def _scoped(self, stmt):
        return stmt.join(Vehicle, Vehicle.id == self.model.vehicle_id).where(Vehicle.user_id == self.user_id)

    async def _before_write(self, entity: EntityType) -> None:
        await ensure_vehicle_access(self.session, self.user_id, entity.vehicle_id)

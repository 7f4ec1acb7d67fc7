from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar('T')
ID = TypeVar('ID')


class Repository(ABC, Generic[T, ID]):
    """Minimal persistence contract shared by every repository.

    Update and delete are left to the concrete repositories that own mutable
    entities; execution records expose neither.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @abstractmethod
    async def get(self, id: ID) -> T | None:
        ...

    @abstractmethod
    async def create(self, entity: T) -> T:
        ...

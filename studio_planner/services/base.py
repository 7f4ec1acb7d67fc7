from datetime import date
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from studio_planner.core.exceptions import NotFoundError, ValidationError

T = TypeVar("T")


class BaseService:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_or_404(self, model: type[T], id: str, error_msg: str | None = None) -> T:
        result = await self._session.get(model, id)
        if not result:
            entity_name = model.__name__
            raise NotFoundError(
                entity_name,
                error_msg or f"{entity_name} {id} not found",
                {"id": id}
            )
        return result

    @staticmethod
    def _check_window(start_date: date | None, end_date: date | None) -> None:
        """Reject an inverted date window. Open ends are allowed."""
        if start_date and end_date and start_date > end_date:
            raise ValidationError(
                "date_range",
                "start_date must not be after end_date",
                {"start_date": str(start_date), "end_date": str(end_date)},
            )

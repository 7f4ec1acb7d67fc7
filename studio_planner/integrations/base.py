"""Interfaces to the studio-operations collaborators.

Attendance keeping and the slot timetable live outside the planner. The
planner only asks who was present at a slot on a date and which slots are
currently running.
"""
from abc import ABC, abstractmethod
from datetime import date


class AttendanceProvider(ABC):
    @abstractmethod
    async def get_present_members(self, slot_id: str, on_date: date) -> list[str]:
        """Member ids marked present for the slot on the date."""
        pass


class SlotRegistry(ABC):
    @abstractmethod
    async def get_active_slots(self) -> list[str]:
        """Ids of every slot that is currently active."""
        pass


def dedupe_members(member_ids: list[str]) -> list[str]:
    """Drop repeated member ids, keeping first-seen order."""
    return list(dict.fromkeys(member_ids))

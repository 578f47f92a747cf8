"""Entity services: the CRUD API the application consumes.

Each service is a thin dispatcher over one Backend strategy. Query helpers
are built on ``get_all`` so they behave the same in mock and live mode.
"""
from datetime import UTC, date, datetime
from typing import Any, Dict, List, Optional

from case_manager.backends import Backend
from case_manager.logging_config import get_logger
from case_manager.models import CaseNote, CaseStatus, TimelineEntry, TimelineEventType

logger = get_logger(__name__)


class EntityService:
    """get_all / get_by_id / create / update / delete for one entity type."""

    def __init__(self, backend: Backend):
        self.backend = backend

    @property
    def entity(self) -> str:
        return self.backend.kind.name

    async def get_all(self) -> List[Dict[str, Any]]:
        return await self.backend.get_all()

    async def get_by_id(self, record_id: Any) -> Dict[str, Any]:
        return await self.backend.get_by_id(record_id)

    async def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self.backend.create(fields)

    async def update(self, record_id: Any, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self.backend.update(record_id, fields)

    async def delete(self, record_id: Any) -> Dict[str, bool]:
        return await self.backend.delete(record_id)

    async def _filter(self, **criteria: Any) -> List[Dict[str, Any]]:
        records = await self.get_all()
        return [
            record for record in records
            if all(record.get(key) == value for key, value in criteria.items())
        ]


def utc_today() -> date:
    return datetime.now(UTC).date()


def _today_iso(today: Optional[date]) -> str:
    """Appointment dates are compared against the UTC calendar day."""
    return (today or utc_today()).isoformat()


class AppointmentService(EntityService):
    """Appointments, plus the date/status views the dashboard uses."""

    async def get_by_status(self, status: str) -> List[Dict[str, Any]]:
        return await self._filter(status=status)

    async def get_by_date(self, day: str) -> List[Dict[str, Any]]:
        """Appointments on ``day`` (YYYY-MM-DD)."""
        return await self._filter(date=day)

    async def get_today(self, today: Optional[date] = None) -> List[Dict[str, Any]]:
        return await self.get_by_date(_today_iso(today))

    async def get_upcoming(self, limit: int = 5, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """
        Next appointments from today onwards.

        Args:
            limit: Maximum number returned
            today: Reference date (defaults to the local date)

        Returns:
            Appointments dated today or later, earliest first
        """
        cutoff = _today_iso(today)
        records = await self.get_all()
        upcoming = [record for record in records if record.get("date", "") >= cutoff]
        upcoming.sort(key=lambda record: (record.get("date", ""), record.get("time") or ""))
        return upcoming[:limit]


class CaseService(EntityService):
    """Cases, with filters and timeline/note helpers."""

    async def get_by_status(self, status: str) -> List[Dict[str, Any]]:
        return await self._filter(status=status)

    async def get_by_priority(self, priority: str) -> List[Dict[str, Any]]:
        return await self._filter(priority=priority)

    async def get_by_assignee(self, assignee: str) -> List[Dict[str, Any]]:
        return await self._filter(assignedTo=assignee)

    async def get_active(self) -> List[Dict[str, Any]]:
        return await self.get_by_status(CaseStatus.ACTIVE.value)

    async def get_recent(self, limit: int = 5) -> List[Dict[str, Any]]:
        """Most recently updated cases first. The store order is left alone."""
        records = await self.get_all()
        records.sort(key=lambda record: record.get("lastUpdated", ""), reverse=True)
        return records[:limit]

    async def add_timeline_event(
        self,
        case_id: Any,
        event: str,
        event_type: str = TimelineEventType.INFO.value,
        on: Optional[date] = None,
    ) -> Dict[str, Any]:
        """Append a timeline entry and save the case."""
        case = await self.get_by_id(case_id)
        entry = TimelineEntry(date=_today_iso(on), event=event, type=event_type)
        timeline = list(case.get("timeline") or []) + [entry.to_record()]
        logger.info("timeline_event_added", entity=self.entity, entity_id=case_id, event=event)
        return await self.update(case_id, {"timeline": timeline})

    async def add_note(self, case_id: Any, author: str, text: str, on: Optional[date] = None) -> Dict[str, Any]:
        """Prepend a note (newest first, like the seed data) and save the case."""
        case = await self.get_by_id(case_id)
        note = CaseNote(date=_today_iso(on), author=author, text=text)
        notes = [note.to_record()] + list(case.get("notes") or [])
        return await self.update(case_id, {"notes": notes})


class ClientService(EntityService):
    """Client directory."""

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        wanted = email.strip().lower()
        for record in await self.get_all():
            if (record.get("email") or "").lower() == wanted:
                return record
        return None


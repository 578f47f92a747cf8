"""Entity kinds: per-type naming and the fields mock mode derives itself.

In live mode the server owns these fields; only MockBackend calls
``new_record``/``touch``.
"""
from datetime import datetime
from typing import Any, Dict

from case_manager import config
from case_manager.models import TimelineEntry, TimelineEventType


def iso_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-12-01T10:00:00.000Z."""
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def iso_date(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d")


class EntityKind:
    """Naming plus audit-field handling shared by every entity type."""

    name = "entity"
    label = "Entity"
    endpoint = "/entities"

    def new_record(
        self,
        record_id: int,
        fields: Dict[str, Any],
        store_size: int,
        now: datetime,
    ) -> Dict[str, Any]:
        """
        Build a record for insertion.

        Caller fields come first; the id and audit fields always win.

        Args:
            record_id: Id issued by the allocator
            fields: Caller-supplied fields
            store_size: Number of records before insertion
            now: Creation timestamp
        """
        stamp = iso_timestamp(now)
        record = dict(fields)
        record.update({"id": record_id, "createdAt": stamp, "updatedAt": stamp})
        return record

    def touch(self, record: Dict[str, Any], now: datetime) -> Dict[str, Any]:
        """Refresh audit fields after an update."""
        record["updatedAt"] = iso_timestamp(now)
        return record


class AppointmentKind(EntityKind):
    name = "appointment"
    label = "Appointment"
    endpoint = "/appointments"


class ClientKind(EntityKind):
    name = "client"
    label = "Client"
    endpoint = "/clients"


class CaseKind(EntityKind):
    """Cases also get a case number, a dated lifecycle and an opening timeline entry."""

    name = "case"
    label = "Case"
    endpoint = "/cases"

    @staticmethod
    def case_number(sequence: int) -> str:
        return f"{config.CASE_NUMBER_PREFIX}-{sequence:03d}"

    def new_record(self, record_id, fields, store_size, now):
        record = super().new_record(record_id, fields, store_size, now)
        today = iso_date(now)
        opened = TimelineEntry(date=today, event="Case opened", type=TimelineEventType.INFO)
        record.update({
            "caseNumber": self.case_number(store_size + 1),
            "openedDate": today,
            "lastUpdated": today,
            "timeline": [opened.to_record()],
            "documents": [],
            "notes": [],
        })
        return record

    def touch(self, record, now):
        super().touch(record, now)
        record["lastUpdated"] = iso_date(now)
        return record


APPOINTMENT = AppointmentKind()
CASE = CaseKind()
CLIENT = ClientKind()

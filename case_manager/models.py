"""Pydantic models describing record shapes and HTTP payloads.

Records travel through the stores as plain dicts with camelCase keys; these
models declare the seed datasets and document the wire format. Unknown
fields are allowed so callers can attach their own data.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class CaseStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    CLOSED = "closed"


class TimelineEventType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


class RecordModel(BaseModel):
    """Base for stored records: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, use_enum_values=True)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class TimelineEntry(RecordModel):
    date: str = Field(..., description="Event date (YYYY-MM-DD)")
    event: str = Field(..., description="Human readable event")
    type: TimelineEventType = Field(TimelineEventType.INFO, description="Severity tag")


class CaseDocument(RecordModel):
    name: str
    size: str
    date: str


class CaseNote(RecordModel):
    date: str
    author: str
    text: str


class Appointment(RecordModel):
    """Appointment record."""
    id: int
    title: str
    client_name: str = Field(..., alias="clientName")
    client_email: Optional[str] = Field(None, alias="clientEmail")
    client_phone: Optional[str] = Field(None, alias="clientPhone")
    type: Optional[str] = None
    date: str = Field(..., description="Appointment date (YYYY-MM-DD)")
    time: Optional[str] = Field(None, description="Start time (HH:MM)")
    duration: Optional[str] = Field(None, description="Duration in minutes")
    priority: Priority = Priority.MEDIUM
    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: Optional[str] = None
    location: Optional[str] = None
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")


class Case(RecordModel):
    """Case record with its timeline, documents and notes."""
    id: int
    case_number: str = Field(..., alias="caseNumber")
    title: str
    client_name: str = Field(..., alias="clientName")
    client_email: Optional[str] = Field(None, alias="clientEmail")
    client_phone: Optional[str] = Field(None, alias="clientPhone")
    type: Optional[str] = None
    status: CaseStatus = CaseStatus.PENDING
    priority: Priority = Priority.MEDIUM
    assigned_to: Optional[str] = Field(None, alias="assignedTo")
    opened_date: str = Field(..., alias="openedDate")
    last_updated: str = Field(..., alias="lastUpdated")
    progress: int = Field(0, ge=0, le=100)
    description: Optional[str] = None
    next_action: Optional[str] = Field(None, alias="nextAction")
    due_date: Optional[str] = Field(None, alias="dueDate")
    timeline: List[TimelineEntry] = Field(default_factory=list)
    documents: List[CaseDocument] = Field(default_factory=list)
    notes: List[CaseNote] = Field(default_factory=list)


class Client(RecordModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")


class User(RecordModel):
    """Directory entry for the mock auth backend. Never sent over the wire."""
    id: int
    name: str
    email: str
    role: str = "user"
    password_hash: str = Field(..., alias="passwordHash")
    created_at: str = Field(..., alias="createdAt")


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, examples=["demo@example.com"])
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1)


class LogoutRequest(BaseModel):
    token: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body; ``message`` is what ApiClient surfaces as the error text."""
    message: str = Field(..., description="Error message")
    code: Optional[str] = Field(None, description="Error code")
    retry_after: Optional[int] = Field(
        None, alias="retryAfter", description="Seconds until a throttled request may be retried"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "message": "Case with id 42 not found",
                "code": "NOT_FOUND"
            }
        }
    )

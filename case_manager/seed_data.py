"""Demo datasets used to seed the mock stores. The test suite relies on these values."""
from typing import Any, Dict, List

from case_manager.models import Appointment, Case, Client


APPOINTMENTS = [
    Appointment(
        id=1,
        title="Initial Consultation",
        clientName="Sarah Johnson",
        clientEmail="sarah.johnson@example.com",
        clientPhone="+1 (555) 123-4567",
        type="consultation",
        date="2024-12-10",
        time="14:00",
        duration="60",
        priority="high",
        status="confirmed",
        notes="First meeting to discuss case details and requirements. Client is interested in long-term support services.",
        location="Office - Room 301",
        createdAt="2024-12-01T10:00:00Z",
        updatedAt="2024-12-05T15:30:00Z",
    ),
    Appointment(
        id=2,
        title="Follow-up Meeting",
        clientName="Michael Chen",
        clientEmail="michael.chen@example.com",
        clientPhone="+1 (555) 234-5678",
        type="follow-up",
        date="2024-12-10",
        time="16:30",
        duration="30",
        priority="medium",
        status="confirmed",
        notes="Review progress and discuss next steps for the ongoing case.",
        location="Virtual - Zoom",
        createdAt="2024-12-02T09:00:00Z",
        updatedAt="2024-12-04T11:20:00Z",
    ),
    Appointment(
        id=3,
        title="Case Review",
        clientName="Emma Wilson",
        clientEmail="emma.wilson@example.com",
        clientPhone="+1 (555) 345-6789",
        type="review",
        date="2024-12-11",
        time="10:00",
        duration="45",
        priority="medium",
        status="pending",
        notes="Quarterly case review meeting to assess progress and strategy.",
        location="Office - Conference Room A",
        createdAt="2024-11-25T14:00:00Z",
        updatedAt="2024-12-03T16:45:00Z",
    ),
    Appointment(
        id=4,
        title="Initial Assessment",
        clientName="James Brown",
        clientEmail="james.brown@example.com",
        clientPhone="+1 (555) 456-7890",
        type="assessment",
        date="2024-12-11",
        time="15:00",
        duration="90",
        priority="high",
        status="pending",
        notes="Comprehensive initial assessment session for new case intake.",
        location="Office - Room 205",
        createdAt="2024-11-28T10:30:00Z",
        updatedAt="2024-12-02T13:15:00Z",
    ),
    Appointment(
        id=5,
        title="Consultation",
        clientName="Lisa Anderson",
        clientEmail="lisa.anderson@example.com",
        clientPhone="+1 (555) 567-8901",
        type="consultation",
        date="2024-12-12",
        time="09:00",
        duration="60",
        priority="low",
        status="confirmed",
        notes="General consultation about available legal services and options.",
        location="Office - Room 301",
        createdAt="2024-11-30T08:00:00Z",
        updatedAt="2024-12-01T10:00:00Z",
    ),
    Appointment(
        id=6,
        title="Document Signing",
        clientName="Robert Taylor",
        clientEmail="robert.taylor@example.com",
        clientPhone="+1 (555) 678-9012",
        type="other",
        date="2024-12-13",
        time="11:00",
        duration="30",
        priority="high",
        status="confirmed",
        notes="Final document signing for case closure.",
        location="Office - Room 101",
        createdAt="2024-12-03T12:00:00Z",
        updatedAt="2024-12-06T09:30:00Z",
    ),
]


CASES = [
    Case(
        id=1,
        caseNumber="CASE-2024-001",
        title="Employment Discrimination Case",
        clientName="Sarah Johnson",
        clientEmail="sarah.johnson@example.com",
        clientPhone="+1 (555) 123-4567",
        type="employment",
        status="active",
        priority="high",
        assignedTo="John Doe",
        openedDate="2024-11-15",
        lastUpdated="2024-12-05",
        progress=75,
        description="Client alleges workplace discrimination based on gender. Multiple incidents documented over the past 6 months. Seeking compensation and policy changes.",
        nextAction="Schedule mediation meeting",
        dueDate="2024-12-20",
        timeline=[
            {"date": "2024-11-15", "event": "Case opened", "type": "info"},
            {"date": "2024-11-20", "event": "Initial consultation completed", "type": "success"},
            {"date": "2024-11-25", "event": "Evidence gathering phase started", "type": "info"},
            {"date": "2024-12-01", "event": "Witness statements collected", "type": "success"},
            {"date": "2024-12-05", "event": "Mediation scheduled", "type": "warning"},
        ],
        documents=[
            {"name": "Initial Complaint.pdf", "size": "2.4 MB", "date": "2024-11-15"},
            {"name": "Witness Statements.pdf", "size": "1.8 MB", "date": "2024-12-01"},
            {"name": "Employment Records.pdf", "size": "3.2 MB", "date": "2024-11-20"},
        ],
        notes=[
            {"date": "2024-12-05", "author": "John Doe", "text": "Client is very cooperative. Strong case with solid evidence."},
            {"date": "2024-12-01", "author": "John Doe", "text": "Collected statements from 3 witnesses. All corroborate client's account."},
        ],
    ),
    Case(
        id=2,
        caseNumber="CASE-2024-002",
        title="Contract Dispute Resolution",
        clientName="Michael Chen",
        clientEmail="michael.chen@example.com",
        clientPhone="+1 (555) 234-5678",
        type="contract",
        status="active",
        priority="medium",
        assignedTo="Jane Smith",
        openedDate="2024-11-20",
        lastUpdated="2024-12-04",
        progress=45,
        description="Breach of contract claim regarding service delivery terms. Client seeks damages and contract termination.",
        nextAction="Review contract documents",
        dueDate="2024-12-15",
        timeline=[
            {"date": "2024-11-20", "event": "Case opened", "type": "info"},
            {"date": "2024-11-22", "event": "Contract review initiated", "type": "info"},
            {"date": "2024-11-28", "event": "Breach identified", "type": "warning"},
            {"date": "2024-12-04", "event": "Demand letter sent", "type": "success"},
        ],
        documents=[
            {"name": "Original Contract.pdf", "size": "1.2 MB", "date": "2024-11-20"},
            {"name": "Breach Evidence.pdf", "size": "3.5 MB", "date": "2024-11-28"},
            {"name": "Demand Letter.pdf", "size": "0.8 MB", "date": "2024-12-04"},
        ],
        notes=[
            {"date": "2024-12-04", "author": "Jane Smith", "text": "Demand letter sent. Awaiting response within 10 business days."},
            {"date": "2024-11-28", "author": "Jane Smith", "text": "Clear breach of Section 4.2. Strong case for damages."},
        ],
    ),
    Case(
        id=3,
        caseNumber="CASE-2024-003",
        title="Family Law Consultation",
        clientName="Emma Wilson",
        clientEmail="emma.wilson@example.com",
        clientPhone="+1 (555) 345-6789",
        type="family",
        status="pending",
        priority="low",
        assignedTo="John Doe",
        openedDate="2024-11-25",
        lastUpdated="2024-12-03",
        progress=20,
        description="Initial consultation for custody arrangement modification. Client seeking increased visitation rights.",
        nextAction="Gather supporting documents",
        dueDate="2024-12-30",
        timeline=[
            {"date": "2024-11-25", "event": "Case opened", "type": "info"},
            {"date": "2024-11-27", "event": "Initial consultation held", "type": "success"},
            {"date": "2024-12-03", "event": "Document request sent", "type": "info"},
        ],
        documents=[
            {"name": "Current Custody Order.pdf", "size": "1.5 MB", "date": "2024-11-25"},
            {"name": "Client Statement.pdf", "size": "0.9 MB", "date": "2024-11-27"},
        ],
        notes=[
            {"date": "2024-12-03", "author": "John Doe", "text": "Waiting for client to provide additional documentation."},
            {"date": "2024-11-27", "author": "John Doe", "text": "Client has valid reasons for modification request."},
        ],
    ),
    Case(
        id=4,
        caseNumber="CASE-2024-004",
        title="Personal Injury Claim",
        clientName="James Brown",
        clientEmail="james.brown@example.com",
        clientPhone="+1 (555) 456-7890",
        type="personal-injury",
        status="active",
        priority="high",
        assignedTo="Jane Smith",
        openedDate="2024-10-10",
        lastUpdated="2024-12-06",
        progress=85,
        description="Workplace accident resulting in serious injury. Settlement negotiations ongoing with insurance company.",
        nextAction="Finalize settlement agreement",
        dueDate="2024-12-12",
        timeline=[
            {"date": "2024-10-10", "event": "Case opened", "type": "info"},
            {"date": "2024-10-15", "event": "Medical records obtained", "type": "success"},
            {"date": "2024-10-25", "event": "Demand letter sent", "type": "info"},
            {"date": "2024-11-10", "event": "Initial settlement offer received", "type": "warning"},
            {"date": "2024-11-20", "event": "Counter-offer submitted", "type": "info"},
            {"date": "2024-12-06", "event": "Settlement agreement reached", "type": "success"},
        ],
        documents=[
            {"name": "Medical Records.pdf", "size": "5.2 MB", "date": "2024-10-15"},
            {"name": "Accident Report.pdf", "size": "2.1 MB", "date": "2024-10-10"},
            {"name": "Settlement Agreement.pdf", "size": "1.3 MB", "date": "2024-12-06"},
        ],
        notes=[
            {"date": "2024-12-06", "author": "Jane Smith", "text": "Settlement reached at $150,000. Client satisfied with outcome."},
            {"date": "2024-11-20", "author": "Jane Smith", "text": "Counter-offer submitted for $150,000. Awaiting response."},
        ],
    ),
    Case(
        id=5,
        caseNumber="CASE-2024-005",
        title="Property Rights Dispute",
        clientName="Lisa Anderson",
        clientEmail="lisa.anderson@example.com",
        clientPhone="+1 (555) 567-8901",
        type="property",
        status="closed",
        priority="medium",
        assignedTo="John Doe",
        openedDate="2024-09-01",
        lastUpdated="2024-11-30",
        progress=100,
        description="Boundary dispute with neighbor. Successfully resolved through mediation.",
        nextAction="Case closed",
        dueDate="2024-11-30",
        timeline=[
            {"date": "2024-09-01", "event": "Case opened", "type": "info"},
            {"date": "2024-09-10", "event": "Property survey completed", "type": "success"},
            {"date": "2024-10-05", "event": "Mediation scheduled", "type": "info"},
            {"date": "2024-10-20", "event": "Mediation held", "type": "success"},
            {"date": "2024-11-30", "event": "Agreement signed, case closed", "type": "success"},
        ],
        documents=[
            {"name": "Property Survey.pdf", "size": "3.8 MB", "date": "2024-09-10"},
            {"name": "Mediation Agreement.pdf", "size": "1.1 MB", "date": "2024-10-20"},
            {"name": "Final Settlement.pdf", "size": "0.9 MB", "date": "2024-11-30"},
        ],
        notes=[
            {"date": "2024-11-30", "author": "John Doe", "text": "Case successfully closed. Both parties satisfied with outcome."},
            {"date": "2024-10-20", "author": "John Doe", "text": "Mediation successful. Agreement reached on boundary line."},
        ],
    ),
]


def _clients_from_appointments() -> List[Client]:
    """One client per distinct appointment client, in first-seen order."""
    clients: List[Client] = []
    seen = set()
    for appointment in APPOINTMENTS:
        if appointment.client_email in seen:
            continue
        seen.add(appointment.client_email)
        clients.append(Client(
            id=len(clients) + 1,
            name=appointment.client_name,
            email=appointment.client_email,
            phone=appointment.client_phone,
            createdAt=appointment.created_at,
            updatedAt=appointment.created_at,
        ))
    return clients


CLIENTS = _clients_from_appointments()


# (name, email, password, role) - hashed when the mock auth backend starts
DEMO_USERS = [
    ("Demo User", "demo@example.com", "password", "admin"),
    ("Test User", "test@example.com", "test123", "user"),
]


def appointment_records() -> List[Dict[str, Any]]:
    return [appointment.to_record() for appointment in APPOINTMENTS]


def case_records() -> List[Dict[str, Any]]:
    """Seeded cases, with audit timestamps derived from their lifecycle dates."""
    records = []
    for case in CASES:
        record = case.to_record()
        record.setdefault("createdAt", f"{record['openedDate']}T00:00:00.000Z")
        record.setdefault("updatedAt", f"{record['lastUpdated']}T00:00:00.000Z")
        records.append(record)
    return records


def client_records() -> List[Dict[str, Any]]:
    return [client.to_record() for client in CLIENTS]

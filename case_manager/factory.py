"""Application root: picks mock or live backends once and wires every service."""
from dataclasses import dataclass
from typing import Optional

from case_manager import config
from case_manager.auth import AuthService, MockAuthBackend, RemoteAuthBackend
from case_manager.backends import Backend, MockBackend, RemoteBackend
from case_manager.context import AppContext, build_context
from case_manager.entities import APPOINTMENT, CASE, CLIENT, EntityKind
from case_manager.http_client import ApiClient
from case_manager.logging_config import get_logger
from case_manager.services import AppointmentService, CaseService, ClientService

logger = get_logger(__name__)


@dataclass
class Services:
    """Every service the application uses, sharing one backend mode."""
    appointments: AppointmentService
    cases: CaseService
    clients: ClientService
    auth: AuthService
    mock: bool
    context: Optional[AppContext] = None
    client: Optional[ApiClient] = None


def build_services(
    mock: Optional[bool] = None,
    context: Optional[AppContext] = None,
    client: Optional[ApiClient] = None,
    bcrypt_rounds: Optional[int] = None,
) -> Services:
    """
    Build the service layer.

    Args:
        mock: Backend mode; defaults to the configured mode switch
        context: Mock-mode state; a seeded context is built when omitted
        client: Live-mode HTTP client; built from config when omitted
        bcrypt_rounds: Cost factor for mock password hashing

    Returns:
        Services wired to MockBackend or RemoteBackend strategies
    """
    use_mock = config.is_mock_mode() if mock is None else mock

    if use_mock:
        context = context if context is not None else build_context()

        def backend(kind: EntityKind) -> Backend:
            return MockBackend(kind, context)

        auth_backend = MockAuthBackend(context, rounds=bcrypt_rounds)
    else:
        client = client if client is not None else ApiClient()

        def backend(kind: EntityKind) -> Backend:
            return RemoteBackend(kind, client)

        auth_backend = RemoteAuthBackend(client)

    logger.info("services_built", mode="mock" if use_mock else "live",
                base_url=None if use_mock else client.base_url)

    return Services(
        appointments=AppointmentService(backend(APPOINTMENT)),
        cases=CaseService(backend(CASE)),
        clients=ClientService(backend(CLIENT)),
        auth=AuthService(auth_backend),
        mock=use_mock,
        context=context if use_mock else None,
        client=None if use_mock else client,
    )

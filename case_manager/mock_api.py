"""Mock API server for local development.

FastAPI app serving the mock services over HTTP with the same endpoints live
mode calls, so the application can run with USE_MOCK_API=false against it.

Run with: python -m case_manager.mock_api
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, FastAPI, Header, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from case_manager import config
from case_manager.errors import (
    AuthenticationError,
    CaseManagerError,
    NotFoundError,
    RateLimitExceeded,
    ValidationError,
)
from case_manager.factory import Services, build_services
from case_manager.logging_config import get_logger, setup_structured_logging
from case_manager.models import (
    ErrorResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
)
from case_manager.services import EntityService

logger = get_logger(__name__)

ERROR_STATUS = [
    # Subclasses before their bases
    (RateLimitExceeded, status.HTTP_429_TOO_MANY_REQUESTS, "RATE_LIMITED"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED"),
    (ValidationError, 422, "VALIDATION_ERROR"),
]


def _error_response(
    status_code: int, message: str, code: str, retry_after: Optional[int] = None
) -> JSONResponse:
    body = ErrorResponse(message=message, code=code, retry_after=retry_after)
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    return token.strip() if scheme.lower() == "bearer" and token.strip() else None


def _require_token(authorization: Optional[str]) -> str:
    token = _bearer_token(authorization)
    if token is None:
        raise AuthenticationError("Missing bearer token")
    return token


def _entity_router(path: str, service: EntityService) -> APIRouter:
    """CRUD routes for one entity collection."""
    router = APIRouter(prefix=path, tags=[path.strip("/")])

    @router.get("")
    async def list_records():
        return await service.get_all()

    @router.get("/{record_id}")
    async def get_record(record_id: str):
        return await service.get_by_id(record_id)

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_record(fields: Dict[str, Any] = Body(...)):
        return await service.create(fields)

    @router.put("/{record_id}")
    async def update_record(record_id: str, fields: Dict[str, Any] = Body(...)):
        return await service.update(record_id, fields)

    @router.delete("/{record_id}")
    async def delete_record(record_id: str):
        return await service.delete(record_id)

    return router


def _auth_router(services: Services) -> APIRouter:
    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("/login")
    async def login(payload: LoginRequest):
        return await services.auth.login(payload.email, payload.password)

    @router.post("/register", status_code=status.HTTP_201_CREATED)
    async def register(payload: RegisterRequest):
        return await services.auth.register(payload.name, payload.email, payload.password)

    @router.post("/logout")
    async def logout(authorization: Optional[str] = Header(None)):
        return await services.auth.logout(_bearer_token(authorization))

    @router.post("/forgot-password")
    async def forgot_password(payload: ForgotPasswordRequest):
        return await services.auth.forgot_password(payload.email)

    @router.get("/me")
    async def me(authorization: Optional[str] = Header(None)):
        return await services.auth.verify_token(_require_token(authorization))

    @router.post("/refresh")
    async def refresh(authorization: Optional[str] = Header(None)):
        return await services.auth.refresh_token(_require_token(authorization))

    return router


def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Build the mock API application.

    Args:
        services: Mock-mode services to expose; seeded ones are built if omitted

    Returns:
        FastAPI app with routes under /api plus /health
    """
    services = services if services is not None else build_services(mock=True)

    app = FastAPI(
        title="Case Manager Mock API",
        description="In-memory backend for appointments, cases, clients and auth",
        version="1.0.0",
    )
    app.state.services = services

    @app.exception_handler(CaseManagerError)
    async def case_manager_error_handler(request: Request, exc: CaseManagerError):
        for error_type, status_code, code in ERROR_STATUS:
            if isinstance(exc, error_type):
                break
        else:
            status_code, code = status.HTTP_400_BAD_REQUEST, "BAD_REQUEST"
        logger.warning("request_rejected", path=request.url.path,
                       status_code=status_code, message=str(exc))
        return _error_response(status_code, str(exc), code, getattr(exc, "retry_after", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors consistently."""
        logger.warning("validation_error", path=request.url.path, errors=str(exc.errors()))
        return _error_response(
            422,
            f"Validation Error: {exc.errors()}",
            "VALIDATION_ERROR",
        )

    @app.get("/health")
    async def health():
        return {"status": "ok", "mode": "mock"}

    api = APIRouter(prefix="/api")
    api.include_router(_entity_router("/appointments", services.appointments))
    api.include_router(_entity_router("/cases", services.cases))
    api.include_router(_entity_router("/clients", services.clients))
    api.include_router(_auth_router(services))
    app.include_router(api)

    return app


def main():
    import uvicorn

    setup_structured_logging()
    logger.info("mock_api_starting", host=config.MOCK_API_HOST, port=config.MOCK_API_PORT)
    uvicorn.run(create_app(), host=config.MOCK_API_HOST, port=config.MOCK_API_PORT)


if __name__ == "__main__":
    main()

"""HTTP client used by live mode.

Purpose: one place that talks to the real backend and turns every failure
into the persistence layer's error types.

Pattern: requests.Session with connection pooling. No retries - a failed
request surfaces to the caller as-is.
"""
from typing import Any, Dict, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from structlog.contextvars import bound_contextvars

from case_manager import config
from case_manager.errors import ApiError, NetworkError, ParseError
from case_manager.logging_config import generate_request_id, get_logger

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"


def create_http_session(pool_size: int = 10) -> requests.Session:
    """
    Create HTTP session with connection pooling and retries disabled.

    Args:
        pool_size: Connections kept per host (default: 10)

    Returns:
        Configured requests.Session
    """
    session = requests.Session()

    adapter = HTTPAdapter(
        max_retries=0,
        pool_connections=pool_size,
        pool_maxsize=pool_size,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


def _merge_headers(headers: Optional[Dict[str, str]], request_id: str) -> Dict[str, str]:
    """Caller headers plus the enforced JSON content type and a request id."""
    merged: Dict[str, str] = {}
    for name, value in (headers or {}).items():
        if name.lower() == "content-type":
            if value != JSON_CONTENT_TYPE:
                logger.warning("content_type_overridden", requested=value)
            continue
        merged[name] = value
    merged.setdefault("X-Request-ID", request_id)
    merged["Content-Type"] = JSON_CONTENT_TYPE
    return merged


def _error_message(response: requests.Response) -> Tuple[str, Any]:
    """Pull ``message`` out of a JSON error body, falling back to the status text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"]), body
    reason = response.reason or f"HTTP {response.status_code}"
    return f"API Error: {reason}", body


class ApiClient:
    """Thin JSON request wrapper bound to a base URL."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: Prefix for every endpoint (default: config.API_BASE_URL)
            session: requests.Session to send with (default: pooled session)
            timeout: Per-request timeout in seconds (default: config value)
        """
        self.base_url = (base_url if base_url is not None else config.API_BASE_URL).rstrip("/")
        self.session = session if session is not None else create_http_session()
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT_SECONDS

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Send a JSON request and return the decoded response body.

        Args:
            endpoint: Path appended to the base URL (e.g. "/cases/3")
            method: HTTP method (GET, POST, PUT, DELETE)
            body: JSON-serializable request body
            headers: Extra headers; Content-Type is always application/json

        Returns:
            Parsed JSON body, or None for a 204 (or an empty DELETE response)

        Raises:
            NetworkError: If no response was obtained
            ApiError: If the status is not 2xx
            ParseError: If a success body is empty or not valid JSON
        """
        url = self.url_for(endpoint)
        request_id = generate_request_id()
        with bound_contextvars(request_id=request_id, method=method.upper(), url=url):
            return self._send(method.upper(), url, body, _merge_headers(headers, request_id))

    def _send(self, method: str, url: str, body: Optional[Any], headers: Dict[str, str]) -> Any:
        kwargs: Dict[str, Any] = {"headers": headers, "timeout": self.timeout}
        if body is not None:
            kwargs["json"] = body

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning("request_failed", error=str(e))
            raise NetworkError(e) from e

        if not 200 <= response.status_code < 300:
            message, error_body = _error_message(response)
            logger.warning("api_error", status_code=response.status_code, message=message)
            raise ApiError(message, response.status_code, error_body)

        if response.status_code == 204:
            return None
        if not response.content:
            if method == "DELETE":
                return None
            logger.warning("empty_response", status_code=response.status_code)
            raise ParseError(f"Empty response body from {url}")

        try:
            return response.json()
        except ValueError as e:
            logger.warning("invalid_json", status_code=response.status_code)
            raise ParseError(f"Invalid JSON in response from {url}: {e}") from e


_default_client: Optional[ApiClient] = None


def get_default_client() -> ApiClient:
    """Get or create the process-wide client built from config."""
    global _default_client
    if _default_client is None:
        _default_client = ApiClient()
    return _default_client


def api_request(
    endpoint: str,
    method: str = "GET",
    body: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """Send a request through the default client. See ApiClient.request."""
    return get_default_client().request(endpoint, method=method, body=body, headers=headers)

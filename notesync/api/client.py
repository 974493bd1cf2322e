"""Request pipeline: the single path every backend call goes through.

Attaches the bearer token from the injected ``SessionContext``, serializes
JSON bodies, and turns every non-success outcome into a ``NotesClientError``
subclass carrying a human-readable message. No retries: a retry is always a
user-initiated re-submission.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from notesync.api.schemas import ErrorBody
from notesync.core.constants import (
    DEFAULT_HTTP_TIMEOUT,
    MSG_MALFORMED_RESPONSE,
    MSG_NETWORK_ERROR,
    MSG_REQUEST_FAILED,
)
from notesync.core.exceptions import (
    AuthenticationFailure,
    BackendFailure,
    NotesClientError,
    NotFound,
    TransportFailure,
)
from notesync.core.logging import get_logger
if TYPE_CHECKING:
    from notesync.session.context import SessionContext

log = get_logger(__name__)

_STATUS_FAILURES: dict[int, type[NotesClientError]] = {
    401: AuthenticationFailure,
    404: NotFound,
}


class ApiClient:
    """Async JSON client for the notes backend."""

    def __init__(
        self,
        base_url: str,
        session: SessionContext,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> SessionContext:
        return self._session

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def send(
        self,
        path: str,
        method: str = "GET",
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        """Issue one request and return the decoded JSON payload.

        Returns None for responses without a JSON body.

        Raises:
            AuthenticationFailure: HTTP 401.
            NotFound: HTTP 404.
            BackendFailure: any other non-2xx status.
            TransportFailure: backend unreachable or undecodable success body.
        """
        method = method.upper()
        url = f"{self._base_url}{path}"
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **self._session.authorization_header(),
        }
        content = json.dumps(dict(body)) if body is not None else None

        log.debug("api_request", method=method, path=path)
        client = await self._get_client()
        try:
            response = await client.request(method, url, headers=headers, content=content)
        except httpx.RequestError as exc:
            log.warning("api_unreachable", method=method, path=path, error=str(exc))
            raise TransportFailure(
                MSG_NETWORK_ERROR,
                context={"method": method, "path": path, "cause": type(exc).__name__},
            ) from exc

        if not response.is_success:
            raise self._failure_from(response, method, path)

        return self._decode(response, method, path)

    @staticmethod
    def _failure_from(response: httpx.Response, method: str, path: str) -> NotesClientError:
        message = _extract_error_message(response)
        status = response.status_code
        log.warning(
            "api_request_failed",
            method=method,
            path=path,
            status_code=status,
            error=message,
        )
        failure_cls = _STATUS_FAILURES.get(status, BackendFailure)
        return failure_cls(message, context={"method": method, "path": path, "status_code": status})

    @staticmethod
    def _decode(response: httpx.Response, method: str, path: str) -> Any:
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type or not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log.warning("api_response_malformed", method=method, path=path, error=str(exc))
            raise TransportFailure(
                MSG_MALFORMED_RESPONSE,
                context={"method": method, "path": path, "status_code": response.status_code},
            ) from exc


def _extract_error_message(response: httpx.Response) -> str:
    """Pick ``error`` then ``message`` from a JSON error body, else a generic message."""
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return MSG_REQUEST_FAILED

    if not isinstance(data, dict):
        return MSG_REQUEST_FAILED
    try:
        parsed = ErrorBody.model_validate(data)
    except ValidationError:
        return MSG_REQUEST_FAILED
    return parsed.error or parsed.message or MSG_REQUEST_FAILED

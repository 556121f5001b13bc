"""
app/connectors/base.py

Shared HTTP mechanics for external registry connectors.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

_MAX_ERROR_BODY_CHARS = 2000


class RemoteAPIError(RuntimeError):
    """
    Raised on any non-success response or transport failure from a remote API.

    ``status_code`` is None when no HTTP response was received.
    """

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class BaseConnector:
    """
    JSON-over-HTTP connector. Requests are issued once; failures propagate
    as RemoteAPIError and are never retried here.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        timeout_seconds: float,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Execute an HTTP request and return parsed JSON.
        """

        response = self._request(method=method, url=url, json_body=json_body, headers=headers)
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteAPIError(
                f"{self.source} API error: response was not valid JSON.",
                status_code=response.status_code,
                body=response.text[:_MAX_ERROR_BODY_CHARS],
            ) from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        request_headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if headers:
            request_headers.update(headers)

        try:
            response = self._session.request(
                method=method,
                url=url,
                json=json_body,
                headers=request_headers,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.error(
                "Connector request failed source=%s url=%s error=%s",
                self.source,
                url,
                exc,
            )
            raise RemoteAPIError(f"{self.source} API error: {exc}") from exc

        if not 200 <= response.status_code < 300:
            body = (response.text or "")[:_MAX_ERROR_BODY_CHARS]
            logger.error(
                "Connector request rejected source=%s status=%s url=%s body=%s",
                self.source,
                response.status_code,
                url,
                body,
            )
            raise RemoteAPIError(
                f"{self.source} API error: {response.status_code} - {body}",
                status_code=response.status_code,
                body=body,
            )
        return response

"""
Configured HTTP client for the CineGhar API.

Every failure, whether the request never completed or the server answered
with an error status, surfaces as a single ``ApiError`` with a message that
is safe to show to a user.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from cineghar.client.session import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5050"
FALLBACK_MESSAGE = "Something went wrong. Please try again."


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return FALLBACK_MESSAGE
    if isinstance(body, dict):
        for key in ("message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return FALLBACK_MESSAGE


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        session: SessionStore | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or os.getenv("CINEGHAR_API_BASE_URL", DEFAULT_BASE_URL)
        self.session = session or SessionStore()
        self._http = httpx.Client(base_url=self.base_url, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _headers(self, multipart: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        # httpx sets the multipart boundary itself
        if not multipart:
            headers["Content-Type"] = "application/json"
        token = self.session.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = self._http.request(
                method,
                path,
                json=json,
                params=params,
                data=data,
                files=files,
                headers=self._headers(multipart=files is not None),
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(str(exc) or FALLBACK_MESSAGE) from exc

        if response.is_error:
            message = _error_message(response)
            logger.info("%s %s -> %d: %s", method, path, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise ApiError(FALLBACK_MESSAGE, status_code=response.status_code) from exc

    def get(self, path: str, **kwargs: Any) -> dict[str, Any]:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> dict[str, Any]:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> dict[str, Any]:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> dict[str, Any]:
        return self.request("DELETE", path, **kwargs)

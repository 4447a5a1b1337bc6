"""Clients for the LMS API.

``LmsClient`` holds the session handling shared by both transports;
``ApiClient`` talks to a running server over HTTP with ``requests``.
The in-process transport lives in ``utils.request_router``.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union

import requests

from config import API_BASE_URL, API_TIMEOUT_SECONDS
from core.exceptions import ApiError, LMSError
from utils.client_storage import ClientStorage
from utils.file_storage import UploadedFile

logger = logging.getLogger(__name__)

Body = Optional[Union[Dict[str, Any], str]]

NOT_FOUND_CODES = ("NotFound",)


class LmsClient:
    """Session handling common to the HTTP and in-process clients."""

    def __init__(self, storage: Optional[ClientStorage] = None):
        self.storage = storage if storage is not None else ClientStorage()

    def fetch(
        self,
        path: str,
        method: str = "GET",
        body: Body = None,
        files: Optional[Dict[str, UploadedFile]] = None,
    ) -> Dict[str, Any]:
        raise NotImplementedError

    def login(self, email: str, password: str, role: str) -> Dict[str, Any]:
        """Log in and keep the token and user in client storage."""
        response = self.fetch(
            "/api/auth/login",
            method="POST",
            body={"email": email, "password": password, "role": role},
        )
        self.storage.save_session(response.get("token"), response.get("user"))
        return response

    def register(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self.fetch("/api/auth/register", method="POST", body=payload)
        self.storage.save_session(response.get("token"), response.get("user"))
        return response

    def logout(self) -> Dict[str, Any]:
        response = self.fetch("/api/auth/logout", method="POST")
        self.storage.clear()
        return response

    def fetch_first(
        self,
        paths: Iterable[str],
        method: str = "GET",
        body: Body = None,
    ) -> Dict[str, Any]:
        """Try candidate paths in order and return the first usable response.

        Only not-found failures move on to the next path; any other failure
        is raised at once.

        Args:
            paths: Candidate paths, most preferred first.
            method: HTTP method.
            body: Optional request body.

        Returns:
            The first response that is not a not-found failure.

        Raises:
            LMSError: The last not-found failure when every path missed, or
                the first other failure.
        """
        last_error: Optional[LMSError] = None
        for path in paths:
            try:
                return self.fetch(path, method=method, body=body)
            except LMSError as e:
                if e.code not in NOT_FOUND_CODES and e.status_code != 404:
                    raise
                logger.debug("Fallback: %s %s not found", method, path)
                last_error = e
        if last_error is None:
            raise ValueError("fetch_first needs at least one path")
        raise last_error


class ApiClient(LmsClient):
    """HTTP client adapter for a running LMS server."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        storage: Optional[ClientStorage] = None,
        session: Optional[requests.Session] = None,
        timeout: float = API_TIMEOUT_SECONDS,
    ):
        """Initialize the client.

        Args:
            base_url: Server origin, e.g. ``http://127.0.0.1:8000``.
            storage: Client storage holding the session token.
            session: Optional preconfigured requests session.
            timeout: Request timeout in seconds.
        """
        super().__init__(storage)
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(
        self,
        path: str,
        method: str = "GET",
        body: Body = None,
        files: Optional[Dict[str, UploadedFile]] = None,
    ) -> Dict[str, Any]:
        """Send a request and return the decoded success body.

        A stored token is sent as ``Authorization: Bearer <token>``. With
        files the body fields travel as a multipart form, otherwise the body
        is sent as JSON.

        Raises:
            ApiError: For network failures (status 0), non-2xx responses and
                bodies reporting ``success: false``.
        """
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        token = self.storage.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        kwargs: Dict[str, Any] = {}
        if files:
            kwargs["data"] = body or {}
            kwargs["files"] = {
                name: (
                    upload.filename,
                    upload.content,
                    upload.content_type or "application/octet-stream",
                )
                for name, upload in files.items()
            }
        elif isinstance(body, str):
            headers["Content-Type"] = "application/json"
            kwargs["data"] = body
        elif body is not None:
            kwargs["json"] = body

        try:
            response = self.session.request(
                method.upper(), url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error("Request %s %s failed: %s", method.upper(), url, e)
            raise ApiError(f"Network error: {e}", status_code=0, code="NetworkError") from e

        payload = self._decode(response)
        if not response.ok or payload.get("success") is False:
            message = (
                payload.get("error")
                or payload.get("message")
                or payload.get("detail")
                or response.reason
                or f"HTTP {response.status_code}"
            )
            raise ApiError(str(message), status_code=response.status_code, code=payload.get("code"))
        return payload

    @staticmethod
    def _decode(response: requests.Response) -> Dict[str, Any]:
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError:
            if response.ok:
                raise ApiError(
                    "Response is not valid JSON", status_code=response.status_code, code="InvalidResponse"
                )
            return {}
        return payload if isinstance(payload, dict) else {"data": payload}

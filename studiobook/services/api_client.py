"""
Booking backend client
Wraps httpx.AsyncClient and normalizes every response into an ApiResult.
Network errors, non-2xx statuses and success:false payloads all come back as
failed results; nothing is raised to the caller.
"""

import logging
from typing import Any, Optional

import httpx

from ..config import BACKEND_URL, REQUEST_TIMEOUT, SESSION_EXPIRED_STATUS
from ..schemas import ApiResult
from ..session import SessionContext

logger = logging.getLogger(__name__)

# Keys of the envelope itself; everything else is payload
ENVELOPE_KEYS = {"success", "message", "errors", "statusCode"}


def normalize_payload(body: Any) -> Any:
    """
    Pull the payload out of a response body.

    Bodies shaped ``{"success": .., "data": X}`` yield X. Bodies that put their
    payload next to the envelope keys (``{"success": .., "project": {..}}``)
    yield a dict of those keys. Non-dict bodies are returned as they are.
    """
    if not isinstance(body, dict):
        return body
    if "data" in body:
        return body["data"]
    payload = {k: v for k, v in body.items() if k not in ENVELOPE_KEYS}
    return payload or None


class BackendClient:
    """Authenticated JSON client for the booking backend"""

    def __init__(
        self,
        session: SessionContext,
        base_url: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.base_url = (base_url or BACKEND_URL).rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def get(self, path: str, params: Optional[dict] = None) -> ApiResult:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[dict] = None) -> ApiResult:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Optional[dict] = None) -> ApiResult:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str, json: Optional[dict] = None) -> ApiResult:
        return await self.request("DELETE", path, json=json)

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> ApiResult:
        """Send one request and convert the outcome into an ApiResult"""
        if not self.session.is_active:
            logger.warning(f"⚠️ Skipping {method} {path}: no active session")
            return ApiResult.failure("Session expired", status_code=SESSION_EXPIRED_STATUS)

        try:
            response = await self._http.request(
                method,
                path,
                json=json,
                params=params,
                headers=self.session.auth_headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} failed: {e}")
            return ApiResult.failure(str(e) or "Network error")

        if response.status_code == SESSION_EXPIRED_STATUS:
            logger.warning(f"⚠️ {method} {path} returned {SESSION_EXPIRED_STATUS}, ending session")
            self.session.force_logout()
            return ApiResult.failure("Session expired", status_code=response.status_code)

        try:
            body = response.json() if response.content else {}
        except ValueError:
            logger.error(f"❌ {method} {path} returned a non-JSON body (HTTP {response.status_code})")
            return ApiResult.failure(
                f"Unexpected response from server (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        message = body.get("message") if isinstance(body, dict) else None
        errors = body.get("errors") if isinstance(body, dict) else None

        if response.is_error:
            logger.error(f"❌ {method} {path} -> HTTP {response.status_code}: {message}")
            return ApiResult.failure(
                message or f"Request failed (HTTP {response.status_code})",
                status_code=response.status_code,
                errors=errors,
            )

        if isinstance(body, dict) and body.get("success") is False:
            logger.info(f"ℹ️ {method} {path} rejected: {message}")
            return ApiResult(
                success=False,
                message=message or "Request was rejected",
                statusCode=response.status_code,
                errors=errors,
                data=normalize_payload(body),
            )

        logger.debug(f"✅ {method} {path} -> HTTP {response.status_code}")
        return ApiResult(
            success=True,
            message=message,
            statusCode=response.status_code,
            data=normalize_payload(body),
        )

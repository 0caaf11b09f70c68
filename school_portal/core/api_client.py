"""Async client for the school REST API."""
from typing import Any, Dict, Optional

import httpx

from school_portal.core.config import get_settings
from school_portal.core.exceptions import (
    ApiError,
    AuthenticationError,
    extract_server_message,
)
from school_portal.core.logging_config import get_logger

logger = get_logger(__name__)

# Endpoints that must never carry credentials or tenant scoping
PUBLIC_ENDPOINTS = (
    "/tenants/by-school-code",
    "/auth/login",
    "/auth/super-admin/login",
    "/auth/forgot-password",
    "/auth/reset-password",
)

ERROR_CODES = {
    400: "API_BAD_REQUEST",
    401: "API_UNAUTHORIZED",
    403: "API_FORBIDDEN",
    404: "API_NOT_FOUND",
    409: "API_CONFLICT",
}


def create_http_client(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the connection pool used to talk to the school API."""
    settings = get_settings()
    return httpx.AsyncClient(
        base_url=(base_url or settings.API_BASE_URL).rstrip("/"),
        timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS,
        headers={"Content-Type": "application/json", "Accept": "application/json"},
        transport=transport,
    )


def is_public_endpoint(path: str) -> bool:
    return any(endpoint in path for endpoint in PUBLIC_ENDPOINTS)


class SchoolApiClient:
    """
    Thin wrapper issuing JSON requests against the school API.

    Credentials are injected per request: a bearer token and, for tenant
    scoped paths, the tenant id as both the ``X-Tenant-ID`` header and the
    ``tenant_id`` query parameter. There is no retry and no caching; every
    failure surfaces as an ``ApiError``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        access_token: Optional[str] = None,
        tenant_id: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.access_token = access_token
        self.tenant_id = tenant_id
        if http_client is None:
            self._client = create_http_client(base_url, timeout, transport)
            self._owns_client = True
        else:
            self._client = http_client
            self._owns_client = False

    async def __aenter__(self) -> "SchoolApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the connection pool if this client created it."""
        if self._owns_client:
            await self._client.aclose()

    def _headers(self, path: str) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if is_public_endpoint(path):
            return headers
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if self.tenant_id and "super-admin" not in path:
            headers["X-Tenant-ID"] = self.tenant_id
        return headers

    def _params(self, path: str, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        # Omitted filters mean "no constraint"
        cleaned = {
            key: value for key, value in (params or {}).items()
            if value is not None and value != ""
        }
        if self.tenant_id and "super-admin" not in path and not is_public_endpoint(path):
            cleaned["tenant_id"] = self.tenant_id
        return cleaned

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        query = self._params(path, params)
        logger.debug(f"{method} {path} params={query}")
        try:
            response = await self._client.request(
                method,
                path,
                params=query or None,
                json=json,
                headers=self._headers(path),
            )
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise ApiError(
                "The school server took too long to respond",
                error_code="API_TIMEOUT",
                details={"path": path, "method": method},
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(
                "Could not reach the school server",
                error_code="API_UNREACHABLE",
                details={"path": path, "method": method},
            )

        payload = _decode(response)
        if response.is_error:
            server_message = extract_server_message(payload)
            logger.error(f"{method} {path} returned {response.status_code}: {server_message}")
            error_class = AuthenticationError if response.status_code == 401 else ApiError
            raise error_class(
                server_message or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                server_message=server_message,
                error_code=ERROR_CODES.get(response.status_code, "API_ERROR"),
                details={"path": path, "method": method, "body": payload},
            )
        return payload

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text

"""Async HTTP client for the daemon API.

Thin wrapper over httpx.AsyncClient. Error responses are raised as
ApiError carrying the daemon's {"message"} text and the status code.
"""

from typing import Any, Optional

import httpx

DEFAULT_API_URL = "http://localhost:8888"


class ApiError(Exception):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class APIClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = await self._http.request(method, path, **kwargs)
        if resp.is_error:
            try:
                message = resp.json().get("message") or resp.reason_phrase
            except (ValueError, AttributeError):
                message = resp.text or resp.reason_phrase
            raise ApiError(message, resp.status_code)
        return resp.json() if resp.content else None

    async def authenticate(self, email: str, password: str) -> str:
        """Log in and return the bearer token."""
        data = await self._request(
            "POST", "/sessions", json={"email": email, "password": password}
        )
        return data["token"]

    async def get_aliases(self) -> list[dict]:
        return await self._request("GET", "/aliases")

    async def register_alias(self, host: str, domain: str, value: str) -> dict:
        return await self._request(
            "POST", "/aliases", json={"host": host, "domain": domain, "value": value}
        )

    async def update_alias(
        self, host: str, domain: str, value: str, new_domain: Optional[str] = None
    ) -> dict:
        """Set the value of an alias, moving it to new_domain if given."""
        body = {"host": host, "domain": domain, "value": value}
        if new_domain:
            body["new_domain"] = new_domain
        return await self._request("PUT", "/aliases", json=body)

    async def delete_alias(self, name: str) -> None:
        await self._request("DELETE", f"/aliases/{name}")

    async def get_domains(self) -> list[str]:
        return await self._request("GET", "/domains")

    async def health(self) -> dict:
        return await self._request("GET", "/health")

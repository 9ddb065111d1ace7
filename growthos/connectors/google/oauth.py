"""Growth OS — Google OAuth2 refresh-token exchange and error parsing.

Shared by the Google Ads, Search Console and Business Profile clients.
"""

from typing import Optional

import httpx

from growthos.config import settings
from growthos.core.errors import VendorError, classify_vendor_error


def google_error_message(resp: httpx.Response) -> str:
    """Pull the human message out of a Google API error body."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"

    if isinstance(body, list) and body:
        body = body[0]
    if not isinstance(body, dict):
        return str(body)

    error = body.get("error")
    if isinstance(error, dict):
        status = error.get("status", "")
        message = error.get("message", "")
        return f"{status}: {message}" if status else message
    if isinstance(error, str):
        description = body.get("error_description", "")
        return f"{error}: {description}" if description else error
    return resp.text


def raise_for_google_error(
    resp: httpx.Response, platform: str, solutions: Optional[dict] = None
) -> None:
    if resp.is_success:
        return
    raise classify_vendor_error(
        google_error_message(resp), resp.status_code, platform=platform, solutions=solutions
    )


async def refresh_access_token(
    client: httpx.AsyncClient,
    client_id: str,
    client_secret: str,
    refresh_token: str,
    platform: str,
    solutions: Optional[dict] = None,
) -> str:
    """Exchange a refresh token for a short-lived access token."""
    try:
        resp = await client.post(
            settings.google_token_url,
            data={
                "client_id": client_id,
                "client_secret": client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
        )
    except httpx.RequestError as e:
        raise classify_vendor_error(
            f"Token endpoint unreachable: {e}", platform=platform, solutions=solutions
        ) from e

    raise_for_google_error(resp, platform, solutions)
    token = resp.json().get("access_token")
    if not token:
        raise VendorError(f"{platform} token response had no access_token")
    return token


class GoogleAPIClient:
    """Base async client holding one access token per instance."""

    platform = "Google"
    solutions: dict = {}

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._access_token: Optional[str] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=settings.http_timeout_seconds, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _headers(self) -> dict:
        if self._access_token is None:
            self._access_token = await refresh_access_token(
                await self._get_client(),
                self.client_id,
                self.client_secret,
                self.refresh_token,
                self.platform,
                self.solutions,
            )
        return {"Authorization": f"Bearer {self._access_token}"}

    async def authorize(self) -> None:
        """Fetch the access token up front so parallel requests share it."""
        await self._headers()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        client = await self._get_client()
        headers = {**(await self._headers()), **kwargs.pop("headers", {})}
        try:
            resp = await client.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as e:
            raise classify_vendor_error(
                f"Connection failed: {e}", platform=self.platform, solutions=self.solutions
            ) from e
        raise_for_google_error(resp, self.platform, self.solutions)
        return resp

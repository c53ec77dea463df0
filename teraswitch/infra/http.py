from __future__ import annotations

import json as jsonlib
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Protocol, runtime_checkable

import aiohttp
from loguru import logger

# ─── Errors ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class HttpError(Exception):
    """Non-200 response, or status 0 when no response was received."""

    status: int
    body: str
    reason: str = ""

    def __str__(self) -> str:
        if self.status == 0:
            return f"transport error: {self.body}"
        return f"HTTP {self.status}: {self.body}"

    @property
    def status_text(self) -> str:
        return f"{self.status} {self.reason}".strip()


# ─── Auth ────────────────────────────────────────────────────────────


@runtime_checkable
class Auth(Protocol):
    def headers(self) -> dict[str, str]: ...


class BearerAuth:
    def __init__(self, token: str) -> None:
        self._token = token

    def __repr__(self) -> str:
        return "BearerAuth(token=***)"

    def headers(self) -> dict[str, str]:
        return {
            "authorization": f"Bearer {self._token}",
            "accept": "application/json",
        }


# ─── Client ──────────────────────────────────────────────────────────

_WRITE_METHODS = frozenset({"POST", "PUT", "PATCH"})


class HttpClient:
    """Single-attempt JSON client over a lazily created aiohttp session."""

    def __init__(
        self,
        base_url: str,
        auth: Auth | None = None,
        *,
        timeout: float = 30,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._default_headers = default_headers or {}
        self._session: aiohttp.ClientSession | None = None
        self._log = logger.bind(component="http")

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    def _build_headers(self, method: str) -> dict[str, str]:
        headers = dict(self._default_headers)
        if self._auth:
            headers.update(self._auth.headers())
        if method in _WRITE_METHODS:
            headers["content-type"] = "application/json"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | list[Any] | None = None,
    ) -> Any:
        method = method.upper()
        session = await self._ensure_session()
        headers = self._build_headers(method)
        self._log.debug("{method} {path}", method=method, path=path)

        try:
            async with session.request(
                method, self._url(path), headers=headers, json=json,
            ) as resp:
                return await self._parse(resp)
        except aiohttp.ClientResponseError as e:
            raise HttpError(status=e.status, body=e.message) from e
        except aiohttp.ClientError as e:
            raise HttpError(status=0, body=str(e) or type(e).__name__) from e
        except TimeoutError as e:
            raise HttpError(status=0, body=f"request timed out: {method} {path}") from e

    async def _parse(self, resp: aiohttp.ClientResponse) -> Any:
        if resp.status != HTTPStatus.OK:
            body = await resp.text()
            self._log.warning(
                "HTTP {status} from {url}: {body}",
                status=resp.status, url=str(resp.url), body=body[:500],
            )
            raise HttpError(status=resp.status, body=body, reason=resp.reason or "")
        raw = await resp.read()
        if not raw:
            return None
        try:
            return jsonlib.loads(raw)
        except ValueError as e:
            raise HttpError(
                status=resp.status,
                body=raw.decode(errors="replace")[:500],
                reason="unable to decode response body",
            ) from e

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def close(self) -> None:
        if self._session and not self._session.closed:
            self._log.debug("Closing HTTP session")
            await self._session.close()

    async def __aenter__(self) -> HttpClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

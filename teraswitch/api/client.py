"""Async HTTP client for the TeraSwitch API."""

from __future__ import annotations

import json as jsonlib
from http import HTTPStatus
from typing import Any

from loguru import logger

from teraswitch.core.exceptions import NotFoundError, RemoteError, TransportError
from teraswitch.infra.http import BearerAuth, HttpClient, HttpError

from .types import (
    Instance,
    InstanceCreateParams,
    InstanceEnvelope,
    SshKey,
    SshKeyCreateParams,
    SshKeyEnvelope,
    Status,
)

DEFAULT_ENDPOINT = "https://api.tsw.io"


def _decode_status(body: str) -> Status | None:
    try:
        data = jsonlib.loads(body)
    except ValueError:
        return None
    match data:
        case dict():
            return Status(
                success=bool(data.get("success", False)),
                message=str(data.get("message") or ""),
            )
        case _:
            return None


def _envelope(data: Any) -> Any:
    return data if isinstance(data, dict) else {}


def _check_success(envelope: Status, context: str) -> None:
    if not envelope.get("success"):
        raise RemoteError(HTTPStatus.OK, envelope.get("message") or "", context)


def _entity(envelope: Any, context: str) -> Any:
    """Return the envelope's ``result``, which must be an object with an integer id."""
    match envelope.get("result"):
        case None:
            raise RemoteError(HTTPStatus.OK, "no result in response", context)
        case {"id": int()} as entity:
            return entity
        case _:
            raise RemoteError(HTTPStatus.OK, "malformed result in response", context)


class TeraSwitchClient:
    """Async HTTP client for the TeraSwitch API.

    Every call is a single attempt. Failures are translated into the
    exceptions of ``teraswitch.core.exceptions``; a 200 response is only a
    success once its envelope has been checked as well.

    Example:
        async with TeraSwitchClient(DEFAULT_ENDPOINT, token) as client:
            key = await client.get_ssh_key(42)
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        token: str = "",
        *,
        request_timeout: float = 30,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self._log = logger.bind(component="client")
        self._http = HttpClient(self.endpoint, BearerAuth(token), timeout=request_timeout)

    def __repr__(self) -> str:
        return f"TeraSwitchClient(endpoint={self.endpoint!r})"

    async def __aenter__(self) -> TeraSwitchClient:
        return self

    async def __aexit__(self, *_args: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.close()

    async def execute(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body."""
        try:
            return await self._http.request(method, path, json=json)
        except HttpError as e:
            self._log.warning(
                "API error {method} {path}: {status}",
                method=method, path=path, status=e.status,
            )
            raise self._classify(e, path) from e

    @staticmethod
    def _classify(error: HttpError, path: str) -> Exception:
        if error.status == 0:
            return TransportError(error.body)
        if error.status == HTTPStatus.NOT_FOUND:
            return NotFoundError(path)
        if error.status == HTTPStatus.OK:
            return RemoteError(error.status, f"{error.reason}: {error.body}")
        status = _decode_status(error.body)
        if status is None or not status.get("message"):
            return RemoteError(error.status, error.status_text)
        return RemoteError(error.status, status["message"])

    # =========================================================================
    # Instances
    # =========================================================================

    async def get_instance(self, instance_id: int) -> Instance:
        """Fetch a compute instance by ID."""
        result: InstanceEnvelope = _envelope(
            await self.execute("GET", f"/v2/Instance/{instance_id}"),
        )
        return _entity(result, "unable to get instance")

    async def create_instance(self, params: InstanceCreateParams) -> Instance:
        """Request a new compute instance. Returns the instance as first reported."""
        body: dict[str, Any] = dict(params)
        for optional in ("sshKeyIds", "tags", "bootSize"):
            if not body.get(optional):
                body.pop(optional, None)

        self._log.debug(
            "Creating instance {name} in {region}",
            name=params["displayName"], region=params["regionId"],
        )
        result: InstanceEnvelope = _envelope(
            await self.execute("POST", "/v2/Instance", json=body),
        )
        _check_success(result, "unable to create instance")
        instance: Instance = _entity(result, "unable to create instance")
        self._log.debug("Created instance {iid}", iid=instance["id"])
        return instance

    # =========================================================================
    # SSH Keys
    # =========================================================================

    async def get_ssh_key(self, key_id: int) -> SshKey:
        """Fetch an SSH key by ID."""
        result: SshKeyEnvelope = _envelope(await self.execute("GET", f"/v1/SSHKey/{key_id}"))
        return _entity(result, "unable to get ssh key")

    async def create_ssh_key(self, params: SshKeyCreateParams) -> SshKey:
        """Register an SSH public key."""
        self._log.debug("Creating SSH key {name}", name=params["displayName"])
        result: SshKeyEnvelope = _envelope(
            await self.execute("POST", "/v1/SSHKey", json=dict(params)),
        )
        _check_success(result, "unable to create ssh key")
        return _entity(result, "unable to create ssh key")

    async def delete_ssh_key(self, key_id: int) -> None:
        """Delete an SSH key.

        Success is taken from the response's ``success`` flag alone; the
        backend does not reliably purge the key even when it reports success.
        """
        self._log.debug("Deleting SSH key {kid}", kid=key_id)
        result: Status = _envelope(await self.execute("DELETE", f"/v1/SSHKey/{key_id}"))
        _check_success(result, "unable to delete ssh key")

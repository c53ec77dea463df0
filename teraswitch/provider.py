"""Provider entry point: configuration, shared session and resource registry.

The orchestrator configures the provider once; the resulting
``ProviderSession`` is immutable and handed to every resource adapter it
builds, so adapters never reach for global state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from yarl import URL

from teraswitch.api.client import DEFAULT_ENDPOINT, TeraSwitchClient
from teraswitch.config import ProviderConfig
from teraswitch.core.exceptions import ConfigurationError
from teraswitch.resources.base import Resource
from teraswitch.resources.compute_instance import ComputeInstanceResource
from teraswitch.resources.diagnostics import Outcome
from teraswitch.resources.schema import Attribute, Kind, Schema
from teraswitch.resources.ssh_key import SshKeyResource

log = logger.bind(component="provider")

PROVIDER_TYPE_NAME = "teraswitch"

type ResourceFactory = Callable[[ProviderSession], Resource[Any]]

RESOURCES: dict[str, ResourceFactory] = {
    ComputeInstanceResource.type_name: ComputeInstanceResource,
    SshKeyResource.type_name: SshKeyResource,
}

SCHEMA = Schema(
    type_name=PROVIDER_TYPE_NAME,
    attributes=(
        Attribute("endpoint", Kind.STRING, optional=True, description="TeraSwitch API URL"),
        Attribute(
            "api_token", Kind.STRING, required=True, sensitive=True,
            description="TeraSwitch REST API token",
        ),
        Attribute(
            "poll_interval", Kind.FLOAT, optional=True,
            description="Seconds between readiness checks after creating a server",
        ),
        Attribute(
            "ready_timeout", Kind.FLOAT, optional=True,
            description="Maximum seconds to wait for a new server to power on",
        ),
        Attribute("request_timeout", Kind.FLOAT, optional=True),
    ),
)


@dataclass(frozen=True, slots=True)
class ProviderSession:
    """Validated endpoint and credential shared by all resource adapters."""

    endpoint: str
    token: str = field(repr=False)
    client: TeraSwitchClient = field(compare=False)
    poll_interval: float = 1.0
    ready_timeout: float | None = None

    @classmethod
    def from_config(cls, config: ProviderConfig) -> ProviderSession:
        """Validate ``config`` and open a client. Raises ConfigurationError."""
        endpoint = (config.endpoint or DEFAULT_ENDPOINT).rstrip("/")
        try:
            url = URL(endpoint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid endpoint {endpoint!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(f"Invalid endpoint {endpoint!r}: expected an http(s) URL")
        if not config.api_token:
            raise ConfigurationError("api_token is required")
        if config.poll_interval <= 0:
            raise ConfigurationError(
                f"poll_interval must be positive, got {config.poll_interval}"
            )
        if config.ready_timeout is not None and config.ready_timeout <= 0:
            raise ConfigurationError(
                f"ready_timeout must be positive, got {config.ready_timeout}"
            )

        client = TeraSwitchClient(
            endpoint, config.api_token, request_timeout=config.request_timeout,
        )
        return cls(
            endpoint=endpoint,
            token=config.api_token,
            client=client,
            poll_interval=config.poll_interval,
            ready_timeout=config.ready_timeout,
        )


class TeraSwitchProvider:
    """Provider plugin for TeraSwitch.

    Example:
        provider = TeraSwitchProvider("1.0.0")
        outcome = await provider.configure(ProviderConfig(api_token="..."))
        keys = provider.resource("teraswitch_ssh_key")
        created = await keys.create(SshKeyModel(display_name="ci", ssh_key="ssh-ed25519 ..."))
    """

    type_name = PROVIDER_TYPE_NAME

    def __init__(self, version: str = "dev") -> None:
        self.version = version
        self._session: ProviderSession | None = None

    @property
    def session(self) -> ProviderSession | None:
        return self._session

    def schema(self) -> Schema:
        return SCHEMA

    async def configure(self, config: ProviderConfig) -> Outcome[ProviderSession]:
        """Validate ``config`` and replace the current session.

        On failure the previous session, if any, stays active.
        """
        outcome: Outcome[ProviderSession] = Outcome()
        try:
            session = ProviderSession.from_config(config)
        except ConfigurationError as e:
            outcome.diagnostics.add_error("Provider Configuration Error", str(e), e)
            return outcome

        if self._session is not None:
            log.debug("Closing client of the previous session")
            await self._session.client.close()

        log.debug(
            "Configured provider version={version} endpoint={endpoint}",
            version=self.version, endpoint=session.endpoint,
        )
        self._session = session
        outcome.state = session
        return outcome

    def resource_types(self) -> list[str]:
        return list(RESOURCES)

    def data_sources(self) -> list[str]:
        return []

    def resource(self, type_name: str) -> Resource[Any]:
        """Build the adapter for ``type_name`` bound to the configured session."""
        factory = RESOURCES.get(type_name)
        if factory is None:
            raise ConfigurationError(
                f"No resource registered for {type_name!r}. "
                f"Available resources: {', '.join(RESOURCES)}"
            )
        if self._session is None:
            raise ConfigurationError("Provider has not been configured")
        return factory(self._session)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.client.close()

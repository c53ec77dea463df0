from __future__ import annotations

import pytest
from conftest import TOKEN, FakeTeraSwitch

from teraswitch.api import DEFAULT_ENDPOINT
from teraswitch.config import ProviderConfig
from teraswitch.core.exceptions import ConfigurationError
from teraswitch.provider import RESOURCES, ProviderSession, TeraSwitchProvider
from teraswitch.resources import ComputeInstanceResource, SshKeyModel, SshKeyResource
from teraswitch.resources.base import Resource

pytestmark = [pytest.mark.unit]


class TestProviderSession:
    async def test_default_endpoint(self):
        session = ProviderSession.from_config(ProviderConfig(api_token=TOKEN))
        assert session.endpoint == DEFAULT_ENDPOINT
        assert session.poll_interval == 1.0
        assert session.ready_timeout is None
        await session.client.close()

    async def test_trailing_slash_stripped(self):
        session = ProviderSession.from_config(
            ProviderConfig(endpoint="https://api.tsw.io/", api_token=TOKEN),
        )
        assert session.endpoint == "https://api.tsw.io"
        await session.client.close()

    def test_repr_hides_token(self):
        session = ProviderSession.from_config(ProviderConfig(api_token="super-secret"))
        assert "super-secret" not in repr(session)

    @pytest.mark.parametrize(
        ("config", "match"),
        [
            (ProviderConfig(), "api_token is required"),
            (ProviderConfig(api_token=""), "api_token is required"),
            (ProviderConfig(endpoint="ftp://api.tsw.io", api_token=TOKEN), "Invalid endpoint"),
            (ProviderConfig(endpoint="not a url", api_token=TOKEN), "Invalid endpoint"),
            (ProviderConfig(api_token=TOKEN, poll_interval=0), "poll_interval"),
            (ProviderConfig(api_token=TOKEN, ready_timeout=-1), "ready_timeout"),
        ],
    )
    def test_rejects_invalid_config(self, config: ProviderConfig, match: str):
        with pytest.raises(ConfigurationError, match=match):
            ProviderSession.from_config(config)


class TestTeraSwitchProvider:
    def test_registry(self):
        provider = TeraSwitchProvider()
        assert sorted(provider.resource_types()) == [
            "teraswitch_compute_instance",
            "teraswitch_ssh_key",
        ]
        assert provider.data_sources() == []

    def test_schema_marks_token_sensitive(self):
        schema = TeraSwitchProvider().schema()
        assert schema.sensitive == frozenset({"api_token"})
        assert schema["api_token"].required
        assert schema["endpoint"].optional

    async def test_configure_failure_is_a_diagnostic(self):
        provider = TeraSwitchProvider()
        outcome = await provider.configure(ProviderConfig())

        assert outcome.state is None
        (diag,) = outcome.diagnostics.errors()
        assert diag.summary == "Provider Configuration Error"
        assert provider.session is None

    async def test_configure(self, provider: TeraSwitchProvider, base_url: str):
        assert provider.session is not None
        assert provider.session.endpoint == base_url

    @pytest.mark.parametrize(
        ("type_name", "cls"),
        [
            ("teraswitch_compute_instance", ComputeInstanceResource),
            ("teraswitch_ssh_key", SshKeyResource),
        ],
    )
    async def test_resource_is_bound_to_session(
        self, provider: TeraSwitchProvider, type_name: str, cls: type,
    ):
        resource = provider.resource(type_name)
        assert isinstance(resource, cls)
        assert isinstance(resource, Resource)
        assert RESOURCES[type_name] is cls

    async def test_unknown_resource(self, provider: TeraSwitchProvider):
        with pytest.raises(ConfigurationError, match="No resource registered"):
            provider.resource("teraswitch_volume")

    def test_resource_before_configure(self):
        with pytest.raises(ConfigurationError, match="has not been configured"):
            TeraSwitchProvider().resource("teraswitch_ssh_key")

    async def test_close_without_session(self):
        await TeraSwitchProvider().close()

    async def test_resources_share_one_client(self, provider: TeraSwitchProvider):
        session = provider.session
        assert session is not None
        keys = provider.resource("teraswitch_ssh_key")
        servers = provider.resource("teraswitch_compute_instance")
        assert keys._client is session.client
        assert servers._client is session.client

    async def test_reconfigure_closes_previous_client(
        self, provider: TeraSwitchProvider, fake: FakeTeraSwitch, config: ProviderConfig,
    ):
        first = provider.session
        assert first is not None
        fake.add_ssh_key(9)
        await provider.resource("teraswitch_ssh_key").read(SshKeyModel(id=9))
        assert not first.client._http._session.closed

        outcome = await provider.configure(config)

        assert outcome.ok
        assert provider.session is outcome.state
        assert provider.session is not first
        assert first.client._http._session.closed

    async def test_failed_reconfigure_keeps_session(self, provider: TeraSwitchProvider):
        first = provider.session

        outcome = await provider.configure(ProviderConfig())

        assert not outcome.ok
        assert provider.session is first
        read = await provider.resource("teraswitch_ssh_key").read(SshKeyModel(id=404))
        assert read.removed

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from teraswitch.config import ProviderConfig
from teraswitch.provider import ProviderSession, TeraSwitchProvider

TOKEN = "test-token"

type Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@dataclass
class Recorded:
    method: str
    path: str
    headers: Mapping[str, str]
    body: Any


@dataclass
class FakeTeraSwitch:
    """In-memory TeraSwitch API.

    New instances report ``power_states`` in order on successive GETs, then
    keep repeating the last entry. Deleted SSH keys stay readable unless
    ``purge_on_delete`` is set, like the real backend.
    """

    power_states: list[str] = field(default_factory=lambda: ["On"])
    purge_on_delete: bool = False
    instances: dict[int, dict[str, Any]] = field(default_factory=dict)
    ssh_keys: dict[int, dict[str, Any]] = field(default_factory=dict)
    requests: list[Recorded] = field(default_factory=list)
    overrides: dict[tuple[str, str], Handler] = field(default_factory=dict)
    instance_gets: dict[int, int] = field(default_factory=dict)
    next_id: int = 100

    def override(self, method: str, path: str, handler: Handler) -> None:
        self.overrides[(method, path)] = handler

    def calls(self, method: str, path: str) -> list[Recorded]:
        return [r for r in self.requests if r.method == method and r.path == path]

    def add_instance(self, instance_id: int, **fields: Any) -> dict[str, Any]:
        instance = {
            "id": instance_id,
            "objectType": "Instance",
            "powerState": "On",
            "ipAddresses": ["203.0.113.10", "2001:db8::10"],
            "tier": {"id": "c1.small", "memory": 4, "vcpus": 2, "transfer": 1000},
            "projectId": 7,
            "serviceType": "Compute",
            "status": "Active",
            "regionId": "EWR1",
            "tierId": "c1.small",
            "imageId": "ubuntu-22.04",
            "displayName": f"server-{instance_id}",
            "region": {
                "id": "EWR1",
                "name": "Newark",
                "country": "US",
                "city": "Newark",
                "location": "NJ",
            },
            "sku": "c1.small",
            **fields,
        }
        self.instances[instance_id] = instance
        return instance

    def add_ssh_key(self, key_id: int, **fields: Any) -> dict[str, Any]:
        key = {
            "id": key_id,
            "projectId": 7,
            "displayName": f"key-{key_id}",
            "key": "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIExample user@host",
            **fields,
        }
        self.ssh_keys[key_id] = key
        return key

    # ─── Handlers ────────────────────────────────────────────────────

    def app(self) -> web.Application:
        @web.middleware
        async def record(request: web.Request, handler: Handler) -> web.StreamResponse:
            body = await request.json() if request.can_read_body else None
            self.requests.append(
                Recorded(request.method, request.path, request.headers.copy(), body)
            )
            if request.headers.get("authorization") != f"Bearer {TOKEN}":
                return web.json_response(
                    {"success": False, "message": "invalid api token"}, status=401,
                )
            if custom := self.overrides.get((request.method, request.path)):
                return await custom(request)
            return await handler(request)

        app = web.Application(middlewares=[record])
        app.router.add_get("/v2/Instance/{id}", self.get_instance)
        app.router.add_post("/v2/Instance", self.create_instance)
        app.router.add_get("/v1/SSHKey/{id}", self.get_ssh_key)
        app.router.add_post("/v1/SSHKey", self.create_ssh_key)
        app.router.add_delete("/v1/SSHKey/{id}", self.delete_ssh_key)
        return app

    def _new_id(self) -> int:
        self.next_id += 1
        return self.next_id

    async def get_instance(self, request: web.Request) -> web.Response:
        instance_id = int(request.match_info["id"])
        instance = self.instances.get(instance_id)
        if instance is None:
            return web.json_response(
                {"success": False, "message": "Instance not found"}, status=404,
            )
        n = self.instance_gets.get(instance_id, 0)
        self.instance_gets[instance_id] = n + 1
        instance["powerState"] = self.power_states[min(n, len(self.power_states) - 1)]
        return web.json_response({"result": instance})

    async def create_instance(self, request: web.Request) -> web.Response:
        body = await request.json()
        instance = self.add_instance(
            self._new_id(),
            powerState="off",
            ipAddresses=[],
            regionId=body["regionId"],
            tierId=body["tierId"],
            imageId=body["imageId"],
            displayName=body["displayName"],
        )
        return web.json_response({"success": True, "result": instance, "message": ""})

    async def get_ssh_key(self, request: web.Request) -> web.Response:
        key = self.ssh_keys.get(int(request.match_info["id"]))
        if key is None:
            return web.json_response({"success": False, "message": "SSH key not found"}, status=404)
        return web.json_response({"result": key})

    async def create_ssh_key(self, request: web.Request) -> web.Response:
        body = await request.json()
        key = self.add_ssh_key(self._new_id(), displayName=body["displayName"], key=body["key"])
        return web.json_response({"success": True, "result": key, "message": ""})

    async def delete_ssh_key(self, request: web.Request) -> web.Response:
        key_id = int(request.match_info["id"])
        if key_id not in self.ssh_keys:
            return web.json_response({"success": False, "message": "SSH key not found"})
        if self.purge_on_delete:
            del self.ssh_keys[key_id]
        return web.json_response({"success": True, "message": "deleted"})


def json_reply(payload: Any, status: int = 200) -> Handler:
    async def handler(_: web.Request) -> web.Response:
        return web.json_response(payload, status=status)

    return handler


def text_reply(text: str, status: int = 200) -> Handler:
    async def handler(_: web.Request) -> web.Response:
        return web.Response(text=text, status=status)

    return handler


@pytest.fixture
def fake() -> FakeTeraSwitch:
    return FakeTeraSwitch()


@pytest.fixture
async def server(fake: FakeTeraSwitch):
    srv = TestServer(fake.app())
    await srv.start_server()
    yield srv
    await srv.close()


@pytest.fixture
def base_url(server: TestServer) -> str:
    return f"http://{server.host}:{server.port}"


@pytest.fixture
def config(base_url: str) -> ProviderConfig:
    return ProviderConfig(endpoint=base_url, api_token=TOKEN, poll_interval=0.01)


@pytest.fixture
async def session(config: ProviderConfig):
    s = ProviderSession.from_config(config)
    yield s
    await s.client.close()


@pytest.fixture
async def provider(config: ProviderConfig):
    p = TeraSwitchProvider("test")
    outcome = await p.configure(config)
    assert outcome.ok
    yield p
    await p.close()

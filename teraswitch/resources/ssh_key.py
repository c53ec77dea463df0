"""SSH keys for TeraSwitch servers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from loguru import logger

from teraswitch.api.types import SshKey, SshKeyCreateParams
from teraswitch.core.exceptions import InvalidIdentityError, NotFoundError, TeraSwitchError

from .base import client_error, invalid_identity, parse_identity, unsupported
from .diagnostics import Outcome
from .schema import Attribute, Kind, Schema

if TYPE_CHECKING:
    from teraswitch.provider import ProviderSession

TYPE_NAME = "teraswitch_ssh_key"

SCHEMA = Schema(
    type_name=TYPE_NAME,
    description="Creates and manages SSH keys for TeraSwitch servers.",
    attributes=(
        Attribute("id", Kind.INT64, computed=True, description="The ID of the SSH key"),
        Attribute(
            "project_id", Kind.INT64, computed=True,
            description="The ID of the project the SSH key belongs to",
        ),
        Attribute(
            "ssh_key", Kind.STRING, required=True, requires_replace=True,
            description="The OpenSSH format SSH public key",
        ),
        Attribute("display_name", Kind.STRING, required=True, requires_replace=True),
    ),
)


@dataclass(frozen=True, slots=True)
class SshKeyModel:
    ssh_key: str | None = None
    display_name: str | None = None
    id: int | None = None
    project_id: int | None = None

    @classmethod
    def from_api(cls, key: SshKey) -> SshKeyModel:
        return cls(
            id=key["id"],
            project_id=key.get("projectId"),
            display_name=key.get("displayName"),
            ssh_key=key.get("key"),
        )


class SshKeyResource:
    type_name: ClassVar[str] = TYPE_NAME

    def __init__(self, session: ProviderSession) -> None:
        self._client = session.client
        self._log = logger.bind(component="resource", resource=TYPE_NAME)

    def schema(self) -> Schema:
        return SCHEMA

    async def create(
        self,
        plan: SshKeyModel,
        *,
        cancel: asyncio.Event | None = None,
    ) -> Outcome[SshKeyModel]:
        outcome: Outcome[SshKeyModel] = Outcome()
        outcome.diagnostics.extend(SCHEMA.validate(plan))
        if outcome.diagnostics.has_error():
            return outcome

        params = SshKeyCreateParams(displayName=plan.display_name or "", key=plan.ssh_key or "")
        try:
            key = await self._client.create_ssh_key(params)
        except TeraSwitchError as e:
            client_error(outcome.diagnostics, "create SSH key", e)
            return outcome

        outcome.state = SshKeyModel.from_api(key)
        self._log.bind(ssh_key_id=key["id"]).trace("created SSH key")
        return outcome

    async def read(self, state: SshKeyModel) -> Outcome[SshKeyModel]:
        outcome: Outcome[SshKeyModel] = Outcome()
        if state.id is None:
            outcome.diagnostics.add_error("Invalid State", "SSH key state has no ID")
            return outcome

        try:
            key = await self._client.get_ssh_key(state.id)
        except NotFoundError:
            self._log.bind(ssh_key_id=state.id).debug(
                "SSH key no longer exists, removing from state",
            )
            outcome.removed = True
            return outcome
        except TeraSwitchError as e:
            client_error(outcome.diagnostics, f"get SSH key {state.id}", e)
            return outcome

        outcome.state = SshKeyModel.from_api(key)
        return outcome

    async def update(self, plan: SshKeyModel, state: SshKeyModel) -> Outcome[SshKeyModel]:
        outcome = unsupported(TYPE_NAME, "update", state)
        if changed := SCHEMA.replacement_fields(state, plan):
            outcome.diagnostics.add_warning(
                "Requires Replacement",
                f"Changes to {', '.join(changed)} require replacing the SSH key",
            )
        return outcome

    async def delete(self, state: SshKeyModel) -> Outcome[SshKeyModel]:
        outcome: Outcome[SshKeyModel] = Outcome(state=state)
        if state.id is None:
            outcome.diagnostics.add_error("Invalid State", "SSH key state has no ID")
            return outcome

        try:
            await self._client.delete_ssh_key(state.id)
        except TeraSwitchError as e:
            client_error(outcome.diagnostics, f"delete SSH key {state.id}", e)
            return outcome

        outcome.state = None
        outcome.removed = True
        return outcome

    async def import_state(self, identity: str) -> Outcome[SshKeyModel]:
        try:
            key_id = parse_identity(identity)
        except InvalidIdentityError as e:
            return invalid_identity(e)

        outcome: Outcome[SshKeyModel] = Outcome()
        try:
            key = await self._client.get_ssh_key(key_id)
        except TeraSwitchError as e:
            client_error(outcome.diagnostics, f"get SSH key {key_id}", e)
            return outcome

        outcome.state = SshKeyModel.from_api(key)
        return outcome

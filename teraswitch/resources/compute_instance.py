"""TeraSwitch Cloud Compute servers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, ClassVar

from loguru import logger

from teraswitch.api.types import POWER_STATE_ON, Instance, InstanceCreateParams
from teraswitch.core.exceptions import InvalidIdentityError, TeraSwitchError
from teraswitch.wait import PollStatus, poll_until_ready

from .base import client_error, invalid_identity, parse_identity, unsupported
from .diagnostics import Outcome
from .schema import Attribute, Kind, Schema

if TYPE_CHECKING:
    from teraswitch.provider import ProviderSession

TYPE_NAME = "teraswitch_compute_instance"

SCHEMA = Schema(
    type_name=TYPE_NAME,
    description="Creates and manages TeraSwitch Cloud Compute servers.",
    attributes=(
        Attribute("id", Kind.INT64, computed=True, description="The ID of the server"),
        Attribute(
            "project_id", Kind.INT64, computed=True,
            description="The ID of the project the server belongs to",
        ),
        Attribute(
            "display_name", Kind.STRING, required=True,
            description="The display name of the server",
        ),
        Attribute(
            "region", Kind.STRING, required=True,
            description="The region the server is located in",
        ),
        Attribute("tier_id", Kind.STRING, required=True),
        Attribute("image_id", Kind.STRING, required=True),
        Attribute("tags", Kind.STRING_LIST, optional=True),
        Attribute(
            "ip_addresses", Kind.STRING_LIST, computed=True,
            description="The IP addresses assigned to the server",
        ),
        Attribute("ssh_key_ids", Kind.INT64_LIST, required=True),
        Attribute(
            "boot_size", Kind.INT64, required=True,
            description="The size of the boot volume in GB",
        ),
    ),
)


@dataclass(frozen=True, slots=True)
class ComputeInstanceModel:
    display_name: str | None = None
    region: str | None = None
    tier_id: str | None = None
    image_id: str | None = None
    ssh_key_ids: tuple[int, ...] | None = None
    boot_size: int | None = None
    tags: tuple[str, ...] | None = None
    id: int | None = None
    project_id: int | None = None
    ip_addresses: tuple[str, ...] = ()

    @classmethod
    def from_api(
        cls, instance: Instance, prior: ComputeInstanceModel | None = None,
    ) -> ComputeInstanceModel:
        """Project a remote instance onto ``prior``.

        Attributes the API does not echo back (ssh keys, boot size, tags),
        and any field missing from a partial response, keep their prior
        values.
        """
        base = prior or cls()
        return replace(
            base,
            id=instance["id"],
            project_id=instance.get("projectId", base.project_id),
            display_name=instance.get("displayName", base.display_name),
            region=instance.get("regionId", base.region),
            tier_id=instance.get("tierId", base.tier_id),
            image_id=instance.get("imageId", base.image_id),
            ip_addresses=tuple(instance.get("ipAddresses") or ()),
        )

    def to_create_params(self) -> InstanceCreateParams:
        return InstanceCreateParams(
            displayName=self.display_name or "",
            regionId=self.region or "",
            tierId=self.tier_id or "",
            imageId=self.image_id or "",
            sshKeyIds=list(self.ssh_key_ids or ()),
            bootSize=self.boot_size or 0,
            tags=list(self.tags or ()),
        )


def _powered_on(instance: Instance) -> bool:
    return instance.get("powerState") == POWER_STATE_ON


class ComputeInstanceResource:
    type_name: ClassVar[str] = TYPE_NAME

    def __init__(self, session: ProviderSession) -> None:
        self._session = session
        self._client = session.client
        self._log = logger.bind(component="resource", resource=TYPE_NAME)

    def schema(self) -> Schema:
        return SCHEMA

    async def create(
        self,
        plan: ComputeInstanceModel,
        *,
        cancel: asyncio.Event | None = None,
    ) -> Outcome[ComputeInstanceModel]:
        outcome: Outcome[ComputeInstanceModel] = Outcome()
        outcome.diagnostics.extend(SCHEMA.validate(plan))
        if outcome.diagnostics.has_error():
            return outcome

        try:
            instance = await self._client.create_instance(plan.to_create_params())
        except TeraSwitchError as e:
            client_error(outcome.diagnostics, "create instance", e)
            return outcome

        data = ComputeInstanceModel.from_api(instance, plan)
        log = self._log.bind(instance_id=data.id)
        log.trace("sent instance creation request, polling ...")

        try:
            result = await poll_until_ready(
                lambda: self._client.get_instance(instance["id"]),
                _powered_on,
                interval=self._session.poll_interval,
                timeout=self._session.ready_timeout,
                cancel=cancel,
                description=f"instance {data.id}",
            )
        except TeraSwitchError as e:
            client_error(outcome.diagnostics, f"get instance {data.id}", e)
            return outcome

        match result.status:
            case PollStatus.CANCELLED:
                log.debug("creation of instance cancelled before it reported power state on")
                outcome.cancelled = True
                return outcome
            case PollStatus.TIMED_OUT:
                outcome.diagnostics.add_error(
                    "Timeout",
                    f"Instance {data.id} did not report power state {POWER_STATE_ON} "
                    f"within {self._session.ready_timeout}s; it may still exist remotely",
                )
                return outcome
            case PollStatus.READY if result.value is not None:
                data = ComputeInstanceModel.from_api(result.value, plan)

        log.trace("instance is reporting power state on")
        outcome.state = data
        return outcome

    async def read(self, state: ComputeInstanceModel) -> Outcome[ComputeInstanceModel]:
        outcome: Outcome[ComputeInstanceModel] = Outcome()
        if state.id is None:
            outcome.diagnostics.add_error("Invalid State", "Compute instance state has no ID")
            return outcome

        try:
            instance = await self._client.get_instance(state.id)
        except TeraSwitchError as e:
            client_error(outcome.diagnostics, f"get instance {state.id}", e)
            return outcome

        outcome.state = ComputeInstanceModel.from_api(instance, state)
        return outcome

    async def update(
        self, plan: ComputeInstanceModel, state: ComputeInstanceModel,
    ) -> Outcome[ComputeInstanceModel]:
        return unsupported(TYPE_NAME, "update", state)

    async def delete(self, state: ComputeInstanceModel) -> Outcome[ComputeInstanceModel]:
        return unsupported(TYPE_NAME, "delete", state)

    async def import_state(self, identity: str) -> Outcome[ComputeInstanceModel]:
        try:
            instance_id = parse_identity(identity)
        except InvalidIdentityError as e:
            return invalid_identity(e)

        outcome: Outcome[ComputeInstanceModel] = Outcome()
        try:
            instance = await self._client.get_instance(instance_id)
        except TeraSwitchError as e:
            client_error(outcome.diagnostics, f"get compute instance {instance_id}", e)
            return outcome

        outcome.state = ComputeInstanceModel.from_api(instance)
        return outcome

"""Capability interface shared by every manageable resource type."""

from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from teraswitch.core.exceptions import (
    InvalidIdentityError,
    TeraSwitchError,
    UnsupportedError,
)

from .diagnostics import Diagnostics, Outcome
from .schema import Schema

if TYPE_CHECKING:
    from teraswitch.provider import ProviderSession

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_IDENTITY = re.compile(r"[+-]?[0-9]+")


@runtime_checkable
class Resource[M](Protocol):
    """Create, read, update, delete and import for one entity type.

    Adapters are constructed with the provider session they operate
    against. Every operation returns an ``Outcome`` and never raises for
    backend failures.
    """

    type_name: ClassVar[str]

    def __init__(self, session: ProviderSession) -> None: ...

    def schema(self) -> Schema: ...

    async def create(self, plan: M, *, cancel: asyncio.Event | None = None) -> Outcome[M]: ...

    async def read(self, state: M) -> Outcome[M]: ...

    async def update(self, plan: M, state: M) -> Outcome[M]: ...

    async def delete(self, state: M) -> Outcome[M]: ...

    async def import_state(self, identity: str) -> Outcome[M]: ...


def parse_identity(raw: str) -> int:
    """Parse an externally supplied identity as a base-10 64-bit integer."""
    if not _IDENTITY.fullmatch(raw):
        raise InvalidIdentityError(raw)
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidIdentityError(raw)
    return value


def client_error(
    diagnostics: Diagnostics, action: str, error: TeraSwitchError,
) -> None:
    """Record a failed API call, e.g. ``action="create SSH key"``."""
    diagnostics.add_error("Client Error", f"Unable to {action}, got error: {error}", error)


def unsupported[M](resource_type: str, operation: str, state: M | None = None) -> Outcome[M]:
    error = UnsupportedError(resource_type, operation)
    outcome: Outcome[M] = Outcome(state=state)
    outcome.diagnostics.add_error(
        "Provider Error",
        f"Sorry, support for {operation} on {resource_type} is not yet implemented",
        error,
    )
    return outcome


def invalid_identity[M](error: InvalidIdentityError) -> Outcome[M]:
    outcome: Outcome[M] = Outcome()
    outcome.diagnostics.add_error("Invalid ID", str(error), error)
    return outcome

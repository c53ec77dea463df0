"""TeraSwitch API response types.

TypedDicts for API responses - no conversion needed.
"""

from __future__ import annotations

from typing import NotRequired, TypedDict

# =============================================================================
# Constants
# =============================================================================

POWER_STATE_ON = "On"
POWER_STATE_OFF = "off"

# =============================================================================
# Response Types
# =============================================================================


class InstanceTier(TypedDict):
    """Hardware tier embedded in an instance response."""

    id: str
    memory: int
    vcpus: int
    transfer: int


class Region(TypedDict):
    """Region embedded in an instance response."""

    id: str
    name: str
    country: str
    city: str
    location: str


class Instance(TypedDict):
    """Compute instance from the TeraSwitch API."""

    id: int
    objectType: NotRequired[str]
    powerState: NotRequired[str]  # On, off
    ipAddresses: NotRequired[list[str] | None]
    tier: NotRequired[InstanceTier]
    projectId: NotRequired[int]
    serviceType: NotRequired[str]
    status: NotRequired[str]
    regionId: NotRequired[str]
    tierId: NotRequired[str]
    imageId: NotRequired[str]
    displayName: NotRequired[str]
    region: NotRequired[Region]
    sku: NotRequired[str]


class SshKey(TypedDict):
    """SSH public key from the TeraSwitch API."""

    id: int
    projectId: NotRequired[int]
    displayName: NotRequired[str]
    key: NotRequired[str]


class Status(TypedDict, total=False):
    """Status envelope returned by write endpoints and error responses."""

    success: bool
    message: str


class InstanceEnvelope(Status, total=False):
    result: Instance | None


class SshKeyEnvelope(Status, total=False):
    result: SshKey | None


# =============================================================================
# Request Types
# =============================================================================


class InstanceCreateParams(TypedDict):
    """Body of ``POST /v2/Instance``."""

    displayName: str
    regionId: str
    tierId: str
    imageId: str
    sshKeyIds: NotRequired[list[int]]
    bootSize: NotRequired[int]
    tags: NotRequired[list[str]]


class SshKeyCreateParams(TypedDict):
    """Body of ``POST /v1/SSHKey``."""

    displayName: str
    key: str

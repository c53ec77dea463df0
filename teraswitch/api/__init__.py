"""TeraSwitch REST API client."""

from .client import DEFAULT_ENDPOINT, TeraSwitchClient
from .types import (
    POWER_STATE_OFF,
    POWER_STATE_ON,
    Instance,
    InstanceCreateParams,
    SshKey,
    SshKeyCreateParams,
)

__all__ = [
    "DEFAULT_ENDPOINT",
    "POWER_STATE_OFF",
    "POWER_STATE_ON",
    "Instance",
    "InstanceCreateParams",
    "SshKey",
    "SshKeyCreateParams",
    "TeraSwitchClient",
]

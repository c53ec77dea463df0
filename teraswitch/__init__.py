"""TeraSwitch provider - manage TeraSwitch servers and SSH keys declaratively.

Example:

    from teraswitch import ProviderConfig, SshKeyModel, TeraSwitchProvider

    provider = TeraSwitchProvider()
    await provider.configure(ProviderConfig(api_token="..."))

    keys = provider.resource("teraswitch_ssh_key")
    outcome = await keys.create(SshKeyModel(display_name="ci", ssh_key="ssh-ed25519 AAAA..."))
    if outcome.ok:
        print(outcome.state.id)
"""

from loguru import logger

from teraswitch.api import TeraSwitchClient
from teraswitch.config import ProviderConfig, resolve_provider_config
from teraswitch.core.exceptions import (
    ConfigurationError,
    InvalidIdentityError,
    NotFoundError,
    RemoteError,
    TeraSwitchError,
    TransportError,
    UnsupportedError,
)
from teraswitch.provider import RESOURCES, ProviderSession, TeraSwitchProvider
from teraswitch.resources import (
    ComputeInstanceModel,
    ComputeInstanceResource,
    Diagnostic,
    Diagnostics,
    Outcome,
    Severity,
    SshKeyModel,
    SshKeyResource,
)
from teraswitch.wait import PollResult, PollStatus, poll_until_ready

__version__ = "0.1.0"

# Library default: silent until the host calls observability.setup_logging.
logger.disable("teraswitch")

__all__ = [
    "RESOURCES",
    "ComputeInstanceModel",
    "ComputeInstanceResource",
    "ConfigurationError",
    "Diagnostic",
    "Diagnostics",
    "InvalidIdentityError",
    "NotFoundError",
    "Outcome",
    "PollResult",
    "PollStatus",
    "ProviderConfig",
    "ProviderSession",
    "RemoteError",
    "Severity",
    "SshKeyModel",
    "SshKeyResource",
    "TeraSwitchClient",
    "TeraSwitchError",
    "TeraSwitchProvider",
    "TransportError",
    "UnsupportedError",
    "__version__",
    "poll_until_ready",
    "resolve_provider_config",
]

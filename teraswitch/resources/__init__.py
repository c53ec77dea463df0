"""Resource adapters and the types they exchange with the orchestrator."""

from .base import Resource, parse_identity
from .compute_instance import ComputeInstanceModel, ComputeInstanceResource
from .diagnostics import Diagnostic, Diagnostics, Outcome, Severity
from .schema import Attribute, Kind, Schema
from .ssh_key import SshKeyModel, SshKeyResource

__all__ = [
    "Attribute",
    "ComputeInstanceModel",
    "ComputeInstanceResource",
    "Diagnostic",
    "Diagnostics",
    "Kind",
    "Outcome",
    "Resource",
    "Schema",
    "Severity",
    "SshKeyModel",
    "SshKeyResource",
    "parse_identity",
]

"""CI provisioning: workflow generation and the fork/publish flow."""

from .provisioner import CIProvisioner, ProvisioningError, ProvisioningResult
from .workflow import render_workflow, write_workflow

__all__ = [
    "CIProvisioner",
    "ProvisioningError",
    "ProvisioningResult",
    "render_workflow",
    "write_workflow",
]

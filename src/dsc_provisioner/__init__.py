"""
DSC provisioner configuration

Collects the settings of a PowerShell DSC provisioner, fills in defaults and
checks the referenced manifests and modules before a provisioning run.
"""

from .constants import ERROR_NAMESPACE, AppInfo
from .counter import get_and_update_counter
from .definition import Definition, load_definition
from .errors import ConfigError, DefinitionError, DSCError
from .machine import Environment, HostFileSystem, Machine
from .provisioner_config import UNSET, ProvisionerConfig

__version__ = AppInfo.version

__all__ = [
    "ERROR_NAMESPACE",
    "UNSET",
    "ProvisionerConfig",
    "Environment",
    "HostFileSystem",
    "Machine",
    "Definition",
    "load_definition",
    "get_and_update_counter",
    "DSCError",
    "ConfigError",
    "DefinitionError",
]

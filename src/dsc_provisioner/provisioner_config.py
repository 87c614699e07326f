"""
DSC Provisioner Configuration

This module holds the configuration of a single DSC provisioner declaration:
the manifests and modules to ship to the guest, the parameters handed to the
DSC Configuration and the working directory used on the guest.

The provisioning engine drives the lifecycle:
    config = ProvisionerConfig(configuration_file="manifests/site.ps1")
    config.finalize()
    errors = config.validate(machine)
"""

import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from .constants import ERROR_NAMESPACE, Defaults, ErrorKeys
from .counter import get_and_update_counter
from .errors import ConfigError, render_message
from .machine import HostFileSystem
from .utils import dirname, expand_guest_path, expand_host_path, strip_extension


class _Unset:
    """Marker for an option the user never assigned."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNSET = _Unset()


class ProvisionerConfig:
    """How the DSC provisioner should behave for one machine.

    Attributes:
        configuration_params: Parameters passed to the DSC Configuration.
        mof_path: Folder holding a pre-generated MOF file, relative to the root path.
        configuration_file: DSC Configuration file, relative to the root path.
        configuration_data_file: Configuration data parameterising configuration_file.
        manifests_path: Folder containing the root Configuration manifest file.
        configuration_name: Name of the Configuration, defaults to the basename
            of configuration_file ("Foo.ps1" becomes "Foo").
        module_path: One path or a list of paths to local module folders.
        synced_folder_type: Synced folder type used to share the data, None for
            the engine default.
        temp_dir: Working directory on the guest.
        module_install: Modules to install on the guest.
        abort_on_dsc_failure: Stop provisioning when the DSC run fails.
        expanded_configuration_file: Guest path of the configuration file, set by
            validate(). Do not override this.
        expanded_configuration_data_file: Guest path of the configuration data
            file, set by validate(). Do not override this.
    """

    # Options a user may assign, in the order they are finalized
    OPTIONS = (
        "configuration_file",
        "configuration_data_file",
        "module_path",
        "synced_folder_type",
        "temp_dir",
        "module_install",
        "mof_path",
        "configuration_name",
        "manifests_path",
        "abort_on_dsc_failure",
        "configuration_params",
    )

    # Options holding a single path or name, None clears them
    STRING_OPTIONS = (
        "configuration_file",
        "configuration_data_file",
        "synced_folder_type",
        "temp_dir",
        "mof_path",
        "configuration_name",
        "manifests_path",
    )

    def __init__(self, **options):
        self.configuration_file = UNSET
        self.configuration_data_file = UNSET
        self.manifests_path = UNSET
        self.configuration_name = UNSET
        self.mof_path = UNSET
        self.module_path = UNSET
        self.configuration_params: Dict[str, Any] = {}
        self.synced_folder_type = UNSET
        self.temp_dir = UNSET
        self.module_install = UNSET
        self.abort_on_dsc_failure = UNSET
        self.expanded_configuration_file: Optional[str] = None
        self.expanded_configuration_data_file: Optional[str] = None
        self._logger = logging.getLogger(__name__)

        self.set_options(options)

    def set_options(self, options: Dict[str, Any]) -> None:
        """Assign user options by name.

        Raises:
            ConfigError: If an option name is not known or its value has the
                wrong type.
        """
        for name, value in options.items():
            if name not in self.OPTIONS:
                raise ConfigError(ErrorKeys.UNKNOWN_OPTION, option=name)
            _check_option(name, value)
            if name == "configuration_params":
                value = dict(value or {})
            setattr(self, name, value)

    def finalize(self) -> None:
        """
        Final step of the configuration lifecycle prior to validation.

        Replaces every unset option with its default. Calling it again on a
        finalized config changes nothing.

        Raises:
            ConfigError: If both a configuration file and a MOF path are set.
        """
        if self.configuration_file is UNSET:
            self.configuration_file = Defaults.CONFIGURATION_FILE
        if self.configuration_data_file is UNSET:
            self.configuration_data_file = None
        if self.module_path is UNSET:
            self.module_path = None
        if self.synced_folder_type is UNSET:
            self.synced_folder_type = None
        if self.temp_dir is UNSET:
            self.temp_dir = None
        if self.module_install is UNSET:
            self.module_install = None
        if self.mof_path is UNSET:
            self.mof_path = None
        if self.configuration_name is UNSET:
            self.configuration_name = (
                strip_extension(self.configuration_file) if self.configuration_file else None
            )
        if self.manifests_path is UNSET:
            self.manifests_path = dirname(self.configuration_file) if self.configuration_file else None
        if self.abort_on_dsc_failure is UNSET:
            self.abort_on_dsc_failure = False

        # Can't supply them both!
        if self.configuration_file is not None and self.mof_path is not None:
            raise ConfigError(ErrorKeys.MANIFEST_AND_MOF_PROVIDED)

        # Numbered so several dsc provisioners don't overwrite each other
        if not self.temp_dir:
            counter = get_and_update_counter(Defaults.COUNTER_NAME)
            self.temp_dir = f"{Defaults.TEMP_DIR_PREFIX}{counter}"

        self._logger.debug(
            f"Finalized DSC config {self.configuration_name} (temp_dir={self.temp_dir})"
        )

    def expanded_module_paths(self, root_path: str) -> List[str]:
        """Returns the module paths expanded relative to root_path.

        Args:
            root_path: Directory the module paths are relative to.

        Returns:
            List of absolute paths to the module directories.
        """
        if not self.module_path:
            return []

        paths = self.module_path
        if not isinstance(paths, (list, tuple)):
            paths = [paths]
        return [expand_host_path(path, root_path) for path in paths]

    def validate(self, machine) -> Dict[str, List[str]]:
        """
        Validate the configuration against the host filesystem.

        Does not check that DSC itself is properly configured, that happens
        at run-time. Every check runs even when an earlier one failed.

        Args:
            machine: Object exposing env.root_path, and optionally env.fs
                (a HostFileSystem).

        Returns:
            A mapping of "dsc provisioner" to the list of error messages,
            empty when the configuration is valid.
        """
        self._logger.info("==> Configuring DSC")
        errors: List[str] = []
        root_path = machine.env.root_path
        fs = getattr(machine.env, "fs", None) or HostFileSystem()

        for path in self.expanded_module_paths(root_path):
            if not fs.is_dir(path):
                errors.append(render_message(ErrorKeys.MODULE_PATH_MISSING, path=path))

        host_manifest_path = root_path
        if self.manifests_path is not None:
            host_manifest_path = expand_host_path(self.manifests_path, root_path)
            if not fs.is_dir(host_manifest_path):
                errors.append(
                    render_message(ErrorKeys.MANIFESTS_PATH_MISSING, path=host_manifest_path)
                )

        # A MOF-only provisioner has no configuration file to ship
        if self.configuration_file is not None:
            configuration_basename = os.path.basename(self.configuration_file)
            host_configuration_file = expand_host_path(configuration_basename, host_manifest_path)
            if not fs.exists(host_configuration_file):
                errors.append(
                    render_message(ErrorKeys.MANIFEST_MISSING, manifest=host_configuration_file)
                )

            self.expanded_configuration_file = self._guest_path(self.configuration_file)

        if self.configuration_data_file is not None:
            host_data_dir = expand_host_path(dirname(self.configuration_data_file), root_path)
            host_data_file = expand_host_path(
                os.path.basename(self.configuration_data_file), host_data_dir
            )
            if not fs.exists(host_data_file):
                errors.append(
                    render_message(ErrorKeys.CONFIGURATION_DATA_MISSING, path=host_data_file)
                )

            self.expanded_configuration_data_file = self._guest_path(
                self.configuration_data_file
            )

        for error in errors:
            self._logger.warning(error)

        return {ERROR_NAMESPACE: errors}

    def _guest_path(self, path: str) -> str:
        """Absolute location of a root-relative file once staged under temp_dir."""
        guest_dir = expand_guest_path(dirname(path), self.temp_dir)
        return f"{guest_dir.rstrip('/')}/{os.path.basename(path)}"

    def merge(self, other: "ProvisionerConfig") -> "ProvisionerConfig":
        """
        Layer another config over this one.

        Options set on other win, unset ones fall back to this config.
        configuration_params are merged key by key.

        Returns:
            A new, unfinalized ProvisionerConfig.
        """
        merged = ProvisionerConfig()
        for name in self.OPTIONS:
            if name == "configuration_params":
                continue
            value = getattr(other, name)
            if value is UNSET:
                value = getattr(self, name)
            setattr(merged, name, value)
        merged.configuration_params = {**self.configuration_params, **other.configuration_params}
        return merged

    def to_dict(self) -> Dict[str, Any]:
        """Option values and expanded paths, keyed by attribute name."""
        data = {name: getattr(self, name) for name in self.OPTIONS}
        data["configuration_params"] = dict(self.configuration_params)
        data["expanded_configuration_file"] = self.expanded_configuration_file
        data["expanded_configuration_data_file"] = self.expanded_configuration_data_file
        return data

    def __repr__(self) -> str:
        return (
            f"ProvisionerConfig(configuration_file={self.configuration_file!r}, "
            f"temp_dir={self.temp_dir!r})"
        )

def _check_option(name: str, value: Any) -> None:
    """Raise ConfigError when a value cannot be used for the named option."""
    if name in ProvisionerConfig.STRING_OPTIONS:
        valid = value is None or isinstance(value, str)
        expected = "a string"
    elif name == "module_path":
        valid = value is None or isinstance(value, str) or (
            isinstance(value, (list, tuple)) and all(isinstance(path, str) for path in value)
        )
        expected = "a string or a list of strings"
    elif name == "configuration_params":
        valid = value is None or isinstance(value, Mapping)
        expected = "a mapping"
    elif name == "abort_on_dsc_failure":
        valid = isinstance(value, bool)
        expected = "true or false"
    else:
        return

    if not valid:
        raise ConfigError(ErrorKeys.INVALID_OPTION, option=name, expected=expected, actual=value)

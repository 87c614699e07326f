"""
Machine definitions

Loads a YAML file declaring machines and their provisioners, and turns every
dsc provisioner into a finalized ProvisionerConfig.

Example:
    root_path: .
    defaults:
      dsc:
        module_path: modules
    machines:
      - name: web
        provision:
          - type: dsc
            configuration_file: manifests/site.ps1
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .constants import Defaults
from .errors import DefinitionError
from .machine import Environment, HostFileSystem, Machine
from .provisioner_config import ProvisionerConfig
from .utils import log_function_call


@dataclass
class ProvisionerEntry:
    """A dsc provisioner attached to a machine."""

    machine: Machine
    index: int
    config: ProvisionerConfig

    @property
    def label(self) -> str:
        return f"{self.machine.name}/{self.index}"


@dataclass
class Definition:
    """Machines and dsc provisioners read from a definition file."""

    path: Path
    env: Environment
    machines: List[Machine] = field(default_factory=list)
    provisioners: List[ProvisionerEntry] = field(default_factory=list)

    def validate_all(self) -> Dict[str, List[str]]:
        """Validate every provisioner, keyed by "<machine>/<index>"."""
        results = {}
        for entry in self.provisioners:
            errors = entry.config.validate(entry.machine)
            results[entry.label] = [msg for messages in errors.values() for msg in messages]
        return results


@log_function_call
def load_definition(
    path: Union[str, Path],
    base_defaults: Optional[Dict[str, Any]] = None,
    fs: Optional[HostFileSystem] = None,
) -> Definition:
    """
    Load a machine definition file and finalize its dsc provisioners.

    Args:
        path: YAML definition file
        base_defaults: Provisioner settings applied under the file's own defaults
        fs: Host filesystem used for validation

    Returns:
        Definition: The parsed definition

    Raises:
        DefinitionError: If the file cannot be read or is malformed
        ConfigError: If a provisioner declaration is invalid
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except OSError as e:
        raise DefinitionError(path, e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise DefinitionError(path, f"YAML parse error: {e}") from e

    return parse_definition(document, path, base_defaults=base_defaults, fs=fs)


def parse_definition(
    document: Any,
    path: Union[str, Path],
    base_defaults: Optional[Dict[str, Any]] = None,
    fs: Optional[HostFileSystem] = None,
) -> Definition:
    """Build a Definition from an already parsed YAML document."""
    path = Path(path)
    if not isinstance(document, dict):
        raise DefinitionError(path, "top level must be a mapping")

    root_path = document.get("root_path") or "."
    root_path = os.path.normpath(os.path.join(path.parent.resolve(), os.path.expanduser(str(root_path))))
    env = Environment(root_path=root_path, fs=fs or HostFileSystem())
    definition = Definition(path=path, env=env)

    defaults = _new_config(base_defaults or {})
    shared = document.get("defaults") or {}
    if not isinstance(shared, dict):
        raise DefinitionError(path, "defaults must be a mapping")
    file_defaults = shared.get(Defaults.PROVISIONER_TYPE)
    if file_defaults:
        if not isinstance(file_defaults, dict):
            raise DefinitionError(path, "defaults.dsc must be a mapping")
        defaults = defaults.merge(_new_config(file_defaults))

    machines = document.get("machines") or []
    if not isinstance(machines, list):
        raise DefinitionError(path, "machines must be a list")

    for position, machine_doc in enumerate(machines):
        if not isinstance(machine_doc, dict) or not machine_doc.get("name"):
            raise DefinitionError(path, f"machine #{position} has no name")
        machine = Machine(name=str(machine_doc["name"]), env=env)
        definition.machines.append(machine)

        for index, provisioner_doc in enumerate(machine_doc.get("provision") or []):
            if not isinstance(provisioner_doc, dict):
                raise DefinitionError(path, f"provisioner {machine.name}/{index} must be a mapping")
            options = dict(provisioner_doc)
            provisioner_type = options.pop("type", None)
            if provisioner_type != Defaults.PROVISIONER_TYPE:
                logging.debug(f"Skipping {provisioner_type} provisioner {machine.name}/{index}")
                continue

            config = defaults.merge(_new_config(options))
            config.finalize()
            definition.provisioners.append(ProvisionerEntry(machine, index, config))

    logging.info(
        f"Loaded {len(definition.provisioners)} dsc provisioner(s) "
        f"for {len(definition.machines)} machine(s) from {path}"
    )
    return definition


def _new_config(options: Dict[Any, Any]) -> ProvisionerConfig:
    """Build a config from YAML options, whose keys are not guaranteed to be strings."""
    config = ProvisionerConfig()
    config.set_options(options)
    return config

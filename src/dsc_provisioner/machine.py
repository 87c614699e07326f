"""
Machine context handed to provisioner configurations during validation.

The provisioning engine owns the real machine objects; these dataclasses carry
only what validation needs: the environment root and a way to query the host
filesystem.
"""

import os
from dataclasses import dataclass, field
from typing import Union


class HostFileSystem:
    """Answers existence queries about paths on the host."""

    def is_file(self, path: Union[str, os.PathLike]) -> bool:
        return os.path.isfile(path)

    def is_dir(self, path: Union[str, os.PathLike]) -> bool:
        return os.path.isdir(path)

    def exists(self, path: Union[str, os.PathLike]) -> bool:
        """True if the path is either a regular file or a directory."""
        return self.is_file(path) or self.is_dir(path)


@dataclass
class Environment:
    """The environment a machine is defined in."""

    root_path: str
    fs: HostFileSystem = field(default_factory=HostFileSystem)

    def __post_init__(self):
        self.root_path = os.fspath(self.root_path)


@dataclass
class Machine:
    """A single machine declared in a definition."""

    name: str
    env: Environment

    def __str__(self) -> str:
        return self.name

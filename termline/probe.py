"""
Environment probe: the process environment as seen by help presentation.

The pager chain needs three things from the host system: an environment
variable ($PAGER), executable discovery and running a shell command. They
are grouped behind EnvironmentProbe so presentation can be exercised with a
fake in tests.
"""
import os
import shutil
import subprocess
from typing import Protocol, runtime_checkable


@runtime_checkable
class EnvironmentProbe(Protocol):
    def getenv(self, name, /):
        """value of the environment variable name, or None."""

    def which(self, name, /):
        """full path of the executable name, or None when not found."""

    def system(self, command, /):
        """run command through the shell and return its exit status."""


class SystemProbe:
    """
    EnvironmentProbe backed by the running process.
    """

    def getenv(self, name, /):
        return os.environ.get(name)

    def which(self, name, /):
        return shutil.which(name)

    def system(self, command, /):
        return subprocess.run(command, shell=True).returncode


__all__ = (
    "EnvironmentProbe",
    "SystemProbe",
)

"""Gateway to systemd's image management daemon."""

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from ..errors import DaemonError


logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of a daemon call."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class DaemonGateway(ABC):
    """Operations offered by the image management daemon."""

    @abstractmethod
    def show_image(self, name: str) -> CommandResult:
        """Describe a registered image; fails when it is not registered."""

    @abstractmethod
    def pull(self, kind: str, url: str, name: str) -> CommandResult:
        """Download, verify and register an image."""

    @abstractmethod
    def import_unverified(self, kind: str, path: str, name: str) -> CommandResult:
        """Register a local image file without verification."""

    @abstractmethod
    def set_read_only(self, name: str, read_only: bool) -> CommandResult:
        """Set the read-only flag of a registered image."""


class MachinectlGateway(DaemonGateway):
    """DaemonGateway backed by the machinectl command."""

    def __init__(self, binary: str = "machinectl"):
        self.binary = binary

    def show_image(self, name: str) -> CommandResult:
        return self._run(["show-image", name])

    def pull(self, kind: str, url: str, name: str) -> CommandResult:
        return self._run([f"pull-{kind}", "--verify=signature", url, name])

    def import_unverified(self, kind: str, path: str, name: str) -> CommandResult:
        return self._run([f"import-{kind}", path, name])

    def set_read_only(self, name: str, read_only: bool) -> CommandResult:
        return self._run(["read-only", name, "true" if read_only else "false"])

    def _run(self, args: List[str]) -> CommandResult:
        command = [self.binary] + args
        logger.debug(f"Running {' '.join(command)}")
        try:
            proc = subprocess.run(
                command,
                capture_output=True,
                text=True
            )
        except FileNotFoundError:
            raise DaemonError(f"{self.binary} not found, is systemd-container installed?")

        result = CommandResult(proc.returncode, proc.stdout, proc.stderr)
        if not result.ok:
            logger.debug(f"{' '.join(command)} exited with {proc.returncode}: {proc.stderr.strip()}")
        return result

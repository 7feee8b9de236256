"""Verification keyring setup."""

import logging
import os
import subprocess
import tempfile
from enum import Enum
from typing import Callable, Optional

from ..config.settings import Config, KEYRING_PATH
from ..errors import KeyringDeclined, KeyringError
from ..storage.catalog import CatalogClient
from ..utils.privilege import is_privileged, require_privilege


logger = logging.getLogger(__name__)


class KeyringDecision(Enum):
    """Answer given to the keyring setup question."""
    ACCEPTED = "accepted"
    DECLINED = "declined"
    UNRECOGNIZED = "unrecognized"


def decide(answer: Optional[str]) -> KeyringDecision:
    """Map a yes/no answer to a KeyringDecision."""
    normalized = (answer or "").strip().lower()
    if normalized in ("y", "yes"):
        return KeyringDecision.ACCEPTED
    if normalized in ("n", "no"):
        return KeyringDecision.DECLINED
    return KeyringDecision.UNRECOGNIZED


def ask_user(question: str) -> str:
    """Read an answer from the terminal, empty when stdin is closed."""
    try:
        return input(question)
    except EOFError:
        print()
        return ""


class KeyringManager:
    """Makes sure the keyring used for signature verification exists."""

    def __init__(self, config: Config, catalog: CatalogClient,
                 ask: Callable[[str], str] = ask_user,
                 privileged: Callable[[], bool] = is_privileged,
                 gpg_binary: str = "gpg",
                 keyring_path: Optional[str] = None):
        self.config = config
        self.catalog = catalog
        self.ask = ask
        self.privileged = privileged
        self.gpg_binary = gpg_binary
        self.keyring_path = keyring_path or KEYRING_PATH

    def keyring_exists(self) -> bool:
        return os.path.exists(self.keyring_path)

    def ensure_keyring(self):
        """Create the keyring from the catalog master key unless it exists."""
        if self.keyring_exists():
            logger.debug(f"Keyring {self.keyring_path} already present")
            return

        answer = self.ask(
            f"No keyring found at {self.keyring_path}. "
            f"Import the master key from {self.config.key_url}? [y/n] "
        )
        decision = decide(answer)
        if decision is KeyringDecision.DECLINED:
            raise KeyringDeclined("Keyring setup declined, images cannot be verified")
        if decision is KeyringDecision.UNRECOGNIZED:
            raise KeyringDeclined(f"Unrecognized answer {answer!r}, expected y or n")

        require_privilege(f"Importing the master key into {self.keyring_path}", self.privileged)
        self._import_master_key()

    def _import_master_key(self):
        fd, key_path = tempfile.mkstemp(prefix="nspawn-masterkey.", suffix=".pgp")
        os.close(fd)
        try:
            self.catalog.fetch_key(self.config.key_url, key_path)
            proc = subprocess.run(
                [
                    self.gpg_binary,
                    "--no-default-keyring",
                    f"--keyring={self.keyring_path}",
                    "--import",
                    key_path
                ],
                capture_output=True,
                text=True
            )
        except FileNotFoundError:
            raise KeyringError(f"{self.gpg_binary} not found, cannot create {self.keyring_path}")
        finally:
            os.remove(key_path)

        if proc.returncode != 0:
            logger.debug(f"gpg import failed: {proc.stderr.strip()}")
            raise KeyringError(f"Could not import the master key into {self.keyring_path}")

        logger.info(f"Imported master key into {self.keyring_path}")
        print(f"Keyring created at {self.keyring_path}")

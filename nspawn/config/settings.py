"""Configuration management for nspawn."""

import os
import yaml
from typing import Dict, Any, Optional

from ..models.image import ImageSpec, RemoteImageLocation


DEFAULT_BASE_URL = "https://hub.nspawn.org/storage"
# systemd-importd only verifies against this keyring
KEYRING_PATH = "/etc/systemd/import-pubring.gpg"


class Config:
    """Configuration manager for nspawn.

    Values come from the environment first, then from an optional YAML file
    named by ``NSPAWN_CONFIG``, then from built-in defaults.
    """

    def __init__(self):
        self.config_path = os.environ.get('NSPAWN_CONFIG')
        self._file_config = None

        file_config = self.file_config
        self.base_url = (
            os.environ.get('NSPAWN_BASEURL')
            or file_config.get('base_url')
            or DEFAULT_BASE_URL
        ).rstrip('/')
        self.request_timeout = self._parse_timeout(file_config.get('request_timeout'))

    @property
    def file_config(self) -> Dict[str, Any]:
        """Load and cache the optional YAML configuration file."""
        if self._file_config is None:
            if not self.config_path:
                self._file_config = {}
                return self._file_config

            if not os.path.exists(self.config_path):
                raise FileNotFoundError(f"nspawn config file not found: {self.config_path}")

            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f)

            if loaded is None:
                loaded = {}
            if not isinstance(loaded, dict):
                raise ValueError(f"nspawn config file must contain a mapping: {self.config_path}")
            self._file_config = loaded

        return self._file_config

    @staticmethod
    def _parse_timeout(value: Any) -> Optional[float]:
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid request_timeout in nspawn config: {value!r}")

    @property
    def list_url(self) -> str:
        """URL of the catalog listing."""
        return f"{self.base_url}/list.txt"

    @property
    def key_url(self) -> str:
        """URL of the catalog master key."""
        return f"{self.base_url}/masterkey.pgp"

    def image_location(self, spec: ImageSpec) -> RemoteImageLocation:
        """Remote location of the image described by ``spec``."""
        return RemoteImageLocation.for_spec(spec, self.base_url)

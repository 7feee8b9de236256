"""Image acquisition: fetch, verify and register an image with the daemon."""

import logging
import os
import tempfile
from typing import Callable, Optional

from ..config.settings import Config
from ..errors import ImageNotFound, ImportFailed
from ..models.image import AcquisitionReport, ImageSpec, VerificationMode
from ..storage.catalog import CatalogClient
from ..storage.machinectl import DaemonGateway, MachinectlGateway
from ..utils.privilege import is_privileged, require_privilege
from .keyring import KeyringManager


logger = logging.getLogger(__name__)


class AcquireOperation:
    """Handles fetching an image from the catalog into the local registry."""

    def __init__(self, config: Config,
                 catalog: Optional[CatalogClient] = None,
                 gateway: Optional[DaemonGateway] = None,
                 keyring: Optional[KeyringManager] = None,
                 privileged: Callable[[], bool] = is_privileged):
        self.config = config
        self.catalog = catalog or CatalogClient(timeout=config.request_timeout)
        self.gateway = gateway or MachinectlGateway()
        self.keyring = keyring or KeyringManager(config, self.catalog, privileged=privileged)
        self.privileged = privileged

    def acquire(self, spec: ImageSpec, mode: VerificationMode) -> AcquisitionReport:
        """Register the image described by ``spec`` with the daemon."""
        logger.info(f"Acquiring {spec} ({mode.value})")

        if mode is VerificationMode.VERIFIED:
            self.keyring.ensure_keyring()

        location = self.config.image_location(spec)
        local_name = spec.local_name

        status = self.catalog.check_exists(location.url)
        if status != location.expected_status:
            raise ImageNotFound(status, local_name)

        existing = self.gateway.show_image(local_name)
        if existing.ok:
            logger.info(f"{local_name} is already registered")
            return AcquisitionReport(
                local_name=local_name,
                already_existed=True,
                details=existing.stdout.strip()
            )

        require_privilege(f"Pulling the image via {spec.kind}", self.privileged)

        if mode is VerificationMode.VERIFIED:
            result = self.gateway.pull(spec.kind, location.url, local_name)
        else:
            result = self._import_unverified(spec, location.url, local_name)

        if not result.ok:
            raise ImportFailed(local_name)

        read_only = self.gateway.set_read_only(local_name, False)
        if not read_only.ok:
            logger.debug(f"Could not clear read-only flag of {local_name}")

        details = self.gateway.show_image(local_name)
        return AcquisitionReport(
            local_name=local_name,
            read_only_cleared=read_only.ok,
            details=details.stdout.strip() if details.ok else None
        )

    def _import_unverified(self, spec: ImageSpec, url: str, local_name: str):
        fd, image_path = tempfile.mkstemp(
            prefix=f"nspawn-{local_name}.", suffix=f".{spec.kind}.xz"
        )
        os.close(fd)
        try:
            self.catalog.download(url, image_path)
            return self.gateway.import_unverified(spec.kind, image_path, local_name)
        finally:
            os.remove(image_path)

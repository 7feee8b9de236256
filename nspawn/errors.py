"""Exceptions raised by nspawn operations."""


class NspawnError(Exception):
    """Base class for errors that end an invocation."""

    exit_code = 1


class CatalogError(NspawnError):
    """Network failure while talking to the image catalog."""


class DaemonError(NspawnError):
    """The image management daemon could not be reached."""


class PrivilegeRequired(NspawnError):
    """An action needs root privileges the caller does not have."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(
            f"{action} requires root privileges, please re-run nspawn as root"
        )


class KeyringDeclined(NspawnError):
    """The user did not agree to create the verification keyring."""

    exit_code = 2


class KeyringError(NspawnError):
    """Importing the master key into the keyring failed."""


class ImageNotFound(NspawnError):
    """The requested image does not exist in the catalog."""

    def __init__(self, status: int, local_name: str):
        self.status = status
        self.local_name = local_name
        super().__init__(
            f"Image {local_name} not found in the catalog (HTTP {status}), "
            f"see 'nspawn --list' for available images"
        )


class ImportFailed(NspawnError):
    """The daemon failed to import the image."""

    def __init__(self, local_name: str):
        self.local_name = local_name
        super().__init__(f"Failed to import image {local_name}")

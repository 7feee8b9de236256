"""Root privilege checks."""

import os
from typing import Callable

from ..errors import PrivilegeRequired


def is_privileged() -> bool:
    """Whether the current process runs as root."""
    return os.geteuid() == 0


def require_privilege(action: str, check: Callable[[], bool] = is_privileged):
    """Raise PrivilegeRequired naming ``action`` unless ``check()`` holds."""
    if not check():
        raise PrivilegeRequired(action)

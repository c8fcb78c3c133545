from __future__ import annotations

import os
import sys
from typing import Callable

from winsetup.core import PrivilegeError


def is_admin() -> bool:
    if sys.platform == "win32":
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except OSError:
            return False
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def require_admin(check: Callable[[], bool] = is_admin) -> None:
    """Raise PrivilegeError unless the process runs elevated. Runs before any step."""
    if not check():
        raise PrivilegeError(
            "This command must be run as administrator "
            "(right-click the terminal and choose 'Run as administrator')."
        )

"""
Thin wrappers around the external tools the steps drive.

Each backend only issues commands; deciding whether to issue them is the
step's job.
"""

from winsetup.backends.clipboard import ClipboardBackend
from winsetup.backends.editor_cli import EditorCliBackend
from winsetup.backends.git import GitBackend
from winsetup.backends.sc import ScServiceBackend
from winsetup.backends.ssh import SshBackend
from winsetup.backends.symlink import SymlinkBackend
from winsetup.backends.winget import WingetBackend

__all__ = [
    "ClipboardBackend",
    "EditorCliBackend",
    "GitBackend",
    "ScServiceBackend",
    "SshBackend",
    "SymlinkBackend",
    "WingetBackend",
]

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SymlinkBackend:
    logger: logging.Logger
    dry_run: bool = False

    def remove_file(self, target: Path) -> bool:
        """Delete a regular file or a link at `target`. Directories are refused."""
        if target.is_symlink() or target.is_file():
            self.logger.debug("Removing %s", target)
            if not self.dry_run:
                target.unlink()
            return True
        if target.is_dir():
            raise RuntimeError(f"Refusing to replace directory with a symlink: {target}")
        return False

    def replace_with_symlink(self, *, source: Path, target: Path) -> None:
        if not source.exists():
            if self.dry_run:
                self.logger.debug("Symlink source %s does not exist yet (dry run)", source)
                return
            raise FileNotFoundError(f"Symlink source does not exist: {source}")
        self.remove_file(target)
        self.logger.debug("LINK %s -> %s", target, source)
        if self.dry_run:
            return
        target.parent.mkdir(parents=True, exist_ok=True)
        # Creating symlinks on Windows needs elevation or developer mode.
        target.symlink_to(source, target_is_directory=source.is_dir())

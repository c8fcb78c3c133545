from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from winsetup.backends import (
    ClipboardBackend,
    EditorCliBackend,
    GitBackend,
    ScServiceBackend,
    SshBackend,
    SymlinkBackend,
    WingetBackend,
)
from winsetup.backends.git import as_git_path
from winsetup.config_loader import load_json_file
from winsetup.core import Context
from winsetup.targets import RepositorySpec

SSH_CONFIG_CONTENT = "Host *\n    AddKeysToAgent yes\n    IdentitiesOnly yes\n"


def _git(ctx: Context) -> GitBackend:
    return GitBackend(runner=ctx.runner, logger=ctx.logger, executable=ctx.settings.git_executable)


def _winget(ctx: Context) -> WingetBackend:
    return WingetBackend(runner=ctx.runner, logger=ctx.logger, executable=ctx.settings.winget_executable)


def _ssh(ctx: Context) -> SshBackend:
    return SshBackend(
        runner=ctx.runner,
        logger=ctx.logger,
        keygen_executable=ctx.settings.ssh_keygen_executable,
        add_executable=ctx.settings.ssh_add_executable,
    )


def _symlinks(ctx: Context) -> SymlinkBackend:
    return SymlinkBackend(logger=ctx.logger, dry_run=ctx.dry_run)


class PackageStep:
    """winget package, considered installed when its executable exists."""

    def __init__(self, name: str, *, package_id: str, marker: Path) -> None:
        self.name = name
        self.package_id = package_id
        self.marker = marker

    def check(self, ctx: Context) -> bool:
        return self.marker.exists()

    def apply(self, ctx: Context) -> str:
        _winget(ctx).install(self.package_id)
        return f"Installed {self.package_id}."


class GitSshTransportStep:
    name = "Configure Git SSH transport"

    def check(self, ctx: Context) -> bool:
        return False

    def apply(self, ctx: Context) -> str:
        ssh = as_git_path(ctx.settings.ssh_executable)
        _git(ctx).set_global("core.sshCommand", ssh)
        return f"Git uses {ssh} for SSH."


class SshAgentServiceStep:
    name = "Enable SSH agent service"

    def check(self, ctx: Context) -> bool:
        return False

    def apply(self, ctx: Context) -> str:
        service = ctx.settings.ssh_agent_service
        sc = ScServiceBackend(runner=ctx.runner, logger=ctx.logger, executable=ctx.settings.sc_executable)
        sc.set_automatic(service)
        if sc.is_running(service):
            return f"{service} starts automatically and is running."
        sc.start(service)
        return f"{service} set to start automatically and started."


class SshKeygenStep:
    name = "Generate SSH key"

    def __init__(self, *, email: str | None = None) -> None:
        self.email = email

    def check(self, ctx: Context) -> bool:
        return ctx.settings.ssh_private_key.exists()

    def apply(self, ctx: Context) -> str:
        email = self.email or ctx.ask("Email address for the SSH key: ")
        if not email:
            raise ValueError("An email address is required to generate an SSH key")
        key = ctx.settings.ssh_private_key
        if not ctx.dry_run:
            key.parent.mkdir(parents=True, exist_ok=True)
        _ssh(ctx).generate_key(key, key_type=ctx.settings.ssh_key_type, comment=email)
        return f"Generated {ctx.settings.ssh_key_type} key {key}."


class SshAgentKeyStep:
    """
    Register the private key with the agent.

    The check is a literal match of the public key file against `ssh-add -L`
    lines, not a fingerprint comparison.
    """

    name = "Register SSH key with agent"

    def check(self, ctx: Context) -> bool:
        pub = ctx.settings.ssh_public_key
        if not pub.exists():
            return False
        content = pub.read_text(encoding="utf-8").strip()
        return content in _ssh(ctx).loaded_keys()

    def apply(self, ctx: Context) -> str:
        key = ctx.settings.ssh_private_key
        if not ctx.dry_run and not key.exists():
            raise FileNotFoundError(f"SSH private key not found: {key}")
        _ssh(ctx).add_key(key)
        return f"Added {key} to the SSH agent."


class PublishSshKeyStep:
    name = "Publish SSH public key"

    def __init__(self, *, clipboard: bool = True, write_config: bool = True) -> None:
        self.clipboard = clipboard
        self.write_config = write_config

    def check(self, ctx: Context) -> bool:
        return False

    def apply(self, ctx: Context) -> str:
        done: list[str] = []
        if self.clipboard:
            pub = ctx.settings.ssh_public_key
            if ctx.dry_run and not pub.exists():
                content = ""
            else:
                content = pub.read_text(encoding="utf-8").strip()
            ClipboardBackend(runner=ctx.runner, logger=ctx.logger, command=ctx.settings.clipboard_command).copy(content)
            done.append("copied public key to clipboard")
        if self.write_config:
            cfg = ctx.settings.ssh_config
            if not ctx.dry_run:
                cfg.parent.mkdir(parents=True, exist_ok=True)
                cfg.write_text(SSH_CONFIG_CONTENT, encoding="utf-8")
            done.append(f"wrote {cfg}")
        if not done:
            return "Nothing to publish."
        summary = "; ".join(done)
        if ctx.dry_run:
            return f"Would have {summary}."
        return summary[:1].upper() + summary[1:] + "."


class RepositoryStep:
    """
    Clone the repository when its directory is missing, otherwise pull the
    branch. Either way the directory ends up in git's safe.directory list.
    """

    def __init__(self, repo: RepositorySpec, *, dest: Path) -> None:
        self.repo = repo
        self.dest = dest
        self.name = f"Clone or update {repo.name}"

    def check(self, ctx: Context) -> bool:
        # Clone vs update is decided in apply; both paths always run.
        return False

    def _clone_or_pull(self, ctx: Context, git: GitBackend) -> str:
        if self.dest.exists():
            git.pull(self.dest, branch=self.repo.branch)
            return f"Pulled {self.repo.branch} into {self.dest}."
        if not ctx.dry_run:
            self.dest.parent.mkdir(parents=True, exist_ok=True)
        git.clone(self.repo.ssh_url, self.dest)
        return f"Cloned {self.repo.ssh_url} into {self.dest}."

    def _register(self, git: GitBackend) -> None:
        if not git.is_safe_directory(self.dest):
            git.add_safe_directory(self.dest)

    def apply(self, ctx: Context) -> str:
        git = _git(ctx)
        try:
            msg = self._clone_or_pull(ctx, git)
        except (RuntimeError, OSError):
            # Still registered after a failed clone/pull; the clone/pull error is the one raised.
            try:
                self._register(git)
            except (RuntimeError, OSError) as e:
                ctx.logger.warning("Could not add %s to safe.directory: %s", self.dest, e)
            raise
        self._register(git)
        return msg


class SymlinkStep:
    def __init__(self, name: str, *, source: Path, target: Path) -> None:
        self.name = name
        self.source = source
        self.target = target

    def check(self, ctx: Context) -> bool:
        return self.target.is_symlink()

    def apply(self, ctx: Context) -> str:
        _symlinks(ctx).replace_with_symlink(source=self.source, target=self.target)
        if ctx.dry_run:
            return f"Would link {self.target} -> {self.source}."
        return f"Linked {self.target} -> {self.source}."


def _load_json_list(path: Path) -> list[Any]:
    data = load_json_file(path)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list")
    return data


def merge_keybindings(generic: Sequence[Any], specific: Sequence[Any]) -> list[Any]:
    # Plain concatenation: later entries win inside the editor, nothing is deduped here.
    return [*generic, *specific]


class KeybindingsStep:
    name = "Install keybindings"

    def __init__(self, *, generic: Path, specific: Path, target: Path) -> None:
        self.generic = generic
        self.specific = specific
        self.target = target

    def check(self, ctx: Context) -> bool:
        return False

    def apply(self, ctx: Context) -> str:
        if ctx.dry_run and not (self.generic.exists() and self.specific.exists()):
            return f"Would write keybindings from {self.generic} and {self.specific} to {self.target}."
        merged = merge_keybindings(_load_json_list(self.generic), _load_json_list(self.specific))
        if ctx.dry_run:
            return f"Would write {len(merged)} keybindings to {self.target}."
        self.target.parent.mkdir(parents=True, exist_ok=True)
        self.target.write_text(json.dumps(merged, indent=4) + "\n", encoding="utf-8")
        return f"Wrote {len(merged)} keybindings to {self.target}."


def load_extension_manifest(path: Path) -> list[str]:
    """
    Extension ids from a bare JSON list or a VS Code style
    ``{"recommendations": [...]}`` object, de-duplicated in order.
    """
    data = load_json_file(path)
    if isinstance(data, dict):
        data = data.get("recommendations")
    if not isinstance(data, list) or not all(isinstance(x, str) and x for x in data):
        raise ValueError(f"{path} must be a list of extension ids or an object with 'recommendations'")
    seen: set[str] = set()
    out: list[str] = []
    for ext in data:
        if ext.lower() in seen:
            continue
        seen.add(ext.lower())
        out.append(ext)
    return out


class EditorExtensionsStep:
    name = "Install editor extensions"

    def __init__(self, *, cli: Path, manifest: Path) -> None:
        self.cli = cli
        self.manifest = manifest

    def _missing(self, ctx: Context) -> list[str]:
        wanted = load_extension_manifest(self.manifest)
        editor = EditorCliBackend(runner=ctx.runner, logger=ctx.logger, executable=self.cli)
        installed = {e.lower() for e in editor.list_extensions()}
        return [e for e in wanted if e.lower() not in installed]

    def check(self, ctx: Context) -> bool:
        if ctx.dry_run and not self.manifest.exists():
            return False
        return not self._missing(ctx)

    def apply(self, ctx: Context) -> str:
        if ctx.dry_run and not self.manifest.exists():
            return f"Would install editor extensions listed in {self.manifest}."
        missing = self._missing(ctx)
        editor = EditorCliBackend(runner=ctx.runner, logger=ctx.logger, executable=self.cli)
        for ext in missing:
            editor.install_extension(ext)
        if not missing:
            return "Editor extensions already installed."
        return f"Installed editor extensions: {', '.join(missing)}."


class WindowManagerStep:
    name = "Install and configure window manager"

    def __init__(self, *, package_id: str, config_source: Path, config_target: Path) -> None:
        self.package_id = package_id
        self.config_source = config_source
        self.config_target = config_target

    def check(self, ctx: Context) -> bool:
        return False

    def apply(self, ctx: Context) -> str:
        _winget(ctx).install(self.package_id)
        _symlinks(ctx).replace_with_symlink(source=self.config_source, target=self.config_target)
        return f"Installed {self.package_id}; linked {self.config_target} -> {self.config_source}."


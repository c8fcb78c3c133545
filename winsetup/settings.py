from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from winsetup.config_loader import load_mapping_file
from winsetup.util import config_home, expand_path


@dataclass(frozen=True)
class Settings:
    """
    Every fixed path, package id and service name the plans touch.

    Built once at start-up (defaults from the Windows environment, then
    overrides from a settings file) and handed to steps through the Context.
    """

    user_profile: Path
    program_files: Path
    local_app_data: Path
    app_data: Path
    system_root: Path

    git_executable: Path
    git_package_id: str

    ssh_executable: Path
    ssh_keygen_executable: Path
    ssh_add_executable: Path
    ssh_dir: Path
    ssh_key_name: str
    ssh_key_type: str
    ssh_agent_service: str

    repos_root: Path
    settings_repository: str
    second_repository: str
    repository_branch: str

    editor: str
    editor_settings_source: str
    keybindings_source: str
    editor_keybindings_source: str
    extensions_manifest: str

    window_manager_package_id: str
    window_manager_config: Path
    window_manager_config_source: str

    winget_executable: str
    sc_executable: str
    clipboard_command: tuple[str, ...]

    @property
    def ssh_private_key(self) -> Path:
        return self.ssh_dir / self.ssh_key_name

    @property
    def ssh_public_key(self) -> Path:
        return self.ssh_dir / f"{self.ssh_key_name}.pub"

    @property
    def ssh_config(self) -> Path:
        return self.ssh_dir / "config"


def default_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    home = Path(env.get("USERPROFILE") or Path.home())
    program_files = Path(env.get("ProgramFiles") or env.get("PROGRAMFILES") or r"C:\Program Files")
    local_app_data = Path(env.get("LOCALAPPDATA") or home / "AppData" / "Local")
    app_data = Path(env.get("APPDATA") or home / "AppData" / "Roaming")
    system_root = Path(env.get("SystemRoot") or env.get("SYSTEMROOT") or r"C:\Windows")
    openssh = system_root / "System32" / "OpenSSH"

    return Settings(
        user_profile=home,
        program_files=program_files,
        local_app_data=local_app_data,
        app_data=app_data,
        system_root=system_root,
        git_executable=program_files / "Git" / "cmd" / "git.exe",
        git_package_id="Git.Git",
        ssh_executable=openssh / "ssh.exe",
        ssh_keygen_executable=openssh / "ssh-keygen.exe",
        ssh_add_executable=openssh / "ssh-add.exe",
        ssh_dir=home / ".ssh",
        ssh_key_name="id_ed25519",
        ssh_key_type="ed25519",
        ssh_agent_service="ssh-agent",
        repos_root=home / "source" / "repos",
        settings_repository="",
        second_repository="",
        repository_branch="master",
        editor="vscode",
        editor_settings_source="vscode/settings.json",
        keybindings_source="vscode/keybindings.json",
        editor_keybindings_source="vscode/keybindings.{editor}.json",
        extensions_manifest="vscode/extensions.json",
        window_manager_package_id="glzr-io.glazewm",
        window_manager_config=home / ".glzr" / "glazewm" / "config.yaml",
        window_manager_config_source="glazewm/config.yaml",
        winget_executable="winget",
        sc_executable="sc.exe",
        clipboard_command=("clip",),
    )


def default_settings_paths() -> list[Path]:
    base = config_home() / "winsetup"
    return [base / "settings.toml", base / "settings.json", base / "settings.yaml", base / "settings.yml"]


def _coerce(name: str, current: Any, value: Any) -> Any:
    if isinstance(current, Path):
        if not isinstance(value, str) or not value:
            raise ValueError(f"setting '{name}' must be a non-empty path string")
        return expand_path(value)
    if isinstance(current, tuple):
        if isinstance(value, str) and value:
            return (value,)
        if isinstance(value, list) and value and all(isinstance(x, str) and x for x in value):
            return tuple(value)
        raise ValueError(f"setting '{name}' must be a string or a non-empty list of strings")
    if not isinstance(value, str):
        raise ValueError(f"setting '{name}' must be a string")
    return value


def apply_overrides(settings: Settings, overrides: Mapping[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")
    changes = {k: _coerce(k, getattr(settings, k), v) for k, v in overrides.items()}
    return replace(settings, **changes)


def load_settings(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    settings = default_settings(environ)
    if path is None:
        path = next((p for p in default_settings_paths() if p.exists()), None)
        if path is None:
            return settings
    elif not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    raw = load_mapping_file(path)
    # Allow either a flat file or one with a [settings] table.
    table = raw.get("settings", raw)
    if not isinstance(table, dict):
        raise ValueError(f"'settings' in {path} must be a table")
    return apply_overrides(settings, table)

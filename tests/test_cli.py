import json
import logging
import subprocess

import pytest

from winsetup import cli


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("APPDATA", str(home / "AppData" / "Roaming"))
    monkeypatch.setenv("LOCALAPPDATA", str(home / "AppData" / "Local"))
    monkeypatch.delenv("WINSETUP_PLUGINS_DIRS", raising=False)
    monkeypatch.setattr(cli, "is_admin", lambda: True)

    def no_processes(*_a, **_kw):
        raise AssertionError("dry runs must not start processes")

    monkeypatch.setattr("winsetup.util.subprocess.run", no_processes)
    return home


@pytest.fixture
def messages(monkeypatch):
    # The CLI logger does not propagate; collect its records directly.
    records = []

    class _Collect(logging.Handler):
        def emit(self, record):
            records.append(record.getMessage())

    original = cli._setup_logger

    def setup(verbose):
        logger = original(verbose)
        logger.addHandler(_Collect())
        return logger

    monkeypatch.setattr(cli, "_setup_logger", setup)
    return records


def test_clone_dry_run(messages, isolated_env):
    rc = cli.main(["--dry-run", "clone", "--type", "GitHub", "--owner", "me", "--name", "dotfiles", "--branch", "main"])

    assert rc == 0
    assert any("Cloned git@github.com:me/dotfiles.git" in m for m in messages)
    assert not (isolated_env / "source" / "repos").exists()


def test_clone_azure_requires_organization(messages):
    rc = cli.main(["--dry-run", "clone", "--type", "AzureDevOps", "--owner", "proj", "--name", "r"])
    assert rc == 2
    assert any("organization" in m for m in messages)


def test_clone_rejects_unknown_type():
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["clone", "--type", "Bitbucket", "--owner", "o", "--name", "n"])
    assert excinfo.value.code == 2


def test_bootstrap_requires_settings_repository(messages):
    rc = cli.main(["--dry-run", "bootstrap", "--email", "me@example.com"])
    assert rc == 2
    assert any("settings repository" in m for m in messages)


def test_bootstrap_dry_run_walks_whole_plan(messages):
    rc = cli.main(
        [
            "--dry-run",
            "--non-interactive",
            "bootstrap",
            "--email",
            "me@example.com",
            "--settings-repo",
            "me/dotfiles",
            "--second-repo",
            "me/notes",
            "--editor",
            "cursor",
        ]
    )

    assert rc == 0
    joined = "\n".join(messages)
    assert "=== bootstrap (12 steps) ===" in joined
    assert "git@github.com:me/notes.git" in joined
    assert "Anysphere.Cursor" in joined
    assert messages[-1] == "Done."


def test_bootstrap_rejects_unknown_editor(messages):
    rc = cli.main(["--dry-run", "bootstrap", "--settings-repo", "me/dotfiles", "--editor", "notepad"])
    assert rc == 2
    assert any("Unsupported editor type" in m for m in messages)


def test_invalid_settings_file(messages, tmp_path):
    bad = tmp_path / "settings.json"
    bad.write_text(json.dumps({"not_a_setting": "x"}), encoding="utf-8")
    rc = cli.main(["--settings", str(bad), "--dry-run", "window-manager"])
    assert rc == 2
    assert any("Unknown settings" in m for m in messages)


def test_step_failure_exits_nonzero(messages, monkeypatch):
    def winget_fails(argv, **_kw):
        return subprocess.CompletedProcess(argv, 1, stdout="No package found\n", stderr="")

    monkeypatch.setattr("winsetup.util.subprocess.run", winget_fails)

    rc = cli.main(["window-manager", "--settings-repo", "me/dotfiles"])

    assert rc == 1
    assert any("Install and configure window manager" in m and "failed" in m for m in messages)
    assert "Done." not in messages


def test_unknown_command_rejected():
    with pytest.raises(SystemExit):
        cli.main(["apply", "--config-dir", "plans"])

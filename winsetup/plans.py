from __future__ import annotations

from pathlib import Path

from winsetup.core import Step
from winsetup.settings import Settings
from winsetup.steps import (
    EditorExtensionsStep,
    GitSshTransportStep,
    KeybindingsStep,
    PackageStep,
    PublishSshKeyStep,
    RepositoryStep,
    SshAgentKeyStep,
    SshAgentServiceStep,
    SshKeygenStep,
    SymlinkStep,
    WindowManagerStep,
)
from winsetup.targets import EditorType, RepositorySpec, parse_github_slug


def repository_dir(settings: Settings, repo: RepositorySpec) -> Path:
    return settings.repos_root / repo.name


def git_steps(settings: Settings) -> list[Step]:
    return [
        PackageStep("Install Git", package_id=settings.git_package_id, marker=settings.git_executable),
        GitSshTransportStep(),
    ]


def ssh_steps(*, email: str | None = None) -> list[Step]:
    return [
        SshAgentServiceStep(),
        SshKeygenStep(email=email),
        SshAgentKeyStep(),
        PublishSshKeyStep(),
    ]


def editor_package_step(settings: Settings, editor: EditorType) -> Step:
    return PackageStep(
        f"Install {editor.display_name}",
        package_id=editor.package_id,
        marker=editor.executable(settings),
    )


def editor_config_steps(settings: Settings, editor: EditorType, settings_repo: Path) -> list[Step]:
    user_dir = editor.user_dir(settings)
    specific = settings.editor_keybindings_source.format(editor=editor.value)
    return [
        SymlinkStep(
            "Symlink editor settings",
            source=settings_repo / settings.editor_settings_source,
            target=user_dir / "settings.json",
        ),
        KeybindingsStep(
            generic=settings_repo / settings.keybindings_source,
            specific=settings_repo / specific,
            target=user_dir / "keybindings.json",
        ),
        EditorExtensionsStep(
            cli=editor.cli(settings),
            manifest=settings_repo / settings.extensions_manifest,
        ),
    ]


def bootstrap_plan(
    settings: Settings,
    *,
    editor: EditorType,
    settings_repo: RepositorySpec,
    extra_repos: list[RepositorySpec] | None = None,
    email: str | None = None,
) -> list[Step]:
    """
    Git, SSH, the editor and its configuration.

    Repositories are cloned after the editor is installed and before anything
    that reads files out of the settings repository.
    """
    plan: list[Step] = []
    plan.extend(git_steps(settings))
    plan.extend(ssh_steps(email=email))
    plan.append(editor_package_step(settings, editor))
    for repo in [settings_repo, *(extra_repos or [])]:
        plan.append(RepositoryStep(repo, dest=repository_dir(settings, repo)))
    plan.extend(editor_config_steps(settings, editor, repository_dir(settings, settings_repo)))
    return plan


def clone_plan(settings: Settings, repo: RepositorySpec) -> list[Step]:
    return [RepositoryStep(repo, dest=repository_dir(settings, repo))]


def window_manager_plan(settings: Settings, settings_repo: RepositorySpec) -> list[Step]:
    return [
        WindowManagerStep(
            package_id=settings.window_manager_package_id,
            config_source=repository_dir(settings, settings_repo) / settings.window_manager_config_source,
            config_target=settings.window_manager_config,
        )
    ]


def configured_repositories(settings: Settings, *, branch: str | None = None) -> tuple[RepositorySpec, list[RepositorySpec]]:
    """The settings repository (required) and the optional second one from Settings."""
    if not settings.settings_repository:
        raise ValueError("No settings repository configured (use --settings-repo OWNER/NAME or 'settings_repository')")
    branch = branch or settings.repository_branch
    main = parse_github_slug(settings.settings_repository, branch=branch)
    extra = []
    if settings.second_repository:
        extra.append(parse_github_slug(settings.second_repository, branch=branch))
    return main, extra

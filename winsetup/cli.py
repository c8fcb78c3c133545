from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable

from winsetup.core import Options, PrivilegeError, Step, StepFailed, build_context
from winsetup.plans import bootstrap_plan, clone_plan, configured_repositories, window_manager_plan
from winsetup.privilege import is_admin, require_admin
from winsetup.runner import run_plan
from winsetup.settings import Settings, load_settings
from winsetup.targets import REPOSITORY_TYPES, EditorType, make_repository


def _setup_logger(verbose: bool) -> logging.Logger:
    logger = logging.getLogger("winsetup")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="winsetup")
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings file (*.toml, *.json, *.yaml). Defaults to <config home>/winsetup/settings.* if present.",
    )
    parser.add_argument("--dry-run", action="store_true", help="Log actions but do not change the system.")
    parser.add_argument("--non-interactive", action="store_true", help="Never prompt; fail if input is required.")
    parser.add_argument("--verbose", action="store_true", help="Verbose logs.")
    sub = parser.add_subparsers(dest="command", required=True)

    boot = sub.add_parser("bootstrap", help="Install Git, SSH keys, the editor and its configuration.")
    boot.add_argument("--editor", default=None, help="Editor to install: vscode or cursor.")
    boot.add_argument("--email", default=None, help="Identity for a newly generated SSH key (prompted if omitted).")
    boot.add_argument("--settings-repo", default=None, help="GitHub OWNER/NAME of the repository holding editor settings.")
    boot.add_argument("--second-repo", default=None, help="Optional second GitHub OWNER/NAME repository to clone.")
    boot.add_argument("--branch", default=None, help="Branch pulled when a repository already exists.")

    clone = sub.add_parser("clone", help="Clone or update one repository over SSH.")
    clone.add_argument("--type", dest="repo_type", required=True, choices=REPOSITORY_TYPES)
    clone.add_argument("--owner", required=True, help="GitHub owner, or Azure DevOps project.")
    clone.add_argument("--name", required=True, help="Repository name.")
    clone.add_argument("--branch", default="master")
    clone.add_argument("--organization", default=None, help="Azure DevOps organization (AzureDevOps only).")

    wm = sub.add_parser("window-manager", help="Install GlazeWM and link its config from the settings repository.")
    wm.add_argument("--settings-repo", default=None, help="GitHub OWNER/NAME of the repository holding the config.")

    return parser


def _with_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    changes = {}
    if getattr(args, "settings_repo", None):
        changes["settings_repository"] = args.settings_repo
    if getattr(args, "second_repo", None):
        changes["second_repository"] = args.second_repo
    if getattr(args, "editor", None):
        changes["editor"] = args.editor
    return replace(settings, **changes) if changes else settings


def _plan(args: argparse.Namespace, settings: Settings) -> list[Step]:
    if args.command == "bootstrap":
        main_repo, extra = configured_repositories(settings, branch=args.branch)
        return bootstrap_plan(
            settings,
            editor=EditorType.parse(settings.editor),
            settings_repo=main_repo,
            extra_repos=extra,
            email=args.email,
        )
    if args.command == "clone":
        repo = make_repository(
            args.repo_type,
            owner=args.owner,
            name=args.name,
            branch=args.branch,
            organization=args.organization,
        )
        return clone_plan(settings, repo)
    if args.command == "window-manager":
        main_repo, _extra = configured_repositories(settings)
        return window_manager_plan(settings, main_repo)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None, *, prompt: Callable[[str], str] = input) -> int:
    args = _build_parser().parse_args(argv)
    logger = _setup_logger(args.verbose)

    try:
        settings = _with_cli_overrides(load_settings(args.settings), args)
    except (ValueError, OSError) as e:
        logger.error("Invalid settings: %s", e)
        return 2

    try:
        require_admin(is_admin)
    except PrivilegeError as e:
        logger.error("%s", e)
        return 2

    options = Options(dry_run=bool(args.dry_run), non_interactive=bool(args.non_interactive))
    ctx = build_context(settings=settings, options=options, logger=logger, prompt=prompt)

    try:
        plan = _plan(args, settings)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    logger.info("=== %s (%d steps) ===", args.command, len(plan))
    try:
        run_plan(plan, ctx)
    except StepFailed as e:
        logger.error("%s", e)
        logger.debug("Cause", exc_info=e.error)
        return 1

    logger.info("Done.")
    return 0

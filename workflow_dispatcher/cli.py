"""CLI entry point for browsing and dispatching workflows."""

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import asdict
from pathlib import Path
from typing import Any

from workflow_dispatcher.backends.base import WorkflowBackend
from workflow_dispatcher.backends.loading import (
    installed_backends,
    load_backend_manifest,
)
from workflow_dispatcher.browser import WorkflowBrowser, create_workflow_url
from workflow_dispatcher.errors import FormNotReadyError, WorkflowDispatcherError
from workflow_dispatcher.favorites import JsonFileStore, is_favorite_workflow
from workflow_dispatcher.fields import BooleanField, FieldSpec
from workflow_dispatcher.form import DispatchForm
from workflow_dispatcher.models.workflow import Workflow
from workflow_dispatcher.notices import LoggingNotifier
from workflow_dispatcher.schema import FormValue

DEFAULT_FAVORITES_PATH = Path("~/.config/workflow-dispatcher/favorites.json")
TRUE_VALUES = {"true", "1", "yes", "on"}


def parse_input_values(
    pairs: Sequence[str], fields: Sequence[FieldSpec]
) -> Mapping[str, FormValue]:
    """Parse ``name=value`` pairs, reading checkbox fields as booleans."""
    boolean_fields = {f.name for f in fields if isinstance(f, BooleanField)}
    values: dict[str, FormValue] = {}
    for pair in pairs:
        name, separator, value = pair.partition("=")
        if not separator:
            raise ValueError(f"Input must be in name=value format, got '{pair}'")
        name = name.strip()
        if name in boolean_fields:
            values[name] = value.strip().lower() in TRUE_VALUES
        else:
            values[name] = value
    return values


def format_workflow(
    workflow: Workflow, favorites: Sequence[Workflow]
) -> dict[str, Any]:
    """Format a workflow list item for JSON output."""
    return {
        "id": workflow.id,
        "name": workflow.name,
        "file": workflow.path.split("/")[-1],
        "favorite": is_favorite_workflow(workflow, favorites),
        "url": create_workflow_url(workflow),
    }


def format_form(form: DispatchForm) -> dict[str, Any]:
    """Format a loaded dispatch form for JSON output."""
    repository = form.repository
    return {
        "workflow": form.workflow.name,
        "branch": {
            "selected": form.selected_branch,
            "options": list(repository.branches) if repository else [],
        },
        "fields": [
            {"kind": type(spec).__name__, **asdict(spec)} for spec in form.fields
        ],
        "initial_values": dict(form.schema.initial_values),
        "required": sorted(form.schema.validation_rules),
    }


def build_backend_config(manifest_config_cls: type[Any], config_json: str) -> Any:
    """Build backend configuration, taking the token from the environment."""
    config_dict = json.loads(config_json)
    if "token" not in config_dict and os.environ.get("GITHUB_TOKEN"):
        config_dict["token"] = os.environ["GITHUB_TOKEN"]
    return manifest_config_cls(**config_dict)


async def run_command(
    args: argparse.Namespace, backend: WorkflowBackend, log: logging.Logger
) -> int:
    """Run a parsed command against a backend and return the exit code."""
    browser = WorkflowBrowser(
        backend=backend,
        store=JsonFileStore(path=args.favorites_path.expanduser()),
        notifier=LoggingNotifier(logger=log),
        repository_full_name=args.repository,
    )
    await browser.load()

    if args.command == "list":
        output = {
            section.title: [
                format_workflow(workflow, browser.favorites)
                for workflow in section.workflows
            ]
            for section in browser.sections()
        }
        print(json.dumps(output, indent=2))
        return 0

    workflow = browser.find_workflow(args.workflow)
    if workflow is None:
        log.error("Workflow '%s' not found in %s", args.workflow, args.repository)
        return 1

    if args.command == "favorite":
        favorites = await browser.toggle_favorite(workflow)
        log.info(
            "%s is %s a favorite",
            workflow.name,
            "now" if is_favorite_workflow(workflow, favorites) else "no longer",
        )
        return 0

    if args.command == "run-defaults":
        result = await browser.run_with_defaults(workflow)
        return 0 if result.status == "success" else 1

    form = await browser.select_workflow(workflow)
    if form is None:
        raise FormNotReadyError(f"Form for {workflow.name} was superseded")

    if args.command == "show":
        print(json.dumps(format_form(form), indent=2))
        return 0

    if args.ref:
        form.select_branch(args.ref)
    values = {
        **form.schema.initial_values,
        **parse_input_values(args.input, form.fields),
    }
    result = await form.submit(values)
    return 0 if result.status == "success" else 1


async def run(
    backend_key: str,
    backend_config_json: str,
    args: argparse.Namespace,
) -> int:
    """Load the backend and run the command."""
    log = logging.getLogger("workflow_dispatcher")

    log.info("Loading backend: %s", backend_key)
    manifest = load_backend_manifest(backend_key)
    config = build_backend_config(manifest.config_cls, backend_config_json)

    async with manifest.backend_factory(config) as backend:
        try:
            return await run_command(args, backend, log)
        except (WorkflowDispatcherError, ValueError) as e:
            log.error("%s", e)
            return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per action."""
    parser = argparse.ArgumentParser(
        description="Browse workflows and dispatch workflow runs"
    )
    parser.add_argument(
        "--backend",
        default="github",
        help=f"Backend key, one of: {', '.join(installed_backends())}",
    )
    parser.add_argument(
        "--backend-config",
        default="{}",
        help="JSON configuration for the backend; the token defaults to "
        "$GITHUB_TOKEN",
    )
    parser.add_argument(
        "--favorites-path",
        type=Path,
        default=DEFAULT_FAVORITES_PATH,
        help="File storing favorite workflows",
    )
    parser.add_argument(
        "--repository",
        required=True,
        help="Repository identifier (owner/repo format)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List favorite and active workflows")

    for name, help_text in (
        ("show", "Show the dispatch form of a workflow"),
        ("run", "Run a workflow with input values"),
        ("run-defaults", "Run a workflow on the default branch without inputs"),
        ("favorite", "Add or remove a workflow from the favorites"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument(
            "--workflow",
            required=True,
            help="Workflow id, name or file name",
        )
        if name == "run":
            command.add_argument(
                "--ref",
                default="",
                help="Branch to run on (defaults to the default branch)",
            )
            command.add_argument(
                "--input",
                action="append",
                default=[],
                metavar="NAME=VALUE",
                help="Workflow input value, may be repeated",
            )

    return parser


def main() -> None:
    """CLI entry point."""
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(run(args.backend, args.backend_config, args))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

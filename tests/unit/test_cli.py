"""Tests for CLI module."""

import argparse
import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import Mock

import pytest
from pydantic import SecretStr

from workflow_dispatcher.backends.base import WorkflowBackend
from workflow_dispatcher.backends.github.config import GitHubConfig
from workflow_dispatcher.backends.manifest import BackendManifest
from workflow_dispatcher.cli import (
    build_backend_config,
    build_parser,
    parse_input_values,
    run,
    run_command,
)
from workflow_dispatcher.errors import BackendRequestError
from workflow_dispatcher.fields import BooleanField, TextField
from workflow_dispatcher.models.workflow import Workflow
from workflow_dispatcher.testing.github.payloads import (
    DEPLOY_MANIFEST,
    encode_manifest,
)


@pytest.fixture
def backend(backend_mock: Mock, workflow: Workflow) -> Mock:
    """Create mock backend serving the deploy workflow."""
    backend_mock.list_workflows.return_value = [workflow]
    backend_mock.get_content.return_value = encode_manifest(DEPLOY_MANIFEST)
    return backend_mock


def parse(tmp_path: Path, *argv: str) -> argparse.Namespace:
    """Parse CLI arguments with a temporary favorites file."""
    return build_parser().parse_args(
        [
            "--favorites-path",
            str(tmp_path / "favorites.json"),
            "--repository",
            "test-owner/test-repo",
            *argv,
        ]
    )


class TestParseInputValues:
    """Tests for parse_input_values."""

    def test_parses_text_and_boolean_values(self) -> None:
        """Checkbox fields become booleans, others stay text."""
        fields = [
            BooleanField(name="force", title="force", default=False),
            TextField(name="version", title="version", default=""),
        ]

        values = parse_input_values(
            ["force=true", "version=1.2=rc", "other=x"], fields
        )

        assert values == {"force": True, "version": "1.2=rc", "other": "x"}

    def test_false_values_for_checkbox(self) -> None:
        """Anything but a true value unchecks a checkbox."""
        fields = [BooleanField(name="force", title="force", default=True)]

        assert parse_input_values(["force=no"], fields) == {"force": False}

    def test_rejects_pair_without_separator(self) -> None:
        """Raises ValueError for values without '='."""
        with pytest.raises(ValueError, match="name=value"):
            parse_input_values(["force"], [])


def test_build_backend_config_uses_env_token(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Takes the token from GITHUB_TOKEN when the JSON has none."""
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")

    config = build_backend_config(GitHubConfig, '{"per_page": 50}')

    assert config.token == SecretStr("env-token")
    assert config.per_page == 50


def test_build_backend_config_prefers_json_token(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """An explicit token wins over the environment."""
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")

    config = build_backend_config(GitHubConfig, '{"token": "json-token"}')

    assert config.token.get_secret_value() == "json-token"


class TestRunCommand:
    """Tests for run_command."""

    async def test_list_prints_sections(
        self,
        backend: Mock,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Lists favorites and all workflows as JSON."""
        args = parse(tmp_path, "list")

        exit_code = await run_command(args, backend, Mock())

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert output["Favorites"] == []
        assert output["All"][0]["name"] == "Deploy"
        assert output["All"][0]["file"] == "deploy.yml"
        assert output["All"][0]["url"] == (
            "https://github.com/test-owner/test-repo/actions/workflows/deploy.yml"
        )

    async def test_show_prints_form(
        self,
        backend: Mock,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Shows fields, initial values and required inputs."""
        args = parse(tmp_path, "show", "--workflow", "Deploy")

        exit_code = await run_command(args, backend, Mock())

        output = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert output["branch"] == {"selected": "main", "options": ["main", "develop"]}
        assert [f["kind"] for f in output["fields"]] == [
            "ChoiceField",
            "BooleanField",
            "TextField",
        ]
        assert output["fields"][0]["options"] == ["dev", "prod"]
        assert output["required"] == ["version"]

    async def test_run_merges_defaults_and_inputs(
        self, backend: Mock, tmp_path: Path
    ) -> None:
        """Runs with the initial values overridden by the given inputs."""
        args = parse(
            tmp_path,
            "run",
            "--workflow",
            "deploy.yml",
            "--ref",
            "develop",
            "--input",
            "version=1.0",
            "--input",
            "force=true",
        )

        exit_code = await run_command(args, backend, Mock())

        assert exit_code == 0
        backend.create_workflow_dispatch.assert_awaited_once_with(
            "test-owner",
            "test-repo",
            42,
            "develop",
            {"env": "dev", "force": True, "version": "1.0"},
        )

    async def test_run_fails_without_required_input(
        self, backend: Mock, tmp_path: Path
    ) -> None:
        """Returns 1 and sends nothing when a required input is missing."""
        args = parse(tmp_path, "run", "--workflow", "Deploy")

        exit_code = await run_command(args, backend, Mock())

        assert exit_code == 1
        backend.create_workflow_dispatch.assert_not_called()

    async def test_favorite_toggles_and_persists(
        self, backend: Mock, tmp_path: Path
    ) -> None:
        """Toggles the favorite in the favorites file."""
        args = parse(tmp_path, "favorite", "--workflow", "42")

        assert await run_command(args, backend, Mock()) == 0

        stored = json.loads((tmp_path / "favorites.json").read_text())
        assert json.loads(stored["favorite-workflows"]) == [42]

    async def test_unknown_workflow_returns_error(
        self, backend: Mock, tmp_path: Path
    ) -> None:
        """Returns 1 when the workflow is not found."""
        args = parse(tmp_path, "run-defaults", "--workflow", "missing")

        assert await run_command(args, backend, Mock()) == 1
        backend.create_workflow_dispatch.assert_not_called()


async def test_run_returns_error_when_backend_request_fails(
    backend: Mock,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Backend request failures are logged and exit with 1."""

    @asynccontextmanager
    async def backend_factory(
        config: GitHubConfig,
    ) -> AsyncGenerator[WorkflowBackend, None]:
        yield backend

    monkeypatch.setattr(
        "workflow_dispatcher.cli.load_backend_manifest",
        lambda key: BackendManifest(
            config_cls=GitHubConfig, backend_factory=backend_factory
        ),
    )
    backend.get_repository.side_effect = BackendRequestError(
        "Failed to get /repos/test-owner/test-repo: Not Found"
    )
    args = parse(tmp_path, "list")

    with caplog.at_level(logging.ERROR):
        exit_code = await run("github", '{"token": "test-token"}', args)

    assert exit_code == 1
    assert "Not Found" in caplog.text

"""Unit tests for remote command execution."""

import subprocess

import pytest

from deploykit.core.exceptions import ProcessExecutionError
from deploykit.models.environment import TargetEnvironment
from deploykit.services.remote import LocalShell, RemoteShell, format_options


class RecordingRunner:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = ""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.commands: list[list[str]] = []
        self.kwargs: list[dict] = []

    def __call__(self, cmd, **kwargs):
        self.commands.append(cmd)
        self.kwargs.append(kwargs)
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


class TestFormatOptions:
    def test_flags_and_values(self):
        assert format_options({"verbose": True, "input-format": "integer", "yes": False, "x": None}) == [
            "--verbose",
            "--input-format=integer",
        ]

    def test_none(self):
        assert format_options(None) == []


class TestRemoteShell:
    """Tests for RemoteShell."""

    def test_drush_over_ssh(self, test_env: TargetEnvironment):
        runner = RecordingRunner(stdout="1\n")
        shell = RemoteShell(drush_binary="../vendor/bin/drush", runner=runner)

        output = shell.drush(test_env, "state:get", ["system.maintenance_mode"])

        assert output == "1\n"
        cmd = runner.commands[0]
        assert cmd[:4] == ["ssh", "-o", "BatchMode=yes", "test@ssh"]
        assert cmd[4] == (
            "cd /var/www/html/test/docroot && ../vendor/bin/drush -r /var/www/html/test/docroot "
            "state:get system.maintenance_mode"
        )

    def test_local_without_host(self):
        env = TargetEnvironment(name="dev", uuid="u", root="/srv/site")
        runner = RecordingRunner()

        RemoteShell(runner=runner).run(env, ["ls", "-la"])

        assert runner.commands[0] == ["sh", "-c", "cd /srv/site && ls -la"]

    def test_arguments_are_quoted(self, test_env: TargetEnvironment):
        runner = RecordingRunner()

        RemoteShell(drush_binary="drush", runner=runner).drush(
            test_env, "sql:query", ["SELECT nid FROM t WHERE title LIKE '%_QAG%'"]
        )

        assert "'SELECT nid FROM t WHERE title LIKE '\"'\"'%_QAG%'\"'\"''" in runner.commands[0][4]

    def test_non_zero_exit(self, test_env: TargetEnvironment):
        runner = RecordingRunner(returncode=3, stderr="table missing")

        with pytest.raises(ProcessExecutionError) as exc_info:
            RemoteShell(runner=runner).run_script(test_env, "false")

        assert exc_info.value.returncode == 3
        assert exc_info.value.details["output"] == "table missing"

    def test_stream_does_not_capture(self, test_env: TargetEnvironment):
        runner = RecordingRunner(stdout=None)

        assert RemoteShell(runner=runner).run_script(test_env, "drush deploy", stream=True) == ""
        assert runner.kwargs[0]["capture_output"] is False


class TestLocalShell:
    def test_output_stripped(self):
        runner = RecordingRunner(stdout="feature/foo\n")
        assert LocalShell(runner=runner).output(["git", "rev-parse", "--abbrev-ref", "HEAD"]) == "feature/foo"

    def test_failure(self):
        with pytest.raises(ProcessExecutionError):
            LocalShell(runner=RecordingRunner(returncode=128)).output(["git", "status"])

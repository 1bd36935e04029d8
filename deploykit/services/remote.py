"""Running shell and Drush commands on a target environment."""

import shlex
import subprocess
from typing import Any, Callable, Sequence

from deploykit.config import settings
from deploykit.core.exceptions import ProcessExecutionError
from deploykit.models.environment import TargetEnvironment
from deploykit.utils.logging import get_logger

OptionValue = str | int | bool | None


def format_options(options: dict[str, OptionValue] | None) -> list[str]:
    """Turn ``{"input-format": "integer", "verbose": True}`` into CLI flags."""
    flags: list[str] = []
    for name, value in (options or {}).items():
        if value is None or value is False:
            continue
        if value is True:
            flags.append(f"--{name}")
        else:
            flags.append(f"--{name}={value}")
    return flags


class RemoteShell:
    """Execute commands on the host behind a target environment.

    Environments with an SSH ``host`` run through ``ssh``; environments
    without one run locally through ``sh -c``. Every non-zero exit raises
    :class:`ProcessExecutionError`.
    """

    def __init__(
        self,
        drush_binary: str | None = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.drush_binary = drush_binary or settings.drush_binary
        self.runner = runner
        self.logger = get_logger("remote")

    def _command(self, env: TargetEnvironment, script: str) -> list[str]:
        if env.host:
            return ["ssh", "-o", "BatchMode=yes", env.host, script]
        return ["sh", "-c", script]

    def run_script(self, env: TargetEnvironment, script: str, stream: bool = False) -> str:
        """Run a shell snippet on the target and return its stdout.

        With ``stream`` the process output goes straight to the terminal and
        an empty string is returned.
        """
        cmd = self._command(env, script)
        self.logger.info("remote.running", target=env.name, script=script)

        process = self.runner(cmd, capture_output=not stream, text=True, check=False)

        if process.returncode != 0:
            output = (process.stderr or process.stdout or "") if not stream else None
            self.logger.error(
                "remote.failed",
                target=env.name,
                returncode=process.returncode,
                error_preview=output[:500] if output else None,
            )
            raise ProcessExecutionError(script, process.returncode, output[:1000] if output else None)

        return "" if stream else (process.stdout or "")

    def run(self, env: TargetEnvironment, argv: Sequence[str], stream: bool = False) -> str:
        """Run a single argv-style command from the target's docroot."""
        return self.run_script(env, f"cd {shlex.quote(env.root)} && {shlex.join(argv)}", stream=stream)

    def drush(
        self,
        env: TargetEnvironment,
        command: str,
        args: Sequence[str] = (),
        options: dict[str, OptionValue] | None = None,
        stream: bool = False,
    ) -> str:
        """Run a Drush command against the target site."""
        argv = [self.drush_binary, "-r", env.root, command, *args, *format_options(options)]
        return self.run(env, argv, stream=stream)


class LocalShell:
    """Run commands on the operator's machine."""

    def __init__(self, runner: Callable[..., Any] = subprocess.run):
        self.runner = runner

    def output(self, argv: Sequence[str]) -> str:
        process = self.runner(list(argv), capture_output=True, text=True, check=False)
        if process.returncode != 0:
            raise ProcessExecutionError(shlex.join(argv), process.returncode, process.stderr)
        return (process.stdout or "").strip()

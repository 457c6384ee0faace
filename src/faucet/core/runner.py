"""Shell command execution shared by check scorers and dispatch."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from typing import Protocol

from faucet.core.errors import LaunchError

SHELL = "sh"


class CommandRunner(Protocol):
    """What the engine needs from a shell command."""

    def run(self, env: Mapping[str, str]) -> int:
        """Run to completion and return the exit status."""
        ...

    def spawn(self, env: Mapping[str, str]) -> None:
        """Start without waiting."""
        ...


class ShellCommand:
    """A command template executed through `sh -c`.

    The given env is layered over the current process environment.
    """

    def __init__(self, template: str):
        self.template = template

    def __repr__(self) -> str:
        return f"ShellCommand({self.template!r})"

    def _argv(self) -> list[str]:
        return [SHELL, "-c", self.template]

    def _env(self, env: Mapping[str, str]) -> dict[str, str]:
        return {**os.environ, **env}

    def run(self, env: Mapping[str, str]) -> int:
        try:
            return subprocess.run(self._argv(), env=self._env(env)).returncode
        except OSError as e:
            raise LaunchError(f"Failed to execute '{self.template}': {e}") from e

    def spawn(self, env: Mapping[str, str]) -> None:
        try:
            subprocess.Popen(self._argv(), env=self._env(env))
        except OSError as e:
            raise LaunchError(f"Failed to launch '{self.template}': {e}") from e

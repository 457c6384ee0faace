"""Pre-flight checks run before any input is read."""

from __future__ import annotations

import shutil
from collections.abc import Callable

from faucet.core.bash import program_name
from faucet.core.config import Config
from faucet.core.errors import EnvironmentCheckError

REQUIRED_TOOLS = ("sh", "xclip")


def required_tools(config: Config) -> list[str]:
    """Base tools plus whatever program the menu command runs."""
    tools = list(REQUIRED_TOOLS)
    menu = program_name(config.menu_command)
    if menu is None:
        raise EnvironmentCheckError(f"Cannot parse menu command '{config.menu_command}'")
    if menu not in tools:
        tools.append(menu)
    return tools


def check_environment(
    config: Config, which: Callable[[str], str | None] = shutil.which
) -> None:
    """Raise EnvironmentCheckError naming every required tool missing from PATH."""
    missing = [tool for tool in required_tools(config) if which(tool) is None]
    if missing:
        names = ", ".join(f"'{tool}'" for tool in missing)
        raise EnvironmentCheckError(f"Required command(s) {names} not found in PATH")

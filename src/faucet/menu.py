"""Interactive choice through an external list picker (dmenu by default)."""

from __future__ import annotations

import subprocess
from collections.abc import Callable

from faucet.core.errors import MenuError
from faucet.core.runner import SHELL


def choose(
    displays: list[str], menu_command: str, run: Callable = subprocess.run
) -> str | None:
    """Offer displays one per line; return the chosen line or None."""
    try:
        result = run(
            [SHELL, "-c", menu_command],
            input="\n".join(displays).encode("utf-8"),
            stdout=subprocess.PIPE,
        )
    except OSError as e:
        raise MenuError(f"Failed to run menu '{menu_command}': {e}") from e
    selected = result.stdout.decode("utf-8", errors="replace").strip()
    return selected or None

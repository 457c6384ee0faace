"""
Faucet - route clipboard, selection, file or argument data to a command.

Scores configured commands against the input and either launches the
clear winner or asks via a menu.
"""

from __future__ import annotations

__version__ = "0.3.0"

from faucet.faucet import main

__all__ = ["main", "__version__"]

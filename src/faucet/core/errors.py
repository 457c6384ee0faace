"""Error types for Faucet. Anything deriving from FaucetError ends the run with exit 1."""

from __future__ import annotations


class FaucetError(Exception):
    """Base class for run-ending errors."""


class ConfigError(FaucetError, ValueError):
    """Configuration is missing, unparseable or inconsistent."""


class EnvironmentCheckError(FaucetError):
    """A required external tool is not available."""


class AcquisitionError(FaucetError):
    """Input data could not be read."""


class LaunchError(FaucetError, RuntimeError):
    """A shell command could not be started."""


class MenuError(FaucetError):
    """The menu process could not be run."""

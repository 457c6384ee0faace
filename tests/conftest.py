"""
Shared test fixtures for Faucet tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from faucet.core.config import CandidateCommand, CheckCommandRule, Config, Effect, PatternRule
from faucet.core.errors import LaunchError
from faucet.core.payload import Payload
from faucet.core.scoring import ScoringContext


class FakeCommand:
    def __init__(self, runner: FakeRunner, template: str):
        self.runner = runner
        self.template = template

    def run(self, env):
        if self.template in self.runner.broken:
            raise LaunchError(f"cannot start {self.template}")
        self.runner.ran.append((self.template, dict(env)))
        return self.runner.statuses.get(self.template, 0)

    def spawn(self, env):
        if self.template in self.runner.broken:
            raise LaunchError(f"cannot start {self.template}")
        self.runner.spawned.append((self.template, dict(env)))


class FakeRunner:
    """Runner factory that records commands instead of executing them.

    statuses maps a template to its exit status (default 0); templates in
    broken raise LaunchError.
    """

    def __init__(self, statuses: dict[str, int] | None = None, broken: set[str] | None = None):
        self.statuses = statuses or {}
        self.broken = broken or set()
        self.ran: list[tuple[str, dict]] = []
        self.spawned: list[tuple[str, dict]] = []

    def __call__(self, template: str) -> FakeCommand:
        return FakeCommand(self, template)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging so later tests never write to a closed capture stream."""
    yield
    structlog.reset_defaults()


def regex(pattern: str, *targets: tuple[str, int]) -> PatternRule:
    kind = "regex_multi" if len(targets) > 1 else "regex"
    return PatternRule(pattern, tuple(Effect(l, d) for l, d in targets), kind=kind)


def check(command: str, *targets: tuple[str, int]) -> CheckCommandRule:
    kind = "command_multi" if len(targets) > 1 else "command"
    return CheckCommandRule(command, tuple(Effect(l, d) for l, d in targets), kind=kind)


@pytest.fixture
def make_config(tmp_path):
    """Factory for a Config with commands named after labels."""

    def _make(labels=("browser", "editor", "viewer"), rules=(), **settings) -> Config:
        commands = {
            label: CandidateCommand(label, f"Open in {label}", f"{label} \"$DATA_FILE\"")
            for label in labels
        }
        settings.setdefault("data_file", tmp_path / "faucet_data")
        return Config(commands=commands, rules=list(rules), **settings)

    return _make


@pytest.fixture
def text_ctx(tmp_path):
    """Factory for a ScoringContext over a text payload."""

    def _make(text: str) -> ScoringContext:
        data_file = tmp_path / "faucet_data"
        payload = Payload.from_text(text)
        payload.persist(data_file)
        return ScoringContext(payload, payload.matching_text(data_file), data_file)

    return _make


@pytest.fixture
def repo_root() -> Path:
    return Path(__file__).resolve().parent.parent

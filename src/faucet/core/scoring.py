"""
Scorer evaluation and score aggregation.

Each scorer is evaluated once against the input and yields the effects it
contributes. Effects are then folded, in config order, into a fresh table
where every command starts at zero. Scorers never see each other's results,
so the final table does not depend on evaluation order.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import structlog

from faucet.core.config import CandidateCommand, CheckCommandRule, Config, Effect, PatternRule, Rule
from faucet.core.errors import LaunchError
from faucet.core.payload import Payload, command_env
from faucet.core.runner import CommandRunner, ShellCommand

log = structlog.get_logger()

RunnerFactory = Callable[[str], CommandRunner]


@dataclass(frozen=True)
class ScoringContext:
    """Everything a scorer may look at for one run."""

    payload: Payload
    matching_text: str
    data_file: Path

    @property
    def env(self) -> dict[str, str]:
        return command_env(self.payload, self.data_file, self.matching_text)


def pattern_matches(pattern: str, text: str) -> bool:
    """Unanchored regex search. Invalid patterns never match."""
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        log.warning("invalid_regex", regex=pattern, error=str(e))
        return False
    return compiled.search(text) is not None


def check_succeeds(check_command: str, ctx: ScoringContext, runner_factory: RunnerFactory) -> bool:
    """Run a check command once. Exit status 0 is a match, launch failure is not."""
    try:
        status = runner_factory(check_command).run(ctx.env)
    except LaunchError as e:
        log.error("check_command_failed", command=check_command, error=str(e))
        return False
    log.info("check_command_finished", command=check_command, status=status)
    return status == 0


def evaluate(
    rule: Rule, ctx: ScoringContext, runner_factory: RunnerFactory = ShellCommand
) -> tuple[Effect, ...]:
    """Return the effects a rule contributes: all its targets if it matched, else none."""
    if isinstance(rule, PatternRule):
        matched = pattern_matches(rule.pattern, ctx.matching_text)
    elif isinstance(rule, CheckCommandRule):
        matched = check_succeeds(rule.check_command, ctx, runner_factory)
    else:
        raise TypeError(f"unknown rule type: {type(rule).__name__}")
    return rule.targets if matched else ()


def collect_effects(
    rules: Iterable[Rule],
    ctx: ScoringContext,
    runner_factory: RunnerFactory = ShellCommand,
    parallel: bool = False,
) -> list[Effect]:
    """Evaluate every rule and flatten the effects, keeping config order.

    With parallel=True rules are evaluated on a thread pool; results are
    still gathered in config order.
    """
    rules = list(rules)
    if parallel and len(rules) > 1:
        with ThreadPoolExecutor() as pool:
            results = list(pool.map(lambda r: evaluate(r, ctx, runner_factory), rules))
    else:
        results = [evaluate(r, ctx, runner_factory) for r in rules]
    return [effect for effects in results for effect in effects]


def new_score_table(commands: Mapping[str, CandidateCommand]) -> dict[str, int]:
    """Every configured command at score 0, in config order."""
    return {label: 0 for label in commands}


def apply_effects(table: Mapping[str, int], effects: Iterable[Effect]) -> dict[str, int]:
    """Fold effects into a copy of table. Effects for unknown labels are dropped."""
    scores = dict(table)
    for effect in effects:
        if effect.label not in scores:
            log.debug("unknown_label_dropped", label=effect.label)
            continue
        before = scores[effect.label]
        scores[effect.label] = before + effect.delta
        log.debug(
            "score_updated",
            label=effect.label,
            before=before,
            after=scores[effect.label],
        )
    return scores


def score(
    config: Config, ctx: ScoringContext, runner_factory: RunnerFactory = ShellCommand
) -> dict[str, int]:
    """Score every configured command against the input."""
    effects = collect_effects(
        config.rules, ctx, runner_factory=runner_factory, parallel=config.parallel_checks
    )
    return apply_effects(new_score_table(config.commands), effects)

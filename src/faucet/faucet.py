"""Faucet entry point: acquire input, score commands, launch or ask.

Usage:
    faucet                 stdin if piped, else the clipboard
    faucet sel             the primary selection
    faucet file <path>     a file
    faucet <words...>      the words themselves

Exit codes:
- 0: nothing matched, or a command was launched, or the menu was dismissed
- 1: configuration, environment, input, menu or launch failure
"""

from __future__ import annotations

import sys
from collections.abc import Callable

import structlog

from faucet.core.config import CandidateCommand, Config, configure_logging, lint_shell_templates, load_config
from faucet.core.errors import FaucetError
from faucet.core.payload import Payload
from faucet.core.preflight import check_environment
from faucet.core.ranking import Decision, decide, rank, resolve_selection
from faucet.core.runner import ShellCommand
from faucet.core.scoring import RunnerFactory, ScoringContext, score
from faucet.menu import choose
from faucet.sources import acquire

log = structlog.get_logger()

Chooser = Callable[[list[str], str], str | None]


def dispatch(
    command: CandidateCommand, ctx: ScoringContext, runner_factory: RunnerFactory = ShellCommand
) -> None:
    """Launch the chosen command without waiting for it. LaunchError propagates."""
    log.info("launching", label=command.label, command=command.command)
    runner_factory(command.command).spawn(ctx.env)


def route(
    config: Config,
    payload: Payload,
    source: str,
    runner_factory: RunnerFactory = ShellCommand,
    chooser: Chooser = choose,
) -> Decision:
    """Score the payload, then launch or ask. Returns the decision taken."""
    payload.persist(config.data_file)
    matching_text = payload.matching_text(config.data_file)
    ctx = ScoringContext(payload, matching_text, config.data_file)

    log.debug("matching_text", text=matching_text[:100])
    log.debug(
        "input_received",
        kind="text" if payload.is_text else "binary",
        source=source,
        data=payload.describe(matching_text),
    )

    scores = score(config, ctx, runner_factory)
    decision = decide(
        rank(scores, config.commands), config.min_threshold, config.max_threshold
    )

    if decision.action == "none":
        log.info("no_match")
    elif decision.action == "auto":
        log.info(
            "auto_selected",
            label=decision.choice.label,
            score=decision.choice.score,
            reason=decision.reason,
        )
        dispatch(decision.choice.command, ctx, runner_factory)
    else:
        displays = [entry.command.display for entry in decision.shortlist]
        log.debug("menu_offered", displays=displays)
        selected = resolve_selection(
            config.commands, chooser(displays, config.menu_command)
        )
        if selected is None:
            log.info("menu_dismissed")
        else:
            log.info("menu_selected", label=selected.label)
            dispatch(selected, ctx, runner_factory)
    return decision


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    try:
        config = load_config()
        configure_logging(config)
        check_environment(config)
        log.debug(
            "config_loaded", commands=len(config.commands), scorers=len(config.rules)
        )
        for template in lint_shell_templates(config):
            log.warning("unparseable_shell_template", command=template)

        payload, source = acquire(args)
        route(config, payload, source)
    except FaucetError as e:
        print(f"faucet: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

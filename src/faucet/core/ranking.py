"""
Ranking and the auto-select decision.

Commands with a positive score are ranked highest first, ties broken by
label. The ranked list then becomes one of three outcomes:

- none: nothing scored above zero
- auto: launch the top command without asking
- menu: let the user pick from the ranked list
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from faucet.core.config import CandidateCommand

# Extra floor on the leader's score when several commands are in play,
# independent of auto_select_min_threshold.
AUTO_SELECT_FLOOR = 10


@dataclass(frozen=True)
class Ranked:
    """A command with its final score."""

    label: str
    score: int
    command: CandidateCommand

    @property
    def sort_key(self) -> tuple[int, str]:
        return (-self.score, self.label)


@dataclass
class Decision:
    """Outcome of ranking."""

    action: Literal["none", "auto", "menu"]
    reason: str
    choice: Ranked | None = None  # set when action="auto"
    shortlist: list[Ranked] = field(default_factory=list)  # set when action="menu"

    def __repr__(self) -> str:
        return f"Decision({self.action!r}, {self.reason!r})"


def rank(scores: Mapping[str, int], commands: Mapping[str, CandidateCommand]) -> list[Ranked]:
    """Positive-score commands, highest score first, then by label."""
    ranked = [
        Ranked(label, value, commands[label])
        for label, value in scores.items()
        if value > 0 and label in commands
    ]
    return sorted(ranked, key=lambda r: r.sort_key)


def decide(ranked: list[Ranked], min_threshold: int, max_threshold: int) -> Decision:
    """Apply the auto-select policy to a ranked list.

    A lone candidate is launched when it beats min_threshold. With several,
    the leader must beat the runner-up by more than max_threshold and also
    exceed AUTO_SELECT_FLOOR. Anything else goes to the menu.
    """
    if not ranked:
        return Decision("none", "no scorers matched")

    top = ranked[0]
    if len(ranked) == 1:
        if top.score > min_threshold:
            return Decision(
                "auto", f"only match, score {top.score} > min {min_threshold}", choice=top
            )
    else:
        runner_up = ranked[1]
        if top.score > max_threshold + runner_up.score and top.score > AUTO_SELECT_FLOOR:
            return Decision(
                "auto",
                f"score {top.score} > max {max_threshold} + next {runner_up.score}",
                choice=top,
            )

    return Decision("menu", f"{len(ranked)} candidate(s) need a choice", shortlist=list(ranked))


def resolve_selection(
    commands: Mapping[str, CandidateCommand], selected: str | None
) -> CandidateCommand | None:
    """Map the menu reply to a command by exact display text.

    Every configured command is eligible, not only the shortlist, since the
    menu accepts typed input. The first match in config order wins.
    """
    if not selected:
        return None
    for command in commands.values():
        if command.display == selected:
            return command
    return None

"""Tests for ranking and the auto-select decision."""

from __future__ import annotations

import pytest

from faucet.core.config import CandidateCommand
from faucet.core.ranking import AUTO_SELECT_FLOOR, Ranked, decide, rank, resolve_selection


def commands(*labels):
    return {l: CandidateCommand(l, f"Open in {l}", l) for l in labels}


def ranked(*pairs):
    return [Ranked(l, s, CandidateCommand(l, f"Open in {l}", l)) for l, s in pairs]


class TestRank:
    def test_drops_non_positive(self):
        result = rank({"a": 0, "b": -5, "c": 1}, commands("a", "b", "c"))
        assert [r.label for r in result] == ["c"]

    def test_highest_first(self):
        result = rank({"a": 5, "b": 50, "c": 20}, commands("a", "b", "c"))
        assert [(r.label, r.score) for r in result] == [("b", 50), ("c", 20), ("a", 5)]

    def test_ties_broken_by_label(self):
        result = rank({"zeta": 10, "alpha": 10, "mid": 10}, commands("zeta", "alpha", "mid"))
        assert [r.label for r in result] == ["alpha", "mid", "zeta"]

    def test_tie_break_independent_of_table_order(self):
        forward = rank({"b": 3, "a": 3}, commands("a", "b"))
        backward = rank({"a": 3, "b": 3}, commands("a", "b"))
        assert forward == backward

    def test_empty(self):
        assert rank({}, {}) == []


class TestDecide:
    def test_nothing_matched(self):
        assert decide([], 10, 100).action == "none"

    def test_single_above_min(self):
        """https://example.com scored 50 by a lone browser rule."""
        decision = decide(ranked(("browser", 50)), 10, 100)
        assert decision.action == "auto"
        assert decision.choice.label == "browser"

    def test_single_at_min_asks(self):
        decision = decide(ranked(("browser", 10)), 10, 100)
        assert decision.action == "menu"
        assert [r.label for r in decision.shortlist] == ["browser"]

    def test_two_close_scores_ask(self):
        decision = decide(ranked(("a", 60), ("b", 55)), 10, 100)
        assert decision.action == "menu"
        assert [(r.label, r.score) for r in decision.shortlist] == [("a", 60), ("b", 55)]

    def test_clear_leader_auto(self):
        decision = decide(ranked(("a", 200), ("b", 50)), 10, 100)
        assert decision.action == "auto"
        assert decision.choice.label == "a"

    def test_margin_must_be_strict(self):
        assert decide(ranked(("a", 150), ("b", 50)), 10, 100).action == "menu"

    def test_floor_applies_with_several(self):
        """Leader beats the margin but not the fixed floor."""
        decision = decide(ranked(("a", AUTO_SELECT_FLOOR), ("b", 1)), 0, 5)
        assert decision.action == "menu"
        assert decide(ranked(("a", AUTO_SELECT_FLOOR + 1), ("b", 1)), 0, 5).action == "auto"

    @pytest.mark.parametrize("score", [1, 5, 10, 11, 50, 150])
    def test_raising_min_never_creates_auto(self, score):
        entries = ranked(("a", score))
        for low, high in [(0, 10), (10, 40), (40, 100)]:
            if decide(entries, low, 200).action != "auto":
                assert decide(entries, high, 200).action != "auto"


class TestResolveSelection:
    def test_exact_display(self):
        assert resolve_selection(commands("a", "b"), "Open in b").label == "b"

    def test_command_outside_shortlist(self):
        """A typed display for a zero-score command still resolves."""
        assert resolve_selection(commands("a", "b", "c"), "Open in c").label == "c"

    def test_duplicate_display_first_in_config_order(self):
        cmds = {
            "z": CandidateCommand("z", "Open", "first"),
            "a": CandidateCommand("a", "Open", "second"),
        }
        assert resolve_selection(cmds, "Open").command == "first"

    def test_no_selection(self):
        assert resolve_selection(commands("a"), None) is None
        assert resolve_selection(commands("a"), "") is None

    def test_unknown_display(self):
        assert resolve_selection(commands("a"), "Open in") is None

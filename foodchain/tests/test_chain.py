"""
Tests for merging results and walking selection chains.

Tests:
- Immediate-only merges and key collisions
- Linking several prompts into one chain
- SelectionDriver stepping through queued prompts
"""

import pytest

from ..engine_core.chain import (
    SelectionDriver,
    combine_immediate,
    merge_results,
    requires_selection,
)
from ..engine_core.context import Candidate, SelectTarget
from .conftest import make_card, place


def prompt(name: str, **immediate) -> dict:
    """A two-candidate prompt whose answer yields {name: value}."""
    result = dict(immediate)
    result["select_target"] = SelectTarget(
        title=f"Pick for {name}",
        candidates=[Candidate("one", 1), Candidate("two", 2)],
        on_select=lambda value: {name: value},
    )
    return result


class TestMerge:
    """Tests for merge_results without prompts."""

    def test_empty(self):
        assert merge_results([]) == {}
        assert merge_results([{}, {}]) == {}

    def test_single(self):
        assert merge_results([{"heal": 1}]) == {"heal": 1}

    def test_disjoint_keys(self):
        assert merge_results([{"heal": 1}, {"draw": 2}]) == {"heal": 1, "draw": 2}

    def test_collision_goes_to_composite(self):
        """A colliding result is kept whole instead of overwriting."""
        merged = combine_immediate([{"heal": 1}, {"heal": 2, "draw": 1}])
        assert merged == {"heal": 1, "composite": [{"heal": 2, "draw": 1}]}


class TestChaining:
    """Tests for linking prompts."""

    def test_single_prompt_keeps_immediate(self):
        merged = merge_results([{"heal": 1}, prompt("a")])
        assert merged["heal"] == 1
        assert requires_selection(merged)

    def test_second_prompt_follows_first(self):
        merged = merge_results([prompt("a", draw=1), prompt("b", heal=2)])
        assert merged["draw"] == 1
        assert "heal" not in merged

        after_a = merged["select_target"].on_select(1)
        assert after_a["a"] == 1
        assert after_a["heal"] == 2
        assert after_a["select_target"].title == "Pick for b"

        assert after_a["select_target"].on_select(2) == {"b": 2}

    def test_three_prompts_queue(self):
        merged = merge_results([prompt("a"), prompt("b"), prompt("c")])
        after_a = merged["select_target"].on_select(1)
        assert after_a["select_target"].title == "Pick for b"
        assert len(after_a["pending_selections"]) == 1

    def test_continuation_prompt_goes_first(self):
        """A prompt opened by an answer runs before the queued ones."""
        follow_up = SelectTarget(
            title="Follow-up",
            candidates=[Candidate("x", "x"), Candidate("y", "y")],
            on_select=lambda value: {"follow": value},
        )
        first = {
            "select_target": SelectTarget(
                title="First",
                candidates=[Candidate("one", 1), Candidate("two", 2)],
                on_select=lambda value: {"first": value, "select_target": follow_up},
            )
        }
        merged = merge_results([first, prompt("b")])
        after = merged["select_target"].on_select(1)
        assert after["select_target"].title == "Follow-up"
        assert after["pending_selections"][0]["select_target"].title == "Pick for b"


class TestSelectionDriver:
    """Tests for stepping through a chain."""

    def test_no_prompt(self):
        driver = SelectionDriver({"heal": 1})
        assert driver.done
        assert driver.applied == [{"heal": 1}]

    def test_walks_three_prompts_in_order(self):
        driver = SelectionDriver(merge_results([prompt("a", heal=1), prompt("b"), prompt("c")]))
        assert driver.applied == [{"heal": 1}]

        titles, produced = [], []
        while not driver.done:
            titles.append(driver.current.title)
            assert [c.value for c in driver.candidates()] == [1, 2]
            produced.append(driver.submit(2))

        assert titles == ["Pick for a", "Pick for b", "Pick for c"]
        assert produced == [{"a": 2}, {"b": 2}, {"c": 2}]

    def test_remaining_counts_current(self):
        driver = SelectionDriver(merge_results([prompt("a"), prompt("b")]))
        assert driver.remaining == 1
        driver.submit(1)
        assert driver.remaining == 1
        driver.submit(1)
        assert driver.remaining == 0

    def test_submit_when_done(self):
        with pytest.raises(RuntimeError):
            SelectionDriver({}).submit(1)

    def test_composite_prompts_are_queued(self):
        """Prompts inside composite entries are offered in entry order."""
        driver = SelectionDriver({"composite": [prompt("a", heal=1), {"draw": 1}, prompt("b")]})
        assert driver.applied == [{"composite": [{"heal": 1}, {"draw": 1}]}]
        assert driver.remaining == 2

        assert driver.current.title == "Pick for a"
        assert driver.submit(1) == {"a": 1}
        assert driver.current.title == "Pick for b"
        assert driver.submit(2) == {"b": 2}
        assert driver.done

    def test_composite_definition_walks_both_prompts(self, context, resolver, rival):
        first, second = make_card("First"), make_card("Second")
        place(rival, first, second)
        result = resolver.resolve({"type": "composite", "params": {"effects": [
            {"type": "selectEnemyToKill"},
            {"type": "selectEnemyToFreeze"},
        ]}}, context)

        driver = SelectionDriver(result)
        assert driver.current.title == "Choose a Rival's creature to kill"
        killed = driver.submit(driver.candidates()[0].value)
        assert killed["kill_targets"] == [first]

        assert driver.current.title == "Choose a Rival's creature to freeze"
        driver.submit(driver.candidates()[1].value)
        assert driver.done

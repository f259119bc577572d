"""
Selection Chain - Merging results that each want player input.

When one definition list produces several prompts, the first prompt is
presented and its continuation is wrapped so that the next prompt is
spliced into whatever the continuation returns. The driver therefore
sees one prompt at a time, with the rest queued in pending_selections.

SelectionDriver walks such a chain explicitly:

    driver = SelectionDriver(result)
    apply(driver.applied)
    while not driver.done:
        apply(driver.submit(ask_player(driver.current)))
"""

from __future__ import annotations
from collections import deque
from dataclasses import replace
from typing import Any
import logging

from .context import Candidate, EffectResult, SelectOption, SelectTarget

logger = logging.getLogger(__name__)


PROMPT_KEYS = ("select_target", "select_option")
CHAIN_KEYS = PROMPT_KEYS + ("pending_selections",)


def requires_selection(result: EffectResult | None) -> bool:
    """True if the result carries a prompt."""
    return bool(result) and any(key in result for key in PROMPT_KEYS)


def split_selection(result: EffectResult) -> tuple[EffectResult, EffectResult]:
    """Split a result into (immediate part, prompt part)."""
    immediate = {k: v for k, v in result.items() if k not in CHAIN_KEYS}
    prompt = {k: v for k, v in result.items() if k in CHAIN_KEYS}
    return immediate, prompt


def combine_immediate(results: list[EffectResult]) -> EffectResult:
    """
    Merge results that carry no prompt.

    A result whose keys collide with what is already merged is kept
    whole under "composite" instead of overwriting.
    """
    merged: EffectResult = {}
    overflow: list[EffectResult] = []
    for result in results:
        if not result:
            continue
        if any(key in merged for key in result):
            overflow.append(result)
        else:
            merged.update(result)
    if overflow:
        merged["composite"] = list(merged.get("composite", [])) + overflow
    return merged


def merge_results(results: list[EffectResult]) -> EffectResult:
    """Merge sub-results of a definition list, chaining their prompts."""
    results = [r for r in results if r]
    if not results:
        return {}
    if len(results) == 1:
        return results[0]

    with_prompt = [r for r in results if requires_selection(r)]
    immediate = [r for r in results if not requires_selection(r)]

    if not with_prompt:
        return combine_immediate(immediate)

    first_immediate, first_prompt = split_selection(with_prompt[0])
    merged = combine_immediate(immediate + [first_immediate])
    rest = with_prompt[1:]
    if rest:
        logger.debug("chaining %d follow-up prompt(s)", len(rest))
        first_prompt = _link_prompt(first_prompt, rest)
    merged.update(first_prompt)
    return merged


def _link_prompt(prompt: EffectResult, rest: list[EffectResult]) -> EffectResult:
    """Wrap the active prompt so its continuation advances the chain."""
    key = "select_target" if "select_target" in prompt else "select_option"
    request = prompt[key]
    original = request.on_select

    def on_select(value: Any) -> EffectResult:
        return advance_chain(original(value) or {}, rest)

    linked = dict(prompt)
    linked[key] = replace(request, on_select=on_select)
    return linked


def advance_chain(result: EffectResult, pending: list[EffectResult]) -> EffectResult:
    """
    Attach pending prompts to a continuation's result.

    If the continuation opened a prompt of its own, that one goes first
    and the pending ones queue behind it. Otherwise the next pending
    prompt becomes active and its immediate keys ride along.
    """
    if not pending:
        return result
    if requires_selection(result):
        advanced = dict(result)
        advanced["pending_selections"] = list(result.get("pending_selections", [])) + list(pending)
        return advanced

    upcoming, remaining = pending[0], list(pending[1:])
    upcoming_immediate, upcoming_prompt = split_selection(upcoming)
    advanced = combine_immediate([result, upcoming_immediate])
    advanced.update(upcoming_prompt)
    if remaining:
        advanced["pending_selections"] = list(upcoming_prompt.get("pending_selections", [])) + remaining
    return advanced


class SelectionDriver:
    """
    Queue-based stepper over a (possibly chained) result.

    Immediate parts are collected in order in `applied`; `submit`
    returns the immediate part produced by each answer. Prompts nested
    in "composite" entries are queued like pending_selections.
    """

    def __init__(self, result: EffectResult | None):
        self.applied: list[EffectResult] = []
        self._queue: deque[EffectResult] = deque()
        self._current: SelectTarget | SelectOption | None = None
        self._absorb(result or {})

    @property
    def current(self) -> SelectTarget | SelectOption | None:
        return self._current

    @property
    def done(self) -> bool:
        return self._current is None

    @property
    def remaining(self) -> int:
        """Prompts still to answer, the current one included."""
        return len(self._queue) + (0 if self.done else 1)

    def candidates(self) -> list[Candidate]:
        """Candidates of the current target prompt (lazy ones evaluated now)."""
        if isinstance(self._current, SelectTarget):
            return self._current.resolve_candidates()
        return []

    def submit(self, value: Any) -> EffectResult:
        """Answer the current prompt and advance."""
        if self._current is None:
            raise RuntimeError("No selection is pending")
        request, self._current = self._current, None
        start = len(self.applied)
        self._absorb(request.on_select(value) or {})
        produced = self.applied[start:]
        return combine_immediate(produced)

    def _absorb(self, result: EffectResult) -> None:
        immediate, waiting = _unnest(result)
        if immediate:
            self.applied.append(immediate)
        upcoming: list[Any] = []
        for prompt in waiting:
            upcoming.extend(prompt[key] for key in PROMPT_KEYS if key in prompt)
            upcoming.extend(prompt.get("pending_selections", []))
        self._queue.extendleft(reversed(upcoming))
        self._advance()

    def _advance(self) -> None:
        while self._current is None and self._queue:
            item = self._queue.popleft()
            if isinstance(item, (SelectTarget, SelectOption)):
                self._current = item
            else:
                self._absorb(item)


def _unnest(result: EffectResult) -> tuple[EffectResult, list[EffectResult]]:
    """
    Split a result into its immediate part and its prompt parts.

    Prompts carried by "composite" entries are lifted out in entry order,
    after the result's own prompt.
    """
    immediate, prompt = split_selection(result)
    waiting = [prompt] if prompt else []
    entries = immediate.pop("composite", None)
    if entries is not None:
        kept = []
        for entry in entries:
            entry_immediate, entry_waiting = _unnest(entry)
            if entry_immediate:
                kept.append(entry_immediate)
            waiting.extend(entry_waiting)
        if kept:
            immediate["composite"] = kept
    return immediate, waiting

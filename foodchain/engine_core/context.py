"""
Effect Context and result descriptors.

An EffectContext is assembled by the turn/combat layer for every
trigger and handed to a primitive. The primitive answers with an
EffectResult: a sparse dict from operation name to payload. An empty
dict means nothing happened.

Interactive results carry a SelectTarget or SelectOption prompt whose
on_select continuation is called exactly once by the driver.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Union
import logging

from ..config import EngineSettings
from .state import Card, GameState, PlayerState

if TYPE_CHECKING:
    from .effect_resolver import EffectResolver

logger = logging.getLogger(__name__)


EffectResult = dict[str, Any]
Primitive = Callable[["EffectContext"], EffectResult]


class EffectLog:
    """Append-only recorder for player-facing messages."""

    def __init__(self):
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)
        logger.debug("effect log: %s", message)

    def __contains__(self, message: str) -> bool:
        return message in self.messages

    def __len__(self) -> int:
        return len(self.messages)


@dataclass
class TargetRef:
    """
    Tagged reference to a live game object offered as a candidate.

    kind is one of "creature", "player", "hand" or "carrion".
    """
    kind: str
    creature: Card | None = None
    card: Card | None = None
    owner_index: int | None = None
    player_index: int | None = None

    @property
    def subject(self) -> Card | None:
        """The referenced card, whichever slot holds it."""
        return self.creature or self.card


@dataclass
class Candidate:
    """One selectable entry in a prompt."""
    label: str
    value: Any
    card: Card | None = None
    is_recently_drawn: bool = False


CandidateSource = Union[list[Candidate], Callable[[], list[Candidate]]]


@dataclass
class SelectTarget:
    """
    Prompt asking a player to pick one candidate.

    candidates may be a zero-argument producer; it is evaluated only when
    the prompt is shown, after earlier immediate results were applied.
    """
    title: str
    candidates: CandidateSource
    on_select: Callable[[Any], EffectResult]
    render_cards: bool = False
    is_opponent_selection: bool = False
    selecting_player_index: int | None = None

    @property
    def is_lazy(self) -> bool:
        return callable(self.candidates)

    def resolve_candidates(self) -> list[Candidate]:
        if callable(self.candidates):
            return list(self.candidates())
        return list(self.candidates)


@dataclass
class Option:
    """One entry of an option prompt."""
    id: str
    label: str
    description: str = ""
    effect: Any = None


@dataclass
class SelectOption:
    """Prompt asking a player to pick one option."""
    title: str
    options: list[Option]
    on_select: Callable[[Option], EffectResult]


@dataclass
class EffectContext:
    """
    Everything a primitive may read while resolving.

    player/opponent/state are the live aggregates; primitives never
    replace them, and derived contexts share them.
    """
    log: Callable[[str], None] = field(default_factory=EffectLog)
    player: PlayerState | None = None
    opponent: PlayerState | None = None
    state: GameState | None = None
    player_index: int | None = None
    opponent_index: int | None = None

    # Ability source and combat participants
    creature: Card | None = None
    target: Any = None
    attacker: Card | None = None
    defender_index: int | None = None

    played_card: Card | None = None
    consumed_card: Card | None = None
    selected_target: Any = None

    resolver: EffectResolver | None = field(default=None, repr=False)

    @property
    def settings(self) -> EngineSettings:
        if self.resolver is not None:
            return self.resolver.settings
        return EngineSettings()

    def derive(self, **overrides) -> EffectContext:
        """Copy with some fields replaced; aggregates stay shared."""
        return replace(self, **overrides)

    def resolve(self, definition: Any) -> EffectResult:
        """Resolve a nested effect definition against this context."""
        if self.resolver is None:
            from .effect_resolver import EffectResolver
            self.resolver = EffectResolver()
        return self.resolver.resolve(definition, self)

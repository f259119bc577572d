"""
Pytest fixtures for Food Chain tests.
"""

import pytest
from typing import Callable

from ..config import EngineSettings
from ..engine_core.context import EffectContext, EffectLog
from ..engine_core.effect_resolver import EffectResolver
from ..engine_core.state import Card, CardType, GameState, PlayerState


def make_card(
    name: str = "Minnow",
    card_type: str = CardType.PREY.value,
    keywords: list[str] | None = None,
    atk: int = 1,
    hp: int = 1,
    **kwargs,
) -> Card:
    """Create a card instance with a readable id."""
    card_id = kwargs.pop("card_id", f"test-{name.lower().replace(' ', '-')}")
    return Card(
        card_id=card_id,
        name=name,
        type=card_type,
        keywords=list(keywords or []),
        atk=atk,
        hp=hp,
        **kwargs,
    )


def place(player: PlayerState, *cards: Card) -> None:
    """Put cards into the player's field slots, left to right."""
    for slot, card in enumerate(cards):
        player.field[slot] = card


@pytest.fixture
def card_factory() -> Callable[..., Card]:
    return make_card


@pytest.fixture
def game_state() -> GameState:
    """Two players with empty fields, hands and decks."""
    return GameState(
        players=[PlayerState(name="Alice"), PlayerState(name="Bob")],
        random_seed=7,
    )


@pytest.fixture
def resolver() -> EffectResolver:
    """Lenient resolver that ignores the environment."""
    return EffectResolver(settings=EngineSettings())


@pytest.fixture
def strict_resolver() -> EffectResolver:
    return EffectResolver(settings=EngineSettings(strict_effects=True))


@pytest.fixture
def make_context(game_state: GameState, resolver: EffectResolver) -> Callable[..., EffectContext]:
    """Context for player 0 acting against player 1."""
    def factory(**overrides) -> EffectContext:
        values = dict(
            log=EffectLog(),
            player=game_state.players[0],
            opponent=game_state.players[1],
            state=game_state,
            player_index=0,
            opponent_index=1,
            resolver=resolver,
        )
        values.update(overrides)
        return EffectContext(**values)
    return factory


@pytest.fixture
def context(make_context) -> EffectContext:
    return make_context()


@pytest.fixture
def me(game_state: GameState) -> PlayerState:
    return game_state.players[0]


@pytest.fixture
def rival(game_state: GameState) -> PlayerState:
    return game_state.players[1]

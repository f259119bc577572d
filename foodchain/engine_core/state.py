"""
Game State - Runtime view of the board the effect engine reads.

Design principles:
- Shared, mutable aggregates: the external state layer owns them and
  applies the descriptors the engine returns
- Instance identity: every card copy carries a unique instance_id so a
  replaced object can be found again on the current field
- Deterministic: random choices go through the game's seeded RNG
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum
import random
import uuid


FIELD_SLOTS = 3


class CardType(str, Enum):
    """Printed card types."""
    PREY = "Prey"
    PREDATOR = "Predator"
    SPELL = "Spell"
    FREE_SPELL = "Free Spell"
    TRAP = "Trap"


def _new_instance_id() -> str:
    return uuid.uuid4().hex


@dataclass(eq=False)
class Card:
    """
    A card instance in the game.

    Note: This is a runtime instance, not the definition. Card data
    (name, stats, keywords, effect definitions) is copied onto the
    instance when it is created, so keyword lists are never shared.
    """
    card_id: str  # References the card definition id, e.g. "fish-prey-salmon"
    name: str = ""
    type: str = CardType.PREY.value
    instance_id: str = field(default_factory=_new_instance_id)

    keywords: list[str] = field(default_factory=list)
    tribe: str | None = None

    # Printed and current stats (creatures only)
    atk: int = 0
    hp: int = 0
    current_atk: int | None = None
    current_hp: int | None = None

    is_token: bool = False
    dry_dropped: bool = False  # Predator played without consuming
    abilities_cancelled: bool = False
    frozen: bool = False

    # Tribal mechanics
    stalking: bool = False
    stalk_bonus: int = 0
    shell_level: int = 0
    current_shell: int = 0

    # Effect definitions keyed by trigger ("onPlay", "effect", ...)
    effects: dict[str, Any] = field(default_factory=dict)

    # Reaction when an ability selects this card; may replace the result
    on_targeted: Callable[[Any], dict[str, Any] | None] | None = field(default=None, repr=False)

    def __post_init__(self):
        if self.current_atk is None:
            self.current_atk = self.atk
        if self.current_hp is None:
            self.current_hp = self.hp

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> Card:
        """Create a fresh instance from a card definition dict."""
        return cls(
            card_id=data["id"],
            name=data.get("name", data["id"]),
            type=data.get("type", CardType.PREY.value),
            keywords=list(data.get("keywords", [])),
            tribe=data.get("tribe"),
            atk=data.get("atk", 0),
            hp=data.get("hp", 0),
            is_token=data.get("isToken", False),
            shell_level=data.get("shellLevel", 0),
            current_shell=data.get("shellLevel", 0),
            effects=dict(data.get("effects", {})),
        )


def card_type_of(card: Card | None) -> str:
    """Normalized (lower-case) card type, '' for None."""
    if card is None or not card.type:
        return ""
    return card.type.lower()


def is_creature_card(card: Card | None) -> bool:
    """Prey and Predators are creatures."""
    return card_type_of(card) in ("prey", "predator")


def is_prey(card: Card | None) -> bool:
    return card_type_of(card) == "prey"


def is_predator(card: Card | None) -> bool:
    return card_type_of(card) == "predator"


def is_spell(card: Card | None) -> bool:
    """Spells and Free Spells (traps are not spells)."""
    return card_type_of(card) in ("spell", "free spell")


def is_token(card: Card | None) -> bool:
    if card is None:
        return False
    return card.is_token or card.card_id.startswith("token-")


@dataclass
class PlayerState:
    """
    State for a single player.

    The field has a fixed number of slots; an empty slot is None.
    """
    name: str
    hp: int = 10
    hand: list[Card] = field(default_factory=list)
    deck: list[Card] = field(default_factory=list)
    carrion: list[Card] = field(default_factory=list)
    # Declared last: the attribute name shadows dataclasses.field in the class body
    field: list[Card | None] = field(default_factory=lambda: [None] * FIELD_SLOTS)

    @property
    def creatures(self) -> list[Card]:
        """Creatures currently on the field, in slot order."""
        return [c for c in self.field if c is not None and is_creature_card(c)]

    def has_open_slot(self) -> bool:
        return any(slot is None for slot in self.field)

    def find_on_field(self, instance_id: str) -> Card | None:
        """Find the current field object for an instance id."""
        for card in self.field:
            if card is not None and card.instance_id == instance_id:
                return card
        return None


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    Effects read it through the context; only the external state layer
    writes to it.
    """
    players: list[PlayerState] = field(default_factory=list)
    turn: int = 1
    active_player_index: int = 0

    # Instance ids of cards drawn this turn (highlighted in selections)
    recently_drawn_cards: list[str] = field(default_factory=list)

    # Random seed for determinism
    random_seed: int = 0
    rng: random.Random = field(default=None, repr=False)

    # Metadata
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.rng is None:
            self.rng = random.Random(self.random_seed)

    @property
    def num_players(self) -> int:
        return len(self.players)

    def get_player(self, index: int | None) -> PlayerState | None:
        """Get player by index, None when out of range."""
        if index is None or not 0 <= index < len(self.players):
            return None
        return self.players[index]

    def random_int(self, upper: int) -> int:
        """Deterministic integer in [0, upper)."""
        return self.rng.randrange(upper)

    def was_recently_drawn(self, card: Card) -> bool:
        return card.instance_id in self.recently_drawn_cards

"""
Keywords - Keyword catalogue and predicates.

Keyword abilities can be suppressed: a Predator played without
consuming (dry-dropped) loses all of them. Status markers applied by
effects (Frozen, Webbed, ...) live in the same keyword list.
"""

from __future__ import annotations
from enum import Enum

from .state import Card, is_creature_card, is_predator


class Keyword(str, Enum):
    """Keywords printed on cards or granted by effects."""
    HASTE = "Haste"
    FREE_PLAY = "Free Play"
    HIDDEN = "Hidden"
    LURE = "Lure"
    INVISIBLE = "Invisible"
    PASSIVE = "Passive"
    BARRIER = "Barrier"
    ACUITY = "Acuity"
    IMMUNE = "Immune"
    EDIBLE = "Edible"
    INEDIBLE = "Inedible"
    SCAVENGE = "Scavenge"
    NEUROTOXIC = "Neurotoxic"
    NEUROTOXINED = "Neurotoxined"
    AMBUSH = "Ambush"
    TOXIC = "Toxic"
    POISONOUS = "Poisonous"
    HARMLESS = "Harmless"
    FROZEN = "Frozen"
    PARALYZED = "Paralyzed"
    # Tribal
    PACK = "Pack"
    WEB = "Web"
    WEBBED = "Webbed"
    VENOM = "Venom"
    PRIDE = "Pride"
    STALK = "Stalk"
    STALKED = "Stalked"
    POUNCE = "Pounce"
    SHELL = "Shell"
    MOLT = "Molt"


def are_abilities_active(card: Card | None) -> bool:
    """Check if a card's keyword abilities are active."""
    if card is None:
        return False
    if is_predator(card) and card.dry_dropped:
        return False
    return True


def has_keyword(card: Card | None, keyword: str) -> bool:
    """Active keyword check (respects dry-drop suppression)."""
    if not are_abilities_active(card):
        return False
    return keyword in card.keywords


def has_status(card: Card | None, keyword: str) -> bool:
    """Raw marker check; statuses apply even to suppressed cards."""
    return card is not None and keyword in card.keywords


def is_hidden(card: Card | None) -> bool:
    return has_keyword(card, Keyword.HIDDEN)


def is_invisible(card: Card | None, state=None) -> bool:
    return has_keyword(card, Keyword.INVISIBLE)


def has_lure(card: Card | None) -> bool:
    return has_keyword(card, Keyword.LURE)


def has_acuity(card: Card | None) -> bool:
    return has_keyword(card, Keyword.ACUITY)


def has_barrier(card: Card | None) -> bool:
    return has_keyword(card, Keyword.BARRIER)


def has_pride(card: Card | None) -> bool:
    return has_keyword(card, Keyword.PRIDE)


def has_stalk(card: Card | None) -> bool:
    return has_keyword(card, Keyword.STALK)


def has_shell(card: Card | None) -> bool:
    return has_keyword(card, Keyword.SHELL)


def has_molt(card: Card | None) -> bool:
    return has_keyword(card, Keyword.MOLT)


def is_frozen(card: Card | None) -> bool:
    return card is not None and (card.frozen or has_status(card, Keyword.FROZEN))


def is_webbed(card: Card | None) -> bool:
    return has_status(card, Keyword.WEBBED)


def is_stalking(card: Card | None) -> bool:
    return card is not None and card.stalking


def count_creatures_with(field_cards, predicate) -> int:
    """Count creatures on a field slot list matching predicate."""
    return sum(1 for c in field_cards if c is not None and is_creature_card(c) and predicate(c))

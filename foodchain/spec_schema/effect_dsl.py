"""
Effect DSL - Declarative effect definitions authored in card data.

A definition is either a node or an ordered list of nodes:

    {"type": "selectFromGroup",
     "params": {"targetGroup": "enemy-prey", "effect": {"kill": true}}}

This module defines:
- The closed set of effect types (EffectType) and condition types
- Trigger names and target group names
- Pydantic models for the params that have structure of their own
- Small factory helpers for building definitions in Python
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class EffectType(str, Enum):
    """Every effect type a definition node may name."""
    # Basic
    HEAL = "heal"
    DRAW = "draw"
    DAMAGE_RIVAL = "damageRival"
    DAMAGE_CREATURE = "damageCreature"
    SUMMON_TOKENS = "summonTokens"
    ADD_TO_HAND = "addToHand"
    TRANSFORM_CARD = "transformCard"
    KILL_CREATURE = "killCreature"
    DESTROY = "destroy"

    # Keywords and buffs
    GRANT_KEYWORD = "grantKeyword"
    ADD_KEYWORD = "addKeyword"
    BUFF_STATS = "buffStats"
    BUFF = "buff"

    # Selection
    SELECT_TARGET = "selectTarget"
    SELECT_CONSUME = "selectConsume"

    # Control flow
    CONDITIONAL = "conditional"
    COMPOSITE = "composite"
    REPEAT = "repeat"

    # Advanced
    NEGATE_ATTACK = "negateAttack"
    NEGATE_DAMAGE = "negateDamage"
    NEGATE_PLAY = "negatePlay"
    ALLOW_REPLAY = "allowReplay"
    KILL_ATTACKER = "killAttacker"
    FREEZE_ALL_CREATURES = "freezeAllCreatures"
    DISCARD_CARDS = "discardCards"
    REVEAL_CARDS = "revealCards"
    TUTOR = "tutor"
    COPY_ABILITIES = "copyAbilities"
    STEAL_CREATURE = "stealCreature"
    KILL_ALL = "killAll"
    REVEAL_HAND = "revealHand"
    GRANT_BARRIER = "grantBarrier"
    REMOVE_ABILITIES = "removeAbilities"
    REMOVE_ABILITIES_ALL = "removeAbilitiesAll"

    # Selection-based
    SELECT_PREDATOR_FOR_END_EFFECT = "selectPredatorForEndEffect"
    SELECT_CARD_TO_DISCARD = "selectCardToDiscard"
    SELECT_AND_DISCARD = "selectAndDiscard"
    SELECT_ENEMY_TO_KILL = "selectEnemyToKill"
    TUTOR_FROM_DECK = "tutorFromDeck"
    SELECT_CREATURE_FOR_DAMAGE = "selectCreatureForDamage"
    SELECT_TARGET_FOR_DAMAGE = "selectTargetForDamage"
    SELECT_ENEMY_PREY_TO_CONSUME = "selectEnemyPreyToConsume"
    SELECT_CREATURE_TO_RESTORE = "selectCreatureToRestore"

    # Flexible selection
    SELECT_FROM_GROUP = "selectFromGroup"
    CHOOSE_OPTION = "chooseOption"
    CHOICE = "choice"

    # Field and global
    DAMAGE_ALL_CREATURES = "damageAllCreatures"
    DAMAGE_ALL_ENEMY_CREATURES = "damageAllEnemyCreatures"
    DAMAGE_BOTH_PLAYERS = "damageBothPlayers"
    DAMAGE_OTHER_CREATURES = "damageOtherCreatures"
    RETURN_ALL_ENEMIES = "returnAllEnemies"
    KILL_ENEMY_TOKENS = "killEnemyTokens"
    KILL_ALL_ENEMY_CREATURES = "killAllEnemyCreatures"
    SELECT_ENEMY_FOR_KEYWORD = "selectEnemyForKeyword"
    SELECT_ENEMY_CREATURE_FOR_DAMAGE = "selectEnemyCreatureForDamage"
    SELECT_CREATURE_TO_COPY = "selectCreatureToCopy"
    SELECT_PREY_FOR_BUFF = "selectPreyForBuff"
    SELECT_CREATURE_FOR_BUFF = "selectCreatureForBuff"
    SELECT_CREATURE_TO_TRANSFORM = "selectCreatureToTransform"

    # Traps
    REMOVE_TRIGGERED_CREATURE_ABILITIES = "removeTriggeredCreatureAbilities"
    NEGATE_AND_DAMAGE_ALL = "negateAndDamageAll"
    RETURN_TRIGGERED_TO_HAND = "returnTriggeredToHand"
    NEGATE_AND_KILL_ATTACKER = "negateAndKillAttacker"
    NEGATE_COMBAT = "negateCombat"

    # Amphibian
    DAMAGE_RIVAL_AND_SELECT_ENEMY = "damageRivalAndSelectEnemy"
    DAMAGE_ALL_ENEMIES_MULTIPLE = "damageAllEnemiesMultiple"
    KILL_ENEMY_TOKENS_EFFECT = "killEnemyTokensEffect"
    HEAL_AND_SELECT_TARGET_FOR_DAMAGE = "healAndSelectTargetForDamage"
    NEGATE_AND_ALLOW_REPLAY = "negateAndAllowReplay"
    PLAY_SPELLS_FROM_HAND = "playSpellsFromHand"

    # Arachnid web
    WEB_ALL_ENEMIES = "webAllEnemies"
    WEB_ATTACKER = "webAttacker"
    WEB_TARGET = "webTarget"
    WEB_RANDOM_ENEMY = "webRandomEnemy"
    DAMAGE_WEBBED = "damageWebbed"
    DRAW_PER_WEBBED = "drawPerWebbed"
    HEAL_PER_WEBBED = "healPerWebbed"
    DRAW_IF_ENEMY_WEBBED = "drawIfEnemyWebbed"
    BUFF_ATK_PER_WEBBED = "buffAtkPerWebbed"
    SUMMON_TOKENS_PER_WEBBED = "summonTokensPerWebbed"

    # Feline stalk and pride
    ENTER_STALK_MODE = "enterStalkMode"
    ENTER_STALK_MODE_ON_PLAY = "enterStalkModeOnPlay"
    DRAW_PER_STALKING = "drawPerStalking"
    BUFF_ALL_STALKING = "buffAllStalking"
    DRAW_PER_PRIDE = "drawPerPride"
    BUFF_ALL_PRIDE = "buffAllPride"
    SUMMON_TOKENS_PER_PRIDE = "summonTokensPerPride"
    HEAL_PER_PRIDE = "healPerPride"
    GRANT_PRIDE = "grantPride"
    DAMAGE_EQUAL_TO_STALK_BONUS = "damageEqualToStalkBonus"
    CHASE_PREY = "chasePrey"

    # Crustacean shell and molt
    DRAW_PER_SHELL = "drawPerShell"
    BUFF_ALL_SHELL = "buffAllShell"
    HEAL_PER_SHELL = "healPerShell"
    REGENERATE_ALL_SHELLS = "regenerateAllShells"
    GRANT_SHELL = "grantShell"
    GRANT_MOLT = "grantMolt"
    DRAW_PER_MOLT = "drawPerMolt"
    BUFF_ALL_MOLT = "buffAllMolt"
    SUMMON_TOKENS_PER_SHELL = "summonTokensPerShell"
    DAMAGE_EQUAL_TO_TOTAL_SHELL = "damageEqualToTotalShell"
    BUFF_HP_PER_SHELL = "buffHpPerShell"

    # Mammal and misc
    SELECT_ENEMY_TO_FREEZE = "selectEnemyToFreeze"
    FREEZE_ALL_ENEMIES = "freezeAllEnemies"
    REMOVE_FROZEN_FROM_FRIENDLIES = "removeFrozenFromFriendlies"
    SELECT_CREATURE_FROM_DECK_WITH_KEYWORD = "selectCreatureFromDeckWithKeyword"
    RETURN_TARGETED_TO_HAND = "returnTargetedToHand"
    SELECT_FRIENDLY_CREATURE_TO_SACRIFICE = "selectFriendlyCreatureToSacrifice"
    REVIVE_CREATURE = "reviveCreature"
    REGEN_SELF = "regenSelf"
    SELECT_ENEMY_TO_RETURN = "selectEnemyToReturn"
    DISCARD_DRAW_AND_KILL_ENEMY = "discardDrawAndKillEnemy"
    DRAW_THEN_DISCARD = "drawThenDiscard"
    FORCE_OPPONENT_DISCARD = "forceOpponentDiscard"
    DRAW_AND_REVEAL_HAND = "drawAndRevealHand"
    TUTOR_AND_PLAY_SPELL = "tutorAndPlaySpell"
    DAMAGE_ALL_AND_FREEZE_ALL = "damageAllAndFreezeAll"
    END_TURN = "endTurn"
    REGEN_OTHER_CREATURES = "regenOtherCreatures"
    PLAY_SPELL_FROM_HAND = "playSpellFromHand"
    SELECT_ENEMY_TO_RETURN_TO_OPPONENT_HAND = "selectEnemyToReturnToOpponentHand"
    DRAW_AND_EMPOWER_PREDATOR = "drawAndEmpowerPredator"
    TRACK_ATTACK_FOR_REGEN_HEAL = "trackAttackForRegenHeal"
    DEAL_DAMAGE_TO_ATTACKER = "dealDamageToAttacker"
    APPLY_NEUROTOXIC_TO_ATTACKER = "applyNeurotoxicToAttacker"
    FREEZE_ATTACKER = "freezeAttacker"
    DAMAGE_ENEMIES_AFTER_COMBAT = "damageEnemiesAfterCombat"
    EAT_PREY_INSTEAD_OF_ATTACKING = "eatPreyInsteadOfAttacking"

    @classmethod
    def lookup(cls, value: Any) -> Optional[EffectType]:
        """Enum member for a type string, None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


class ConditionType(str, Enum):
    """Predicates usable in a conditional node."""
    HAS_CARDS_IN_HAND = "hasCardsInHand"
    HAS_CREATURES_ON_FIELD = "hasCreaturesOnField"
    OPPONENT_HAS_CREATURES = "opponentHasCreatures"


class TargetGroup(str, Enum):
    """Named candidate groups for selectFromGroup."""
    FRIENDLY_CREATURES = "friendly-creatures"
    ENEMY_CREATURES = "enemy-creatures"
    ALL_CREATURES = "all-creatures"
    FRIENDLY_ENTITIES = "friendly-entities"
    ENEMY_ENTITIES = "enemy-entities"
    ALL_ENTITIES = "all-entities"
    RIVAL = "rival"
    SELF = "self"
    ENEMY_PREY = "enemy-prey"
    FRIENDLY_PREY = "friendly-prey"
    ALL_PREY = "all-prey"
    FRIENDLY_PREDATORS = "friendly-predators"
    CARRION_PREDATORS = "carrion-predators"
    HAND_PREY = "hand-prey"
    OTHER_CREATURES = "other-creatures"
    CARRION = "carrion"
    FRIENDLY_CARRION = "friendly-carrion"


class EffectTrigger(str, Enum):
    """Card data keys under which effect definitions are stored."""
    ON_PLAY = "onPlay"
    ON_CONSUME = "onConsume"
    ON_SLAIN = "onSlain"
    ON_DEFEND = "onDefend"
    ON_START = "onStart"
    ON_END = "onEnd"
    ON_BEFORE_COMBAT = "onBeforeCombat"
    ON_AFTER_COMBAT = "onAfterCombat"
    EFFECT = "effect"
    DISCARD_EFFECT = "discardEffect"
    SACRIFICE_EFFECT = "sacrificeEffect"
    ATTACK_REPLACEMENT = "attackReplacement"
    ON_FRIENDLY_SPELL_PLAYED = "onFriendlySpellPlayed"
    ON_FRIENDLY_CREATURE_DIES = "onFriendlyCreatureDies"


# Params whose presence validation requires (no usable default)
REQUIRED_PARAMS: dict[EffectType, tuple[str, ...]] = {
    EffectType.HEAL: ("amount",),
    EffectType.DRAW: ("count",),
    EffectType.DAMAGE_RIVAL: ("amount",),
    EffectType.DAMAGE_CREATURE: ("targetType", "amount"),
    EffectType.SUMMON_TOKENS: ("tokenIds",),
    EffectType.ADD_TO_HAND: ("cardId",),
    EffectType.TRANSFORM_CARD: ("targetType", "newCardId"),
    EffectType.KILL_CREATURE: ("targetType",),
    EffectType.GRANT_KEYWORD: ("targetType", "keyword"),
    EffectType.ADD_KEYWORD: ("keyword",),
    EffectType.BUFF_STATS: ("targetType",),
    EffectType.COPY_ABILITIES: ("source",),
    EffectType.KILL_ALL: ("targetType",),
    EffectType.REMOVE_ABILITIES: ("targetType",),
    EffectType.SELECT_PREDATOR_FOR_END_EFFECT: ("tokenId",),
    EffectType.SELECT_CREATURE_FOR_DAMAGE: ("amount",),
    EffectType.SELECT_TARGET_FOR_DAMAGE: ("amount",),
    EffectType.SELECT_FROM_GROUP: ("targetGroup",),
    EffectType.DAMAGE_ALL_CREATURES: ("amount",),
    EffectType.DAMAGE_ALL_ENEMY_CREATURES: ("amount",),
    EffectType.DAMAGE_BOTH_PLAYERS: ("amount",),
    EffectType.DAMAGE_OTHER_CREATURES: ("amount",),
    EffectType.SELECT_ENEMY_FOR_KEYWORD: ("keyword",),
    EffectType.SELECT_ENEMY_CREATURE_FOR_DAMAGE: ("amount",),
    EffectType.SELECT_CREATURE_TO_TRANSFORM: ("newCardId",),
    EffectType.DAMAGE_RIVAL_AND_SELECT_ENEMY: ("rivalDamage", "creatureDamage"),
    EffectType.DAMAGE_ALL_ENEMIES_MULTIPLE: ("amount",),
    EffectType.HEAL_AND_SELECT_TARGET_FOR_DAMAGE: ("healAmount", "damageAmount"),
    EffectType.DAMAGE_WEBBED: ("damage",),
    EffectType.SUMMON_TOKENS_PER_WEBBED: ("tokenId",),
    EffectType.SUMMON_TOKENS_PER_PRIDE: ("tokenId",),
    EffectType.SUMMON_TOKENS_PER_SHELL: ("tokenId",),
    EffectType.SELECT_CREATURE_FROM_DECK_WITH_KEYWORD: ("keyword",),
    EffectType.DAMAGE_ALL_AND_FREEZE_ALL: ("damage",),
    EffectType.DRAW_AND_EMPOWER_PREDATOR: ("drawCount", "tokenId"),
    EffectType.DAMAGE_ENEMIES_AFTER_COMBAT: ("damage",),
    EffectType.CONDITIONAL: ("condition", "effectIfTrue"),
    EffectType.COMPOSITE: ("effects",),
    EffectType.REPEAT: ("effect",),
    EffectType.SELECT_TARGET: ("effect",),
}


# =============================================================================
# Definition nodes
# =============================================================================

class EffectNode(BaseModel):
    """A single {type, params} node."""
    type: str
    params: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}


class ConditionNode(BaseModel):
    """A condition reference inside a conditional node."""
    type: ConditionType
    params: dict[str, Any] = Field(default_factory=dict)


EffectDefinition = Union[dict[str, Any], list[Any]]


# =============================================================================
# Structured params
# =============================================================================

class Stats(BaseModel):
    """Stat modifiers."""
    attack: int = 0
    health: int = 0


class DestroyParams(BaseModel):
    """destroy: targetEnemy | enemyCreatures | allCreatures."""
    target: str = "targetEnemy"


class AddKeywordParams(BaseModel):
    """addKeyword: targetCreature | friendlyCreatures | self."""
    keyword: str
    target: Optional[str] = None


class BuffParams(BaseModel):
    """buff: targetCreature | targetPredator | targetEnemy | friendlyCreatures | self."""
    attack: int = 0
    health: int = 0
    target: Optional[str] = None


class GroupEffect(BaseModel):
    """
    What happens to a selection made by selectFromGroup.

    Shortcut flags accumulate; when none applies, a nested type/params
    definition is resolved with the selection as target.
    """
    damage: Optional[int] = None
    heal: Optional[int] = None
    kill: bool = False
    buff: Optional[Stats] = None
    keyword: Optional[str] = None
    regen: bool = False
    consume: bool = False
    remove_abilities: bool = Field(False, alias="removeAbilities")
    steal: bool = False
    copy_abilities: bool = Field(False, alias="copyAbilities")
    copy_stats: bool = Field(False, alias="copyStats")
    copy_abilities_from: bool = Field(False, alias="copyAbilitiesFrom")
    play: bool = False
    paralyze: bool = False
    add_to_hand: bool = Field(False, alias="addToHand")
    sacrifice: bool = False
    draw: Optional[int] = None
    label: Optional[str] = None
    type: Optional[str] = None
    params: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True, "extra": "allow"}

    def as_definition(self) -> dict[str, Any]:
        """The nested definition carried by this effect."""
        return {"type": self.type, "params": self.params}


class SelectFromGroupParams(BaseModel):
    target_group: str = Field(alias="targetGroup")
    title: Optional[str] = None
    effect: GroupEffect = Field(default_factory=GroupEffect)
    render_cards: bool = Field(True, alias="renderCards")

    model_config = {"populate_by_name": True}


class OptionSpec(BaseModel):
    """One option of chooseOption; effect is a shortcut dict or a definition."""
    label: str
    description: str = ""
    effect: Any = None


class ChooseOptionParams(BaseModel):
    title: Optional[str] = None
    options: list[OptionSpec] = Field(default_factory=list)


class ChoiceSpec(BaseModel):
    """One inline choice of the choice effect."""
    label: str
    description: str = ""
    type: str
    params: dict[str, Any] = Field(default_factory=dict)


class ChoiceParams(BaseModel):
    choices: list[ChoiceSpec] = Field(default_factory=list)


# =============================================================================
# Factory functions for common definitions
# =============================================================================

def effect_node(effect_type: EffectType | str, **params) -> dict[str, Any]:
    """Build a {type, params} definition node."""
    type_name = effect_type.value if isinstance(effect_type, EffectType) else effect_type
    return {"type": type_name, "params": params}


def heal_effect(amount: int) -> dict[str, Any]:
    return effect_node(EffectType.HEAL, amount=amount)


def draw_effect(count: int | str) -> dict[str, Any]:
    return effect_node(EffectType.DRAW, count=count)


def select_from_group_effect(target_group: TargetGroup | str, effect: dict[str, Any], title: str | None = None) -> dict[str, Any]:
    group = target_group.value if isinstance(target_group, TargetGroup) else target_group
    params: dict[str, Any] = {"targetGroup": group, "effect": effect}
    if title:
        params["title"] = title
    return effect_node(EffectType.SELECT_FROM_GROUP, **params)


def conditional_effect(
    condition: ConditionType | str,
    if_true: Any,
    if_false: Any = None,
    **condition_params,
) -> dict[str, Any]:
    cond = condition.value if isinstance(condition, ConditionType) else condition
    params: dict[str, Any] = {
        "condition": {"type": cond, "params": condition_params},
        "effectIfTrue": if_true,
    }
    if if_false is not None:
        params["effectIfFalse"] = if_false
    return effect_node(EffectType.CONDITIONAL, **params)

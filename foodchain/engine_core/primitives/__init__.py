"""
Effect Primitives - The building blocks card definitions are made of.

Every primitive is a factory: bind static parameters first, then call
the returned function with an EffectContext to get an EffectResult.

    result = heal(3)(context)   # {"heal": 3}
"""

from .basic import (
    add_keyword,
    add_to_hand,
    allow_replay,
    buff,
    buff_stats,
    copy_abilities,
    damage_creature,
    damage_rival,
    destroy,
    discard_cards,
    draw,
    draw_and_reveal_hand,
    end_turn,
    grant_keyword,
    heal,
    kill_creature,
    negate_and_allow_replay,
    negate_attack,
    negate_damage,
    negate_play,
    regen_self,
    remove_abilities,
    reveal_cards,
    reveal_hand,
    revive_creature,
    summon_tokens,
    track_attack_for_regen_heal,
    transform_card,
    tutor,
)
from .common import (
    handle_targeted_response,
    make_targeted_selection,
    resolve_dynamic_count,
    sort_cards_for_selection,
)
from .field import (
    damage_all_and_freeze_all,
    damage_all_creatures,
    damage_all_enemies_multiple,
    damage_all_enemy_creatures,
    damage_both_players,
    damage_enemies_after_combat,
    damage_other_creatures,
    freeze_all_creatures,
    freeze_all_enemies,
    grant_barrier,
    kill_all,
    kill_all_enemy_creatures,
    kill_enemy_tokens,
    kill_enemy_tokens_effect,
    regen_other_creatures,
    remove_abilities_all,
    remove_frozen_from_friendlies,
    return_all_enemies,
)
from .groups import (
    apply_effect_to_selection,
    build_target_candidates,
    choice,
    choose_option,
    resolve_option_effect,
    select_from_group,
)
from .selection import (
    damage_rival_and_select_enemy,
    discard_draw_and_kill_enemy,
    draw_and_empower_predator,
    draw_then_discard,
    eat_prey_instead_of_attacking,
    force_opponent_discard,
    heal_and_select_target_for_damage,
    play_spell_from_hand,
    play_spells_from_hand,
    select_and_discard,
    select_card_to_discard,
    select_consume,
    select_creature_for_buff,
    select_creature_for_damage,
    select_creature_from_deck_with_keyword,
    select_creature_to_copy,
    select_creature_to_restore,
    select_creature_to_transform,
    select_enemy_creature_for_damage,
    select_enemy_for_keyword,
    select_enemy_prey_to_consume,
    select_enemy_to_freeze,
    select_enemy_to_kill,
    select_enemy_to_return,
    select_enemy_to_return_to_opponent_hand,
    select_friendly_creature_to_sacrifice,
    select_predator_for_end_effect,
    select_prey_for_buff,
    select_target,
    select_target_for_damage,
    steal_creature,
    tutor_and_play_spell,
    tutor_from_deck,
)
from .traps import (
    apply_neurotoxic_to_attacker,
    deal_damage_to_attacker,
    freeze_attacker,
    get_creature_from_trap_context,
    get_current_creature_from_field,
    get_fresh_creature_for_trap,
    kill_attacker,
    negate_and_damage_all,
    negate_and_kill_attacker,
    negate_combat,
    remove_triggered_creature_abilities,
    return_targeted_to_hand,
    return_triggered_to_hand,
)
from .tribal import (
    buff_all_molt,
    buff_all_pride,
    buff_all_shell,
    buff_all_stalking,
    buff_atk_per_webbed,
    buff_hp_per_shell,
    chase_prey,
    damage_equal_to_stalk_bonus,
    damage_equal_to_total_shell,
    damage_webbed,
    draw_if_enemy_webbed,
    draw_per_molt,
    draw_per_pride,
    draw_per_shell,
    draw_per_stalking,
    draw_per_webbed,
    enter_stalk_mode,
    enter_stalk_mode_on_play,
    grant_molt,
    grant_pride,
    grant_shell,
    heal_per_pride,
    heal_per_shell,
    heal_per_webbed,
    regenerate_all_shells,
    summon_tokens_per_pride,
    summon_tokens_per_shell,
    summon_tokens_per_webbed,
    web_all_enemies,
    web_attacker,
    web_random_enemy,
    web_target,
)

__all__ = [
    "add_keyword",
    "add_to_hand",
    "allow_replay",
    "buff",
    "buff_stats",
    "copy_abilities",
    "damage_creature",
    "damage_rival",
    "destroy",
    "discard_cards",
    "draw",
    "draw_and_reveal_hand",
    "end_turn",
    "grant_keyword",
    "heal",
    "kill_creature",
    "negate_and_allow_replay",
    "negate_attack",
    "negate_damage",
    "negate_play",
    "regen_self",
    "remove_abilities",
    "reveal_cards",
    "reveal_hand",
    "revive_creature",
    "summon_tokens",
    "track_attack_for_regen_heal",
    "transform_card",
    "tutor",
    "handle_targeted_response",
    "make_targeted_selection",
    "resolve_dynamic_count",
    "sort_cards_for_selection",
    "damage_all_and_freeze_all",
    "damage_all_creatures",
    "damage_all_enemies_multiple",
    "damage_all_enemy_creatures",
    "damage_both_players",
    "damage_enemies_after_combat",
    "damage_other_creatures",
    "freeze_all_creatures",
    "freeze_all_enemies",
    "grant_barrier",
    "kill_all",
    "kill_all_enemy_creatures",
    "kill_enemy_tokens",
    "kill_enemy_tokens_effect",
    "regen_other_creatures",
    "remove_abilities_all",
    "remove_frozen_from_friendlies",
    "return_all_enemies",
    "apply_effect_to_selection",
    "build_target_candidates",
    "choice",
    "choose_option",
    "resolve_option_effect",
    "select_from_group",
    "damage_rival_and_select_enemy",
    "discard_draw_and_kill_enemy",
    "draw_and_empower_predator",
    "draw_then_discard",
    "eat_prey_instead_of_attacking",
    "force_opponent_discard",
    "heal_and_select_target_for_damage",
    "play_spell_from_hand",
    "play_spells_from_hand",
    "select_and_discard",
    "select_card_to_discard",
    "select_consume",
    "select_creature_for_buff",
    "select_creature_for_damage",
    "select_creature_from_deck_with_keyword",
    "select_creature_to_copy",
    "select_creature_to_restore",
    "select_creature_to_transform",
    "select_enemy_creature_for_damage",
    "select_enemy_for_keyword",
    "select_enemy_prey_to_consume",
    "select_enemy_to_freeze",
    "select_enemy_to_kill",
    "select_enemy_to_return",
    "select_enemy_to_return_to_opponent_hand",
    "select_friendly_creature_to_sacrifice",
    "select_predator_for_end_effect",
    "select_prey_for_buff",
    "select_target",
    "select_target_for_damage",
    "steal_creature",
    "tutor_and_play_spell",
    "tutor_from_deck",
    "apply_neurotoxic_to_attacker",
    "deal_damage_to_attacker",
    "freeze_attacker",
    "get_creature_from_trap_context",
    "get_current_creature_from_field",
    "get_fresh_creature_for_trap",
    "kill_attacker",
    "negate_and_damage_all",
    "negate_and_kill_attacker",
    "negate_combat",
    "remove_triggered_creature_abilities",
    "return_targeted_to_hand",
    "return_triggered_to_hand",
    "buff_all_molt",
    "buff_all_pride",
    "buff_all_shell",
    "buff_all_stalking",
    "buff_atk_per_webbed",
    "buff_hp_per_shell",
    "chase_prey",
    "damage_equal_to_stalk_bonus",
    "damage_equal_to_total_shell",
    "damage_webbed",
    "draw_if_enemy_webbed",
    "draw_per_molt",
    "draw_per_pride",
    "draw_per_shell",
    "draw_per_stalking",
    "draw_per_webbed",
    "enter_stalk_mode",
    "enter_stalk_mode_on_play",
    "grant_molt",
    "grant_pride",
    "grant_shell",
    "heal_per_pride",
    "heal_per_shell",
    "heal_per_webbed",
    "regenerate_all_shells",
    "summon_tokens_per_pride",
    "summon_tokens_per_shell",
    "summon_tokens_per_webbed",
    "web_all_enemies",
    "web_attacker",
    "web_random_enemy",
    "web_target",
]

"""
Food Chain - Effect resolution engine for a creature card game.

Cards carry declarative effect definitions; the engine turns them into
result descriptors that the game's state layer applies:
- Targeting rules (Lure, Invisible, Acuity, Hidden)
- Effect primitives, combinators and a registry-driven resolver
- Selection prompts that can chain into one another
- Authoring-time validation of card effect data
"""

__version__ = "0.1.0"

# swz_PowerEditor/core/combos.py
from __future__ import annotations
from dataclasses import dataclass, field, fields
import logging

from .model import Power

_LOG = logging.getLogger(__name__)

# ComboTree slot -> Power attribute naming the next power
SLOT_FIELDS: dict[str, str] = {
    "normal":       "combo_name",
    "if_hit":       "combo_override_if_hit",
    "if_release":   "combo_override_if_release",
    "if_wall":      "combo_override_if_wall",
    "if_button":    "combo_override_if_button",
    "if_interrupt": "combo_override_if_interrupt",
}
DIRECTION_FIELD = "combo_override_if_dir"


@dataclass
class ActiveInput:
    direction: str    # upper-cased key from "DIR:PowerName"
    combo: Power


@dataclass
class ComboTree:
    """
    Where a power leads (or, for the reverse tree, which powers lead to it).

    - normal:       the combo naturally proceeds here unless another condition applies
    - if_hit:       the power connected
    - if_release:   the attack button was released
    - if_wall:      the power touched a wall
    - if_button:    an attack button was pressed again before the power ended
    - if_dir:       per held direction
    - if_interrupt: the power was interrupted (e.g. the caster got hit)
    """
    normal: Power | None = None
    if_hit: Power | None = None
    if_release: Power | None = None
    if_wall: Power | None = None
    if_button: Power | None = None
    if_dir: list[ActiveInput] = field(default_factory=list)
    if_interrupt: Power | None = None

    def is_empty(self) -> bool:
        return all(not getattr(self, f.name) for f in fields(self))


def _name(power: Power) -> str:
    return (power.power_name or "").lower()

def find_power_by_name(powers: list[Power], name: str | None) -> Power | None:
    if not name:
        return None
    wanted = name.lower()
    return next((p for p in powers if _name(p) == wanted), None)

def parse_direction_inputs(value: str | None) -> list[tuple[str, str]]:
    """'Up:PowerA,Down:PowerB' -> [('UP', 'PowerA'), ('DOWN', 'PowerB')]; bad entries are dropped."""
    if not value:
        return []
    out = []
    for entry in value.split(","):
        parts = entry.split(":")
        if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
            _LOG.debug("invalid direction input %r", entry)
            continue
        out.append((parts[0].strip().upper(), parts[1].strip()))
    return out

def combo_tree(power: Power, powers: list[Power]) -> ComboTree | None:
    tree = ComboTree()
    for slot, attr in SLOT_FIELDS.items():
        setattr(tree, slot, find_power_by_name(powers, getattr(power, attr)))

    for direction, target in parse_direction_inputs(getattr(power, DIRECTION_FIELD)):
        combo = find_power_by_name(powers, target)
        if combo is not None:
            tree.if_dir.append(ActiveInput(direction, combo))

    return None if tree.is_empty() else tree

def reverse_combo_tree(target: Power, powers: list[Power]) -> ComboTree | None:
    """Powers that combo into ``target`` (first match per slot, every direction entry)."""
    name = _name(target)
    if not name:
        return None

    tree = ComboTree()
    for slot, attr in SLOT_FIELDS.items():
        match = next((p for p in powers if (getattr(p, attr) or "").lower() == name), None)
        setattr(tree, slot, match)

    for p in powers:
        for direction, next_name in parse_direction_inputs(getattr(p, DIRECTION_FIELD)):
            if next_name.lower() == name:
                tree.if_dir.append(ActiveInput(direction, p))

    return None if tree.is_empty() else tree

# swz_PowerEditor/core/editing.py
from __future__ import annotations
from dataclasses import replace

from .model import POWER_SCHEMA, SCHEMA_BY_ATTR, Power, empty_power

def filter_powers(powers: list[Power], query: str) -> list[Power]:
    """Case-insensitive substring search on power_name; empty query keeps everything."""
    if not query:
        return list(powers)
    q = query.lower()
    return [p for p in powers if p.power_name and q in p.power_name.lower()]

def filter_fields(power: Power, query: str) -> list[tuple[str, object]]:
    q = (query or "").lower()
    return [(f.attr, getattr(power, f.attr)) for f in POWER_SCHEMA if q in f.attr.lower()]

def create_power(powers: list[Power], selected_id: int | None = None) -> tuple[list[Power], Power]:
    """
    New blank power with the next sequential id, placed right after the
    selected power (or at the end when nothing is selected).
    """
    new_id = len(powers) + 1
    new_power = replace(empty_power(), power_id=new_id, power_name=f"New Power {new_id}")

    updated = list(powers)
    idx = next((i for i, p in enumerate(updated) if selected_id is not None and p.power_id == selected_id), -1)
    if idx != -1:
        updated.insert(idx + 1, new_power)
    else:
        updated.append(new_power)
    return updated, new_power

def delete_power(powers: list[Power], power_id: int | None) -> list[Power]:
    return [p for p in powers if p.power_id != power_id]

def update_power(powers: list[Power], updated: Power) -> list[Power]:
    return [updated if p.power_id == updated.power_id else p for p in powers]

def enum_values(powers: list[Power], attr: str) -> list[str]:
    """Distinct values seen for a field, e.g. to fill a dropdown for enum columns."""
    if attr not in SCHEMA_BY_ATTR:
        raise KeyError(f"unknown power field {attr!r}")
    seen = {getattr(p, attr) for p in powers}
    return sorted(str(v) for v in seen if v not in (None, ""))

# swz_PowerEditor/commands.py
"""
Command surface consumed by the GUI. Each command takes the session's
EditorContext explicitly and raises PowerEditorError subclasses whose
message is meant to be shown to the user as-is.

The list operations the GUI applies to its working copy (create, delete,
update, field filter) are the pure functions of core/editing.py;
search_power_list and get_enum_values run them against the loaded list.
"""
from __future__ import annotations
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
import logging

from .core.editing import enum_values, filter_powers
from .core.model import Power
from .core.store import PowerStore
from .loaders.descriptions import load_descriptions
from .loaders.powertypes_codec import load_powers, save_powers

_LOG = logging.getLogger(__name__)

@dataclass
class EditorContext:
    store: PowerStore = field(default_factory=PowerStore)
    cfg: dict = field(default_factory=dict)

def get_descriptions(ctx: EditorContext) -> dict[str, str]:
    return load_descriptions(ctx.cfg)

def get_power_list(ctx: EditorContext) -> list[Power]:
    return ctx.store.get()

def load_powers_from_path(ctx: EditorContext, file_path: str | Path) -> list[Power]:
    _LOG.info("loading powers from %s", file_path)
    powers = load_powers(Path(file_path), ctx.cfg)
    ctx.store.replace(powers)
    return powers

def save_power_list_to_path(ctx: EditorContext, file_path: str | Path,
                            updated_list: Iterable[Power | Mapping]) -> None:
    # the caller's list is written as-is; the store keeps what was loaded
    save_powers(Path(file_path), updated_list, ctx.cfg)

def search_power_list(ctx: EditorContext, query: str) -> list[Power]:
    return filter_powers(ctx.store.get(), query)

def get_enum_values(ctx: EditorContext, attr: str) -> list[str]:
    """Dropdown choices for ``attr``; unknown attribute names raise KeyError."""
    return enum_values(ctx.store.get(), attr)

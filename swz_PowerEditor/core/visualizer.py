# swz_PowerEditor/core/visualizer.py
from __future__ import annotations
from dataclasses import dataclass, field
import numpy as np

from .model import Power

# list-valued power fields: one comma-separated entry per cast
CAST_FIELDS: tuple[str, ...] = (
    "cast_impulse_x", "cast_impulse_y", "fire_impulse_x", "fire_impulse_y",
    "base_damage", "variable_impulse", "fixed_impulse",
    "impulse_offset_x", "impulse_offset_y",
)

@dataclass
class Hitbox:
    aoe_radius_x: list[str] = field(default_factory=list)
    aoe_radius_y: list[str] = field(default_factory=list)
    center_offset_x: list[str] = field(default_factory=list)
    center_offset_y: list[str] = field(default_factory=list)

@dataclass
class CastTime:
    startup: float
    active: float

@dataclass
class Cast:
    cast_time: CastTime | None = None
    hitboxes: Hitbox | None = None
    cast_impulse_x: str | None = None
    cast_impulse_y: str | None = None
    fire_impulse_x: str | None = None
    fire_impulse_y: str | None = None
    base_damage: str | None = None
    variable_impulse: str | None = None
    fixed_impulse: str | None = None
    impulse_offset_x: str | None = None
    impulse_offset_y: str | None = None

@dataclass
class VisualizerData:
    casts: list[Cast] = field(default_factory=list)
    error: str | None = None

@dataclass
class ResolvedCast:
    """One cast with values missing from it taken from the first cast."""
    hitbox: Hitbox
    base_damage: str
    variable_impulse: str
    fixed_impulse: str
    impulse_offset_x: str | None
    impulse_offset_y: str | None


def _split(value: str | None, sep: str = ",") -> list[str]:
    return value.split(sep) if value else []

def to_number(s: str | None) -> float:
    """Lenient number: anything unparsable counts as 0."""
    try:
        v = float(s)
    except (TypeError, ValueError):
        return 0.0
    return v if np.isfinite(v) else 0.0

def parse_hitboxes(rx: str | None, ry: str | None, cx: str | None, cy: str | None) -> list[Hitbox]:
    """Casts are comma-separated, hitboxes inside one cast are '&'-separated."""
    parts = [[s.split("&") if s else [] for s in _split(v)] for v in (rx, ry, cx, cy)]
    length = max(len(p) for p in parts)
    out: list[Hitbox] = []
    for i in range(length):
        cells = [p[i] if i < len(p) else [] for p in parts]
        out.append(Hitbox(*cells))
    return out

def parse_cast_time(value: str) -> CastTime:
    """'startup:active@extra' -> CastTime(startup, active + 1)."""
    bits = value.split("@")[0].split(":")
    startup = to_number(bits[0]) if bits else 0.0
    active = to_number(bits[1]) if len(bits) > 1 else 0.0
    return CastTime(startup=startup, active=active + 1)

def get_visualizer_data(power: Power | None) -> VisualizerData:
    if power is None:
        return VisualizerData(error="Undefined power")

    cast_times = _split(power.cast_time)
    columns = {name: _split(getattr(power, name)) for name in CAST_FIELDS}
    hitboxes = parse_hitboxes(power.aoe_radius_x, power.aoe_radius_y,
                              power.center_offset_x, power.center_offset_y)

    length = max([len(cast_times), len(hitboxes)] + [len(v) for v in columns.values()])

    casts: list[Cast] = []
    for i in range(length):
        ct = cast_times[i] if i < len(cast_times) else ""
        values = {name: (col[i] if i < len(col) and col[i] else None) for name, col in columns.items()}
        casts.append(Cast(
            cast_time=parse_cast_time(ct) if ct else None,
            hitboxes=hitboxes[i] if i < len(hitboxes) else None,
            **values,
        ))
    return VisualizerData(casts=casts)

def resolve_cast(data: VisualizerData, index: int) -> ResolvedCast:
    """
    Values defined once apply to every cast: empty entries in cast ``index``
    fall back to the first cast (damage and impulses default to '0').
    """
    if not data.casts:
        return ResolvedCast(Hitbox(), "0", "0", "0", None, None)
    first = data.casts[0]
    cur = data.casts[index] if 0 <= index < len(data.casts) else None

    cur_hb = (cur.hitboxes if cur else None) or Hitbox()
    first_hb = first.hitboxes or Hitbox()
    hitbox = Hitbox(
        aoe_radius_x=cur_hb.aoe_radius_x or first_hb.aoe_radius_x,
        aoe_radius_y=cur_hb.aoe_radius_y or first_hb.aoe_radius_y,
        center_offset_x=cur_hb.center_offset_x or first_hb.center_offset_x,
        center_offset_y=cur_hb.center_offset_y or first_hb.center_offset_y,
    )

    def pick(name: str, default):
        v = getattr(cur, name) if cur else None
        return v or getattr(first, name) or default

    return ResolvedCast(
        hitbox=hitbox,
        base_damage=pick("base_damage", "0"),
        variable_impulse=pick("variable_impulse", "0"),
        fixed_impulse=pick("fixed_impulse", "0"),
        impulse_offset_x=pick("impulse_offset_x", None),
        impulse_offset_y=pick("impulse_offset_y", None),
    )

# ---------- geometry ----------
def parse_vector(value: str | None) -> np.ndarray:
    """'~'-separated components of an interpolated vector; bad entries become NaN."""
    if not value:
        return np.array([], dtype=float)
    out = []
    for s in value.split("~"):
        try:
            out.append(float(s))
        except ValueError:
            out.append(np.nan)
    return np.asarray(out, dtype=float)

def degrees_to_vector(degrees: float) -> tuple[float, float]:
    rad = np.deg2rad(degrees)
    return float(np.cos(rad)), float(np.sin(rad))

def vector_to_degrees(x: float, y: float) -> float:
    return float(np.rad2deg(np.arctan2(y, x)))

def pill_edge_point(x: float, y: float, cx: float, cy: float, rx: float, ry: float) -> tuple[float, float]:
    """
    Project (x, y) onto the outline of a pill centred on (cx, cy) with
    half-extents rx/ry (horizontal pill when rx > ry, vertical otherwise).
    """
    dx, dy = x - cx, y - cy
    if dx == 0 and dy == 0:
        return cx, cy

    if rx > ry:
        half = rx - ry
        if abs(dx) > half:
            ccx = cx + half if dx > 0 else cx - half
            ndx = x - ccx
            dist = np.hypot(ndx, dy)
            return float(ccx + ndx / dist * ry), float(cy + dy / dist * ry)
        if abs(dy) > ry:
            return float(cx + dx), float(cy + dy * abs(ry / dy))
    else:
        half = ry - rx
        if abs(dy) > half:
            ccy = cy + half if dy > 0 else cy - half
            ndy = y - ccy
            dist = np.hypot(dx, ndy)
            return float(cx + dx / dist * rx), float(ccy + ndy / dist * rx)
        if abs(dx) > rx:
            return float(cx + dx * abs(rx / dx)), float(cy + dy)

    # inside the pill: push out along the ellipse through the point
    scale = np.sqrt((dx * dx) / (rx * rx) + (dy * dy) / (ry * ry))
    return float(cx + dx / scale), float(cy + dy / scale)

# swz_PowerEditor/core/plotting.py
from __future__ import annotations
from pathlib import Path
import re
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Ellipse, FancyBboxPatch

from .model import Power
from .visualizer import get_visualizer_data, resolve_cast, parse_vector, pill_edge_point, to_number, vector_to_degrees

# stand-in character until hurtboxes are read from their own file
PLAYER_X, PLAYER_Y = 200.0, 300.0
PLAYER_W, PLAYER_H = 100.0, 100.0

def _sanitize(name: str) -> str:
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("_")
    return s[:120] if len(s) > 120 else s

def _at(values: np.ndarray, i: int) -> float | None:
    return float(values[i]) if i < len(values) else None

def _unset(v: float | None) -> bool:
    return v is None or np.isnan(v) or v == 0

def _draw_direction_lines(ax, cx: float, cy: float, rx: float, ry: float,
                          vx_raw: str | None, vy_raw: str | None) -> None:
    vxs, vys = parse_vector(vx_raw), parse_vector(vy_raw)
    for i in range(max(len(vxs), len(vys))):
        vx, vy = _at(vxs, i), _at(vys, i)

        # angle depends on the target's position: mark the centre instead
        if vx == 0 and vy == 0:
            ax.plot([cx], [cy], marker="*", markersize=12, color="white", markeredgecolor="black")
            continue
        if _unset(vx) and not _unset(vy) and (i == 0 or _unset(_at(vxs, i - 1))):
            ax.plot([cx], [cy], marker="*", markersize=12, color="white", markeredgecolor="black")
            continue
        if _unset(vx) and _unset(vy):
            continue

        vx = vx if vx is not None and not np.isnan(vx) else (_at(vxs, 0) or 0.0)
        vy = vy if vy is not None and not np.isnan(vy) else (_at(vys, 0) or 0.0)
        ex, ey = pill_edge_point(cx + vx, cy + vy, cx, cy, rx, ry)
        # interpolated segments alternate colour
        ax.plot([cx, ex], [cy, ey], color="white" if i % 2 == 0 else "blue", linewidth=3, alpha=0.5)
        # y is flipped on screen, so negate it for a counter-clockwise angle
        ax.annotate(f"{vector_to_degrees(vx, -vy):.0f}°", (ex, ey), fontsize=7, color="white")

def save_cast_plot(power: Power, cast_index: int, out_dir: Path) -> Path | None:
    """
    Side view of one cast: ground, a stand-in player and the cast's pill-shaped
    hitboxes with their impulse directions. Returns the PNG path or None.
    """
    label = power.power_name or str(power.power_id or "power")
    data = get_visualizer_data(power)
    if data.error or not data.casts:
        print(f"[INFO] {label}: no cast data; skipping hitbox plot.")
        return None
    if not 0 <= cast_index < len(data.casts):
        print(f"[INFO] {label}: cast {cast_index + 1} out of range (1..{len(data.casts)}).")
        return None

    cast = resolve_cast(data, cast_index)
    hb = cast.hitbox
    out_dir.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(6, 8))
    ax.set_facecolor("#444444")
    ax.axhline(PLAYER_Y, color="black", linewidth=2)
    ax.add_patch(Ellipse((PLAYER_X, PLAYER_Y - PLAYER_H / 2), PLAYER_W, PLAYER_H,
                         facecolor="yellow", edgecolor="black", linewidth=2))

    drawn = 0
    if data.casts[cast_index].base_damage != "0":
        for i, rx_raw in enumerate(hb.aoe_radius_x):
            ry_raw = hb.aoe_radius_y[i] if i < len(hb.aoe_radius_y) else ""
            if not rx_raw or not ry_raw:
                continue
            rx, ry = abs(to_number(rx_raw)), abs(to_number(ry_raw))
            if rx == 0 or ry == 0:
                continue
            ox = hb.center_offset_x[i] if i < len(hb.center_offset_x) else ""
            oy = hb.center_offset_y[i] if i < len(hb.center_offset_y) else ""
            cx = PLAYER_X + to_number(ox)
            cy = PLAYER_Y - PLAYER_H / 2 + to_number(oy)
            ax.add_patch(FancyBboxPatch((cx - rx, cy - ry), 2 * rx, 2 * ry,
                                        boxstyle=f"round,pad=0,rounding_size={min(rx, ry)}",
                                        facecolor="red", alpha=0.2, edgecolor="red"))
            _draw_direction_lines(ax, cx, cy, rx, ry, cast.impulse_offset_x, cast.impulse_offset_y)
            drawn += 1

    if not drawn:
        plt.close(fig)
        print(f"[INFO] {label}: cast {cast_index + 1} has no hitbox; skipping plot.")
        return None

    ax.set_xlim(0, 400)
    ax.set_ylim(PLAYER_Y + 500, PLAYER_Y - 500)   # screen coordinates: y grows downwards
    ax.set_aspect("equal")
    ax.set_title(f"{label} - cast {cast_index + 1}/{len(data.casts)} "
                 f"(damage {cast.base_damage}, {drawn} hitbox{'es' if drawn != 1 else ''})")
    fig.tight_layout()

    out_path = out_dir / f"{_sanitize(label) or 'power'}_cast{cast_index + 1:02d}.png"
    fig.savefig(out_path, dpi=160)
    plt.close(fig)
    print(f"[OK] {label}: cast {cast_index + 1} hitboxes → {out_path}")
    return out_path

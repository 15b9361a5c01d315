# swz_PowerEditor/main.py
from __future__ import annotations
from pathlib import Path
import logging
import sys
import yaml

from swz_PowerEditor.commands import (
    EditorContext, get_descriptions, load_powers_from_path, save_power_list_to_path,
    search_power_list,
)
from swz_PowerEditor.core.combos import find_power_by_name
from swz_PowerEditor.core.errors import PowerEditorError
from swz_PowerEditor.core.plotting import save_cast_plot
from swz_PowerEditor.core.visualizer import get_visualizer_data
from swz_PowerEditor.utils.detect import discover_power_files

def load_config(cfg_path: Path) -> dict:
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def main():
    # ---------- config ----------
    here = Path(__file__).resolve().parent
    cfg = load_config(here / "config.yaml")

    verbose = bool(cfg.get("logging", {}).get("verbose", True))
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format="[%(levelname)s] %(name)s: %(message)s")

    in_path = Path(cfg.get("input", {}).get("path", "powerTypes.csv")).resolve()
    recurse = bool(cfg.get("input", {}).get("recurse", True))
    if verbose:
        print(f"[cfg] input={in_path} (recurse={recurse})")

    # ---------- discover ----------
    if in_path.is_dir():
        detected = discover_power_files(in_path, recurse=recurse,
                                        sentinel=str(cfg.get("codec", {}).get("sentinel", "powerTypes")))
        if not detected:
            print(f"[INFO] No powerTypes files found under: {in_path}")
            sys.exit(0)
        if verbose:
            print(f"[detector] found {len(detected)} file(s); editing {detected[0].path.name}")
        in_path = detected[0].path

    ctx = EditorContext(cfg=cfg)

    # ---------- load ----------
    try:
        descriptions = get_descriptions(ctx)
        powers = load_powers_from_path(ctx, in_path)
    except PowerEditorError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)
    print(f"[OK] loaded {len(powers)} powers from {in_path.name} ({len(descriptions)} field descriptions)")

    # ---------- plots ----------
    plots = cfg.get("plots", {}) or {}
    if plots.get("enabled", False):
        out_dir = Path(plots.get("out_dir", "plots")).resolve()
        selected = []
        for name in plots.get("powers", []) or []:
            power = find_power_by_name(powers, str(name))
            if power is None:
                print(f"[skip] no power named {name!r}")
                continue
            selected.append(power)
        search = str(plots.get("search", "") or "")
        if search:
            matches = search_power_list(ctx, search)
            print(f"[INFO] search {search!r} matched {len(matches)} power(s)")
            selected += [p for p in matches if p not in selected]
        for power in selected:
            for idx in range(len(get_visualizer_data(power).casts)):
                save_cast_plot(power, idx, out_dir)

    # ---------- save ----------
    out_path = (cfg.get("output", {}) or {}).get("path")
    if out_path:
        try:
            save_power_list_to_path(ctx, Path(out_path).resolve(), powers)
        except PowerEditorError as e:
            print(f"[ERROR] {e}")
            sys.exit(1)
        print(f"[OK] wrote {len(powers)} powers → {out_path}")

if __name__ == "__main__":
    main()

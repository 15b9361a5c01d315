# swz_PowerEditor/utils/detect.py
from __future__ import annotations
from pathlib import Path
from dataclasses import dataclass
from typing import Literal

DEFAULT_SENTINEL = "powerTypes"

LayoutKind = Literal["sentinel", "bare", "empty"]

@dataclass(frozen=True)
class DetectedItem:
    path: Path        # actual path on disk
    kind: LayoutKind

def is_sentinel_line(line: str, sentinel: str = DEFAULT_SENTINEL, delimiter: str = ",") -> bool:
    """
    True when ``line`` is the format marker: first cell equals the sentinel and
    any further cells are empty (spreadsheet exports pad it with delimiters).
    """
    cells = line.lstrip("\ufeff").rstrip("\r\n").split(delimiter)
    if cells[0].strip() != sentinel:
        return False
    return not any(c.strip() for c in cells[1:])

def split_sentinel(text: str, sentinel: str = DEFAULT_SENTINEL,
                   delimiter: str = ",") -> tuple[LayoutKind, str]:
    """
    Classify a file body and strip the sentinel line if present.
    - first line is the sentinel -> ('sentinel', rest of text)
    - anything else              -> ('bare', text)
    - no content                 -> ('empty', '')
    """
    text = text.lstrip("\ufeff")
    if not text.strip():
        return "empty", ""
    first, sep, rest = text.partition("\n")
    if is_sentinel_line(first, sentinel, delimiter):
        return "sentinel", rest
    return "bare", text

def detect_layout(path: Path, sentinel: str = DEFAULT_SENTINEL, delimiter: str = ",",
                  encoding: str = "utf-8") -> LayoutKind:
    with path.open("r", encoding=encoding, newline="") as f:
        first = f.readline()
    if not first.strip():
        return "empty"
    return "sentinel" if is_sentinel_line(first, sentinel, delimiter) else "bare"

def discover_power_files(root: Path, recurse: bool = True,
                         sentinel: str = DEFAULT_SENTINEL) -> list[DetectedItem]:
    """
    If 'root' is a file -> return that one item.
    If 'root' is a folder -> collect .csv files whose first line is the sentinel.
    """
    if root.is_file():
        return [DetectedItem(root.resolve(), detect_layout(root, sentinel))]

    it = root.rglob("*.csv") if recurse else root.glob("*.csv")
    items: list[DetectedItem] = []
    for p in it:
        if not p.is_file():
            continue
        try:
            kind = detect_layout(p, sentinel)
        except (OSError, UnicodeDecodeError):
            continue
        if kind == "sentinel":
            items.append(DetectedItem(p.resolve(), kind))

    # deterministic ordering
    items.sort(key=lambda x: str(x.path))
    return items

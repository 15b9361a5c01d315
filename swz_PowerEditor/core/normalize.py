# swz_PowerEditor/core/normalize.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Literal
import math
import re

FieldKind = Literal["text", "integer", "float", "boolean", "enum"]

TEXT: FieldKind = "text"
INTEGER: FieldKind = "integer"
FLOAT: FieldKind = "float"
BOOLEAN: FieldKind = "boolean"
ENUM: FieldKind = "enum"

FIELD_KINDS: tuple[FieldKind, ...] = (TEXT, INTEGER, FLOAT, BOOLEAN, ENUM)

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class BoolLiterals:
    true: str = "TRUE"
    false: str = "FALSE"


DEFAULT_BOOL_LITERALS = BoolLiterals()


def to_int(raw: str) -> int:
    s = raw.strip()
    if not _INT_RE.fullmatch(s):
        raise ValueError(f"not an integer: {raw!r}")
    return int(s)


def to_float(raw: str) -> float:
    s = raw.strip()
    if not _FLOAT_RE.fullmatch(s):
        raise ValueError(f"not a number: {raw!r}")
    value = float(s)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {raw!r}")
    return value


def to_bool(raw: str, literals: BoolLiterals = DEFAULT_BOOL_LITERALS) -> bool:
    s = raw.strip().lower()
    if s == literals.true.lower():
        return True
    if s == literals.false.lower():
        return False
    raise ValueError(f"not a boolean ({literals.true}/{literals.false}): {raw!r}")


def format_float(value: float) -> str:
    """Stable text for a float: ``2`` for integral values, shortest repr otherwise."""
    if not math.isfinite(value):
        raise ValueError(f"cannot write non-finite number {value!r}")
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def decode_cell(kind: FieldKind, raw: str, literals: BoolLiterals = DEFAULT_BOOL_LITERALS):
    """Convert one cell to the Python value for ``kind``; empty cells give None."""
    if kind in (TEXT, ENUM):
        return raw if raw != "" else None
    if raw.strip() == "":
        return None
    if kind == INTEGER:
        return to_int(raw)
    if kind == FLOAT:
        return to_float(raw)
    if kind == BOOLEAN:
        return to_bool(raw, literals)
    raise ValueError(f"unknown field kind {kind!r}")


def encode_cell(kind: FieldKind, value, literals: BoolLiterals = DEFAULT_BOOL_LITERALS) -> str:
    """Canonical text for one value. Strings for typed kinds go through decode_cell first."""
    if value is None:
        return ""
    if kind in (TEXT, ENUM):
        return str(value)

    if isinstance(value, str):
        value = decode_cell(kind, value, literals)
        if value is None:
            return ""

    if kind == BOOLEAN:
        if not isinstance(value, bool):
            raise ValueError(f"expected a boolean, got {value!r}")
        return literals.true if value else literals.false

    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")

    if kind == INTEGER:
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int):
            raise ValueError(f"expected an integer, got {value!r}")
        return str(value)
    if kind == FLOAT:
        if not isinstance(value, (int, float)):
            raise ValueError(f"expected a number, got {value!r}")
        return format_float(float(value))
    raise ValueError(f"unknown field kind {kind!r}")


def coerce_value(kind: FieldKind, value, literals: BoolLiterals = DEFAULT_BOOL_LITERALS):
    """Normalize a loosely typed value (e.g. text typed into the GUI) to the field's type."""
    return decode_cell(kind, encode_cell(kind, value, literals), literals)

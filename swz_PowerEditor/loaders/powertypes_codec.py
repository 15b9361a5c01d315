# swz_PowerEditor/loaders/powertypes_codec.py
from __future__ import annotations
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
import io, logging, os, warnings
import pandas as pd

from ..core.errors import (
    PowerConfigError, PowerDecodeError, PowerFileNotFoundError, PowerIOError, RowDecodeError,
)
from ..core.model import HEADER_COLUMNS, POWER_SCHEMA, Power, header_line, power_from_dict
from ..core.normalize import (
    ENUM, FIELD_KINDS, FLOAT, INTEGER, TEXT, BoolLiterals, decode_cell, encode_cell,
)
from ..utils.detect import DEFAULT_SENTINEL, split_sentinel

_LOG = logging.getLogger(__name__)

# ---------- options ----------
@dataclass(frozen=True)
class CodecOptions:
    sentinel: str = DEFAULT_SENTINEL
    delimiter: str = ","
    encoding: str = "utf-8"
    literals: BoolLiterals = field(default_factory=BoolLiterals)
    strict_kinds: frozenset = frozenset({INTEGER, FLOAT})
    temp_suffix: str = ".tmp"
    line_terminator: str = "\n"

    @classmethod
    def from_config(cls, cfg: dict | None) -> "CodecOptions":
        """Read the ``codec`` section of config.yaml; missing keys keep defaults."""
        codec = (cfg or {}).get("codec", {}) or {}
        default = cls()

        strict = default.strict_kinds
        kinds = codec.get("strict_kinds", None)
        if isinstance(kinds, Iterable) and not isinstance(kinds, (str, bytes)):
            wanted = {str(k).strip().lower() for k in kinds}
            unknown = wanted.difference(FIELD_KINDS)
            if unknown:
                _LOG.warning("ignoring unknown strict_kinds in config: %s", ", ".join(sorted(unknown)))
            strict = frozenset(wanted.intersection(FIELD_KINDS))

        bools = codec.get("boolean_literals", {}) or {}
        literals = BoolLiterals(
            true=str(bools.get("true", default.literals.true)),
            false=str(bools.get("false", default.literals.false)),
        )

        delimiter = str(codec.get("delimiter", default.delimiter))
        if len(delimiter) != 1:
            raise PowerConfigError(f"codec.delimiter must be a single character, got {delimiter!r}")

        return cls(
            sentinel=str(codec.get("sentinel", default.sentinel)),
            delimiter=delimiter,
            encoding=str(codec.get("encoding", default.encoding)),
            literals=literals,
            strict_kinds=strict,
            temp_suffix=str(codec.get("temp_suffix", default.temp_suffix)),
            line_terminator=str(codec.get("line_terminator", default.line_terminator)),
        )

# ---------- row mapping ----------
def _row_label(row) -> str:
    name = row[0] if row else ""
    return "<unnamed>" if not isinstance(name, str) or not name else name

def decode_row(row, opts: CodecOptions, width: int | None = None) -> Power:
    """
    Positional decode of one row against a header ``width`` cells wide.
    Empty cells become None; a bad value in a strict kind rejects the row,
    in a lenient kind it falls back to None. Typed cells whose text is not
    canonical keep their source text in ``raw_cells`` for the next save.
    """
    width = len(POWER_SCHEMA) if width is None else width
    if len(row) > width and isinstance(row[width], str):
        raise RowDecodeError("row has more fields than the header")
    cells = row[:width]
    short = next((i for i, c in enumerate(cells) if not isinstance(c, str)), None)
    if short is not None:
        raise RowDecodeError(f"row is shorter than the header ({short} of {width} fields)")

    values, raw_cells = {}, {}
    for spec, raw in zip(POWER_SCHEMA, cells):
        try:
            value = decode_cell(spec.kind, raw, opts.literals)
        except ValueError as e:
            if spec.kind in opts.strict_kinds:
                raise RowDecodeError(f"{spec.column}: {e}") from e
            _LOG.warning("%s: %s in %s; leaving it empty", _row_label(row), e, spec.column)
            value = None
        values[spec.attr] = value
        if value is not None and spec.kind not in (TEXT, ENUM) \
                and encode_cell(spec.kind, value, opts.literals) != raw:
            raw_cells[spec.attr] = raw
    return Power(**values, raw_cells=raw_cells or None)

def _unchanged(kind, raw: str, cell: str, literals) -> bool:
    try:
        return decode_cell(kind, raw, literals) == decode_cell(kind, cell, literals)
    except ValueError:
        return False

def encode_row(power: Power | Mapping, opts: CodecOptions) -> list[str]:
    """Canonical cells, except typed values still equal to their loaded source text."""
    if isinstance(power, Mapping):
        power = power_from_dict(power, opts.literals)
    raw_cells = getattr(power, "raw_cells", None) or {}
    cells = []
    for spec in POWER_SCHEMA:
        value = getattr(power, spec.attr)
        try:
            cell = encode_cell(spec.kind, value, opts.literals)
        except ValueError as e:
            name = getattr(power, "power_name", None) or "<unnamed>"
            raise PowerDecodeError(f"Cannot write {spec.column} of power {name!r}: {e}") from e
        raw = raw_cells.get(spec.attr)
        if cell and raw is not None and _unchanged(spec.kind, raw, cell, opts.literals):
            cell = raw
        cells.append(cell)
    return cells

# ---------- parsing ----------
def _read_frame(body: str, opts: CodecOptions, source: str) -> tuple[pd.DataFrame, int]:
    """Data rows of ``body`` plus the header width; one spare column catches overlong rows."""
    header, _, rows = body.partition("\n")
    width = len(header.rstrip("\r").split(opts.delimiter))
    if width != len(HEADER_COLUMNS):
        _LOG.warning("%s: header has %d columns, expected %d; mapping by position",
                     source, width, len(HEADER_COLUMNS))

    names = [f"c{i}" for i in range(width + 1)]
    if not rows.strip():
        return pd.DataFrame(columns=names, dtype=object), width

    try:
        # rows wider than names are cut to fit; the spare column still flags them
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            frame = pd.read_csv(
                io.StringIO(rows),
                sep=opts.delimiter,
                header=None,
                names=names,
                dtype=object,
                keep_default_na=False,
                na_filter=False,
                index_col=False,
                skip_blank_lines=True,
                engine="python",
            )
    except pd.errors.ParserError as e:
        raise PowerDecodeError(f"Cannot parse {source}: {e}") from e
    return frame, width

# ---------- public API ----------
def load_powers(path: Path | str, cfg: dict | None = None) -> list[Power]:
    """
    Accepts: a powerTypes file with or without the sentinel line.
    Returns: list[Power] in file order; malformed rows are logged and skipped.
    """
    opts = CodecOptions.from_config(cfg)
    path = Path(path)
    if not path.exists():
        raise PowerFileNotFoundError(f"Error: File not found at {path}")

    try:
        text = path.read_text(encoding=opts.encoding)
    except UnicodeDecodeError as e:
        raise PowerDecodeError(f"Cannot decode {path.name} as {opts.encoding}: {e}") from e
    except OSError as e:
        raise PowerIOError(f"Cannot read {path}: {e}") from e

    layout, body = split_sentinel(text, opts.sentinel, opts.delimiter)
    if not body.strip():
        _LOG.warning("%s has no header line; nothing to load", path.name)
        return []
    _LOG.debug("%s layout: %s", path.name, layout)

    frame, width = _read_frame(body, opts, path.name)

    powers: list[Power] = []
    skipped = 0
    for row in frame.itertuples(index=False, name=None):
        try:
            powers.append(decode_row(row, opts, width))
        except RowDecodeError as e:
            skipped += 1
            _LOG.warning("skipping power %s in %s: %s", _row_label(row), path.name, e)

    _LOG.info("loaded %d powers from %s (%d rows skipped after parsing)", len(powers), path.name, skipped)
    return powers

def _discard(tmp: Path) -> None:
    try:
        tmp.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        _LOG.warning("could not remove temporary file %s: %s", tmp, e)

def save_powers(path: Path | str, records: Iterable[Power | Mapping], cfg: dict | None = None) -> None:
    """
    Write sentinel + canonical header + one row per record to a sibling temp
    file, then rename it over ``path``. ``path`` is untouched on any failure.
    """
    opts = CodecOptions.from_config(cfg)
    path = Path(path)
    rows = [encode_row(r, opts) for r in records]
    frame = pd.DataFrame(rows, columns=list(HEADER_COLUMNS), dtype=object)

    tmp = path.with_name(path.name + opts.temp_suffix)
    try:
        with tmp.open("w", encoding=opts.encoding, newline="") as f:
            f.write(opts.sentinel + opts.line_terminator)
            f.write(header_line(opts.delimiter) + opts.line_terminator)
            frame.to_csv(f, sep=opts.delimiter, header=False, index=False,
                         lineterminator=opts.line_terminator)
            f.flush()
        os.replace(tmp, path)
    except OSError as e:
        _discard(tmp)
        raise PowerIOError(f"Cannot save {path}: {e}") from e

    _LOG.info("saved %d powers to %s", len(rows), path.name)


# swz_PowerEditor/loaders/descriptions.py
from __future__ import annotations
from pathlib import Path
import json
import logging

from ..core.errors import PowerDecodeError, PowerFileNotFoundError, PowerIOError

_LOG = logging.getLogger(__name__)

DESCRIPTIONS_FILE = "power_desc.json"
RESOURCE_DIR = Path(__file__).resolve().parent.parent / "resources"

def resolve_descriptions_path(cfg: dict | None = None) -> Path:
    """Config override (``descriptions.path``) or the bundled resource."""
    override = ((cfg or {}).get("descriptions", {}) or {}).get("path")
    if override:
        return Path(override).expanduser()
    return RESOURCE_DIR / DESCRIPTIONS_FILE

def load_descriptions(cfg: dict | None = None) -> dict[str, str]:
    """
    Read the field/power description table fresh on every call.
    All-or-nothing: any malformed entry rejects the whole file.
    """
    path = resolve_descriptions_path(cfg)
    if not path.exists():
        raise PowerFileNotFoundError(f"Error: description file not found at {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PowerDecodeError(f"Malformed description file {path.name}: {e}") from e
    except OSError as e:
        raise PowerIOError(f"Cannot read {path}: {e}") from e

    if not isinstance(data, dict):
        raise PowerDecodeError(f"Malformed description file {path.name}: expected a JSON object")
    for key, value in data.items():
        if not isinstance(value, str):
            raise PowerDecodeError(
                f"Malformed description file {path.name}: value for {key!r} is not a string")

    _LOG.debug("loaded %d descriptions from %s", len(data), path)
    return data

# swz_PowerEditor/core/store.py
from __future__ import annotations
from typing import Iterable
import threading

from .errors import PowerListNotLoadedError
from .model import Power, copy_power


class PowerStore:
    """
    Holds the power list of the current editing session (or nothing before the
    first load). Only whole-list reads and writes; each is atomic under one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._powers: list[Power] | None = None

    @property
    def is_loaded(self) -> bool:
        with self._lock:
            return self._powers is not None

    def get(self) -> list[Power]:
        with self._lock:
            if self._powers is None:
                raise PowerListNotLoadedError()
            return [copy_power(p) for p in self._powers]

    def replace(self, powers: Iterable[Power]) -> None:
        snapshot = [copy_power(p) for p in powers]
        with self._lock:
            self._powers = snapshot

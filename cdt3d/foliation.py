# cdt3d/foliation.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

import numpy as np

from . import get_logger
from .engine import Triangulation
from .errors import FoliationConfigError

logger = get_logger(__name__)

MAX_FOLIATION_FIX_PASSES = 20


@dataclass(frozen=True)
class FoliationCheck:
    """Результат перевірки: скільки тетр мають коректну фоліацію, а скільки ні."""
    valid: int
    invalid: int

    @property
    def total(self) -> int:
        return self.valid + self.invalid

    @property
    def ok(self) -> bool:
        return self.invalid == 0

    @property
    def invalid_ratio(self) -> float:
        return self.invalid / self.total if self.total else 0.0

    def __bool__(self) -> bool:
        return self.ok


def _spans(tri: Triangulation):
    """Знімок: тетри, мітки їх вершин (m, 4) і структурна валідність."""
    cells = tri.finite_cells()
    times = tri.labels()[cells] if len(cells) else np.empty((0, 4), dtype=np.int64)
    return cells, times, tri.cell_validity()


def _log_cells(tri: Triangulation, cells: np.ndarray, times: np.ndarray,
               structural: np.ndarray, foliated: np.ndarray) -> None:
    try:
        for i, cell in enumerate(cells):
            if not structural[i]:
                logger.debug("The following cell is invalid.")
                continue
            logger.debug("The following cell is valid.")
            for k, vid in enumerate(cell):
                logger.debug("Vertex %d is %s with timeslice %d", k, tri.point(int(vid)), times[i, k])
            logger.debug("Foliation is %s for this cell.", "valid" if foliated[i] else "invalid")
    except Exception as e:  # діагностика не повинна ламати пайплайн
        logger.warning("Cell diagnostics failed: %s", e)


def check_timeslices(tri: Triangulation, output: bool = False) -> FoliationCheck:
    """
    Перевіряє кожну скінченну тетру.
    Структурно валідна тетра (за предикатом рушія) має коректну фоліацію,
    якщо max(мітка) - min(мітка) == 1. Структурно невалідні рахуються як
    невалідні без перевірки міток.
    """
    cells, times, structural = _spans(tri)
    if len(cells):
        span = times.max(axis=1) - times.min(axis=1)
        foliated = structural & (span == 1)
    else:
        foliated = np.zeros(0, dtype=bool)
    valid = int(foliated.sum())
    check = FoliationCheck(valid=valid, invalid=len(cells) - valid)

    if output:
        _log_cells(tri, cells, times, structural, foliated)
        logger.info("There are %d invalid cells and %d valid cells in this triangulation.",
                    check.invalid, check.valid)
    return check


def fix_timeslices(tri: Triangulation, output: bool = False) -> int:
    """
    Один прохід ремонту: у кожній структурно валідній тетрі з max - min != 1
    видаляємо вершину з найбільшою міткою (першу таку), рушій ретріангулює околицю.

    Прохід іде по знімку тетр на момент виклику. Тетри, чию вершину вже
    видалено в цьому ж проході, більше не існують і пропускаються.
    Структурно невалідні тетри не чіпаємо.
    Повертає кількість видалених вершин; після виклику треба знову перевірити.
    """
    logger.info("Fixing foliation....")
    cells, times, structural = _spans(tri)
    if len(cells) == 0:
        return 0
    cells = cells.copy()
    max_local = times.argmax(axis=1)
    span = times.max(axis=1) - times.min(axis=1)
    bad = np.flatnonzero(structural & (span != 1))

    removed: set[int] = set()
    for i in bad:
        cell = cells[i].tolist()
        if removed.intersection(cell):
            continue
        vid = cell[max_local[i]]
        tri.remove(vid)
        removed.add(vid)
        if output:
            logger.debug("Vertex %d of cell removed.", max_local[i])
    return len(removed)


class RepairOutcome(Enum):
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class RetryPolicy:
    """Скільки проходів ремонту дозволено до здачі (м'яка відмова)."""
    max_passes: int = MAX_FOLIATION_FIX_PASSES

    def __post_init__(self):
        if self.max_passes < 0:
            raise FoliationConfigError(f"max_passes must be >= 0, got {self.max_passes}")


@dataclass(frozen=True)
class RepairReport:
    outcome: RepairOutcome
    passes: int
    removed: int
    check: FoliationCheck

    @property
    def converged(self) -> bool:
        return self.outcome is RepairOutcome.CONVERGED


def repair_foliation(tri: Triangulation, policy: RetryPolicy | None = None,
                     output: bool = False) -> RepairReport:
    """
    Цикл перевірка -> ремонт, доки фоліація не стане коректною
    або не вичерпається policy.max_passes. Завжди завершується.
    """
    policy = policy or RetryPolicy()
    passes = 0
    removed = 0
    check = check_timeslices(tri, output)
    while not check.ok and passes < policy.max_passes:
        passes += 1
        logger.info("Pass #%d", passes)
        removed += fix_timeslices(tri, output)
        check = check_timeslices(tri, output)

    if check.ok:
        outcome = RepairOutcome.CONVERGED
    else:
        outcome = RepairOutcome.EXHAUSTED
        logger.warning("Foliation not repaired after %d passes: %d of %d cells still invalid.",
                       passes, check.invalid, check.total)
    return RepairReport(outcome=outcome, passes=passes, removed=removed, check=check)

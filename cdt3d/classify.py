# cdt3d/classify.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional

import numpy as np

from . import get_logger
from .engine import Triangulation
from .errors import StaleClassificationError

logger = get_logger(__name__)


class SimplexType(IntEnum):
    """
    Причинний тип тетри за розподілом вершин між двома сусідніми шарами:
      31 = (3,1): три вершини на ранішому шарі, одна на пізнішому;
      22 = (2,2): порівну;
      13 = (1,3): одна на ранішому, три на пізнішому.
    """
    THREE_ONE = 31
    TWO_TWO = 22
    ONE_THREE = 13


@dataclass
class SimplexClassification:
    """
    Три впорядковані списки індексів тетр (рядків tri.finite_cells()) і мапа тегів.
    Індекси дійсні лише для `generation`, на якому їх пораховано:
    після будь-якої вставки/видалення доступ через cells() кидає StaleClassificationError.
    """
    three_one: List[int] = field(default_factory=list)
    two_two: List[int] = field(default_factory=list)
    one_three: List[int] = field(default_factory=list)
    tags: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.int8))
    generation: Optional[int] = None

    def clear(self) -> None:
        self.three_one.clear()
        self.two_two.clear()
        self.one_three.clear()
        self.tags = np.empty(0, dtype=np.int8)
        self.generation = None

    def __len__(self) -> int:
        return len(self.three_one) + len(self.two_two) + len(self.one_three)

    def counts(self) -> Dict[SimplexType, int]:
        return {
            SimplexType.THREE_ONE: len(self.three_one),
            SimplexType.TWO_TWO: len(self.two_two),
            SimplexType.ONE_THREE: len(self.one_three),
        }

    def indices(self, kind: SimplexType) -> List[int]:
        return {
            SimplexType.THREE_ONE: self.three_one,
            SimplexType.TWO_TWO: self.two_two,
            SimplexType.ONE_THREE: self.one_three,
        }[SimplexType(kind)]

    def tag(self, cell_index: int) -> SimplexType:
        return SimplexType(int(self.tags[cell_index]))

    def is_fresh(self, tri: Triangulation) -> bool:
        return self.generation is not None and self.generation == tri.generation

    def ensure_fresh(self, tri: Triangulation) -> None:
        if not self.is_fresh(tri):
            raise StaleClassificationError(
                f"classification from generation {self.generation} used on "
                f"generation {tri.generation}; call reclassify_3_simplices()"
            )

    def cells(self, tri: Triangulation, kind: SimplexType) -> np.ndarray:
        """Вершини (id) тетр заданого типу, (n, 4)."""
        self.ensure_fresh(tri)
        return tri.finite_cells()[np.asarray(self.indices(kind), dtype=np.intp)].reshape(-1, 4)


def _fill(tri: Triangulation, classification: SimplexClassification) -> SimplexClassification:
    logger.info("Classifying simplices....")
    cells = tri.finite_cells()
    if len(cells) == 0:
        classification.tags = np.empty(0, dtype=np.int8)
        classification.generation = tri.generation
        return classification

    times = np.sort(tri.labels()[cells], axis=1)
    max_count = (times == times[:, -1:]).sum(axis=1)

    tags = np.full(len(cells), SimplexType.THREE_ONE, dtype=np.int8)
    tags[max_count == 2] = SimplexType.TWO_TWO
    tags[max_count == 3] = SimplexType.ONE_THREE
    # max_count == 4 (усі мітки однакові) у правилі теж падає в (3,1)

    classification.one_three.extend(np.flatnonzero(tags == SimplexType.ONE_THREE).tolist())
    classification.two_two.extend(np.flatnonzero(tags == SimplexType.TWO_TWO).tolist())
    classification.three_one.extend(np.flatnonzero(tags == SimplexType.THREE_ONE).tolist())
    classification.tags = tags
    classification.generation = tri.generation
    return classification


def classify_3_simplices(tri: Triangulation) -> SimplexClassification:
    """Класифікує всі скінченні тетри як (3,1), (2,2) або (1,3)."""
    return _fill(tri, SimplexClassification())


def reclassify_3_simplices(tri: Triangulation,
                           classification: SimplexClassification) -> SimplexClassification:
    """Очищає всі три списки і класифікує заново (не інкрементально)."""
    classification.clear()
    return _fill(tri, classification)


@dataclass(frozen=True)
class EdgeCounts:
    timelike: int
    spacelike: int

    @property
    def total(self) -> int:
        return self.timelike + self.spacelike

    @property
    def N1_TL(self) -> int:
        return self.timelike

    @property
    def N1_SL(self) -> int:
        return self.spacelike


def classify_edges(tri: Triangulation, output: bool = False) -> EdgeCounts:
    """
    Ребро spacelike, якщо мітки кінців рівні, інакше timelike.
    Лише читає тріангуляцію.
    """
    edges = tri.finite_edges()
    if len(edges):
        times = tri.labels()[edges]
        spacelike = int((times[:, 0] == times[:, 1]).sum())
    else:
        spacelike = 0
    counts = EdgeCounts(timelike=len(edges) - spacelike, spacelike=spacelike)
    if output:
        logger.info("N1_SL = %d", counts.spacelike)
        logger.info("N1_TL = %d", counts.timelike)
    return counts

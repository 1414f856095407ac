from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from . import get_logger
from .classify import (
    EdgeCounts, SimplexClassification, SimplexType, classify_3_simplices, classify_edges,
)
from .config import FoliationConfig
from .engine import DelaunayTriangulation, Triangulation
from .foliation import FoliationCheck, RepairReport, RetryPolicy, repair_foliation
from .geom import Pt
from .sphere import make_2_sphere

logger = get_logger(__name__)


@dataclass
class FoliationResult:
    """
    Підсумок побудови. classification посилається на тетри поточного стану
    triangulation — після будь-якої мутації її треба перерахувати.
    """
    triangulation: Triangulation
    repair: RepairReport
    classification: SimplexClassification
    edges: Optional[EdgeCounts]
    structurally_valid: bool

    @property
    def check(self) -> FoliationCheck:
        return self.repair.check

    @property
    def valid(self) -> bool:
        return self.repair.check.ok

    @property
    def invalid_count(self) -> int:
        return self.repair.check.invalid

    @property
    def number_of_cells(self) -> int:
        return self.triangulation.number_of_finite_cells()

    def summary(self) -> Dict[str, Any]:
        counts = self.classification.counts()
        out: Dict[str, Any] = {
            "valid_foliation": self.valid,
            "outcome": self.repair.outcome.value,
            "passes": self.repair.passes,
            "removed_vertices": self.repair.removed,
            "valid_cells": self.check.valid,
            "invalid_cells": self.check.invalid,
            "dimension": self.triangulation.dimension(),
            "vertices": self.triangulation.number_of_vertices(),
            "cells": self.number_of_cells,
            "three_one": counts[SimplexType.THREE_ONE],
            "two_two": counts[SimplexType.TWO_TWO],
            "one_three": counts[SimplexType.ONE_THREE],
        }
        if self.edges is not None:
            out["timelike_edges"] = self.edges.timelike
            out["spacelike_edges"] = self.edges.spacelike
        out["structurally_valid"] = self.structurally_valid
        return out

    def vertex_dump(self) -> List[Tuple[Pt, int]]:
        tri = self.triangulation
        return [(tri.point(int(v)), tri.label(int(v))) for v in tri.finite_vertices()]


def insert_into_S3(tri: Triangulation, points: np.ndarray, labels: np.ndarray) -> np.ndarray:
    """Вставити всі точки разом із мітками часу одним пакетним викликом."""
    return tri.insert(points, labels)


def make_foliated_triangulation(
    simplices: int,
    timeslices: int,
    output: bool = False,
    *,
    triangulation: Optional[Triangulation] = None,
    rng: Optional[np.random.Generator] = None,
    policy: Optional[RetryPolicy] = None,
    with_edges: bool = True,
) -> FoliationResult:
    """
    Повний пайплайн фоліованої (2+1) тріангуляції:
      - кількість точок на шар оцінюємо з бажаної кількості симплексів (4 точки на симплекс);
      - на кожен часовий шар i — сфера радіуса 1 + i, мітка часу = int(радіус);
      - усі точки з мітками вставляємо в Делоне одним пакетом;
      - check_timeslices()/fix_timeslices() у циклі, не більше policy.max_passes проходів;
      - класифікуємо тетри на (3,1), (2,2), (1,3) і (опційно) ребра на timelike/spacelike.

    Кидає FoliationConfigError, якщо на шар припадає менше одного симплекса.
    Невдалий ремонт не фатальний: дивись result.valid / result.invalid_count.
    """
    config = FoliationConfig(simplices=simplices, timeslices=timeslices,
                             output=output, with_edges=with_edges)
    config.validate()
    tri = triangulation if triangulation is not None else DelaunayTriangulation()
    policy = policy or RetryPolicy()

    logger.info("Generating universe ...")
    points_per_timeslice = config.simplices_per_timeslice * 4
    total_points = points_per_timeslice * timeslices

    # кількість точок відома заздалегідь
    points = np.empty((total_points, 3), dtype=float)
    labels = np.empty(total_points, dtype=np.int64)
    for i in range(timeslices):
        radius = 1.0 + i
        pts, lab = make_2_sphere(points_per_timeslice, radius, rng=rng, output=output)
        sl = slice(i * points_per_timeslice, (i + 1) * points_per_timeslice)
        points[sl] = pts
        labels[sl] = lab

    insert_into_S3(tri, points, labels)

    repair = repair_foliation(tri, policy, output)
    classification = classify_3_simplices(tri)
    edges = classify_edges(tri, output) if with_edges else None
    structurally_valid = tri.is_valid()
    if not structurally_valid:
        logger.warning("Triangulation has structurally invalid cells.")

    result = FoliationResult(
        triangulation=tri,
        repair=repair,
        classification=classification,
        edges=edges,
        structurally_valid=structurally_valid,
    )
    _report(result, output)
    return result


def make_from_config(config: FoliationConfig,
                     triangulation: Optional[Triangulation] = None) -> FoliationResult:
    """Те саме, що make_foliated_triangulation, але з FoliationConfig (seed, Qhull, межа проходів)."""
    config.validate()
    tri = triangulation if triangulation is not None else \
        DelaunayTriangulation(qhull_options=config.qhull_options)
    return make_foliated_triangulation(
        config.simplices,
        config.timeslices,
        config.output,
        triangulation=tri,
        rng=np.random.default_rng(config.seed),
        policy=RetryPolicy(max_passes=config.max_passes),
        with_edges=config.with_edges,
    )


def _report(result: FoliationResult, output: bool) -> None:
    counts = result.classification.counts()
    logger.info("Valid foliation: %s", str(result.valid).lower())
    logger.info("Delaunay triangulation has %d cells.", result.number_of_cells)
    logger.info("There are %d (3,1) simplices and %d (2,2) simplices and %d (1,3) simplices.",
                counts[SimplexType.THREE_ONE], counts[SimplexType.TWO_TWO],
                counts[SimplexType.ONE_THREE])
    if output:
        for p, t in result.vertex_dump():
            logger.info("Point %s %s %s has timeslice %d", p.x, p.y, p.z, t)

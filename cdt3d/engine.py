# cdt3d/engine.py
from __future__ import annotations
from typing import Protocol, runtime_checkable

import numpy as np

from . import get_logger
from .errors import TriangulationError
from .geom import EPS, Pt, affine_dimension
from .predicates import insphere_many, orient3d, orient3d_many

logger = get_logger(__name__)

# пари локальних індексів вершин тетраедра -> 6 ребер
_EDGE_PAIRS = np.array([(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)], dtype=np.intp)


@runtime_checkable
class Triangulation(Protocol):
    """
    Мінімальний інтерфейс рушія 3D-тріангуляції, з яким працює фоліація.

    Вершини — стабільні цілі id (індекси у глобальній таблиці, не перевикористовуються).
    Тетраедр — рядок із 4 id у finite_cells(); його індекс дійсний лише
    для поточного `generation`, яке зростає при кожній мутації (insert/remove).
    """
    generation: int

    def insert(self, points, labels) -> np.ndarray: ...
    def remove(self, vid: int) -> None: ...
    def finite_vertices(self) -> np.ndarray: ...
    def finite_cells(self) -> np.ndarray: ...
    def finite_edges(self) -> np.ndarray: ...
    def labels(self) -> np.ndarray: ...
    def label(self, vid: int) -> int: ...
    def point(self, vid: int) -> Pt: ...
    def cell_validity(self) -> np.ndarray: ...
    def is_valid(self, check_delaunay: bool = False) -> bool: ...
    def dimension(self) -> int: ...
    def number_of_vertices(self) -> int: ...
    def number_of_finite_cells(self) -> int: ...
    def number_of_finite_edges(self) -> int: ...


def edges_of_cells(cells: np.ndarray) -> np.ndarray:
    """Унікальні неорієнтовані ребра (min, max) множини тетраедрів, (k, 2)."""
    if len(cells) == 0:
        return np.empty((0, 2), dtype=np.intp)
    pairs = cells[:, _EDGE_PAIRS].reshape(-1, 2)
    pairs = np.sort(pairs, axis=1)
    return np.unique(pairs, axis=0)


class DelaunayTriangulation:
    """
    3D Делоне поверх scipy.spatial.Delaunay (Qhull) з мітками часу на вершинах.

    - points / _labels / alive: глобальна таблиця вершин (мертві лишаються в ній);
    - insert/remove лише позначають структуру «брудною»;
    - будь-яке читання (finite_cells, dimension, ...) перебудовує Делоне на живих вершинах.
    Видалення вершини з повторною тріангуляцією всіх живих дає ту саму тріангуляцію,
    що й локальна ретріангуляція порожнини (для точок у загальному положенні).
    """

    def __init__(self, qhull_options: str = "QJ", eps: float = EPS):
        self.qhull_options = qhull_options  # QJ = joggle для робастності (точки на сферах — коциклічні)
        self.eps = eps
        self.points = np.empty((0, 3), dtype=float)
        self._labels = np.empty(0, dtype=np.int64)
        self.alive = np.empty(0, dtype=bool)
        self.generation = 0
        self._cells = np.empty((0, 4), dtype=np.intp)
        self._neighbors = np.empty((0, 4), dtype=np.intp)
        self._edges: np.ndarray | None = None
        self._validity: np.ndarray | None = None
        self._dimension = -1
        self._dirty = False

    # ---------- мутації ----------
    def insert(self, points, labels) -> np.ndarray:
        """Пакетна вставка (точка, мітка). Порядок не важливий. Повертає id нових вершин."""
        pts = np.asarray(points, dtype=float).reshape(-1, 3)
        lab = np.asarray(labels, dtype=np.int64).reshape(-1)
        if len(pts) != len(lab):
            raise ValueError(f"points/labels length mismatch: {len(pts)} != {len(lab)}")
        start = len(self.points)
        if len(pts) == 0:
            return np.empty(0, dtype=np.intp)
        self.points = np.vstack([self.points, pts])
        self._labels = np.concatenate([self._labels, lab])
        self.alive = np.concatenate([self.alive, np.ones(len(pts), dtype=bool)])
        self._touch()
        return np.arange(start, start + len(pts), dtype=np.intp)

    def remove(self, vid: int) -> None:
        """Видалити вершину; залежні тетри зникнуть при наступній перебудові."""
        vid = int(vid)
        if not (0 <= vid < len(self.alive)) or not self.alive[vid]:
            raise TriangulationError(f"vertex {vid} is not in the triangulation")
        self.alive[vid] = False
        self._touch()

    def _touch(self) -> None:
        self.generation += 1
        self._dirty = True

    # ---------- перебудова ----------
    def _ensure_built(self) -> None:
        if not self._dirty:
            return
        ids = np.flatnonzero(self.alive)
        coords = self.points[ids]
        self._dimension = affine_dimension(coords)
        self._edges = None
        self._validity = None

        if self._dimension < 3:
            cells = np.empty((0, 4), dtype=np.intp)
            nbrs = np.empty((0, 4), dtype=np.intp)
        elif len(ids) == 4:
            # Qhull потребує щонайменше 5 точок; 4 некопланарні — один тетраедр
            a, b, c, d = (Pt.from_seq(p) for p in coords)
            if abs(orient3d(a, b, c, d)) > self.eps:
                cells = ids.reshape(1, 4).astype(np.intp)
            else:
                cells = np.empty((0, 4), dtype=np.intp)
            nbrs = np.full((len(cells), 4), -1, dtype=np.intp)
        else:
            try:
                from scipy.spatial import Delaunay, QhullError
            except ImportError as e:
                raise TriangulationError(
                    "DelaunayTriangulation потребує SciPy. Встанови scipy."
                ) from e
            try:
                dela = Delaunay(coords, qhull_options=self.qhull_options)
            except QhullError as e:
                raise TriangulationError(f"Qhull failed on {len(ids)} vertices: {e}") from e
            cells = ids[dela.simplices].astype(np.intp)
            nbrs = dela.neighbors.astype(np.intp)

        self._cells = cells
        self._neighbors = nbrs
        self._dirty = False
        logger.debug("Rebuilt triangulation: %d vertices, %d cells (generation %d)",
                      len(ids), len(cells), self.generation)

    # ---------- читання ----------
    def finite_vertices(self) -> np.ndarray:
        return np.flatnonzero(self.alive)

    def finite_cells(self) -> np.ndarray:
        self._ensure_built()
        return self._cells

    def finite_edges(self) -> np.ndarray:
        self._ensure_built()
        if self._edges is None:
            self._edges = edges_of_cells(self._cells)
        return self._edges

    def labels(self) -> np.ndarray:
        return self._labels

    def label(self, vid: int) -> int:
        return int(self._labels[vid])

    def point(self, vid: int) -> Pt:
        return Pt.from_seq(self.points[vid])

    def dimension(self) -> int:
        self._ensure_built()
        return self._dimension

    def number_of_vertices(self) -> int:
        return int(self.alive.sum())

    def number_of_finite_cells(self) -> int:
        return len(self.finite_cells())

    def number_of_finite_edges(self) -> int:
        return len(self.finite_edges())

    # ---------- валідація ----------
    def cell_validity(self) -> np.ndarray:
        """
        Структурна коректність кожної тетри (маска над finite_cells()):
          - тетра не вироджена: |orient3d| > eps;
          - сусідства симетричні: якщо nbr[i, j] = k, то i є серед сусідів k.
        """
        cells = self.finite_cells()
        if self._validity is not None:
            return self._validity
        if len(cells) == 0:
            self._validity = np.zeros(0, dtype=bool)
            return self._validity

        p = self.points[cells]
        vol = orient3d_many(p[:, 0], p[:, 1], p[:, 2], p[:, 3])
        ok = np.abs(vol) > self.eps

        nbr = self._neighbors
        rows, cols = np.nonzero(nbr >= 0)
        if len(rows):
            back = (nbr[nbr[rows, cols]] == rows[:, None]).any(axis=1)
            linked = np.ones(nbr.shape, dtype=bool)
            linked[rows, cols] = back
            ok &= linked.all(axis=1)

        self._validity = ok
        return ok

    def is_valid(self, check_delaunay: bool = False, rel_tol: float = 1e-9) -> bool:
        """
        Коректність усієї тріангуляції: кожна тетра структурно валідна.
        check_delaunay=True додатково перевіряє локальну умову Делоне
        (вершина сусіда через кожну внутрішню грань не всередині circumsphere).
        """
        validity = self.cell_validity()
        if not validity.all():
            logger.debug("%d structurally invalid cells", int((~validity).sum()))
            return False
        if not check_delaunay or len(self._cells) == 0:
            return True
        return self._is_locally_delaunay(rel_tol)

    def _is_locally_delaunay(self, rel_tol: float) -> bool:
        cells, nbr = self._cells, self._neighbors
        rows, cols = np.nonzero(nbr >= 0)
        if len(rows) == 0:
            return True
        other = nbr[rows, cols]
        # вершина сусіда, що протилежна спільній грані: та, для якої nbr[other, j] == rows
        opp_local = np.argmax(nbr[other] == rows[:, None], axis=1)
        opp = cells[other, opp_local]

        p = self.points[cells[rows]]
        e = self.points[opp]
        val = insphere_many(p[:, 0], p[:, 1], p[:, 2], p[:, 3], e)
        scale = max(1.0, float(np.abs(self.points[self.alive]).max()))
        bad = val > rel_tol * scale ** 5
        if bad.any():
            logger.debug("%d faces violate the empty-sphere condition", int(bad.sum()))
        return not bool(bad.any())

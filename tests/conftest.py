"""
Спільні фікстури: легка in-memory тріангуляція замість Qhull,
щоб перевіряти логіку фоліації на точно заданих тетрах.
"""
from __future__ import annotations
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pytest

from cdt3d import setup_logging
from cdt3d.engine import edges_of_cells
from cdt3d.errors import TriangulationError
from cdt3d.geom import Pt

Cell = Tuple[int, int, int, int]


class FakeTriangulation:
    """
    Тріангуляція з явно заданими тетрами.
      - on_remove(fake, vid) -> нові тетри, що «ретріангулюють» порожнину;
      - on_insert(fake, new_ids) -> тетри після пакетної вставки;
      - broken: тетри, які структурний предикат вважає невалідними.
    """

    def __init__(
        self,
        labels: Sequence[int] = (),
        cells: Iterable[Cell] = (),
        broken: Iterable[Cell] = (),
        on_remove: Optional[Callable[["FakeTriangulation", int], List[Cell]]] = None,
        on_insert: Optional[Callable[["FakeTriangulation", np.ndarray], List[Cell]]] = None,
    ):
        self._labels = np.asarray(labels, dtype=np.int64)
        self.points = np.column_stack([np.arange(len(self._labels), dtype=float),
                                       np.zeros(len(self._labels)),
                                       self._labels.astype(float)]).reshape(-1, 3)
        self.alive = np.ones(len(self._labels), dtype=bool)
        self._cells: List[Cell] = [tuple(c) for c in cells]
        self.broken = {frozenset(c) for c in broken}
        self.on_remove = on_remove
        self.on_insert = on_insert
        self.generation = 0
        self.insert_calls = 0
        self.removed: List[int] = []

    def add_vertex(self, label: int) -> int:
        vid = len(self._labels)
        self._labels = np.append(self._labels, np.int64(label))
        self.points = np.vstack([self.points, [vid, 0.0, float(label)]])
        self.alive = np.append(self.alive, True)
        return vid

    # ---------- мутації ----------
    def insert(self, points, labels) -> np.ndarray:
        self.insert_calls += 1
        pts = np.asarray(points, dtype=float).reshape(-1, 3)
        start = len(self._labels)
        self._labels = np.concatenate([self._labels, np.asarray(labels, dtype=np.int64)])
        self.points = np.vstack([self.points, pts])
        self.alive = np.concatenate([self.alive, np.ones(len(pts), dtype=bool)])
        ids = np.arange(start, start + len(pts))
        if self.on_insert is not None:
            self._cells = [tuple(c) for c in self.on_insert(self, ids)]
        self.generation += 1
        return ids

    def remove(self, vid: int) -> None:
        vid = int(vid)
        if not (0 <= vid < len(self.alive)) or not self.alive[vid]:
            raise TriangulationError(f"vertex {vid} is not in the triangulation")
        self.alive[vid] = False
        self.removed.append(vid)
        self._cells = [c for c in self._cells if vid not in c]
        if self.on_remove is not None:
            self._cells.extend(tuple(c) for c in self.on_remove(self, vid))
        self.generation += 1

    # ---------- читання ----------
    def finite_vertices(self) -> np.ndarray:
        return np.flatnonzero(self.alive)

    def finite_cells(self) -> np.ndarray:
        return np.array(self._cells, dtype=np.intp).reshape(-1, 4)

    def finite_edges(self) -> np.ndarray:
        return edges_of_cells(self.finite_cells())

    def labels(self) -> np.ndarray:
        return self._labels

    def label(self, vid: int) -> int:
        return int(self._labels[vid])

    def point(self, vid: int) -> Pt:
        return Pt.from_seq(self.points[vid])

    def cell_validity(self) -> np.ndarray:
        return np.array([frozenset(c) not in self.broken for c in self._cells], dtype=bool)

    def is_valid(self, check_delaunay: bool = False) -> bool:
        return bool(self.cell_validity().all())

    def dimension(self) -> int:
        return 3 if self._cells else -1

    def number_of_vertices(self) -> int:
        return int(self.alive.sum())

    def number_of_finite_cells(self) -> int:
        return len(self._cells)

    def number_of_finite_edges(self) -> int:
        return len(self.finite_edges())


def stubborn_remove(fake: FakeTriangulation, vid: int) -> List[Cell]:
    """Кожне видалення породжує нову погану тетру: ремонт ніколи не сходиться."""
    fresh = fake.add_vertex(label=9)
    return [(0, 1, 2, fresh)]


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    setup_logging(level="DEBUG", format_style="simple")
    yield


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def layered_fake():
    """
    Дві коректні тетри між шарами 1 і 2 та дві погані:
    (4,5,6,7) охоплює 1..3, (0,1,8,9) лежить цілком на шарі 1.
    """
    labels = [1, 1, 2, 2, 1, 2, 2, 3, 1, 1]
    cells = [(0, 1, 2, 3), (1, 2, 3, 4), (4, 5, 6, 7), (0, 1, 8, 9)]
    return FakeTriangulation(labels, cells)

from __future__ import annotations
from dataclasses import dataclass
from math import sqrt
from typing import Sequence

import numpy as np

EPS = 1e-10  # поріг виродженості тетраедра (|orient3d| <= EPS)

@dataclass(frozen=True)
class Pt:
    x: float
    y: float
    z: float
    def __iter__(self):
        yield self.x; yield self.y; yield self.z

    @classmethod
    def from_seq(cls, xyz: Sequence[float]) -> "Pt":
        return cls(float(xyz[0]), float(xyz[1]), float(xyz[2]))

    def radius(self) -> float:
        """Відстань до початку координат (для точок на сферах = номер шару)."""
        return norm(self)

def sub(a: Pt, b: Pt) -> Pt:
    return Pt(a.x - b.x, a.y - b.y, a.z - b.z)

def dot(a: Pt, b: Pt) -> float:
    return a.x*b.x + a.y*b.y + a.z*b.z

def cross(a: Pt, b: Pt) -> Pt:
    return Pt(a.y*b.z - a.z*b.y,
              a.z*b.x - a.x*b.z,
              a.x*b.y - a.y*b.x)

def norm(a: Pt) -> float:
    return sqrt(dot(a, a))

def affine_dimension(coords: np.ndarray) -> int:
    """
    Афінна розмірність множини точок (як dimension() у тріангуляції):
      -1 — порожньо, 0 — одна точка, 1 — колінеарні, 2 — копланарні, 3 — загальне положення.
    """
    if len(coords) == 0:
        return -1
    centered = coords - coords[0]
    return int(np.linalg.matrix_rank(centered)) if len(coords) > 1 else 0

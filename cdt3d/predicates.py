# cdt3d/predicates.py
from __future__ import annotations

import numpy as np

from .geom import Pt, sub, cross, dot

def orient3d(a: Pt, b: Pt, c: Pt, d: Pt) -> float:
    ab = sub(b, a)
    ac = sub(c, a)
    ad = sub(d, a)
    return dot(cross(ab, ac), ad)

# ---------- векторизовані версії (масиви (m, 3)) ----------
def orient3d_many(a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray) -> np.ndarray:
    """orient3d для m тетраедрів одночасно; знак — орієнтація, модуль — 6 * об'єм."""
    return np.einsum("ij,ij->i", np.cross(b - a, c - a), d - a)

def insphere_many(a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray,
                  e: np.ndarray) -> np.ndarray:
    """
    Векторизований тест «чи лежить e всередині circumsphere(a,b,c,d)».
    Повертає масив значень:
      >0  e всередині,
      <0  e зовні,
       0  на сфері або тетраедр вироджений.
    Знак детермінанта множимо на sign(orient3d(a,b,c,d)), тож порядок вершин не важливий.
    """
    rows = []
    for p in (a, b, c, d, e):
        s = np.einsum("ij,ij->i", p, p)
        rows.append(np.column_stack([p, s, np.ones(len(p))]))
    m = np.stack(rows, axis=1)  # (m, 5, 5)
    val = np.linalg.det(m) if len(m) else np.zeros(0)
    # det([.., 1]) з рядками у такому порядку має знак, протилежний до «всередині» при orient > 0
    return -val * np.sign(orient3d_many(a, b, c, d))

# cdt3d/sphere.py
from __future__ import annotations
from typing import Optional, Tuple

import numpy as np

from . import get_logger

logger = get_logger(__name__)

# спільне джерело випадковості, якщо rng не передано явно
_default_rng: np.random.Generator = np.random.default_rng()


def seed(value: Optional[int]) -> None:
    """Перезасіяти спільний генератор (для відтворюваних запусків без явного rng)."""
    global _default_rng
    _default_rng = np.random.default_rng(value)


def make_2_sphere(
    count: int,
    radius: float,
    rng: Optional[np.random.Generator] = None,
    output: bool = False,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Рівномірні випадкові точки на 2-сфері радіуса `radius` з центром у 0.
    Радіус задає час: кожна точка отримує мітку int(radius), тож вкладені
    сфери утворюють листки фоліації з однаковою топологією.

    Повертає (points (count, 3), labels (count,)).
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius}")
    gen = rng if rng is not None else _default_rng

    # нормалізований гаусів вектор рівномірний на сфері
    v = gen.standard_normal((count, 3))
    lengths = np.linalg.norm(v, axis=1)
    points = v / lengths[:, None] * float(radius)
    labels = np.full(count, int(radius), dtype=np.int64)

    if output:
        logger.info("Generating %d random points on the surface of a sphere in 3D "
                    "of center 0 and radius %s.", count, radius)
    return points, labels

# examples/demo_cdt.py
import numpy as np

from cdt3d.engine import DelaunayTriangulation
from cdt3d.foliation import check_timeslices, fix_timeslices

if __name__ == "__main__":
    # дві сфери вручну: октаедр радіуса 1 (t=1) і куб радіуса 2 (t=2) + «зайва» точка з t=3
    inner = [(1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1)]
    outer = [(x, y, z) for x in (-1.15, 1.15) for y in (-1.15, 1.15) for z in (-1.15, 1.15)]
    stray = [(0.3, 0.2, 2.9)]
    raw = inner + outer + stray
    labels = [1] * len(inner) + [2] * len(outer) + [3]

    d3 = DelaunayTriangulation()
    d3.insert(np.array(raw, dtype=float), labels)

    # простенька статистика
    print("cells:", d3.number_of_finite_cells(), "edges:", d3.number_of_finite_edges())
    print("check:", check_timeslices(d3))
    print("removed:", fix_timeslices(d3))
    print("check:", check_timeslices(d3))
    print("valid:", d3.is_valid(check_delaunay=True))

from __future__ import annotations

import sys
from pathlib import Path

from cdt3d import FoliationConfigError, setup_logging
from cdt3d.config import FoliationConfig, load_config, save_config
from cdt3d.pipeline import make_from_config


def main(argv: list[str]) -> int:
    try:
        # --- 1) Конфіг: з YAML-файлу або дефолтний ---
        if argv:
            config = load_config(Path(argv[0]))
        else:
            config = FoliationConfig(simplices=6400, timeslices=16, seed=42)
            save_config(config, "foliation.yaml")
            print("foliation.yaml записано (дефолтний конфіг).")

        setup_logging(level="DEBUG" if config.output else "INFO")

        # --- 2) Пайплайн: сфери -> Делоне -> ремонт -> класифікація ---
        result = make_from_config(config)
    except FoliationConfigError as e:
        print(f"Помилка конфігурації: {e}", file=sys.stderr)
        return 2

    # --- 3) Підсумок ---
    summary = result.summary()
    print(f"Фоліація коректна:  {summary['valid_foliation']} ({summary['outcome']}, "
          f"проходів: {summary['passes']})")
    print(f"Вершини:            {summary['vertices']}")
    print(f"Тетраедрів:         {summary['cells']}")
    print(f"(3,1)/(2,2)/(1,3):  {summary['three_one']}/{summary['two_two']}/{summary['one_three']}")
    if result.edges is not None:
        print(f"Ребра TL/SL:        {result.edges.timelike}/{result.edges.spacelike}")
    return 0 if result.valid else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

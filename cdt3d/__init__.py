"""
cdt3d — фолійована (2+1)-вимірна тріангуляція для Causal Dynamical Triangulations.
Вкладені сфери з цілими мітками часу -> 3D Делоне (SciPy/Qhull) -> обмежений цикл
ремонту фоліації -> класифікація тетраедрів (3,1)/(2,2)/(1,3) і ребер timelike/spacelike.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

__version__ = "0.2.0"

_FORMATS = {
    "simple": "%(levelname)s: %(message)s",
    "detailed": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    "debug": "%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d: %(message)s",
}


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_style: str = "detailed",
) -> logging.Logger:
    """
    Єдине налаштування логування для скриптів і тестів.
    Сама бібліотека логування не налаштовує.

    Args:
        level: DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_file: шлях до лог-файлу (None — лише консоль)
        format_style: "simple", "detailed" або "debug"
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    formatter = logging.Formatter(_FORMATS.get(format_style, _FORMATS["detailed"]),
                                  datefmt="%H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Логер модуля (зазвичай get_logger(__name__))."""
    return logging.getLogger(name)


from cdt3d.errors import (  # noqa: E402
    CDTError, FoliationConfigError, StaleClassificationError, TriangulationError,
)
from cdt3d.geom import Pt, EPS  # noqa: E402
from cdt3d.predicates import orient3d, orient3d_many, insphere_many  # noqa: E402
from cdt3d.engine import Triangulation, DelaunayTriangulation  # noqa: E402
from cdt3d.sphere import make_2_sphere  # noqa: E402
from cdt3d.foliation import (  # noqa: E402
    FoliationCheck, RepairOutcome, RepairReport, RetryPolicy,
    MAX_FOLIATION_FIX_PASSES, check_timeslices, fix_timeslices, repair_foliation,
)
from cdt3d.classify import (  # noqa: E402
    EdgeCounts, SimplexClassification, SimplexType,
    classify_3_simplices, classify_edges, reclassify_3_simplices,
)
from cdt3d.config import FoliationConfig, load_config, save_config  # noqa: E402
from cdt3d.pipeline import (  # noqa: E402
    FoliationResult, insert_into_S3, make_foliated_triangulation, make_from_config,
)

__all__ = [
    "__version__", "setup_logging", "get_logger",
    "CDTError", "FoliationConfigError", "StaleClassificationError", "TriangulationError",
    "Pt", "EPS", "orient3d", "orient3d_many", "insphere_many",
    "Triangulation", "DelaunayTriangulation",
    "make_2_sphere",
    "FoliationCheck", "RepairOutcome", "RepairReport", "RetryPolicy",
    "MAX_FOLIATION_FIX_PASSES", "check_timeslices", "fix_timeslices", "repair_foliation",
    "EdgeCounts", "SimplexClassification", "SimplexType",
    "classify_3_simplices", "classify_edges", "reclassify_3_simplices",
    "FoliationConfig", "load_config", "save_config",
    "FoliationResult", "insert_into_S3", "make_foliated_triangulation", "make_from_config",
]

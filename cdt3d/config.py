# cdt3d/config.py
"""
Параметри побудови фоліованої тріангуляції.

Можна задати в коді або прочитати з YAML:

    simplices: 64000
    timeslices: 64
    max_passes: 20
    seed: 42
"""
from __future__ import annotations
from dataclasses import asdict, dataclass, fields
from numbers import Integral
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from . import get_logger
from .errors import FoliationConfigError
from .foliation import MAX_FOLIATION_FIX_PASSES

logger = get_logger(__name__)


@dataclass
class FoliationConfig:
    simplices: int
    timeslices: int
    max_passes: int = MAX_FOLIATION_FIX_PASSES
    seed: Optional[int] = None
    output: bool = False
    with_edges: bool = True
    qhull_options: str = "QJ"

    @property
    def simplices_per_timeslice(self) -> int:
        return self.simplices // self.timeslices if self.timeslices else 0

    def validate(self) -> "FoliationConfig":
        for name in ("simplices", "timeslices"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral) or value < 1:
                raise FoliationConfigError(f"{name} must be a positive integer, got {value!r}")
        if self.simplices_per_timeslice < 1:
            raise FoliationConfigError(
                f"{self.simplices} simplices over {self.timeslices} timeslices gives "
                f"{self.simplices_per_timeslice} simplices per timeslice; need at least 1"
            )
        if isinstance(self.max_passes, bool) or not isinstance(self.max_passes, Integral) \
                or self.max_passes < 0:
            raise FoliationConfigError(f"max_passes must be >= 0, got {self.max_passes!r}")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FoliationConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise FoliationConfigError(f"Unknown config keys: {sorted(unknown)}")
        try:
            config = cls(**data)
        except TypeError as e:
            raise FoliationConfigError(str(e)) from e
        return config.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Union[str, Path]) -> FoliationConfig:
    """Читає FoliationConfig з YAML-файлу."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise FoliationConfigError(f"{path}: expected a mapping, got {type(data).__name__}")
    logger.info("Config loaded from %s", path)
    return FoliationConfig.from_dict(data)


def save_config(config: FoliationConfig, path: Union[str, Path]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

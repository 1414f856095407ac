"""Ієрархія винятків cdt3d."""


class CDTError(Exception):
    """Базовий виняток пакета."""


class FoliationConfigError(CDTError, ValueError):
    """Некоректні параметри побудови (напр. менше 1 симплекса на часовий шар)."""


class TriangulationError(CDTError, RuntimeError):
    """Збій рушія тріангуляції (Qhull, видалення неіснуючої вершини, ...)."""


class StaleClassificationError(CDTError, RuntimeError):
    """Класифікацію використано після того, як тріангуляція змінилась."""

# Domain Package
from .errors import CatalogError, ProgressStoreError, ZitieError
from .models import Catalog, Item, ProgressMap, ProgressRecord, Selection, SessionState
from .ports import Clock, RandomSource, SchedulingAlgorithm
from .tuning import AlgorithmConfig

__all__ = [
    "AlgorithmConfig",
    "Catalog",
    "CatalogError",
    "Clock",
    "Item",
    "ProgressMap",
    "ProgressRecord",
    "ProgressStoreError",
    "RandomSource",
    "SchedulingAlgorithm",
    "Selection",
    "SessionState",
    "ZitieError",
]

# Infrastructure Package
from .catalog import load_catalog
from .progress_store import JsonProgressStore

__all__ = ["JsonProgressStore", "load_catalog"]

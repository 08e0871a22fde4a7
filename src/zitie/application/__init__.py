# Application Package
from .factory import available_algorithms, create_algorithm
from .scheduler import Scheduler

__all__ = ["Scheduler", "available_algorithms", "create_algorithm"]

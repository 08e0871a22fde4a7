# Scheduling Algorithms Package
from .anki import AnkiAlgorithm
from .bucket import BucketAlgorithm
from .focused_sets import FocusedSetsAlgorithm
from .improved import AggressiveAlgorithm, ImprovedAlgorithm
from .mastery import MasteryAlgorithm, MasteryLevel, classify_mastery

__all__ = [
    "AggressiveAlgorithm",
    "AnkiAlgorithm",
    "BucketAlgorithm",
    "FocusedSetsAlgorithm",
    "ImprovedAlgorithm",
    "MasteryAlgorithm",
    "MasteryLevel",
    "classify_mastery",
]

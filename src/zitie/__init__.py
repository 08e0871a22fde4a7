"""zitie: character practice driven by pluggable card-scheduling algorithms."""

__version__ = "0.1.0"

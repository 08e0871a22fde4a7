"""Exceptions raised by zitie's host adapters.

The scheduling core itself does not raise for empty catalogs, missing
records or unknown algorithm names.
"""


class ZitieError(Exception):
    """Base class for all zitie errors."""


class CatalogError(ZitieError):
    """The item catalog could not be read."""


class ProgressStoreError(ZitieError):
    """The progress store could not be read or written."""

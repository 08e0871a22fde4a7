"""
JSON progress store.

Persists the index -> ProgressRecord mapping as a single JSON object.
The scheduling core never calls this; the host loads before the first
pick and saves after each recorded outcome.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from zitie.domain.errors import ProgressStoreError
from zitie.domain.models import ProgressMap, ProgressRecord

logger = logging.getLogger(__name__)


class JsonProgressStore:
    def __init__(self, path: Path):
        self.path = path

    def load(self) -> ProgressMap:
        """
        Load all records. A missing file is an empty mapping.

        Malformed entries are dropped, which makes those items "new" again.
        """
        if not self.path.exists():
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ProgressStoreError(f"Could not read progress file {self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise ProgressStoreError(f"Progress file {self.path} must contain a JSON object")

        progress: ProgressMap = {}
        for key, value in raw.items():
            try:
                progress[int(key)] = ProgressRecord.from_dict(value)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Dropping malformed progress entry {key!r}: {e}")

        logger.debug(f"Loaded {len(progress)} progress records from {self.path}")
        return progress

    def save(self, progress: ProgressMap) -> None:
        payload = {
            str(index): record.to_dict()
            for index, record in sorted(progress.items())
            if isinstance(record, ProgressRecord)
        }

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".progress-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise ProgressStoreError(f"Could not write progress file {self.path}: {e}") from e

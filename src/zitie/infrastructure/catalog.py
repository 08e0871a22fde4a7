"""
Catalog loader: reads the character list from a JSON file.

Expected shape: a JSON array of objects with ``character``, ``pinyin``,
``definition``, ``frequency_rank`` and ``hsk_level`` keys.
"""

import json
import logging
from pathlib import Path
from typing import Any

from zitie.domain.errors import CatalogError
from zitie.domain.models import Item

logger = logging.getLogger(__name__)


def parse_item(entry: Any) -> Item:
    if not isinstance(entry, dict):
        raise TypeError(f"Expected an object, got {type(entry).__name__}")

    text = entry.get("character") or entry.get("text")
    if not text:
        raise ValueError("Missing 'character'")

    level = entry.get("hsk_level", entry.get("level"))
    return Item(
        text=str(text),
        phonetic=str(entry.get("pinyin") or entry.get("phonetic") or ""),
        definition=str(entry.get("definition") or "No definition"),
        frequency_rank=int(entry.get("frequency_rank", 0)),
        level=str(level) if level is not None else None,
    )


def parse_catalog(entries: list[Any]) -> tuple[Item, ...]:
    """
    Convert raw entries into Items sorted by frequency rank (most frequent first).

    Malformed entries are skipped with a warning.
    """
    items: list[Item] = []
    for position, entry in enumerate(entries):
        try:
            items.append(parse_item(entry))
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping catalog entry #{position}: {e}")

    items.sort(key=lambda item: item.frequency_rank)
    return tuple(items)


def load_catalog(path: Path) -> tuple[Item, ...]:
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Could not read catalog {path}: {e}") from e

    if not isinstance(data, list):
        raise CatalogError(f"Catalog {path} must contain a JSON array")

    catalog = parse_catalog(data)
    logger.info(f"Loaded {len(catalog)} items from {path}")
    return catalog

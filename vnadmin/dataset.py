"""
Static dataset loading.

A data source returns the raw rows of one level, in file order.
Rows are turned into immutable Region records here; index building
happens in the registry.

Sources:
- JsonDataSource: <data_dir>/<level>.json (bundled seeds by default)
- SqliteDataSource: table <prefix><level> in a SQLite database
"""
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .config import DATA_DIR, DEFAULT_HIERARCHY, HIERARCHIES
from .errors import DatasetError
from .models import Hierarchy, Level, Region
from .utils.db_utils import load_table_rows

logger = logging.getLogger(__name__)


def get_hierarchy(name: Optional[str] = None) -> Hierarchy:
    """Look up a built-in hierarchy by name (default: config.DEFAULT_HIERARCHY)."""
    name = name or DEFAULT_HIERARCHY
    try:
        return HIERARCHIES[name]
    except KeyError:
        raise ValueError(f"Unknown hierarchy '{name}' (expected one of: {', '.join(HIERARCHIES)})") from None


class JsonDataSource:
    """Reads one JSON array of records per level."""

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)

    def load_rows(self, level: Level) -> List[Dict[str, Any]]:
        path = self.data_dir / f"{level.name}.json"
        try:
            with open(path, 'r', encoding='utf-8') as f:
                rows = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DatasetError(f"Cannot read {level.name} data from {path}: {e}") from e

        if not isinstance(rows, list):
            raise DatasetError(f"{path}: expected a JSON array, got {type(rows).__name__}")
        return rows

    def __repr__(self) -> str:
        return f"JsonDataSource({str(self.data_dir)!r})"


class SqliteDataSource:
    """Reads one table per level; columns use the level's raw field names."""

    def __init__(self, db_path: Union[str, Path], table_prefix: str = ''):
        self.db_path = Path(db_path)
        self.table_prefix = table_prefix

    def load_rows(self, level: Level) -> List[Dict[str, Any]]:
        table = f"{self.table_prefix}{level.name}"
        try:
            return load_table_rows(self.db_path, table)
        except (OSError, ValueError, sqlite3.Error) as e:
            raise DatasetError(f"Cannot read {level.name} data from {self.db_path} (table {table}): {e}") from e

    def __repr__(self) -> str:
        return f"SqliteDataSource({str(self.db_path)!r})"


def default_source(hierarchy: Hierarchy) -> JsonDataSource:
    """Bundled seed files for a built-in hierarchy."""
    return JsonDataSource(DATA_DIR / hierarchy.name)


def _as_id(value: Any) -> Optional[str]:
    if value is None or value == '':
        return None
    return str(value)


def rows_to_regions(level: Level, rows: Iterable[Dict[str, Any]]) -> List[Region]:
    """
    Convert raw rows to Region records.

    Args:
        level: Level definition (field names)
        rows: Raw row dicts

    Returns:
        List of Region, same order as rows

    Raises:
        DatasetError: a row lacks its id or name

    Example:
        >>> rows_to_regions(ward_level, [{'idProvince': '01', 'idWard': '00004', 'name': 'Phường Ba Đình'}])
        [Region(id='00004', name='Phường Ba Đình', level='ward', parent_id='01')]
    """
    regions = []
    for position, row in enumerate(rows):
        if not isinstance(row, dict):
            raise DatasetError(f"{level.name} row {position}: expected an object, got {type(row).__name__}")

        region_id = _as_id(row.get(level.id_field))
        name = row.get('name')
        if region_id is None or not name:
            raise DatasetError(f"{level.name} row {position}: missing '{level.id_field}' or 'name'")

        parent_id = _as_id(row.get(level.parent_field)) if level.parent_field else None
        regions.append(Region(id=region_id, name=str(name), level=level.name, parent_id=parent_id))

    return regions


def load_level(source, level: Level) -> List[Region]:
    """Load one level's records from a data source."""
    rows = source.load_rows(level)
    regions = rows_to_regions(level, rows)
    logger.debug(f"Loaded {len(regions)} {level.name} records from {source!r}")
    return regions

"""
Dataset validation: ID format checks and referential integrity.

The registry never repairs data. Dangling parent references and
duplicate IDs are reported here for callers to act on.
"""
import logging
import re
from typing import List

from ..models import IntegrityReport, Region
from ..registry import Registry

logger = logging.getLogger(__name__)


class ValidationService:

    def __init__(self, registry: Registry):
        self.registry = registry

    def is_valid_id_format(self, level: str, region_id: str) -> bool:
        """
        Check an ID against the level's advisory pattern.

        Levels without a pattern accept any non-empty ID.

        Example:
            >>> service.is_valid_id_format('province', '01')
            True
            >>> service.is_valid_id_format('province', '1')
            False
        """
        if not region_id or not isinstance(region_id, str):
            return False
        pattern = self.registry.hierarchy.get_level(level).id_pattern
        return pattern is None or re.match(pattern, region_id) is not None

    def find_orphans(self, level: str) -> List[Region]:
        """Non-root records whose parent reference is missing or unknown."""
        parent_level = self.registry.hierarchy.parent_of(level)
        records = self.registry.get_records(level)
        if parent_level is None:
            return []

        return [
            record for record in records
            if record.parent_id is None or not self.registry.is_valid_id(parent_level.name, record.parent_id)
        ]

    def check_integrity(self) -> IntegrityReport:
        """Orphans and duplicate IDs for every level (loads all levels)."""
        report = IntegrityReport()
        for level in self.registry.hierarchy.names:
            report.orphans[level] = self.find_orphans(level)
            report.duplicates[level] = list(self.registry.get_level_index(level).duplicate_ids)

        if not report.is_valid:
            logger.warning(f"Integrity check failed: "
                           f"{sum(len(v) for v in report.orphans.values())} orphans, "
                           f"{sum(len(v) for v in report.duplicates.values())} duplicate IDs")
        return report

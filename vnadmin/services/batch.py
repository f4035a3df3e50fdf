"""
Batch wrappers: many IDs in, one result out.
"""
from typing import Dict, Iterable, List, Optional

from ..models import AddressPath, BatchResult, Region
from ..registry import Registry
from .hierarchy import HierarchyService


class BatchService:

    def __init__(self, registry: Registry, hierarchy_service: Optional[HierarchyService] = None):
        self.registry = registry
        self.hierarchy_service = hierarchy_service or HierarchyService(registry)

    def get_many(self, level: str, region_ids: Iterable[str]) -> BatchResult:
        """Found records in request order; unknown IDs go to failed."""
        result = BatchResult()
        for region_id in region_ids:
            region = self.registry.get_by_id(level, region_id)
            if region is None:
                result.failed.append(region_id)
            else:
                result.success.append(region)
        return result

    def get_children_many(self, level: str, parent_ids: Iterable[str]) -> Dict[str, List[Region]]:
        return {parent_id: self.registry.get_children(level, parent_id) for parent_id in parent_ids}

    def validate_ids(self, level: str, region_ids: Iterable[str]) -> Dict[str, bool]:
        return {region_id: self.registry.is_valid_id(level, region_id) for region_id in region_ids}

    def get_address_paths(self, level: str, region_ids: Iterable[str]) -> Dict[str, Optional[AddressPath]]:
        return {
            region_id: self.hierarchy_service.get_address_path(level, region_id)
            for region_id in region_ids
        }

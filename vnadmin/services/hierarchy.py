"""
Hierarchy navigation: address paths, subtrees, ancestry checks.
"""
from typing import List, Optional

from ..models import AddressPath, Region, RegionNode
from ..registry import Registry


class HierarchyService:

    def __init__(self, registry: Registry):
        self.registry = registry

    def get_address_path(self, level: str, region_id: str) -> Optional[AddressPath]:
        """
        Chain from the root down to a region.

        A broken parent link shortens the path instead of failing.

        Example:
            >>> service.get_address_path('ward', '00004').regions
            (Region(id='01', name='Thành phố Hà Nội', ...), Region(id='00004', name='Phường Ba Đình', ...))
        """
        region = self.registry.get_by_id(level, region_id)
        if region is None:
            return None

        ancestors = list(self.registry.iter_ancestors(region))
        return AddressPath(regions=tuple(reversed(ancestors)) + (region,))

    def get_formatted_address(self, level: str, region_id: str, style: str = 'full') -> Optional[str]:
        """
        Comma-joined names from the region up to the root.

        style='short' keeps only the region and the root.

        Example:
            >>> service.get_formatted_address('commune', '00004')
            'Phường Trúc Bạch, Quận Ba Đình, Thành phố Hà Nội'
        """
        if style not in ('full', 'short'):
            raise ValueError(f"style must be 'full' or 'short', got '{style}'")

        path = self.get_address_path(level, region_id)
        if path is None:
            return None

        parts = [region.name for region in reversed(path.regions)]
        if style == 'short' and len(parts) > 2:
            parts = [parts[0], parts[-1]]
        return ', '.join(parts)

    def get_with_children(self, level: str, region_id: str) -> Optional[RegionNode]:
        """Region plus its direct children."""
        region = self.registry.get_by_id(level, region_id)
        if region is None:
            return None
        children = self.registry.get_children(level, region_id)
        return RegionNode(region=region, children=tuple(RegionNode(region=child) for child in children))

    def get_subtree(self, level: str, region_id: str, depth: Optional[int] = None) -> Optional[RegionNode]:
        """Region and its descendants, down to depth levels (None = all the way)."""
        region = self.registry.get_by_id(level, region_id)
        if region is None:
            return None
        return self._build_node(region, depth)

    def _build_node(self, region: Region, depth: Optional[int]) -> RegionNode:
        if depth is not None and depth <= 0:
            return RegionNode(region=region)

        next_depth = None if depth is None else depth - 1
        children = self.registry.get_children(region.level, region.id)
        return RegionNode(region=region, children=tuple(self._build_node(child, next_depth) for child in children))

    def is_descendant(self, ancestor_level: str, ancestor_id: str, level: str, region_id: str) -> bool:
        """True if the region sits under the given ancestor (e.g. ward under province)."""
        region = self.registry.get_by_id(level, region_id)
        if region is None:
            return False
        return any(
            ancestor.level == ancestor_level and ancestor.id == ancestor_id
            for ancestor in self.registry.iter_ancestors(region)
        )

    def get_siblings(self, level: str, region_id: str) -> List[Region]:
        """Other regions sharing the same parent."""
        region = self.registry.get_by_id(level, region_id)
        if region is None or region.parent_id is None:
            return []

        parent_level = self.registry.hierarchy.parent_of(level)
        siblings = self.registry.get_children(parent_level.name, region.parent_id)
        return [sibling for sibling in siblings if sibling.id != region_id]

"""
Category trails and owning catalogs of a product.

A trail entry is ``"<depth>/<root>/.../<category>"``: the depth is the
zero-based position of the last segment within its root-to-leaf sequence.
"""

import logging
from typing import Iterable, Sequence

from product_indexer.collaborators import CatalogMembership, CategoryHierarchy

logger = logging.getLogger(__name__)


def trail_entries(trail: Sequence[str]) -> list[str]:
    """Depth-prefixed path of every prefix of one root-to-leaf trail."""
    entries = []
    path = ""
    depth = 0
    for category_id in trail:
        if path:
            path += "/"
            depth += 1
        path += str(category_id)
        entries.append(f"{depth}/{path}")
    return entries


def root_category(entry: str) -> str:
    """Root category id of a trail entry (first segment after the depth)."""
    parts = entry.split("/")
    return parts[1] if len(parts) > 1 else entry


class CategoryTrailResolver:
    """Expands category memberships into trail entries and catalogs."""

    def __init__(self, hierarchy: CategoryHierarchy, catalogs: CatalogMembership):
        self.hierarchy = hierarchy
        self.catalogs = catalogs

    def resolve_trails(self, product_id: str) -> list[str]:
        """
        Trail entries of every category the product is a member of.

        Entries are unique and keep first-seen order, so an ancestor shared
        by two memberships appears once.
        """
        trails: dict[str, None] = {}
        for category_id in self.hierarchy.memberships(product_id):
            for trail in self.hierarchy.trails(category_id):
                for entry in trail_entries(trail):
                    trails.setdefault(entry, None)

        logger.debug(
            f"Resolved {len(trails)} category trail entries",
            extra={"product_id": product_id},
        )
        return list(trails)

    def resolve_catalogs(self, trails: Iterable[str]) -> list[str]:
        """Catalogs owning the root category of each trail entry, in first-seen order."""
        catalogs: dict[str, None] = {}
        owners_by_root: dict[str, Sequence[str]] = {}
        for entry in trails:
            root = root_category(entry)
            if root not in owners_by_root:
                owners_by_root[root] = self.catalogs.catalogs_of(root)
            for catalog_id in owners_by_root[root]:
                catalogs.setdefault(catalog_id, None)
        return list(catalogs)

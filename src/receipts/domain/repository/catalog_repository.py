"""Abstract repository for the product/service catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod

from receipts.domain.model.catalog import CatalogItem
from receipts.domain.model.document_kind import DocumentKind


class CatalogRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: str) -> CatalogItem | None:
        """Return a catalog item by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str, kind: DocumentKind) -> CatalogItem | None:
        """Return a catalog item of the given kind by name (case-insensitive)."""

    @abstractmethod
    def list_all(self, kind: DocumentKind | None = None) -> list[CatalogItem]:
        """Return all catalog items, optionally filtered by kind."""

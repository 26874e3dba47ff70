"""JSON-file-backed implementation of CatalogRepository."""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

from receipts.domain.exceptions import EntityNotFoundError, ValidationError
from receipts.domain.model.catalog import CatalogItem
from receipts.domain.model.document_kind import DocumentKind
from receipts.domain.model.value_objects import Money
from receipts.domain.repository.catalog_repository import CatalogRepository


class JsonCatalogRepository(CatalogRepository):
    """Reads the catalog from a JSON array of items.

    Coffee item: ``{"id", "name", "kind": "coffee", "category", "price",
    "options": ["Hot", "Cold"]}``.  Carwash service: ``{"id", "name",
    "kind": "carwash", "category", "prices": {"Sedan": "200.00", ...}}``.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- CatalogRepository interface ------------------------------------------

    def get_by_id(self, item_id: str) -> CatalogItem | None:
        return self._load().get(item_id)

    def get_by_name(self, name: str, kind: DocumentKind) -> CatalogItem | None:
        for item in self._load().values():
            if item.kind is kind and item.name.lower() == name.strip().lower():
                return item
        return None

    def list_all(self, kind: DocumentKind | None = None) -> list[CatalogItem]:
        return [
            item for item in self._load().values() if kind is None or item.kind is kind
        ]

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, CatalogItem]:
        if not self._file_path.exists():
            raise EntityNotFoundError(f"Catalog file not found: {self._file_path}")
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Catalog file {self._file_path} is not valid JSON: {exc}") from exc
        if not isinstance(raw, list):
            raise ValidationError(f"Catalog file {self._file_path} must hold a JSON array of items")
        items = [self._to_domain(entry) for entry in raw]
        return {item.id: item for item in items}

    @staticmethod
    def _to_domain(entry: dict) -> CatalogItem:
        if not isinstance(entry, dict):
            raise ValidationError(f"Catalog entry must be a JSON object: {entry!r}")
        try:
            return CatalogItem(
                id=str(entry["id"]),
                name=entry["name"],
                kind=DocumentKind.parse(entry["kind"]),
                category=entry.get("category", ""),
                price=Money(Decimal(str(entry["price"]))) if "price" in entry else None,
                options=list(entry.get("options", [])),
                variant_prices={
                    variant: Money(Decimal(str(price)))
                    for variant, price in entry.get("prices", {}).items()
                },
            )
        except KeyError as exc:
            raise ValidationError(f"Catalog entry is missing {exc}: {entry!r}") from exc
        except (InvalidOperation, TypeError, ValueError, AttributeError) as exc:
            raise ValidationError(f"Catalog entry has an invalid value: {entry!r}") from exc

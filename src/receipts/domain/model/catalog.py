"""Catalog items: coffee products and carwash services.

Coffee products have one price and, for drinks that need it, a list of
temperature options that do not change the price.  Carwash services are
priced per vehicle type.  Both resolve to a unit price through
``price_for(qualifier)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from receipts.domain.exceptions import ValidationError
from receipts.domain.model.document_kind import DocumentKind
from receipts.domain.model.value_objects import Money


@dataclass
class CatalogItem:
    """A sellable product or service."""

    id: str
    name: str
    kind: DocumentKind
    category: str = ""
    price: Money | None = None
    options: list[str] = field(default_factory=list)  # e.g. ["Hot", "Cold"]
    variant_prices: dict[str, Money] = field(default_factory=dict)  # e.g. {"Sedan": P200.00}

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Catalog item name is required")
        if self.price is None and not self.variant_prices:
            raise ValidationError(f"Catalog item '{self.name}' has no price")
        if self.price is not None and self.variant_prices:
            raise ValidationError(
                f"Catalog item '{self.name}' cannot have both a price and variant prices"
            )

    @property
    def qualifiers(self) -> list[str]:
        return list(self.variant_prices) if self.variant_prices else list(self.options)

    def price_for(self, qualifier: str | None) -> Money:
        """Resolve the unit price for a vehicle type or drink option."""
        if self.variant_prices:
            if qualifier is None:
                raise ValidationError(
                    f"'{self.name}' needs one of: {', '.join(self.variant_prices)}"
                )
            for variant, price in self.variant_prices.items():
                if variant.lower() == qualifier.lower():
                    return price
            raise ValidationError(f"'{self.name}' has no price for '{qualifier}'")

        if self.options:
            if qualifier is None or qualifier.lower() not in (o.lower() for o in self.options):
                raise ValidationError(
                    f"'{self.name}' needs one of: {', '.join(self.options)}"
                )
        elif qualifier is not None:
            raise ValidationError(f"'{self.name}' does not take an option")
        return self.price  # type: ignore[return-value]

    def canonical_qualifier(self, qualifier: str | None) -> str | None:
        """Return the qualifier spelled as the catalog spells it."""
        if qualifier is None:
            return None
        for known in self.qualifiers:
            if known.lower() == qualifier.lower():
                return known
        return qualifier

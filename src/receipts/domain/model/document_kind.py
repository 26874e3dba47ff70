"""Document kinds and the per-kind receipt profile.

Coffee and carwash receipts share the same layout.  What differs between
the two business lines (header subtitle, footer, whether a discount may be
printed, whether customer details are printed) lives in a DocumentProfile
so the encoder never branches on the kind itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from receipts.domain.exceptions import ValidationError


class DocumentKind(Enum):
    COFFEE = "coffee"
    CARWASH = "carwash"

    @staticmethod
    def parse(raw: str) -> DocumentKind:
        try:
            return DocumentKind(raw.strip().lower())
        except ValueError:
            choices = ", ".join(k.value for k in DocumentKind)
            raise ValidationError(
                f"Unknown document kind '{raw}'. Expected one of: {choices}",
                field="kind",
            ) from None


@dataclass(frozen=True)
class DocumentProfile:
    kind: DocumentKind
    subtitle: str
    footer: tuple[str, ...]
    allows_discount: bool
    shows_customer: bool


COFFEE_PROFILE = DocumentProfile(
    kind=DocumentKind.COFFEE,
    subtitle="COFFEE",
    footer=("Thank you!", "Visit us again"),
    allows_discount=True,
    shows_customer=False,
)

CARWASH_PROFILE = DocumentProfile(
    kind=DocumentKind.CARWASH,
    subtitle="CARWASH",
    footer=("Thank you!", "Drive safe"),
    allows_discount=False,
    shows_customer=True,
)


def default_profiles(carwash_discounts: bool = False) -> dict[DocumentKind, DocumentProfile]:
    """Profiles keyed by kind.

    Carwash discounts are off unless the business turns them on.
    """
    carwash = CARWASH_PROFILE
    if carwash_discounts:
        carwash = DocumentProfile(
            kind=carwash.kind,
            subtitle=carwash.subtitle,
            footer=carwash.footer,
            allows_discount=True,
            shows_customer=carwash.shows_customer,
        )
    return {
        DocumentKind.COFFEE: COFFEE_PROFILE,
        DocumentKind.CARWASH: carwash,
    }

"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartItemSpec:
    """Input: what the customer asked for (item name, option/vehicle, quantity)."""

    name: str
    qualifier: str | None
    quantity: int


@dataclass(frozen=True)
class CustomerSpec:
    """Input: optional customer details printed on carwash receipts."""

    name: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class PrintOutcome:
    """Output: how a receipt reached paper."""

    order_id: str
    channel: str  # bridge or fallback name, e.g. "rawbt", "browser"
    used_fallback: bool
    byte_count: int
    location: str | None = None  # where the fallback rendered to
    error: str | None = None  # why the bridge was skipped

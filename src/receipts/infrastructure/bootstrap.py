"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from receipts.domain.exceptions import ValidationError
from receipts.domain.gateway.printer_bridge import PrinterBridge
from receipts.domain.model.document_kind import DocumentKind, DocumentProfile, default_profiles
from receipts.domain.service.escpos_encoder import EscPosEncoder
from receipts.infrastructure.config import Settings
from receipts.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from receipts.infrastructure.printing.browser_print import BrowserPrintFallback
from receipts.infrastructure.printing.device_bridge import DevicePrinterBridge
from receipts.infrastructure.printing.rawbt_bridge import RawBTBridge

BRIDGES = ("rawbt", "device")


def settings() -> Settings:
    return Settings.from_env()


def profiles(config: Settings) -> dict[DocumentKind, DocumentProfile]:
    return default_profiles(carwash_discounts=config.carwash_discounts)


def encoder(config: Settings) -> EscPosEncoder:
    return EscPosEncoder(
        line_width=config.line_width,
        business_name=config.business_name,
        profiles=profiles(config),
    )


def catalog_repository(config: Settings) -> JsonCatalogRepository:
    return JsonCatalogRepository(config.catalog_path)


def printer_bridge(config: Settings, name: str = "rawbt") -> PrinterBridge:
    if name == "rawbt":
        return RawBTBridge(enabled=config.rawbt_enabled)
    if name == "device":
        return DevicePrinterBridge(config.printer_device)
    raise ValidationError(
        f"Unknown printer bridge '{name}'. Expected one of: {', '.join(BRIDGES)}",
        field="bridge",
    )


def print_fallback(config: Settings) -> BrowserPrintFallback:
    return BrowserPrintFallback(
        output_dir=config.html_dir,
        profiles=profiles(config),
        business_name=config.business_name,
    )

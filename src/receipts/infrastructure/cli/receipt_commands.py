"""CLI commands for ringing up orders and printing their receipts."""

from __future__ import annotations

import json
from pathlib import Path

import click

from receipts.application.checkout import CheckoutHandler
from receipts.application.dto import CartItemSpec, CustomerSpec
from receipts.application.encode_receipt import EncodeReceiptHandler
from receipts.application.preview_receipt import PreviewReceiptHandler
from receipts.application.print_receipt import PrintReceiptHandler
from receipts.domain.exceptions import DomainException
from receipts.domain.model.cart import DiscountType
from receipts.domain.model.document_kind import DocumentKind
from receipts.domain.model.receipt import PaymentMethod, ReceiptRequest
from receipts.infrastructure.bootstrap import (
    BRIDGES,
    catalog_repository,
    encoder,
    print_fallback,
    printer_bridge,
    profiles,
)
from receipts.infrastructure.config import Settings
from receipts.infrastructure.persistence.json_receipt_request import (
    load_receipt_request,
    save_receipt_request,
    to_raw,
)
from receipts.infrastructure.printing.browser_print import render_receipt_html
from receipts.infrastructure.printing.rawbt_bridge import INSTALL_INSTRUCTIONS

KIND_CHOICE = click.Choice([k.value for k in DocumentKind], case_sensitive=False)
ORDER_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _parse_items(raw: str) -> list[CartItemSpec]:
    """Parse 'Latte:Hot:1,Croissant:2' into CartItemSpec list."""
    specs: list[CartItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = [p.strip() for p in entry.split(":")]
        if len(parts) == 2:
            name, qualifier, qty_str = parts[0], None, parts[1]
        elif len(parts) == 3:
            name, qualifier, qty_str = parts
        else:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'Name:Qty' or 'Name:Option:Qty'."
            )
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(f"Invalid quantity '{qty_str}' for item '{name}'.")
        specs.append(CartItemSpec(name=name, qualifier=qualifier or None, quantity=qty))
    return specs


def _load(order_path: Path) -> ReceiptRequest:
    try:
        return load_receipt_request(order_path)
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("checkout")
@click.option("--kind", type=KIND_CHOICE, required=True, help="coffee or carwash.")
@click.option("--items", required=True, help="Items as 'Name:Option:Qty,Name:Qty'.")
@click.option("--payment", required=True, help="Cash or GCash.")
@click.option("--cash", default=None, help="Cash tendered (required for Cash).")
@click.option("--discount", default=None, help="Senior, PWD or Employee.")
@click.option("--customer", default=None, help="Customer name (carwash).")
@click.option("--phone", default=None, help="Customer phone (carwash).")
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the order document here instead of stdout.")
@click.pass_obj
def receipt_checkout(
    config: Settings,
    kind: str,
    items: str,
    payment: str,
    cash: str | None,
    discount: str | None,
    customer: str | None,
    phone: str | None,
    out_path: Path | None,
) -> None:
    """Ring up an order and write its receipt document as JSON."""
    specs = _parse_items(items)
    handler = CheckoutHandler(catalog_repo=catalog_repository(config))

    try:
        doc_kind = DocumentKind.parse(kind)
        request = handler.handle(
            profile=profiles(config)[doc_kind],
            item_specs=specs,
            payment_method=PaymentMethod.parse(payment),
            cash_tendered=cash,
            discount=DiscountType.parse(discount) if discount else None,
            customer=CustomerSpec(name=customer, phone=phone),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if out_path is None:
        click.echo(json.dumps(to_raw(request), indent=2))
        return

    save_receipt_request(request, out_path)
    click.echo(f"Order {request.order_id} saved to {out_path}")
    click.echo(f"  {'Total':<20} P{request.total:.2f}")
    if request.change_due is not None:
        click.echo(f"  {'Change':<20} P{request.change_due:.2f}")


@click.command("encode")
@click.option("--order", "order_path", type=ORDER_FILE, required=True, help="Order JSON file.")
@click.option("--kind", type=KIND_CHOICE, required=True, help="coffee or carwash.")
@click.option("--out", "out_path", type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
              required=True, help="Where to write the ESC/POS bytes ('-' for stdout).")
@click.pass_obj
def receipt_encode(config: Settings, order_path: Path, kind: str, out_path: Path) -> None:
    """Encode an order into raw ESC/POS bytes."""
    request = _load(order_path)
    handler = EncodeReceiptHandler(encoder=encoder(config))
    result = handler.handle(request, DocumentKind.parse(kind))
    if not result.ok:
        raise click.ClickException(result.error or "receipt could not be encoded")

    data = result.unwrap()
    if str(out_path) == "-":
        click.get_binary_stream("stdout").write(data)
        return
    out_path.write_bytes(data)
    click.echo(f"Wrote {len(data)} bytes to {out_path}")


@click.command("preview")
@click.option("--order", "order_path", type=ORDER_FILE, required=True, help="Order JSON file.")
@click.option("--kind", type=KIND_CHOICE, required=True, help="coffee or carwash.")
@click.pass_obj
def receipt_preview(config: Settings, order_path: Path, kind: str) -> None:
    """Show how the thermal receipt will look."""
    request = _load(order_path)
    handler = PreviewReceiptHandler(encoder=encoder(config))

    try:
        preview = handler.handle(request, DocumentKind.parse(kind))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(preview.render(config.line_width))


@click.command("print")
@click.option("--order", "order_path", type=ORDER_FILE, required=True, help="Order JSON file.")
@click.option("--kind", type=KIND_CHOICE, required=True, help="coffee or carwash.")
@click.option("--bridge", type=click.Choice(BRIDGES), default="rawbt", show_default=True,
              help="How to reach the thermal printer.")
@click.pass_obj
def receipt_print(config: Settings, order_path: Path, kind: str, bridge: str) -> None:
    """Print a receipt, falling back to the browser if the printer is unreachable."""
    request = _load(order_path)

    try:
        handler = PrintReceiptHandler(
            encoder=encoder(config),
            bridge=printer_bridge(config, bridge),
            fallback=print_fallback(config),
        )
        outcome = handler.handle(request, DocumentKind.parse(kind))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if outcome.used_fallback:
        click.echo(f"Printer unavailable ({outcome.error}).", err=True)
        if bridge == "rawbt":
            click.echo(INSTALL_INSTRUCTIONS, err=True)
        click.echo(f"Order {outcome.order_id} sent to browser print: {outcome.location}")
    else:
        click.echo(f"Order {outcome.order_id} sent to {outcome.channel} ({outcome.byte_count} bytes).")


@click.command("html")
@click.option("--order", "order_path", type=ORDER_FILE, required=True, help="Order JSON file.")
@click.option("--kind", type=KIND_CHOICE, required=True, help="coffee or carwash.")
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), required=True,
              help="Where to write the HTML receipt.")
@click.pass_obj
def receipt_html(config: Settings, order_path: Path, kind: str, out_path: Path) -> None:
    """Render the browser-print version of a receipt."""
    request = _load(order_path)

    try:
        profile = profiles(config)[DocumentKind.parse(kind)]
        page = render_receipt_html(request, profile, config.business_name)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    out_path.write_text(page, encoding="utf-8")
    click.echo(f"Wrote receipt page to {out_path}")

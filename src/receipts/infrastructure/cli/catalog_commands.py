"""CLI commands for the catalog."""

from __future__ import annotations

import click

from receipts.domain.exceptions import DomainException
from receipts.domain.model.document_kind import DocumentKind
from receipts.infrastructure.bootstrap import catalog_repository
from receipts.infrastructure.config import Settings

KIND_CHOICE = click.Choice([k.value for k in DocumentKind], case_sensitive=False)


@click.command("list")
@click.option("--kind", type=KIND_CHOICE, default=None, help="Only coffee or carwash items.")
@click.pass_obj
def catalog_list(config: Settings, kind: str | None) -> None:
    """List catalog items and their prices."""
    repo = catalog_repository(config)

    try:
        items = repo.list_all(DocumentKind.parse(kind) if kind else None)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not items:
        click.echo("No catalog items found.")
        return

    click.echo(f"{'ID':<22} {'Name':<26} {'Option':<16} {'Price':>10}")
    click.echo("-" * 77)
    for item in items:
        if item.variant_prices:
            for variant, price in item.variant_prices.items():
                click.echo(f"{item.id:<22} {item.name:<26} {variant:<16} {str(price):>10}")
        else:
            options = "/".join(item.options) or "-"
            click.echo(f"{item.id:<22} {item.name:<26} {options:<16} {str(item.price):>10}")

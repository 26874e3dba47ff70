import click

from receipts.domain.exceptions import DomainException
from receipts.infrastructure.bootstrap import settings
from receipts.infrastructure.cli.catalog_commands import catalog_list
from receipts.infrastructure.cli.receipt_commands import (
    receipt_checkout,
    receipt_encode,
    receipt_html,
    receipt_preview,
    receipt_print,
)
from receipts.infrastructure.logs import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """POS receipts: coffee and carwash receipt printing"""
    try:
        config = settings()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    configure_logging(config.log_level, config.log_format)
    ctx.obj = config


@cli.group()
def catalog() -> None:
    """Browse the product and service catalog."""


# Register subcommands
catalog.add_command(catalog_list)
cli.add_command(receipt_checkout)
cli.add_command(receipt_encode)
cli.add_command(receipt_html)
cli.add_command(receipt_preview)
cli.add_command(receipt_print)

# Overview: Flask CLI command groups for store bootstrap and inventory chores.

# backend/voltmanager/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Set DATABASE_URL to a file database (e.g. sqlite:///voltmanager.sqlite3);
#   the default in-memory store only lives as long as one command.
# - Use: python -m flask <group> <command> [options]
#
# System:
# - python -m flask system reset-db --yes
#   Drop and recreate all tables (deletes all data).
#
# Seed data:
# - python -m flask seed load [--dir PATH] [--replace]
#   Load JSON fixtures into an empty store; --replace clears existing records first.
#
# Inventory:
# - python -m flask inventory low-stock
#   List products at or below their minimum stock.
# - python -m flask inventory adjust SKU DELTA
#   Adjust stock of a product by a signed delta (negative: inventory adjust -- SKU -3).

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Product
from .services import products_service
from .services.seed_service import SeedError, clear_store, load_seed_data, store_is_empty
from .validation import ValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """Drop and recreate all tables."""
    if not yes:
        click.confirm('This deletes ALL data. Continue?', abort=True)
    db.drop_all()
    db.create_all()
    click.echo("Database reset.")


@click.group('seed')
def seed_group():
    """Fixture loading."""


@seed_group.command('load')
@click.option('--dir', 'directory', type=click.Path(file_okay=False), help='Fixture directory (default SEED_DATA_DIR)')
@click.option('--replace', is_flag=True, help='Clear existing records first')
@with_appcontext
def seed_load(directory, replace):
    """Load fixtures into an empty store (or, with --replace, over the current one)."""
    if replace:
        clear_store()
    elif not store_is_empty():
        click.echo("Store already holds records; nothing loaded. Use --replace to reload fixtures.")
        return
    try:
        counts = load_seed_data(directory)
    except SeedError as e:
        raise click.ClickException(str(e))
    for name, count in counts.items():
        click.echo(f"  {name:<20} {count}")


@click.group('inventory')
def inventory_group():
    """Inventory inspection and adjustment."""


@inventory_group.command('low-stock')
@with_appcontext
def low_stock():
    products = products_service.get_low_stock_products()
    if not products:
        click.echo("No low-stock products.")
        return
    for p in products:
        click.echo(f"  {p['sku']:<16} {p['name']:<40} stock={p['stock']} min={p['min_stock']}")


@inventory_group.command('adjust')
@click.argument('sku')
@click.argument('delta', type=int)
@with_appcontext
def adjust(sku, delta):
    product = db.session.query(Product).filter_by(sku=sku).first()
    if product is None:
        raise click.ClickException(f"No product with SKU {sku}")
    try:
        updated = products_service.update_stock(product_id=product.id, delta=delta)
    except ValidationError as e:
        raise click.ClickException(str(e))
    click.echo(f"{sku}: stock {updated['stock']}")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(seed_group)
    app.cli.add_command(inventory_group)

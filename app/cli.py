import os
from decimal import Decimal

import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate

from app.gateway import SQLAlchemyGateway, GatewayError
from app.services.orders import ORDER_STATUSES
from models import db


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


DEMO_PRODUCTS = [
    ("Travel Backpack 40L", "Bags", "2499.00", 25),
    ("Neck Pillow", "Comfort", "599.00", 60),
    ("Universal Power Adapter", "Electronics", "899.00", 40),
    ("Sunscreen SPF 50", "Essentials", "349.00", 0),
]

DEMO_DESTINATIONS = [
    ("Munnar", "India", True, [
        ("Tea Garden Escape", 3, 2, "12999.00"),
    ], [
        ("Misty Hills Resort", "3500.00", 4.4, "mid-range"),
    ]),
    ("Goa", "India", False, [
        ("Beach Weekender", 4, 3, "15999.00"),
    ], [
        ("Palm Grove Inn", "1800.00", 3.9, "budget"),
    ]),
]


@click.command("seed-catalog")
@with_appcontext
def seed_catalog():
    """Load a small demo catalog when the products table is empty."""
    gateway = SQLAlchemyGateway(db.session)
    if gateway.select("products", limit=1):
        click.echo("Catalog already present, nothing to do.")
        return
    with gateway.atomic():
        gateway.insert("products", [
            {"name": name, "category": category, "price": Decimal(price), "stock": stock,
             "description": f"{name} for the road"}
            for name, category, price, stock in DEMO_PRODUCTS
        ])
        for name, country, featured, packages, hotels in DEMO_DESTINATIONS:
            dest = gateway.insert("destinations", {
                "name": name, "country": country, "featured": featured,
                "description": f"Discover {name}",
            })
            gateway.insert("packages", [
                {"destination_id": dest["id"], "name": p, "duration_days": days,
                 "duration_nights": nights, "price": Decimal(price)}
                for p, days, nights, price in packages
            ])
            gateway.insert("hotels", [
                {"destination_id": dest["id"], "name": h, "price_per_night": Decimal(rate),
                 "rating": rating, "budget_category": budget}
                for h, rate, rating, budget in hotels
            ])
    click.echo("Demo catalog loaded.")


@click.command("set-order-status")
@click.argument("order_id")
@click.argument("status", type=click.Choice(ORDER_STATUSES))
@with_appcontext
def set_order_status(order_id, status):
    """Move an order to shipped, delivered or cancelled."""
    gateway = SQLAlchemyGateway(db.session)
    try:
        updated = gateway.update("orders", {"status": status}, {"id": order_id})
    except GatewayError as e:
        raise click.ClickException(e.message)
    if not updated:
        raise click.ClickException(f"Order {order_id} not found")
    click.echo(f"Order {order_id} is now {status}.")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(seed_catalog)
    app.cli.add_command(set_order_status)

# ayana/commands.py
import os
from datetime import datetime, timedelta
from decimal import Decimal

import click
from flask import Flask

from ayana.extensions import db
from ayana.models import Customer, Discount, DiscountType, Product

DEV_PRODUCTS = [
    {"name": "Red roses bouquet", "price": Decimal("45.00"), "flower_type": "rose",
     "stock": 20, "category": "bouquets", "product_type": "bouquet"},
    {"name": "White tulips", "price": Decimal("30.00"), "flower_type": "tulip",
     "stock": 15, "category": "bouquets", "product_type": "bouquet"},
    {"name": "Ceramic vase", "price": Decimal("18.50"), "flower_type": None,
     "stock": 8, "category": "accessories", "product_type": "gift"},
]


def register_commands(app: Flask) -> None:

    @app.cli.command("create-customer")
    @click.option("--username", default=lambda: os.environ.get("CUSTOMER_USERNAME", "customer"),
                  show_default=True)
    @click.option("--email", default=lambda: os.environ.get("CUSTOMER_EMAIL", "customer@example.com"),
                  show_default=True)
    @click.option("--password", default=lambda: os.environ.get("CUSTOMER_PASSWORD"),
                  help="Prompted for when not given")
    @click.option("--force", is_flag=True, default=False, help="Reset the password of an existing account")
    def create_customer(username: str, email: str, password: str | None, force: bool):
        """Create (or reset) a customer account."""
        db.create_all()

        if not password:
            password = click.prompt("Password", hide_input=True, confirmation_prompt=True)

        c = db.session.query(Customer).filter_by(username=username).first()
        if c and not force:
            click.echo(f"Customer '{username}' already exists. Use --force to reset the password.")
            return

        if not c:
            c = Customer(username=username, email=email)
            db.session.add(c)
        c.set_password(password)

        db.session.commit()
        click.echo(f"Customer ready: {username} (#{c.id})")

    @app.cli.command("seed-dev")
    def seed_dev():
        """Minimal catalogue and two discount codes for local development."""
        db.create_all()

        created = 0
        for data in DEV_PRODUCTS:
            if db.session.query(Product).filter_by(name=data["name"]).first():
                continue
            db.session.add(Product(description=f"{data['name']} (seed)", **data))
            created += 1

        now = datetime.utcnow()
        for code, kind, amount in (
            ("WELCOME10", DiscountType.PERCENTAGE, Decimal("10")),
            ("FLOWERS5", DiscountType.AMOUNT_OFF, Decimal("5")),
        ):
            if db.session.query(Discount).filter_by(code=code).first():
                continue
            db.session.add(Discount(
                code=code,
                discount_type=kind.value,
                amount=amount,
                begins_at=now,
                ends_at=now + timedelta(days=30),
            ))
            created += 1

        db.session.commit()
        click.echo(f"[OK] Seeded {created} rows")

# ayana/repositories.py
"""Repositories used by the cart and checkout services.

Every repository offers the same small surface: ``find`` by primary key,
``add``, ``remove`` and ``filter_by`` on column values. ``SqlAlchemyStore``
backs them with the Flask-SQLAlchemy session; ``InMemoryStore`` keeps rows
in dicts for service tests. Services only ever talk to a store, so they run
unchanged on both.
"""
from __future__ import annotations

import itertools
import threading
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import FlushError

from ayana.errors import PersistenceFailure
from ayana.models import CartItem, Discount, Order, OrderItem, Payment, Product


# --- SQLAlchemy -------------------------------------------------------------

class SqlAlchemyRepository:
    def __init__(self, session, model, order_by: tuple = ()):
        self.session = session
        self.model = model
        self.order_by = order_by

    def find(self, key):
        if key is None:
            return None
        return self.session.get(self.model, key)

    def add(self, obj):
        self.session.add(obj)
        return obj

    def remove(self, obj) -> None:
        self.session.delete(obj)

    def filter_by(self, **criteria) -> list:
        q = self.session.query(self.model).filter_by(**criteria)
        if self.order_by:
            q = q.order_by(*[getattr(self.model, name) for name in self.order_by])
        return q.all()

    def first_by(self, **criteria):
        rows = self.filter_by(**criteria)
        return rows[0] if rows else None


class CartItemRepository(SqlAlchemyRepository):
    def __init__(self, session):
        super().__init__(session, CartItem, order_by=("added_at", "product_id"))

    def increment(self, customer_id, product_id, delta: int) -> bool:
        """Change quantity in one UPDATE; never lets it drop below 1."""
        stmt = (
            sa.update(CartItem)
            .where(
                CartItem.customer_id == customer_id,
                CartItem.product_id == product_id,
                CartItem.quantity + delta >= 1,
            )
            .values(quantity=CartItem.quantity + delta)
        )
        return self.session.execute(stmt).rowcount > 0

    def insert(self, item: CartItem) -> bool:
        """Insert a new line; False when the (customer, product) row already exists."""
        try:
            with self.session.begin_nested():
                self.session.add(item)
                self.session.flush()
        except (IntegrityError, FlushError):
            return False
        return True


class SqlAlchemyStore:
    """Unit of work over the Flask-SQLAlchemy session."""

    def __init__(self, session):
        self.session = session
        self.products = SqlAlchemyRepository(session, Product, order_by=("id",))
        self.cart_items = CartItemRepository(session)
        self.discounts = SqlAlchemyRepository(session, Discount, order_by=("id",))
        self.payments = SqlAlchemyRepository(session, Payment, order_by=("id",))
        self.orders = SqlAlchemyRepository(session, Order, order_by=("id",))
        self.order_items = SqlAlchemyRepository(session, OrderItem, order_by=("id",))

    def flush(self) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceFailure(f"Flush failed: {e}") from e

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceFailure(f"Commit failed: {e}") from e

    def rollback(self) -> None:
        self.session.rollback()


# --- In-memory --------------------------------------------------------------

class InMemoryRepository:
    """Rows keyed by primary key, returned in insertion order."""

    def __init__(self, key_attrs: tuple = ("id",), autoincrement: bool = True):
        self.key_attrs = key_attrs
        self.autoincrement = autoincrement
        self.rows: dict = {}
        self._ids = itertools.count(1)

    def _key_of(self, obj):
        values = tuple(getattr(obj, a) for a in self.key_attrs)
        return values[0] if len(values) == 1 else values

    def find(self, key):
        return self.rows.get(key)

    def add(self, obj):
        if self.autoincrement and getattr(obj, "id", None) is None:
            obj.id = next(self._ids)
        self.rows[self._key_of(obj)] = obj
        return obj

    def remove(self, obj) -> None:
        self.rows.pop(self._key_of(obj), None)

    def filter_by(self, **criteria) -> list:
        return [
            row for row in self.rows.values()
            if all(getattr(row, k) == v for k, v in criteria.items())
        ]

    def first_by(self, **criteria):
        rows = self.filter_by(**criteria)
        return rows[0] if rows else None


class InMemoryCartItemRepository(InMemoryRepository):
    def __init__(self):
        super().__init__(key_attrs=("customer_id", "product_id"), autoincrement=False)
        self._lock = threading.Lock()

    def increment(self, customer_id, product_id, delta: int) -> bool:
        with self._lock:
            item = self.rows.get((customer_id, product_id))
            if item is None or item.quantity + delta < 1:
                return False
            item.quantity += delta
            return True

    def insert(self, item: CartItem) -> bool:
        with self._lock:
            if self._key_of(item) in self.rows:
                return False
            if item.added_at is None:
                item.added_at = datetime.utcnow()
            self.rows[self._key_of(item)] = item
            return True


class InMemoryStore:
    """Dict-backed store. ``rollback`` restores which rows exist, not their field values."""

    def __init__(self):
        self.products = InMemoryRepository()
        self.cart_items = InMemoryCartItemRepository()
        self.discounts = InMemoryRepository()
        self.payments = InMemoryRepository()
        self.orders = InMemoryRepository()
        self.order_items = InMemoryRepository()
        self.commits = 0
        self.flushes = 0
        self._snapshot = self._take_snapshot()

    def _repos(self):
        return (self.products, self.cart_items, self.discounts,
                self.payments, self.orders, self.order_items)

    def _take_snapshot(self):
        return [dict(repo.rows) for repo in self._repos()]

    def flush(self) -> None:
        self.flushes += 1

    def commit(self) -> None:
        self.commits += 1
        self._snapshot = self._take_snapshot()

    def rollback(self) -> None:
        for repo, rows in zip(self._repos(), self._snapshot):
            repo.rows = dict(rows)

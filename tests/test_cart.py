from decimal import Decimal

import pytest

from ayana.errors import InvalidInput, NotFound
from ayana.models import CartItem
from ayana.services.cart import (
    add_to_cart,
    cart_subtotal,
    get_cart_items,
    get_cart_products,
    remove_item,
)

CUSTOMER = 7
OTHER = 8


def _rows(store, customer_id=CUSTOMER):
    return store.cart_items.filter_by(customer_id=customer_id)


class TestAddToCart:
    def test_first_add_creates_line_with_quantity_one(self, store):
        add_to_cart(store, CUSTOMER, 1)

        rows = _rows(store)
        assert len(rows) == 1
        assert rows[0].product_id == 1
        assert rows[0].quantity == 1

    def test_second_add_increments_without_duplicate(self, store):
        add_to_cart(store, CUSTOMER, 1)
        add_to_cart(store, CUSTOMER, 1)

        rows = _rows(store)
        assert len(rows) == 1
        assert rows[0].quantity == 2

    def test_lines_are_per_customer(self, store):
        add_to_cart(store, CUSTOMER, 1)
        add_to_cart(store, OTHER, 1)

        assert _rows(store)[0].quantity == 1
        assert _rows(store, OTHER)[0].quantity == 1

    @pytest.mark.parametrize("customer_id", [None, "", "   "])
    def test_missing_customer_fails_without_mutation(self, store, customer_id):
        with pytest.raises(InvalidInput):
            add_to_cart(store, customer_id, 1)
        assert store.cart_items.rows == {}

    def test_unknown_product(self, store):
        with pytest.raises(NotFound):
            add_to_cart(store, CUSTOMER, 999)
        assert store.cart_items.rows == {}

    def test_lost_insert_race_becomes_increment(self, store, monkeypatch):
        # Another request creates the row between our increment and insert.
        original_insert = store.cart_items.insert

        def racing_insert(item):
            original_insert(CartItem(customer_id=item.customer_id, product_id=item.product_id, quantity=1))
            return original_insert(item)

        monkeypatch.setattr(store.cart_items, "insert", racing_insert)
        add_to_cart(store, CUSTOMER, 1)

        rows = _rows(store)
        assert len(rows) == 1
        assert rows[0].quantity == 2

    def test_add_does_not_commit(self, store):
        before = store.commits
        add_to_cart(store, CUSTOMER, 1)
        assert store.commits == before


class TestRemoveItem:
    def test_quantity_above_one_is_decremented(self, store):
        for _ in range(3):
            add_to_cart(store, CUSTOMER, 1)

        assert remove_item(store, CUSTOMER, 1) is True

        rows = _rows(store)
        assert len(rows) == 1
        assert rows[0].quantity == 2

    def test_last_piece_deletes_line(self, store):
        add_to_cart(store, CUSTOMER, 1)
        add_to_cart(store, CUSTOMER, 2)

        assert remove_item(store, CUSTOMER, 1) is True

        assert [r.product_id for r in _rows(store)] == [2]

    def test_missing_line_is_a_no_op(self, store):
        add_to_cart(store, OTHER, 1)

        assert remove_item(store, CUSTOMER, 1) is False
        assert _rows(store, OTHER)[0].quantity == 1

    @pytest.mark.parametrize("customer_id", [None, ""])
    def test_missing_customer_fails_without_mutation(self, store, customer_id):
        add_to_cart(store, CUSTOMER, 1)

        with pytest.raises(InvalidInput):
            remove_item(store, customer_id, 1)
        assert _rows(store)[0].quantity == 1


class TestCartProducts:
    def test_one_group_per_line_in_cart_order(self, store):
        add_to_cart(store, CUSTOMER, 2)
        add_to_cart(store, CUSTOMER, 1)

        items = get_cart_items(store, CUSTOMER)
        groups = get_cart_products(store, items)

        assert len(groups) == len(items) == 2
        assert [g[0].name for g in groups] == ["White tulips", "Red roses"]

    def test_vanished_product_yields_empty_group(self, store):
        add_to_cart(store, CUSTOMER, 1)
        store.products.remove(store.products.find(1))

        assert get_cart_products(store, get_cart_items(store, CUSTOMER)) == [[]]

    def test_subtotal(self, store):
        add_to_cart(store, CUSTOMER, 1)
        add_to_cart(store, CUSTOMER, 1)
        add_to_cart(store, CUSTOMER, 2)

        assert cart_subtotal(store, get_cart_items(store, CUSTOMER)) == Decimal("70.00")

    def test_empty_cart(self, store):
        items = get_cart_items(store, CUSTOMER)
        assert items == []
        assert get_cart_products(store, items) == []
        assert cart_subtotal(store, items) == 0

from datetime import datetime
from decimal import Decimal

import pytest

from ayana.errors import InvalidInput, PersistenceFailure
from ayana.models import Order, Payment, PaymentType
from ayana.services.cart import add_to_cart
from ayana.services.checkout import (
    place_order,
    process_cart_items,
    save_order_data,
    save_payment_data,
)

CUSTOMER = 7


def _fill_cart(store):
    add_to_cart(store, CUSTOMER, 1)
    add_to_cart(store, CUSTOMER, 1)
    add_to_cart(store, CUSTOMER, 2)
    store.commit()


class TestSavePaymentData:
    @pytest.mark.parametrize(
        "bank_account, address, payment_type",
        [
            ("CZ6508000000192000145399", "Flower St 1", PaymentType.BANK_TRANSFER),
            (None, "Tulip Ave 2", PaymentType.CASH_ON_DELIVERY),
        ],
    )
    def test_stamps_and_persists(self, store, bank_account, address, payment_type):
        payment = Payment(bank_account=bank_account, delivery_address=address, payment_type=payment_type.value)

        saved = save_payment_data(store, payment, Decimal("50.00"), 1)

        assert saved.id is not None
        assert store.payments.find(saved.id) is saved
        assert saved.bank_account == bank_account
        assert saved.delivery_address == address
        assert saved.payment_type == payment_type.value
        assert saved.payed_amount == Decimal("50.00")
        assert saved.discount_id == 1


class TestSaveOrderData:
    def test_stamps_references_and_resets_status(self, store):
        payment = save_payment_data(store, Payment(delivery_address="x"), Decimal("50.00"), None)
        order = Order(delivery_date=datetime(2026, 11, 2), personal_message="Happy birthday",
                      is_order_sent=True, rating=5)

        saved = save_order_data(store, order, CUSTOMER, payment, Decimal("50.00"))

        assert store.orders.find(saved.id) is saved
        assert saved.customer_id == CUSTOMER
        assert saved.payment_id == payment.id
        assert saved.total_amount_to_pay == Decimal("50.00")
        assert saved.is_order_sent is False
        assert saved.rating is None
        assert saved.personal_message == "Happy birthday"

    def test_payment_must_be_saved_first(self, store):
        with pytest.raises(InvalidInput):
            save_order_data(store, Order(), CUSTOMER, Payment(delivery_address="x"), Decimal("1"))
        assert store.orders.rows == {}

    def test_missing_customer(self, store):
        payment = save_payment_data(store, Payment(delivery_address="x"), Decimal("1"), None)
        with pytest.raises(InvalidInput):
            save_order_data(store, Order(), None, payment, Decimal("1"))


class TestProcessCartItems:
    def test_moves_lines_and_empties_cart(self, store):
        _fill_cart(store)
        order = store.orders.add(Order(customer_id=CUSTOMER, payment_id=1))
        commits = store.commits

        lines = process_cart_items(store, CUSTOMER, order)

        assert store.cart_items.filter_by(customer_id=CUSTOMER) == []
        assert len(lines) == 2
        assert store.order_items.filter_by(order_id=order.id) == lines
        assert [(l.product_id, l.quantity, l.price) for l in lines] == [
            (1, 2, Decimal("20.00")),
            (2, 1, Decimal("30.00")),
        ]
        assert store.commits == commits + 1

    def test_price_is_captured_at_conversion(self, store):
        _fill_cart(store)
        order = store.orders.add(Order(customer_id=CUSTOMER, payment_id=1))

        lines = process_cart_items(store, CUSTOMER, order)
        store.products.find(1).price = Decimal("99.00")

        assert lines[0].price == Decimal("20.00")

    def test_other_customers_cart_is_untouched(self, store):
        _fill_cart(store)
        add_to_cart(store, 8, 2)
        order = store.orders.add(Order(customer_id=CUSTOMER, payment_id=1))

        process_cart_items(store, CUSTOMER, order)

        assert len(store.cart_items.filter_by(customer_id=8)) == 1

    def test_empty_cart_is_a_no_op(self, store):
        order = store.orders.add(Order(customer_id=CUSTOMER, payment_id=1))
        commits = store.commits

        assert process_cart_items(store, CUSTOMER, order) == []
        assert process_cart_items(store, CUSTOMER, order) == []
        assert store.order_items.rows == {}
        assert store.commits == commits


class TestPlaceOrder:
    def _place(self, store, verifier, code=None):
        return place_order(
            store,
            verifier,
            CUSTOMER,
            Order(personal_message="For mum"),
            Payment(delivery_address="Flower St 1", payment_type=PaymentType.CARD.value),
            discount_code=code,
        )

    def test_full_price_without_code(self, store, verifier):
        _fill_cart(store)

        result = self._place(store, verifier)

        assert result.totals.total_with_discount == Decimal("70.00")
        assert result.payment.payed_amount == Decimal("70.00")
        assert result.payment.discount_id is None
        assert result.order.total_amount_to_pay == Decimal("70.00")
        assert result.order.payment_id == result.payment.id
        assert len(result.items) == 2
        assert store.cart_items.filter_by(customer_id=CUSTOMER) == []

    def test_percentage_code(self, store, verifier):
        _fill_cart(store)

        result = self._place(store, verifier, "PERCENT10")

        assert result.totals.total_with_discount == Decimal("63.00")
        assert result.payment.discount_id == 1
        assert result.order.total_amount_to_pay == Decimal("63.00")

    def test_expired_code_charges_full_price(self, store, verifier):
        _fill_cart(store)

        result = self._place(store, verifier, "EXPIRED")

        assert result.totals.total_with_discount == Decimal("70.00")
        assert result.payment.discount_id is None

    def test_commits_once(self, store, verifier):
        _fill_cart(store)
        commits = store.commits

        self._place(store, verifier, "TENOFF")

        assert store.commits == commits + 1

    def test_empty_cart_is_rejected_before_any_write(self, store, verifier):
        with pytest.raises(InvalidInput):
            self._place(store, verifier)
        assert store.payments.rows == {}
        assert store.orders.rows == {}

    def test_missing_customer(self, store, verifier):
        _fill_cart(store)
        with pytest.raises(InvalidInput):
            place_order(store, verifier, None, Order(), Payment(delivery_address="x"))
        assert store.payments.rows == {}

    def test_failure_rolls_back_every_step(self, store, verifier, monkeypatch):
        _fill_cart(store)

        def broken_add(obj):
            raise RuntimeError("disk full")

        monkeypatch.setattr(store.order_items, "add", broken_add)

        with pytest.raises(PersistenceFailure):
            self._place(store, verifier)

        assert store.payments.rows == {}
        assert store.orders.rows == {}
        assert len(store.cart_items.filter_by(customer_id=CUSTOMER)) == 2

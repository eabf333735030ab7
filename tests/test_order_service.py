"""
Order store: persistence, ordering, and update semantics.
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from kasir.core.exceptions import NotFound, ValidationError
from kasir.models.order import Order, OrderItem
from kasir.services.order_service import AWAITING_CONFIRMATION, AWAITING_PAYMENT

from conftest import cart_item


def _create(store, name="Budi", items=None, total=25000):
    return store.create_order(
        customer_name=name,
        table_number="4",
        total_price=total,
        payment_method="QRIS",
        initial_status=AWAITING_PAYMENT,
        items_summary="Sate x2",
        items=items if items is not None else [cart_item()],
    )


class TestCreateOrder:

    def test_persists_order_and_items(self, store, session):
        order = _create(store, items=[cart_item(), cart_item("Es Teh", 1, 5000, "tanpa gula")])

        assert order.id is not None
        assert order.created_at is not None
        assert order.payment_proof_ref is None

        items = store.get_items(order.id)
        assert [i.item_name for i in items] == ["Sate", "Es Teh"]
        assert items[1].note == "tanpa gula"
        assert items[0].note == ""
        assert session.query(OrderItem).count() == 2

    @pytest.mark.parametrize("kwargs", [
        {"name": ""},
        {"name": "   "},
        {"items": []},
        {"total": 0},
        {"total": -100},
        {"total": float("nan")},
        {"total": float("inf")},
    ])
    def test_invalid_input_creates_nothing(self, store, session, kwargs):
        with pytest.raises(ValidationError):
            _create(store, **kwargs)
        assert session.query(Order).count() == 0
        assert session.query(OrderItem).count() == 0

    def test_ids_are_assigned_sequentially(self, store):
        first = _create(store)
        second = _create(store)
        assert second.id == first.id + 1


class TestReads:

    def test_list_orders_newest_first(self, store):
        t1 = _create(store, name="t1")
        t2 = _create(store, name="t2")
        t3 = _create(store, name="t3")

        orders = store.list_orders()

        assert [o.id for o in orders] == [t3.id, t2.id, t1.id]
        assert all(len(o.items) == 1 for o in orders)

    def test_list_orders_empty(self, store):
        assert store.list_orders() == []

    def test_failed_item_lookup_only_empties_that_order(self, store, monkeypatch):
        ok = _create(store, name="ok")
        broken = _create(store, name="broken")
        real_get_items = store.get_items

        def flaky_get_items(order_id):
            if order_id == broken.id:
                raise OperationalError("SELECT", {}, Exception("disk I/O error"))
            return real_get_items(order_id)

        monkeypatch.setattr(store, "get_items", flaky_get_items)

        orders = {o.customer_name: o for o in store.list_orders()}

        assert len(orders) == 2
        assert orders["broken"].items == []
        assert [i.item_name for i in orders["ok"].items] == ["Sate"]

    def test_order_without_items_is_listed(self, store, session):
        orphan = Order(customer_name="Sari", total_price=1000, payment_method="CASH", status=AWAITING_PAYMENT)
        session.add(orphan)
        session.commit()

        orders = store.list_orders()

        assert orders[0].id == orphan.id
        assert orders[0].items == []

    def test_get_order_unknown_id(self, store):
        with pytest.raises(NotFound):
            store.get_order(999)

    def test_get_items_unknown_id_is_empty(self, store):
        assert store.get_items(999) == []


class TestUpdates:

    def test_update_status(self, store):
        order = _create(store)

        affected = store.update_status(order.id, "PREPARING")

        assert affected == 1
        assert store.get_order(order.id).status == "PREPARING"

    def test_update_status_unknown_id(self, store):
        order = _create(store)

        with pytest.raises(NotFound):
            store.update_status(order.id + 100, "DONE")

        assert store.get_order(order.id).status == AWAITING_PAYMENT

    def test_attach_payment_proof_forces_confirmation(self, store):
        order = _create(store)
        store.update_status(order.id, "DONE")

        store.attach_payment_proof(order.id, "/uploads/1-a-bukti.png")

        refreshed = store.get_order(order.id)
        assert refreshed.status == AWAITING_CONFIRMATION
        assert refreshed.payment_proof_ref == "/uploads/1-a-bukti.png"

    def test_previously_loaded_order_reflects_updates(self, store, session):
        order = _create(store)
        loaded = store.get_order(order.id)
        assert loaded.payment_proof_ref is None

        store.attach_payment_proof(order.id, "/uploads/2-b-bukti.png")

        assert loaded.payment_proof_ref == "/uploads/2-b-bukti.png"
        assert loaded.status == AWAITING_CONFIRMATION
        row = session.execute(
            text("SELECT status, payment_proof_ref FROM orders WHERE id = :id"), {"id": order.id}
        ).one()
        assert tuple(row) == (AWAITING_CONFIRMATION, "/uploads/2-b-bukti.png")

        store.update_status(order.id, "DONE")
        assert store.get_order(order.id).status == "DONE"
        assert store.get_order(order.id).payment_proof_ref == "/uploads/2-b-bukti.png"

    def test_attach_payment_proof_overwrites_previous(self, store):
        order = _create(store)
        store.attach_payment_proof(order.id, "/uploads/first.png")
        store.attach_payment_proof(order.id, "/uploads/second.png")
        assert store.get_order(order.id).payment_proof_ref == "/uploads/second.png"

    def test_attach_payment_proof_unknown_id(self, store):
        with pytest.raises(NotFound):
            store.attach_payment_proof(42, "/uploads/x.png")

    def test_deleting_order_deletes_items(self, store, session):
        order = _create(store, items=[cart_item(), cart_item("Es Teh", 1, 5000)])

        session.delete(store.get_order(order.id))
        session.commit()

        assert session.query(OrderItem).count() == 0

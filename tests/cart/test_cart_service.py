"""Tests for CartService: add/remove, free-claim path, totals, concurrent adds."""
import asyncio

import pytest

from notestore.core.errors import NotFound
from notestore.models.entities import Note
from notestore.services.cart.service import CartAddOutcome, compute_total


def _user(store, user_id="u1"):
    return asyncio.run(store.load()).find_user(user_id)


class TestAddToCart:
    def test_add_paid_note(self, services, store, seed, buyer, catalog_notes):
        seed(users=[buyer], notes=catalog_notes)
        outcome = asyncio.run(services.cart.add_to_cart("u1", 1))
        assert outcome is CartAddOutcome.ADDED
        assert _user(store).cart == [1]

    def test_re_adding_is_noop(self, services, store, seed, buyer, catalog_notes):
        seed(users=[buyer], notes=catalog_notes)
        asyncio.run(services.cart.add_to_cart("u1", 1))
        outcome = asyncio.run(services.cart.add_to_cart("u1", 1))
        assert outcome is CartAddOutcome.ALREADY_IN_CART
        assert _user(store).cart == [1]

    def test_missing_note_raises_not_found(self, services, seed, buyer, catalog_notes):
        seed(users=[buyer], notes=catalog_notes)
        with pytest.raises(NotFound):
            asyncio.run(services.cart.add_to_cart("u1", 404))

    def test_already_purchased_is_noop(self, services, store, seed, buyer, catalog_notes):
        buyer.purchased_notes = [1]
        seed(users=[buyer], notes=catalog_notes)
        outcome = asyncio.run(services.cart.add_to_cart("u1", 1))
        assert outcome is CartAddOutcome.ALREADY_OWNED
        assert _user(store).cart == []

    def test_free_note_is_claimed_and_never_enters_cart(self, services, store, seed, buyer, catalog_notes, email):
        seed(users=[buyer], notes=catalog_notes)
        outcome = asyncio.run(services.cart.add_to_cart("u1", 2))
        assert outcome is CartAddOutcome.CLAIMED_FREE
        user = _user(store)
        assert user.cart == []
        assert user.purchased_notes == [2]
        assert [s[1] for s in email.sent] == ["Free Note Claimed"]

    def test_free_note_claimed_twice_reports_owned(self, services, store, seed, buyer, catalog_notes, audit):
        seed(users=[buyer], notes=catalog_notes)
        asyncio.run(services.cart.add_to_cart("u1", 2))
        outcome = asyncio.run(services.cart.add_to_cart("u1", 2))
        assert outcome is CartAddOutcome.ALREADY_OWNED
        assert _user(store).purchased_notes == [2]
        assert len(audit.records) == 1


def test_add_then_remove_restores_cart(services, store, seed, buyer, catalog_notes):
    buyer.cart = [3]
    seed(users=[buyer], notes=catalog_notes)
    before = list(_user(store).cart)
    asyncio.run(services.cart.add_to_cart("u1", 1))
    asyncio.run(services.cart.remove_from_cart("u1", 1))
    assert _user(store).cart == before


def test_remove_absent_id_is_not_an_error(services, store, seed, buyer, catalog_notes):
    seed(users=[buyer], notes=catalog_notes)
    asyncio.run(services.cart.remove_from_cart("u1", 77))
    assert _user(store).cart == []


def test_concurrent_adds_keep_every_id(services, store, seed, buyer):
    notes = [Note(id=i, title=f"N{i}", price=10 + i) for i in range(1, 21)]
    seed(users=[buyer], notes=notes)

    async def scenario():
        return await asyncio.gather(*(services.cart.add_to_cart("u1", n.id) for n in notes))

    outcomes = asyncio.run(scenario())
    assert all(o is CartAddOutcome.ADDED for o in outcomes)
    assert sorted(_user(store).cart) == [n.id for n in notes]


def test_view_cart_skips_deleted_notes(services, seed, buyer, catalog_notes):
    buyer.cart = [1, 3, 99]
    seed(users=[buyer], notes=catalog_notes)
    view = asyncio.run(services.cart.view_cart("u1"))
    assert [n.id for n in view.items] == [1, 3]
    assert view.total == 750


def test_compute_total():
    notes = [Note(id=1, title="a", price=500), Note(id=2, title="b", price=0), Note(id=3, title="c", price=99)]
    assert compute_total(notes) == 599
    assert compute_total([]) == 0

"""Tests for CatalogService: browsing, note administration, gallery and hero settings."""
import asyncio

import pytest

from notestore.core.errors import NotFound, ValidationError
from notestore.services.catalog.service import parse_price


class TestBrowse:
    def test_filter_by_category_and_search(self, services, seed, catalog_notes):
        seed(notes=catalog_notes)
        law = asyncio.run(services.catalog.list_notes(category="Law"))
        assert [n.id for n in law] == [1, 2]
        found = asyncio.run(services.catalog.list_notes(search="  evidence "))
        assert [n.id for n in found] == [3]
        everything = asyncio.run(services.catalog.list_notes(category="All"))
        assert len(everything) == 3

    def test_categories_start_with_all(self, services, seed, catalog_notes):
        seed(notes=catalog_notes)
        assert asyncio.run(services.catalog.categories()) == ["All", "Law", "Evidence"]

    def test_home_shows_latest_first(self, services, seed, catalog_notes):
        seed(notes=catalog_notes)
        home = asyncio.run(services.catalog.home(latest=2))
        assert [n.id for n in home["notes"]] == [3, 2]
        assert home["settings"].hero_type == "image"

    def test_get_note_missing(self, services, seed, catalog_notes):
        seed(notes=catalog_notes)
        with pytest.raises(NotFound):
            asyncio.run(services.catalog.get_note(99))


class TestAddNote:
    def test_link_note(self, services, store):
        note = asyncio.run(services.catalog.add_note("Torts", "Law", "0", file_link="https://example.com/t"))
        assert note.id == 1
        assert note.is_free
        assert note.file_type == "link"
        assert asyncio.run(store.load()).find_note(1).file_link == "https://example.com/t"

    def test_file_note_requires_stored_file(self, services, notes_dir):
        with pytest.raises(ValidationError):
            asyncio.run(services.catalog.add_note("Contract", "Law", 500, file_name="contract.pdf"))
        (notes_dir / "contract.pdf").write_bytes(b"%PDF")
        note = asyncio.run(services.catalog.add_note("Contract", "Law", 500, file_name="contract.pdf"))
        assert note.file_type == "file"
        assert note.file_name == "contract.pdf"

    def test_file_name_must_be_plain(self, services):
        with pytest.raises(ValidationError):
            asyncio.run(services.catalog.add_note("Contract", "Law", 500, file_name="../data.json"))

    def test_title_required(self, services):
        with pytest.raises(ValidationError):
            asyncio.run(services.catalog.add_note("   ", "Law", 10))

    def test_delete_keeps_entitlements(self, services, store, seed, buyer, catalog_notes):
        buyer.purchased_notes = [1]
        seed(users=[buyer], notes=catalog_notes)
        asyncio.run(services.catalog.delete_note(1))
        snapshot = asyncio.run(store.load())
        assert snapshot.find_note(1) is None
        assert snapshot.find_user("u1").purchased_notes == [1]
        with pytest.raises(NotFound):
            asyncio.run(services.catalog.delete_note(1))


@pytest.mark.parametrize("value,expected", [(0, 0), (500, 500), ("250", 250), (" 99 ", 99)])
def test_parse_price_accepts(value, expected):
    assert parse_price(value) == expected


@pytest.mark.parametrize("value", [-1, "-5", "12.5", "abc", "²", "١٢", "", 3.5, True, None])
def test_parse_price_rejects(value):
    with pytest.raises(ValidationError):
        parse_price(value)


def test_gallery_and_hero(services, store):
    item = asyncio.run(services.catalog.add_gallery_item("/uploads/a.jpg"))
    second = asyncio.run(services.catalog.add_gallery_item("/uploads/b.jpg"))
    assert (item.id, second.id) == (1, 2)
    asyncio.run(services.catalog.delete_gallery_item(1))
    assert [g.id for g in asyncio.run(store.load()).gallery] == [2]

    settings = asyncio.run(services.catalog.update_hero(hero_url="/uploads/h.mp4", hero_type="video"))
    assert (settings.hero_type, settings.hero_url) == ("video", "/uploads/h.mp4")
    with pytest.raises(ValidationError):
        asyncio.run(services.catalog.update_hero(hero_url="/x.gif", hero_type="gif"))


def test_hero_type_without_new_url(services, store):
    asyncio.run(services.catalog.update_hero(hero_url="/uploads/h.jpg"))
    settings = asyncio.run(services.catalog.update_hero(hero_type="video"))
    assert (settings.hero_type, settings.hero_url) == ("video", "/uploads/h.jpg")
    assert asyncio.run(store.load()).settings.hero_type == "video"

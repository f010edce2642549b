"""Tests for NoteFileService: only owners get note content, addressed by note id."""
import asyncio

import pytest

from notestore.core.errors import Forbidden, NotFound, Unauthorized
from notestore.models.entities import Note, Role
from notestore.services.auth.identity import RequestIdentity


@pytest.fixture
def identity():
    return RequestIdentity(user_id="u1", email="buyer@example.com", name="Asha", role=Role.STANDARD)


@pytest.fixture
def stored_pdf(notes_dir):
    (notes_dir / "contract.pdf").write_bytes(b"%PDF-1.4 contract law")
    return notes_dir / "contract.pdf"


def test_anonymous_request_is_unauthorized(services, seed, buyer, catalog_notes, stored_pdf):
    seed(users=[buyer], notes=catalog_notes)
    with pytest.raises(Unauthorized):
        asyncio.run(services.files.stream_note(None, 1))


def test_not_purchased_is_forbidden(services, seed, buyer, catalog_notes, identity, stored_pdf):
    seed(users=[buyer], notes=catalog_notes)
    with pytest.raises(Forbidden):
        asyncio.run(services.files.stream_note(identity, 1))


def test_owner_gets_file_bytes(services, seed, buyer, catalog_notes, identity, stored_pdf):
    buyer.purchased_notes = [1]
    seed(users=[buyer], notes=catalog_notes)
    note_file = asyncio.run(services.files.stream_note(identity, 1))
    assert note_file.read_bytes() == b"%PDF-1.4 contract law"
    assert note_file.media_type == "application/pdf"


def test_deleted_note_is_not_found_even_if_owned(services, seed, buyer, catalog_notes, identity):
    buyer.purchased_notes = [9]
    seed(users=[buyer], notes=catalog_notes)
    with pytest.raises(NotFound):
        asyncio.run(services.files.stream_note(identity, 9))


def test_missing_file_is_not_found(services, seed, buyer, catalog_notes, identity):
    buyer.purchased_notes = [1]
    seed(users=[buyer], notes=catalog_notes)
    with pytest.raises(NotFound):
        asyncio.run(services.files.stream_note(identity, 1))


def test_link_note_is_viewable_but_not_streamed(services, seed, buyer, catalog_notes, identity):
    buyer.purchased_notes = [2]
    seed(users=[buyer], notes=catalog_notes)
    note = asyncio.run(services.files.get_viewable_note(identity, 2))
    assert note.file_link == "https://example.com/t"
    with pytest.raises(NotFound):
        asyncio.run(services.files.stream_note(identity, 2))


def test_stored_traversal_name_is_refused(services, seed, buyer, identity, notes_dir):
    (notes_dir.parent / "data.json.bak").write_text("{}")
    buyer.purchased_notes = [4]
    seed(users=[buyer], notes=[Note(id=4, title="X", price=10, file_type="file", file_name="../data.json.bak")])
    with pytest.raises(NotFound):
        asyncio.run(services.files.stream_note(identity, 4))

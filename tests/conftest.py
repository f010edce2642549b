import os
import tempfile

# Settings are read at import time: configure the environment before importing the app.
_TMP = tempfile.mkdtemp(prefix="notestore-tests-")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-0123456789")
os.environ.setdefault("DATA_FILE", os.path.join(_TMP, "data.json"))
os.environ.setdefault("NOTES_DIR", os.path.join(_TMP, "secure_notes"))
os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:1/0")  # unreachable: rate limit fails open
os.environ.setdefault("SMTP_USER", "")
os.environ.setdefault("SHEETDB_URL", "")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "test_secret")

import pytest  # noqa: E402

from notestore.core.errors import PaymentGatewayError  # noqa: E402
from notestore.db.store import EntityStore  # noqa: E402
from notestore.models.entities import Note, OrderRecord, Snapshot, User  # noqa: E402
from notestore.services.container import build_services  # noqa: E402
from notestore.services.notifications.service import Notifier  # noqa: E402
from notestore.services.payments.gateway import Order  # noqa: E402


class RecordingAudit:
    def __init__(self, fail: Exception | None = None) -> None:
        self.records: list[dict] = []
        self.fail = fail

    async def append(self, record: dict) -> None:
        if self.fail:
            raise self.fail
        self.records.append(record)


class RecordingEmail:
    def __init__(self, fail: Exception | None = None) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = fail

    async def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise self.fail
        self.sent.append((to, subject, html))


class FakeGateway:
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple[int, str, str]] = []
        self.fail = fail

    async def create_order(self, amount_minor: int, currency: str, receipt: str) -> Order:
        self.calls.append((amount_minor, currency, receipt))
        if self.fail:
            raise PaymentGatewayError("Payment failed")
        return Order(id=f"order_{len(self.calls)}", amount=amount_minor, currency=currency, receipt=receipt)


@pytest.fixture
def store(tmp_path):
    return EntityStore(tmp_path / "data.json")


@pytest.fixture
def notes_dir(tmp_path):
    path = tmp_path / "secure_notes"
    path.mkdir()
    return path


@pytest.fixture
def audit():
    return RecordingAudit()


@pytest.fixture
def email():
    return RecordingEmail()


@pytest.fixture
def notifier(audit, email):
    return Notifier(audit=audit, email=email, audit_timeout=1.0, email_timeout=1.0)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def make_services(store, notes_dir, notifier, gateway):
    def _make(gateway=gateway, notifier=notifier):
        return build_services(store, gateway=gateway, notifier=notifier, notes_dir=notes_dir)

    return _make


@pytest.fixture
def services(make_services):
    return make_services()


@pytest.fixture
def failing_gateway():
    return FakeGateway(fail=True)


@pytest.fixture
def failing_notifier():
    return Notifier(
        audit=RecordingAudit(fail=RuntimeError("sheet down")),
        email=RecordingEmail(fail=OSError("smtp down")),
        audit_timeout=1.0,
        email_timeout=1.0,
    )


@pytest.fixture
def seed(store):
    """Write users, notes and gateway orders straight into the document (bypasses services)."""

    def _seed(users=(), notes=(), orders=()) -> Snapshot:
        snapshot = Snapshot(
            users=[u if isinstance(u, User) else User(**u) for u in users],
            notes=[n if isinstance(n, Note) else Note(**n) for n in notes],
            orders=[o if isinstance(o, OrderRecord) else OrderRecord(**o) for o in orders],
        )
        store._write(snapshot)
        return snapshot

    return _seed


@pytest.fixture
def buyer():
    return User(id="u1", email="buyer@example.com", password="pw", name="Asha")


@pytest.fixture
def catalog_notes():
    return [
        Note(id=1, title="Contract Law", category="Law", price=500, file_type="file", file_name="contract.pdf"),
        Note(id=2, title="Torts Primer", category="Law", price=0, file_type="link", file_link="https://example.com/t"),
        Note(id=3, title="Evidence Act", category="Evidence", price=250),
    ]

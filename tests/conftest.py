import hashlib
import hmac
import json
import os
import time
import types
from typing import Any, Dict, Generator, List, Optional
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

# Pas de Redis pendant les tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from storefront.app_setup.factory import create_app
from storefront.app_setup.lifespan import install_services
from storefront.payments.stripe_client import StripeGateway

WEBHOOK_SECRET = "whsec_test_secret"


# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


# --- Double Supabase en mémoire (tables PostgREST, storage, auth admin) ---

class _Resp:
    def __init__(self, data=None):
        self.data = data


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._payload: Optional[Dict[str, Any]] = None
        self._on_conflict: List[str] = []
        self._filters: List[tuple] = []
        self._limit: Optional[int] = None

    def select(self, *_cols):
        self._op = "select"
        return self

    def upsert(self, row, on_conflict: str = "id"):
        self._op = "upsert"
        self._payload = dict(row)
        self._on_conflict = [c.strip() for c in on_conflict.split(",")]
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def _match(self, row):
        return all(row.get(c) == v for c, v in self._filters)

    def execute(self):
        if self._table in self._db.failing_tables:
            raise ConnectionError(f"table {self._table} unreachable")
        rows = self._db.tables.setdefault(self._table, [])
        self._db.calls.append((self._table, self._op, tuple(self._filters)))
        if self._op == "upsert":
            key = {c: self._payload.get(c) for c in self._on_conflict}
            for i, row in enumerate(rows):
                if all(row.get(c) == v for c, v in key.items()):
                    rows[i] = dict(self._payload)
                    break
            else:
                rows.append(dict(self._payload))
            return _Resp([dict(self._payload)])
        if self._op == "delete":
            kept = [r for r in rows if not self._match(r)]
            removed = [r for r in rows if self._match(r)]
            self._db.tables[self._table] = kept
            return _Resp(removed)
        found = [dict(r) for r in rows if self._match(r)]
        if self._limit is not None:
            found = found[: self._limit]
        return _Resp(found)


class FakeBucket:
    def __init__(self, db: "FakeSupabase", name: str):
        self._db = db
        self.name = name

    @property
    def objects(self) -> Dict[str, bytes]:
        return self._db.objects.setdefault(self.name, {})

    def upload(self, path, file, file_options=None):
        self._db.uploads.append(path)
        self.objects[path] = file
        return {"Key": f"{self.name}/{path}"}

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{quote(path)}?"

    def remove(self, paths):
        self._db.removals.extend(paths)
        if self._db.fail_removals:
            raise ConnectionError("storage unreachable")
        return [{"name": p} for p in paths if self.objects.pop(p, None) is not None]


class FakeStorage:
    def __init__(self, db: "FakeSupabase"):
        self._db = db

    def from_(self, bucket):
        return FakeBucket(self._db, bucket)


class FakeAuthAdmin:
    def __init__(self, users):
        self.users = users

    def list_users(self, page=1, per_page=50):
        start = (page - 1) * per_page
        return self.users[start:start + per_page]


class FakeSupabase:
    def __init__(self, users=None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.objects: Dict[str, Dict[str, bytes]] = {}
        self.calls: List[tuple] = []
        self.uploads: List[str] = []
        self.removals: List[str] = []
        self.failing_tables: set = set()
        self.fail_removals = False
        self.storage = FakeStorage(self)
        self.auth = types.SimpleNamespace(admin=FakeAuthAdmin(list(users or [])))

    def table(self, name):
        return FakeQuery(self, name)


# --- Passerelle Stripe: appels réseau simulés, vérification de signature réelle ---

class FakeStripeGateway(StripeGateway):
    def __init__(self, webhook_secret: str = WEBHOOK_SECRET):
        super().__init__(api_key="sk_test_fake", webhook_secret=webhook_secret)
        self.sessions: List[Dict[str, Any]] = []
        self.customers: List[Dict[str, Any]] = []
        self.line_items: Dict[str, List[Dict[str, Any]]] = {}

    def create_customer(self, *, email, name=None, shipping=None):
        self.customers.append({"email": email, "name": name, "shipping": shipping})
        return f"cus_{len(self.customers)}"

    def create_session(self, **params):
        self.sessions.append(params)
        sid = f"cs_test_{len(self.sessions)}"
        return {"id": sid, "url": f"https://checkout.stripe.test/pay/{sid}"}

    def list_line_items(self, session_id):
        return self.line_items.get(session_id, [])


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """En-tête Stripe-Signature valide (schéma v1: HMAC-SHA256 de 't.payload')."""
    ts = timestamp or int(time.time())
    mac = hmac.new(secret.encode(), f"{ts}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={ts},v1={mac}"


def completed_event(session: Dict[str, Any]) -> str:
    return json.dumps({
        "id": "evt_test_1",
        "type": "checkout.session.completed",
        "data": {"object": session},
    })


@pytest.fixture()
def supabase() -> FakeSupabase:
    return FakeSupabase(users=[
        types.SimpleNamespace(
            email="jane@example.com",
            user_metadata={
                "full_name": "Jane Doe",
                "address": {"line1": "1 Main St", "city": "Toronto", "postal_code": "M5V", "country": "CA"},
            },
        ),
    ])


@pytest.fixture()
def stripe_gateway() -> FakeStripeGateway:
    return FakeStripeGateway()


@pytest.fixture()
def app(monkeypatch):
    # Jamais de vrai client Supabase, même si l'environnement en fournit un
    monkeypatch.setattr("storefront.infra.supabase_client.is_configured", lambda: False)
    return create_app()


@pytest.fixture()
def client(app, supabase, stripe_gateway) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        install_services(app, supabase, stripe_gateway)
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def signer():
    return sign_payload


@pytest.fixture()
def make_completed_event():
    return completed_event

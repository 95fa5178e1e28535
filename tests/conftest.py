from datetime import datetime, timedelta, timezone

import pytest

from api import create_app
from api.config import TestingConfig
from api.extensions import get_services
from models.db_storage import DBStorage
from models.seeds import seed_default_categories
from services.container import ServiceContainer

PASSWORD = "s3cret-pass"


class FakeClock:
    """Settable clock for the token issuer and the session authority."""

    def __init__(self, start=None):
        self.now = start or datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def make_config(tmp_path):
    config = {k: getattr(TestingConfig, k) for k in dir(TestingConfig) if k.isupper()}
    config["DATABASE_URL"] = f"sqlite:///{tmp_path / 'test.db'}"
    return config


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage(tmp_path):
    st = DBStorage(f"sqlite:///{tmp_path / 'services.db'}")
    st.reload()
    seed_default_categories(st)
    yield st
    st.dispose()


@pytest.fixture
def services(storage, tmp_path, clock):
    return ServiceContainer.build(storage, make_config(tmp_path), clock=clock)


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", overrides={"DATABASE_URL": f"sqlite:///{tmp_path / 'app.db'}"})
    yield app
    with app.app_context():
        get_services().storage.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email="alice@example.com", name="Alice", password=PASSWORD):
    return client.post("/api/v1/auth/register", json={"name": name, "email": email, "password": password})


def login(client, email="alice@example.com", password=PASSWORD):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client):
    resp = register(client)
    assert resp.status_code == 201
    return bearer(resp.get_json()["data"]["token"])

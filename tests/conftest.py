import sys
from datetime import datetime
from pathlib import Path

import pytest

repo_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(repo_root))

from hsportal.app import create_app
from hsportal.models import AchievementRate, Database


class InlineWriter:
    """Runs submitted writes immediately so tests can assert on them."""

    def submit(self, func, *args):
        func(*args)

    def shutdown(self, wait=True):
        pass


class DictCacheStore:
    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ttl_seconds):
        self.data[key] = value
        self.ttls[key] = ttl_seconds

    def close(self):
        pass


@pytest.fixture()
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    db.create_all()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture()
def add_rates(database):
    def _add(*rows):
        session = database.session()
        try:
            for title, created in rows:
                session.add(
                    AchievementRate(
                        title=title, target=10, achieved=8, rate=80.0, created_at=created
                    )
                )
            session.commit()
        finally:
            session.close()

    return _add


@pytest.fixture()
def january_rates(add_rates):
    add_rates(
        ("January audit", datetime(2024, 1, 5)),
        ("February audit", datetime(2024, 2, 1)),
    )


@pytest.fixture()
def cache_store():
    return DictCacheStore()


@pytest.fixture()
def app(database, cache_store):
    return create_app(
        {"SECRET_KEY": "test", "SESSION_COOKIE_SECURE": False, "RUN_MIGRATIONS": False},
        database=database,
        cache_store=cache_store,
        writer=InlineWriter(),
    )


@pytest.fixture()
def client(app):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user"] = {"id": 1, "name": "Tester"}
    return client

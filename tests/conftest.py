import pytest

from db import init_db, get_session
from import_engine.field_map import HEADER_LINE
from tests.factories import CampaignFactory, DonorFactory

FACTORIES = (CampaignFactory, DonorFactory)


@pytest.fixture
def db_url(tmp_path):
    """A fresh SQLite database file per test."""
    url = f"sqlite:///{tmp_path / 'test.sqlite'}"
    init_db(url)
    return url


@pytest.fixture
def session(db_url):
    """Session used by factories and for assertions."""
    s = get_session()
    for f in FACTORIES:
        f._meta.sqlalchemy_session = s
    yield s
    for f in FACTORIES:
        f._meta.sqlalchemy_session = None
    s.close()


@pytest.fixture
def fresh_session(db_url):
    """Return a factory for new sessions, to read what another session committed."""
    opened = []

    def _open():
        s = get_session()
        opened.append(s)
        return s

    yield _open
    for s in opened:
        s.close()


@pytest.fixture
def app(db_url):
    from main import create_app

    flask_app = create_app(db_url)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def make_csv():
    """Build CSV bytes from data lines, header included."""

    def _make(*lines: str) -> bytes:
        return ("\n".join((HEADER_LINE,) + lines) + "\n").encode("utf-8")

    return _make

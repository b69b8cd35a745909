import os
import tempfile
from pathlib import Path
import pytest

# Point the app at a throwaway database before `bloglist` is imported.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="bloglist-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ.setdefault("JWT_SECRET", "bloglist-test-suite-signing-secret-0123")

from sqlmodel import Session  # noqa: E402
from bloglist import database, models  # noqa: E402
from bloglist.services import hash_password  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Start every test from empty tables."""
    database.reset_db()
    yield


@pytest.fixture
def session():
    with Session(database.engine) as s:
        yield s


@pytest.fixture
def make_user(session):
    """Insert a user directly and return it."""
    def _make(username="root", password="sekret", name=None):
        user = models.User(username=username, name=name, password_hash=hash_password(password))
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _make

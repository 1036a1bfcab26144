"""
Pytest configuration and fixtures for the voting API tests.

The document store is an in-memory mongomock database wired in through
MongoConnector, so no MongoDB server is needed.
"""
import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="globalvote-tests-")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test_secret_key_for_testing_only")
os.environ["VERIFICATION_DELAY_SECONDS"] = "0"
os.environ["VERIFICATION_RETRY_BACKOFF_SECONDS"] = "0"
os.environ["UPLOAD_DIR"] = os.path.join(_tmp, "uploads")
os.environ["KEY_FILE"] = os.path.join(_tmp, "secret.key")

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from globalvote.crud import CandidateRegistry, ReviewStore  # noqa: E402
from globalvote.database.connection import MongoConnector  # noqa: E402
from globalvote.main import app  # noqa: E402
from globalvote.storage_mongo import IdentityStore  # noqa: E402
from globalvote.voting import VoteEngine  # noqa: E402


@pytest.fixture
def db():
    database = mongomock.MongoClient()["test_voting"]
    MongoConnector.use_database(database)
    yield database
    MongoConnector.use_database(None)


@pytest.fixture
def client(db):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def identity(db):
    return IdentityStore(db["voters"])


@pytest.fixture
def registry(db):
    return CandidateRegistry(db["candidates"])


@pytest.fixture
def review_store(db):
    return ReviewStore(db["reviews"])


@pytest.fixture
def engine(db, identity, registry):
    return VoteEngine(identity, registry, db["votes"])


@pytest.fixture
def make_voter(identity):
    """Create a voter; verified unless told otherwise."""

    def _make(document_id="P1234567", name="Ram Thapa", country="Nepal", verified=True):
        voter, _ = identity.find_or_create(name, country, "Passport", document_id)
        if verified:
            identity.mark_verified(document_id)
        return identity.get_voter(document_id)

    return _make

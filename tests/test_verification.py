"""Tests for the document verification stub."""
import pytest

from globalvote.errors import StorageError, ValidationError
from globalvote.verification import get_fernet, store_document, validate_document, verify_document_later


@pytest.mark.parametrize("filename,content_type", [
    ("scan.pdf", "application/pdf"),
    ("photo.JPG", "image/jpeg"),
    ("photo.jpeg", "image/jpeg"),
    ("photo.png", "image/png"),
])
def test_allowed_documents(filename, content_type):
    validate_document(filename, content_type, 1024)


@pytest.mark.parametrize("filename,content_type,size", [
    ("", "image/png", 10),
    ("photo.png", "image/png", 5 * 1024 * 1024 + 1),
    ("photo.bmp", "image/bmp", 10),
    ("photo.png", "application/octet-stream", 10),
    ("photo", "image/png", 10),
])
def test_rejected_documents(filename, content_type, size):
    with pytest.raises(ValidationError):
        validate_document(filename, content_type, size)


def test_documents_are_encrypted_at_rest(tmp_path):
    path = store_document("P1", "scan.pdf", b"%PDF-1.4 identity", upload_dir=str(tmp_path))
    with open(path, "rb") as f:
        stored = f.read()
    assert b"identity" not in stored
    assert get_fernet().decrypt(stored) == b"%PDF-1.4 identity"


def test_verify_later_marks_voter(identity, make_voter):
    make_voter("P1", verified=False)
    assert verify_document_later(identity, "P1", "/tmp/doc.enc", delay=0) is True
    voter = identity.get_voter("P1")
    assert voter["documentVerified"] is True
    assert voter["documentPath"] == "/tmp/doc.enc"


def test_verify_later_unknown_voter(identity):
    assert verify_document_later(identity, "ghost", "/tmp/doc.enc", delay=0) is False


def test_verify_later_retries_store_failures(identity, make_voter, monkeypatch):
    make_voter("P1", verified=False)
    real_mark = identity.mark_verified
    calls = []

    def flaky(voter_id, document_path=None):
        calls.append(voter_id)
        if len(calls) < 3:
            raise StorageError("Verification failed")
        return real_mark(voter_id, document_path)

    monkeypatch.setattr(identity, "mark_verified", flaky)

    assert verify_document_later(identity, "P1", "/tmp/doc.enc", delay=0, max_attempts=3, backoff=0)
    assert len(calls) == 3
    assert identity.get_voter("P1")["documentVerified"] is True


def test_verify_later_gives_up(identity, make_voter, monkeypatch):
    make_voter("P1", verified=False)

    def broken(voter_id, document_path=None):
        raise StorageError("Verification failed")

    monkeypatch.setattr(identity, "mark_verified", broken)

    assert verify_document_later(identity, "P1", "/tmp/doc.enc", delay=0, max_attempts=2, backoff=0) is False
    assert identity.get_voter("P1")["documentVerified"] is False

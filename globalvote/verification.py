# globalvote/verification.py
# Simulated identity-document verification. There is no external provider:
# the document is validated, stored encrypted, and the voter is marked
# verified after a fixed delay by a background task.
import logging
import os
import time
import uuid
from pathlib import Path

from cryptography.fernet import Fernet
from pymongo.errors import PyMongoError

from .config import (
    ALLOWED_DOCUMENT_CONTENT_TYPES,
    ALLOWED_DOCUMENT_EXTENSIONS,
    KEY_FILE,
    MAX_DOCUMENT_SIZE,
    UPLOAD_DIR,
    VERIFICATION_DELAY_SECONDS,
    VERIFICATION_MAX_ATTEMPTS,
    VERIFICATION_RETRY_BACKOFF_SECONDS,
)
from .errors import StorageError, ValidationError
from .storage_mongo import IdentityStore

logger = logging.getLogger(__name__)

_fernet = None


def get_fernet(key_file: str = KEY_FILE) -> Fernet:
    """Load the document encryption key, generating it on first use."""
    global _fernet
    if _fernet is None:
        key_path = Path(key_file)
        key_path.parent.mkdir(parents=True, exist_ok=True)
        if not key_path.exists():
            key = Fernet.generate_key()
            with open(key_path, "wb") as kf:
                kf.write(key)
        else:
            with open(key_path, "rb") as kf:
                key = kf.read()
        _fernet = Fernet(key)
    return _fernet


def validate_document(filename: str, content_type: str, size: int):
    if not filename:
        raise ValidationError("No document file uploaded")
    if size > MAX_DOCUMENT_SIZE:
        raise ValidationError("Document exceeds the 5MB size limit")
    extension = os.path.splitext(filename)[1].lower().lstrip(".")
    content_type = (content_type or "").lower()
    if extension not in ALLOWED_DOCUMENT_EXTENSIONS or content_type not in ALLOWED_DOCUMENT_CONTENT_TYPES:
        raise ValidationError("Only images (JPEG, JPG, PNG) and PDF files are allowed")


def store_document(voter_id: str, filename: str, data: bytes, upload_dir: str = UPLOAD_DIR) -> str:
    """Write the document encrypted at rest and return its path."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    extension = os.path.splitext(filename)[1].lower()
    path = directory / f"{int(time.time() * 1000)}-{uuid.uuid4().hex}{extension}.enc"
    with open(path, "wb") as f:
        f.write(get_fernet().encrypt(data))
    logger.info(f"Stored identity document for voter {voter_id} at {path}")
    return str(path)


def verify_document_later(identity: IdentityStore, voter_id: str, document_path: str,
                          delay: float = None, max_attempts: int = None,
                          backoff: float = None) -> bool:
    """
    Background task: wait out the simulated check, then mark the voter verified.

    Store failures are retried with a linear backoff. Returns True once the
    voter is marked, False if the voter vanished or every attempt failed.
    """
    delay = VERIFICATION_DELAY_SECONDS if delay is None else delay
    max_attempts = VERIFICATION_MAX_ATTEMPTS if max_attempts is None else max_attempts
    backoff = VERIFICATION_RETRY_BACKOFF_SECONDS if backoff is None else backoff

    if delay > 0:
        time.sleep(delay)

    for attempt in range(1, max_attempts + 1):
        try:
            if identity.mark_verified(voter_id, document_path):
                logger.info(f"Document verified for voter {voter_id}")
                return True
            logger.warning(f"Verification skipped: voter {voter_id} not found")
            return False
        except (StorageError, PyMongoError) as e:
            logger.warning(f"Verification attempt {attempt}/{max_attempts} for {voter_id} failed: {e}")
            if attempt < max_attempts and backoff > 0:
                time.sleep(backoff * attempt)

    logger.error(f"Giving up verifying voter {voter_id} after {max_attempts} attempts")
    return False

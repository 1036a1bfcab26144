# globalvote/errors.py
from typing import Any, Dict, Optional


class VotingError(Exception):
    """Base class for errors surfaced to API callers as {success: false, message}."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(VotingError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(VotingError):
    """Voter, candidate or review does not exist."""

    status_code = 404


class ConflictError(VotingError):
    """Already voted, or duplicate identity."""

    status_code = 409


class StorageError(VotingError):
    """The document store failed underneath us."""

    status_code = 500

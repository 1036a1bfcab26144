# storage_mongo.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from .errors import ConflictError, NotFoundError, StorageError

logger = logging.getLogger(__name__)


class IdentityStore:
    """Voter identity records, keyed by identity document id."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def _new_voter(self, name: str, country: str, document_type: str, document_id: str) -> Dict[str, Any]:
        return {
            "_id": document_id,
            "documentId": document_id,
            "name": name,
            "country": country,
            "documentType": document_type,
            "documentVerified": False,
            "hasVoted": False,
            "createdAt": datetime.now(timezone.utc),
        }

    def find_or_create(self, name: str, country: str, document_type: str,
                       document_id: str) -> Tuple[Dict[str, Any], bool]:
        """
        Return the voter holding this document id, creating it on first login.

        Returns:
            (voter document, created flag)
        """
        try:
            voter = self.collection.find_one({"_id": document_id})
            if voter:
                return voter, False
            voter = self._new_voter(name, country, document_type, document_id)
            self.collection.insert_one(voter)
            logger.info(f"Voter {document_id} created")
            return voter, True
        except DuplicateKeyError:
            # A concurrent login created the voter between our find and insert
            return self.collection.find_one({"_id": document_id}), False
        except PyMongoError as e:
            logger.error(f"Error loading voter {document_id}: {e}")
            raise StorageError("Could not load voter") from e

    def register(self, name: str, email: str, country: str, document_type: str,
                 document_id: str, password_hash: str) -> Dict[str, Any]:
        try:
            existing = self.collection.find_one({"$or": [{"email": email}, {"_id": document_id}]})
            if existing:
                raise ConflictError("User with this email or document already exists")
            voter = self._new_voter(name, country, document_type, document_id)
            voter["email"] = email
            voter["passwordHash"] = password_hash
            self.collection.insert_one(voter)
        except DuplicateKeyError as e:
            raise ConflictError("User with this email or document already exists") from e
        except PyMongoError as e:
            logger.error(f"Error registering voter {document_id}: {e}")
            raise StorageError("Registration failed") from e
        logger.info(f"Voter {document_id} registered")
        return voter

    def get_voter(self, voter_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.collection.find_one({"_id": voter_id})
        except PyMongoError as e:
            logger.error(f"Error retrieving voter {voter_id}: {e}")
            raise StorageError("Could not load voter") from e

    def require_voter(self, voter_id: str) -> Dict[str, Any]:
        voter = self.get_voter(voter_id)
        if voter is None:
            raise NotFoundError("User not found")
        return voter

    def mark_verified(self, voter_id: str, document_path: Optional[str] = None) -> bool:
        """Flag the voter's identity document as verified. Returns False if no such voter."""
        update: Dict[str, Any] = {"documentVerified": True, "verifiedAt": datetime.now(timezone.utc)}
        if document_path:
            update["documentPath"] = document_path
        try:
            result = self.collection.update_one({"_id": voter_id}, {"$set": update})
        except PyMongoError as e:
            logger.error(f"Error verifying voter {voter_id}: {e}")
            raise StorageError("Verification failed") from e
        return result.matched_count > 0

    def update_country(self, voter_id: str, country: str) -> Dict[str, Any]:
        """Move the voter to another country. Votes already cast keep their own snapshot."""
        try:
            voter = self.collection.find_one_and_update(
                {"_id": voter_id},
                {"$set": {"country": country}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Error updating voter {voter_id}: {e}")
            raise StorageError("Profile update failed") from e
        if voter is None:
            raise NotFoundError("User not found")
        return voter

    def claim_vote(self, voter_id: str) -> Optional[Dict[str, Any]]:
        """
        Flip hasVoted false -> true for a verified voter in a single conditional write.

        Returns the voter as it was before the flip, or None when another call
        already holds the claim (or the voter is not eligible).
        """
        try:
            return self.collection.find_one_and_update(
                {"_id": voter_id, "documentVerified": True, "hasVoted": False},
                {"$set": {"hasVoted": True, "votedAt": datetime.now(timezone.utc)}},
                return_document=ReturnDocument.BEFORE,
            )
        except PyMongoError as e:
            logger.error(f"Error claiming vote for {voter_id}: {e}")
            raise StorageError("Voting failed") from e

    def release_vote_claim(self, voter_id: str):
        """Undo a claim whose vote record was never written."""
        try:
            self.collection.update_one(
                {"_id": voter_id, "hasVoted": True},
                {"$set": {"hasVoted": False}, "$unset": {"votedAt": ""}},
            )
        except PyMongoError:
            logger.exception(f"Could not release vote claim for {voter_id}")
            raise

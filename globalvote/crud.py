import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .errors import NotFoundError, StorageError, ValidationError
from .moderation import ModerationResult

logger = logging.getLogger(__name__)

CANDIDATE_ACTIVE = "active"
CANDIDATE_RETIRED = "retired"

REVIEW_PENDING = "pending"
REVIEW_APPROVED = "approved"


def parse_object_id(value: str, kind: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {kind} ID format.")


# --- Candidate Registry ---

class CandidateRegistry:
    def __init__(self, collection: Collection):
        self.collection = collection

    def add(self, name: str, party: str) -> Dict[str, Any]:
        candidate = {
            "name": name,
            "party": party,
            "status": CANDIDATE_ACTIVE,
            "active": True,
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            result = self.collection.insert_one(candidate)
        except PyMongoError as e:
            logger.error(f"Error adding candidate {name}: {e}")
            raise StorageError("Failed to add candidate") from e
        candidate["_id"] = result.inserted_id
        logger.info(f"Candidate {result.inserted_id} ({name}, {party}) added")
        return candidate

    def list(self, include_retired: bool = False) -> List[Dict[str, Any]]:
        query = {} if include_retired else {"status": CANDIDATE_ACTIVE}
        try:
            return list(self.collection.find(query))
        except PyMongoError as e:
            logger.error(f"Error listing candidates: {e}")
            raise StorageError("Failed to fetch candidates") from e

    def get(self, candidate_id: str) -> Optional[Dict[str, Any]]:
        """Candidate by id, retired ones included. Malformed ids find nothing."""
        try:
            oid = ObjectId(candidate_id)
        except (InvalidId, TypeError):
            return None
        try:
            return self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Error fetching candidate {candidate_id}: {e}")
            raise StorageError("Failed to fetch candidate") from e

    def retire(self, candidate_id: str) -> Dict[str, Any]:
        """Soft delete: the record stays so historical votes remain attributable."""
        oid = parse_object_id(candidate_id, "candidate")
        try:
            candidate = self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": {"status": CANDIDATE_RETIRED, "active": False,
                          "retiredAt": datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Error retiring candidate {candidate_id}: {e}")
            raise StorageError("Failed to remove candidate") from e
        if candidate is None:
            raise NotFoundError("Candidate not found.")
        logger.info(f"Candidate {candidate_id} retired")
        return candidate


# --- Review Store ---

class ReviewStore:
    def __init__(self, collection: Collection):
        self.collection = collection

    def create(self, voter: Dict[str, Any], candidate_id: Optional[ObjectId], rating: int,
               content: str, moderation: ModerationResult) -> Dict[str, Any]:
        review = {
            "voterId": voter["_id"],
            "voterName": voter.get("name"),
            "candidateId": candidate_id,
            "rating": rating,
            "content": content,
            "voterCountry": voter.get("country"),
            "aiApproved": moderation.approved,
            "aiReason": moderation.reason,
            "aiConfidence": moderation.confidence,
            "sentiment": moderation.sentiment,
            "status": REVIEW_APPROVED if moderation.approved else REVIEW_PENDING,
            "timestamp": datetime.now(timezone.utc),
        }
        try:
            result = self.collection.insert_one(review)
        except PyMongoError as e:
            logger.error(f"Error saving review from {voter['_id']}: {e}")
            raise StorageError("Review submission failed") from e
        review["_id"] = result.inserted_id
        return review

    def list(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        if status is not None and status not in (REVIEW_PENDING, REVIEW_APPROVED):
            raise ValidationError("Status must be 'pending' or 'approved'")
        query = {"status": status} if status else {}
        try:
            return list(self.collection.find(query).sort("timestamp", DESCENDING))
        except PyMongoError as e:
            logger.error(f"Error listing reviews: {e}")
            raise StorageError("Failed to fetch reviews") from e

    def approve(self, review_id: str) -> Dict[str, Any]:
        oid = parse_object_id(review_id, "review")
        try:
            review = self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": {"status": REVIEW_APPROVED}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Error approving review {review_id}: {e}")
            raise StorageError("Failed to approve review") from e
        if review is None:
            raise NotFoundError("Review not found.")
        logger.info(f"Review {review_id} approved by admin")
        return review

    def delete(self, review_id: str):
        oid = parse_object_id(review_id, "review")
        try:
            result = self.collection.delete_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Error deleting review {review_id}: {e}")
            raise StorageError("Failed to delete review") from e
        if result.deleted_count == 0:
            raise NotFoundError("Review not found.")
        logger.info(f"Review {review_id} deleted by admin")

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..crud import CandidateRegistry, ReviewStore
from ..deps import get_candidate_registry, get_content_filter, get_identity_store, get_review_store
from ..errors import NotFoundError
from ..models.review_model import ReviewIn
from ..moderation import ContentFilter
from ..schemas import ReviewOut, dump
from ..storage_mongo import IdentityStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("")
def submit_review(
    review: ReviewIn,
    identity: IdentityStore = Depends(get_identity_store),
    candidates: CandidateRegistry = Depends(get_candidate_registry),
    reviews: ReviewStore = Depends(get_review_store),
    content_filter: ContentFilter = Depends(get_content_filter),
):
    voter = identity.require_voter(review.voter_ref)

    candidate_id = None
    if review.candidate_ref:
        candidate = candidates.get(review.candidate_ref)
        if candidate is None:
            raise NotFoundError("Candidate not found.")
        candidate_id = candidate["_id"]

    outcome = content_filter.classify(review.content)
    saved = reviews.create(voter, candidate_id, review.rating, review.content, outcome)
    logger.info(f"Review {saved['_id']} from {voter['_id']} moderated: "
                f"approved={outcome.approved} confidence={outcome.confidence}")

    message = ("Review submitted successfully" if outcome.approved
               else f"Review filtered by AI: {outcome.reason}")
    return {
        "success": True,
        "message": message,
        "aiFiltered": not outcome.approved,
        "review": dump(ReviewOut.from_document(saved)),
    }


@router.get("")
def list_reviews(status: Optional[str] = Query(None),
                 reviews: ReviewStore = Depends(get_review_store)):
    return {"success": True, "reviews": [dump(ReviewOut.from_document(r)) for r in reviews.list(status)]}


@router.put("/{review_id}/approve")
def approve_review(review_id: str, reviews: ReviewStore = Depends(get_review_store)):
    approved = reviews.approve(review_id)
    return {
        "success": True,
        "message": "Review approved successfully",
        "review": dump(ReviewOut.from_document(approved)),
    }


@router.delete("/{review_id}")
def delete_review(review_id: str, reviews: ReviewStore = Depends(get_review_store)):
    reviews.delete(review_id)
    return {"success": True, "message": "Review deleted successfully"}

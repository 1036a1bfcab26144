from typing import Optional

from fastapi import Header

from .crud import CandidateRegistry, ReviewStore
from .database.connection import (
    candidate_collection,
    review_collection,
    vote_collection,
    voter_collection,
)
from .moderation import ContentFilter, default_filter
from .security import decode_access_token, token_from_header
from .storage_mongo import IdentityStore
from .voting import KeyedLock, VoteEngine

# Shared by every request so that calls for one voter queue on the same lock
vote_locks = KeyedLock()


def get_identity_store() -> IdentityStore:
    return IdentityStore(voter_collection())


def get_candidate_registry() -> CandidateRegistry:
    return CandidateRegistry(candidate_collection())


def get_review_store() -> ReviewStore:
    return ReviewStore(review_collection())


def get_vote_engine() -> VoteEngine:
    return VoteEngine(get_identity_store(), get_candidate_registry(), vote_collection(), vote_locks)


def get_content_filter() -> ContentFilter:
    return default_filter


def get_token_claims(authorization: Optional[str] = Header(None)) -> dict:
    return decode_access_token(token_from_header(authorization))

"""
Vote integrity and tallying.

`VoteEngine.cast_vote` guarantees at most one vote per voter. Calls for the
same voter are serialized by a per-voter lock, and the hasVoted flag is flipped
false -> true with a conditional write. The unique index on ``votes.voterId``
holds the same rule at the store level.
"""
import enum
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from .crud import CandidateRegistry
from .errors import StorageError
from .storage_mongo import IdentityStore

logger = logging.getLogger(__name__)


class VoteOutcome(str, enum.Enum):
    ACCEPTED = "accepted"
    VOTER_NOT_FOUND = "voter_not_found"
    VOTER_NOT_VERIFIED = "voter_not_verified"
    ALREADY_VOTED = "already_voted"
    CANDIDATE_INVALID = "candidate_invalid"


OUTCOME_MESSAGES = {
    VoteOutcome.ACCEPTED: "Vote recorded successfully",
    VoteOutcome.VOTER_NOT_FOUND: "User does not exist",
    VoteOutcome.VOTER_NOT_VERIFIED: "User not verified",
    VoteOutcome.ALREADY_VOTED: "User has already voted",
    VoteOutcome.CANDIDATE_INVALID: "Invalid candidate",
}


@dataclass
class CastVoteResult:
    outcome: VoteOutcome
    vote: Optional[Dict[str, Any]] = None

    @property
    def success(self) -> bool:
        return self.outcome is VoteOutcome.ACCEPTED

    @property
    def message(self) -> str:
        return OUTCOME_MESSAGES[self.outcome]


class KeyedLock:
    """One mutex per key, created on demand and dropped when nobody holds it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, list] = {}

    @contextmanager
    def hold(self, key: str):
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self):
        with self._guard:
            return len(self._locks)


def percentage(candidate_count: int, total_count: int) -> float:
    """Share of the total as a percentage rounded to one decimal, 0 for an empty poll."""
    if total_count == 0:
        return 0.0
    return round(candidate_count / total_count * 100, 1)


class VoteEngine:
    def __init__(self, identity: IdentityStore, candidates: CandidateRegistry,
                 votes: Collection, locks: Optional[KeyedLock] = None):
        self.identity = identity
        self.candidates = candidates
        self.votes = votes
        self.locks = locks if locks is not None else KeyedLock()

    def cast_vote(self, voter_ref: str, candidate_ref: str,
                  origin: Optional[str] = None) -> CastVoteResult:
        """
        Record a vote for `candidate_ref` on behalf of `voter_ref`.

        Eligibility is checked in order: the voter exists, is verified, has not
        voted yet, and the candidate exists and is active. The first failing
        check decides the outcome; nothing is written in that case.

        Raises:
            StorageError: the store failed. No vote is left behind and the
                voter's hasVoted flag is unchanged.
        """
        with self.locks.hold(voter_ref):
            voter = self.identity.get_voter(voter_ref)
            if voter is None:
                return self._reject(voter_ref, VoteOutcome.VOTER_NOT_FOUND)
            if not voter.get("documentVerified"):
                return self._reject(voter_ref, VoteOutcome.VOTER_NOT_VERIFIED)
            if voter.get("hasVoted"):
                return self._reject(voter_ref, VoteOutcome.ALREADY_VOTED)

            candidate = self.candidates.get(candidate_ref)
            if candidate is None or not candidate.get("active"):
                return self._reject(voter_ref, VoteOutcome.CANDIDATE_INVALID)

            claimed = self.identity.claim_vote(voter_ref)
            if claimed is None:
                return self._reject(voter_ref, VoteOutcome.ALREADY_VOTED)

            vote = {
                "voterId": voter_ref,
                "candidateId": candidate["_id"],
                "voterCountry": claimed.get("country"),
                "timestamp": datetime.now(timezone.utc),
                "ipAddress": origin,
            }
            try:
                result = self.votes.insert_one(vote)
            except DuplicateKeyError:
                # a vote already exists for this voter, so the flag stays set
                return self._reject(voter_ref, VoteOutcome.ALREADY_VOTED)
            except PyMongoError as e:
                logger.error(f"Failed to record vote for {voter_ref}: {e}")
                self._release(voter_ref)
                raise StorageError("Voting failed") from e

        vote["_id"] = result.inserted_id
        logger.info(f"Vote {result.inserted_id} recorded: voter {voter_ref} -> candidate {candidate['_id']}")
        return CastVoteResult(VoteOutcome.ACCEPTED, vote)

    def _reject(self, voter_ref: str, outcome: VoteOutcome) -> CastVoteResult:
        logger.warning(f"Vote rejected for {voter_ref}: {outcome.value}")
        return CastVoteResult(outcome)

    def _release(self, voter_ref: str):
        try:
            self.identity.release_vote_claim(voter_ref)
        except PyMongoError as e:
            raise StorageError("Voting failed") from e

    def has_voted(self, voter_ref: str) -> bool:
        try:
            return self.votes.find_one({"voterId": voter_ref}) is not None
        except PyMongoError as e:
            raise StorageError("Failed to check vote") from e

    def _group_count(self, field: str) -> Dict[str, int]:
        pipeline = [{"$group": {"_id": f"${field}", "count": {"$sum": 1}}}]
        try:
            rows = list(self.votes.aggregate(pipeline))
        except PyMongoError as e:
            logger.error(f"Failed to aggregate votes by {field}: {e}")
            raise StorageError("Failed to fetch votes") from e
        return {str(row["_id"]): row["count"] for row in rows}

    def tally_by_candidate(self) -> Dict[str, int]:
        """Votes per candidate id. Candidates without votes are absent."""
        return self._group_count("candidateId")

    def tally_by_country(self) -> Dict[str, int]:
        """Votes per country, using the country captured when each vote was cast."""
        return self._group_count("voterCountry")

    def results(self) -> List[Dict[str, Any]]:
        tally = self.tally_by_candidate()
        total = sum(tally.values())
        rows = []
        for candidate in self.candidates.list(include_retired=True):
            candidate_id = str(candidate["_id"])
            count = tally.get(candidate_id, 0)
            if not candidate.get("active") and count == 0:
                continue
            rows.append({
                "id": candidate_id,
                "name": candidate.get("name", ""),
                "party": candidate.get("party", ""),
                "active": bool(candidate.get("active")),
                "votes": count,
                "percentage": percentage(count, total),
            })
        rows.sort(key=lambda row: row["votes"], reverse=True)
        return rows

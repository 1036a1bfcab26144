from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..deps import get_vote_engine
from ..models.vote_model import Vote
from ..voting import VoteEngine, VoteOutcome

router = APIRouter(tags=["Vote"])

REJECTION_STATUS = {
    VoteOutcome.VOTER_NOT_FOUND: 404,
    VoteOutcome.VOTER_NOT_VERIFIED: 403,
    VoteOutcome.ALREADY_VOTED: 409,
    VoteOutcome.CANDIDATE_INVALID: 400,
}


@router.post("/vote")
def cast_vote(vote: Vote, request: Request, engine: VoteEngine = Depends(get_vote_engine)):
    """
    Casts a vote. Each voter gets exactly one; every rejection comes back
    with its reason and nothing is stored.
    """
    origin = request.client.host if request.client else None
    result = engine.cast_vote(vote.voter_ref, vote.candidate_ref, origin=origin)
    if not result.success:
        return JSONResponse(
            status_code=REJECTION_STATUS[result.outcome],
            content={"success": False, "message": result.message, "reason": result.outcome.value},
        )
    return {
        "success": True,
        "message": result.message,
        "vote": {
            "id": str(result.vote["_id"]),
            "candidateId": str(result.vote["candidateId"]),
            "timestamp": result.vote["timestamp"].isoformat(),
        },
    }


@router.get("/vote/check/{voter_id}")
def check_vote(voter_id: str, engine: VoteEngine = Depends(get_vote_engine)):
    if engine.has_voted(voter_id):
        return {"success": True, "status": "already_voted"}
    return {"success": True, "status": "not_voted"}


@router.get("/votes")
def get_votes(engine: VoteEngine = Depends(get_vote_engine)):
    """Vote counts keyed by candidate id."""
    tally = engine.tally_by_candidate()
    return {"success": True, "votes": tally, "total": sum(tally.values())}


@router.get("/voter-stats")
def get_voter_stats(engine: VoteEngine = Depends(get_vote_engine)):
    """Vote counts keyed by the voter's country at the time of voting."""
    return {"success": True, "stats": engine.tally_by_country()}


@router.get("/results")
def get_results(engine: VoteEngine = Depends(get_vote_engine)):
    results = engine.results()
    return {"success": True, "total": sum(r["votes"] for r in results), "results": results}

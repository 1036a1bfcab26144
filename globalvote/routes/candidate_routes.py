from fastapi import APIRouter, Depends, Query, status

from ..crud import CandidateRegistry
from ..deps import get_candidate_registry
from ..models.candidate_model import Candidate
from ..schemas import CandidateOut, dump

router = APIRouter(prefix="/candidates", tags=["Candidates"])


@router.get("")
def list_candidates(include_retired: bool = Query(False),
                    registry: CandidateRegistry = Depends(get_candidate_registry)):
    candidates = registry.list(include_retired=include_retired)
    return {"success": True, "candidates": [dump(CandidateOut.from_document(c)) for c in candidates]}


@router.post("", status_code=status.HTTP_201_CREATED)
def add_candidate(candidate: Candidate, registry: CandidateRegistry = Depends(get_candidate_registry)):
    created = registry.add(candidate.name.strip(), candidate.party.strip())
    return {
        "success": True,
        "message": "Candidate added successfully",
        "candidate": dump(CandidateOut.from_document(created)),
    }


@router.delete("/{candidate_id}")
def remove_candidate(candidate_id: str, registry: CandidateRegistry = Depends(get_candidate_registry)):
    """Retire a candidate. Their votes stay in the tallies."""
    retired = registry.retire(candidate_id)
    return {
        "success": True,
        "message": "Candidate removed successfully",
        "candidate": dump(CandidateOut.from_document(retired)),
    }

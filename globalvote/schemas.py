from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class VoterOut(BaseModel):
    id: str
    name: str
    country: str
    document_type: str = Field(serialization_alias="documentType")
    document_id: str = Field(serialization_alias="documentId")
    document_verified: bool = Field(False, serialization_alias="documentVerified")
    has_voted: bool = Field(False, serialization_alias="hasVoted")
    email: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "VoterOut":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            country=doc.get("country", ""),
            document_type=doc.get("documentType", ""),
            document_id=doc.get("documentId", str(doc["_id"])),
            document_verified=bool(doc.get("documentVerified", False)),
            has_voted=bool(doc.get("hasVoted", False)),
            email=doc.get("email"),
        )


class CandidateOut(BaseModel):
    id: str
    name: str
    party: str
    status: str
    active: bool

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "CandidateOut":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            party=doc.get("party", ""),
            status=doc.get("status", "active"),
            active=bool(doc.get("active", True)),
        )


class ReviewOut(BaseModel):
    id: str
    voter_id: str = Field(serialization_alias="voterId")
    voter_name: Optional[str] = Field(None, serialization_alias="voterName")
    candidate_id: Optional[str] = Field(None, serialization_alias="candidateId")
    rating: int
    content: str
    voter_country: Optional[str] = Field(None, serialization_alias="voterCountry")
    ai_approved: bool = Field(serialization_alias="aiApproved")
    ai_reason: str = Field(serialization_alias="aiReason")
    ai_confidence: int = Field(serialization_alias="aiConfidence")
    sentiment: str
    status: str
    timestamp: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ReviewOut":
        candidate_id = doc.get("candidateId")
        return cls(
            id=str(doc["_id"]),
            voter_id=str(doc["voterId"]),
            voter_name=doc.get("voterName"),
            candidate_id=str(candidate_id) if candidate_id is not None else None,
            rating=doc["rating"],
            content=doc["content"],
            voter_country=doc.get("voterCountry"),
            ai_approved=doc["aiApproved"],
            ai_reason=doc["aiReason"],
            ai_confidence=doc["aiConfidence"],
            sentiment=doc["sentiment"],
            status=doc["status"],
            timestamp=doc.get("timestamp"),
        )


def dump(model: BaseModel) -> Dict[str, Any]:
    """JSON-ready dict using the camelCase wire names."""
    return model.model_dump(mode="json", by_alias=True)

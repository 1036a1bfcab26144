from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class ReviewIn(BaseModel):
    voter_ref: str = Field(..., min_length=1, validation_alias=AliasChoices("voterRef", "userId", "voter_ref"))
    candidate_ref: Optional[str] = Field(None, validation_alias=AliasChoices("candidateRef", "candidateId", "candidate_ref"))
    rating: int = Field(..., ge=1, le=5)
    content: str

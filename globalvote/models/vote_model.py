from pydantic import AliasChoices, BaseModel, Field


class Vote(BaseModel):
    voter_ref: str = Field(..., min_length=1, validation_alias=AliasChoices("voterRef", "userId", "voter_ref"))
    candidate_ref: str = Field(..., min_length=1, validation_alias=AliasChoices("candidateRef", "candidateId", "candidate_ref"))

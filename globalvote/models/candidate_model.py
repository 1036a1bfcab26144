from pydantic import BaseModel, Field


class Candidate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120, examples=["Sita Sharma"])
    party: str = Field(..., min_length=1, max_length=120, examples=["Independent"])

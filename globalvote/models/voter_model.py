from pydantic import AliasChoices, BaseModel, EmailStr, Field


class VoterLogin(BaseModel):
    name: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    document_type: str = Field(..., min_length=1, validation_alias=AliasChoices("documentType", "document_type"))
    document_id: str = Field(..., min_length=1, validation_alias=AliasChoices("documentId", "document_id"))


class VoterRegister(VoterLogin):
    email: EmailStr
    password: str = Field(..., min_length=6)


class CountryUpdate(BaseModel):
    country: str = Field(..., min_length=1)
